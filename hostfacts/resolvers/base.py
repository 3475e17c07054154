# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Base class for resolvers: collaborators that read raw values from the host."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from hostfacts.resolvers.cache import ResolverCache

logger = logging.getLogger(__name__)


class ProbeError(Exception):
    """Raised by a resolver when the value it probes for is unavailable."""
    pass


class BaseResolver:
    """A resolver with its own ResolverCache.

    Subclasses implement post_resolve(), which reads the host and returns a
    mapping of every key it could determine. Callers only use resolve().

    Usage:
        class UptimeResolver(BaseResolver):
            def post_resolve(self, key, options):
                seconds = float(Path("/proc/uptime").read_text().split()[0])
                return {"seconds": int(seconds), "days": int(seconds // 86400)}

        UptimeResolver().resolve("days")
    """

    name: str = ""

    def __init__(self):
        self._cache = ResolverCache(
            self.name or type(self).__name__,
            self.post_resolve,
            unavailable=(ProbeError, OSError),
        )

    @property
    def cache(self) -> ResolverCache:
        return self._cache

    def resolve(self, key: str, **options: Any) -> Any:
        """Return the value for key, or None if it is unavailable on this host."""
        return self._cache.resolve(key, options)

    def invalidate_cache(self) -> None:
        self._cache.clear()

    def post_resolve(self, key: str, options: dict) -> Optional[Mapping[str, Any]]:
        raise NotImplementedError
