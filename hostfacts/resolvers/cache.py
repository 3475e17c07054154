# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Memoizing cache for one resolver scope.

A miss runs the resolver's fill procedure once. The fill may return values
for several keys at a time (one metadata request, one passwd lookup), and
every returned key is stored, so related keys are served from the cache
afterwards. A key the fill did not produce is stored as None: the value is
unavailable on this host, which is not an error.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

FillFunction = Callable[[str, dict], Optional[Mapping[str, Any]]]


class ResolverCache:
    """Key -> value store filled lazily by a resolver.

    Fills are serialized per key so that two concurrent callers never both
    run the probe for the same key.
    """

    def __init__(self, name: str, fill: FillFunction, unavailable: tuple[type[BaseException], ...] = (OSError,)):
        """
        Args:
            name: Resolver scope name (for logs)
            fill: Callable taking (key, options) and returning a mapping of
                every value it was able to read
            unavailable: Exception types that mean "probe unavailable"; they
                are logged and turned into absence
        """
        self.name = name
        self._fill = fill
        self._unavailable = unavailable
        self._store: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._fill_locks: dict[str, threading.Lock] = {}
        self.fill_count = 0

    def resolve(self, key: str, options: Optional[dict] = None) -> Any:
        """Return the cached value for key, filling the cache on a miss.

        Returns:
            The value, or None if the resolver could not produce it
        """
        with self._lock:
            if key in self._store:
                return self._store[key]
            key_lock = self._fill_locks.setdefault(key, threading.Lock())

        with key_lock:
            with self._lock:
                if key in self._store:
                    return self._store[key]

            values = self._run_fill(key, dict(options or {}))

            with self._lock:
                self._store.update(values)
                self._store.setdefault(key, None)
                self.fill_count += 1
                return self._store[key]

    def _run_fill(self, key: str, options: dict) -> Mapping[str, Any]:
        logger.debug(f"{self.name}: cache miss for '{key}', filling")
        try:
            values = self._fill(key, options)
        except self._unavailable as e:
            logger.debug(f"{self.name}: '{key}' unavailable ({type(e).__name__}: {e})")
            return {}
        return values or {}

    def clear(self) -> None:
        """Empty the cache; the next lookup fills again.

        Fill locks are kept, so a fill still running keeps serializing
        callers for its key.
        """
        with self._lock:
            self._store.clear()
            self.fill_count = 0

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._store

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._store)
