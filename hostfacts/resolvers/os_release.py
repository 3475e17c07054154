# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Resolver for the os-release file."""

import logging
from pathlib import Path

from hostfacts.resolvers.base import BaseResolver

logger = logging.getLogger(__name__)

DEFAULT_OS_RELEASE_PATH = "/etc/os-release"


def parse_os_release(content: str) -> dict[str, str]:
    """Parse os-release KEY=VALUE lines into a dict with lower-cased keys.

    Comments and blank lines are skipped; surrounding quotes are removed.
    """
    values = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key.strip().lower()] = value
    return values


class OsReleaseResolver(BaseResolver):
    """Reads every key of an os-release file in one fill."""

    name = "os_release"

    def __init__(self, path: str = DEFAULT_OS_RELEASE_PATH):
        super().__init__()
        self.path = Path(path)

    def post_resolve(self, key: str, options: dict) -> dict:
        logger.debug(f"Reading {self.path}")
        return parse_os_release(self.path.read_text())
