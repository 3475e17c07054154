# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Resolver for distribution-specific release files (/etc/gentoo-release and friends)."""

import logging
import re
from pathlib import Path

from hostfacts.core.errors import ConfigurationError
from hostfacts.resolvers.base import BaseResolver

logger = logging.getLogger(__name__)

# First dotted number on the line, e.g. "Gentoo Base System release 2.7" -> "2.7"
VERSION_PATTERN = re.compile(r"\d+(?:\.\d+)*")


class ReleaseFileResolver(BaseResolver):
    """Extracts a release version from a distribution release file.

    Options:
        release_file: Path of the file to read (required)
        regex: Pattern searched in the whole file; its first group (or the
            whole match when it has no groups) is the release. Without it
            the first version number on the first line is used.

    The value is cached under the requested key, so use one resolver per
    release file.
    """

    name = "release_file"

    def post_resolve(self, key: str, options: dict) -> dict:
        release_file = options.get("release_file")
        if not release_file:
            raise ConfigurationError(f"{self.name} requires a 'release_file' option")

        logger.debug(f"Reading {release_file}")
        content = Path(release_file).read_text()

        regex = options.get("regex")
        if regex is not None:
            match = re.search(regex, content)
            if not match:
                return {}
            return {key: match.group(1) if match.groups() else match.group(0)}

        first_line = content.splitlines()[0] if content else ""
        match = VERSION_PATTERN.search(first_line)
        return {key: match.group(0)} if match else {}
