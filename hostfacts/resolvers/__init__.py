# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Resolvers: cached collaborators that read raw values from the host."""

from .cache import ResolverCache
from .base import BaseResolver, ProbeError
from .identity import PosixIdentityResolver
from .os_release import OsReleaseResolver, parse_os_release
from .release_file import ReleaseFileResolver

__all__ = [
    "BaseResolver",
    "OsReleaseResolver",
    "PosixIdentityResolver",
    "ProbeError",
    "ReleaseFileResolver",
    "ResolverCache",
    "parse_os_release",
]
