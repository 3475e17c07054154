# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Operating system release facts."""

from typing import Optional

from hostfacts.core.models import LegacyAlias, confine
from hostfacts.core.registry import FactRegistry
from hostfacts.execution.aggregate import merge_or_none
from hostfacts.resolvers.os_release import OsReleaseResolver
from hostfacts.resolvers.release_file import ReleaseFileResolver

RELEASE_ALIASES = (
    LegacyAlias("operatingsystemmajrelease", "major"),
    LegacyAlias("operatingsystemrelease", "full"),
)


def release_hash_from_string(version: Optional[str], include_patch: bool = False) -> Optional[dict]:
    """Split a dotted version into its parts.

    Examples:
        "2007.0" -> {"full": "2007.0", "major": "2007", "minor": "0"}
        "9"      -> {"full": "9", "major": "9"}
    """
    if not version:
        return None
    parts = version.split(".")
    release = {"full": version, "major": parts[0]}
    if len(parts) > 1:
        release["minor"] = parts[1]
    if include_patch and len(parts) > 2:
        release["patch"] = parts[2]
    return release


def register_release_facts(
    registry: FactRegistry,
    os_release: OsReleaseResolver,
    release_file: Optional[ReleaseFileResolver] = None,
    release_file_options: Optional[dict] = None,
) -> None:
    """Register os.release and the os.distro aggregate for Linux hosts.

    Args:
        registry: Registry receiving the definitions
        os_release: Resolver for the os-release file
        release_file: Resolver for a distribution release file, read first
        release_file_options: Options for release_file (release_file, regex)
    """

    def from_specific_file():
        if release_file is None or not release_file_options:
            return None
        return release_hash_from_string(release_file.resolve("release", **release_file_options))

    def from_os_release():
        return release_hash_from_string(os_release.resolve("version_id"))

    def os_release_fact():
        return from_specific_file() or from_os_release()

    registry.add(
        "os.release",
        os_release_fact,
        confines=confine(kernel="Linux"),
        aliases=RELEASE_ALIASES,
    )

    def os_distro(aggregate):
        aggregate.chunk("id", lambda: {"id": os_release.resolve("id")})
        aggregate.chunk("description", lambda: {"description": os_release.resolve("pretty_name")})
        aggregate.chunk("codename", lambda: {"codename": os_release.resolve("version_codename")})

        @aggregate.chunk("release", require=["id"])
        def release(distro_id):
            if not distro_id["id"]:
                return {}
            return {"release": os_release_fact()}

        aggregate.combine(merge_or_none)

    registry.aggregate("os.distro", confines=confine(kernel="Linux"))(os_distro)
