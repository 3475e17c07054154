# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Identity of the user running the fact collection."""

import os

from hostfacts.resolvers.base import BaseResolver, ProbeError


class PosixIdentityResolver(BaseResolver):
    """Reads uid/gid/user/group from the passwd and group databases.

    A single lookup fills every key.
    """

    name = "posix_identity"

    def post_resolve(self, key: str, options: dict) -> dict:
        try:
            import grp
            import pwd
        except ImportError as e:
            raise ProbeError("passwd database is not available on this platform") from e

        try:
            login_info = pwd.getpwuid(os.getuid())
            group_name = grp.getgrgid(login_info.pw_gid).gr_name
        except KeyError as e:
            raise ProbeError(f"no passwd/group entry for the current user: {e}") from e

        return {
            "gid": login_info.pw_gid,
            "group": group_name,
            "privileged": login_info.pw_uid == 0,
            "uid": login_info.pw_uid,
            "user": login_info.pw_name,
        }
