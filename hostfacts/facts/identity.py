# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Facts about the user running the collection."""

from hostfacts.core.models import LegacyAlias, confine
from hostfacts.core.registry import FactRegistry
from hostfacts.execution.aggregate import merge_or_none
from hostfacts.resolvers.identity import PosixIdentityResolver


def _not_windows(kernel: str) -> bool:
    return kernel.lower() != "windows"


def register_identity_facts(registry: FactRegistry, identity: PosixIdentityResolver) -> None:
    """Register the identity aggregate and its flat identity.* facts."""
    posix = confine(kernel=_not_windows)

    def identity_fact(aggregate):
        @aggregate.chunk("user")
        def user():
            return {"user": identity.resolve("user"), "uid": identity.resolve("uid")}

        @aggregate.chunk("group")
        def group():
            return {"group": identity.resolve("group"), "gid": identity.resolve("gid")}

        @aggregate.chunk("privileged", require=["user"])
        def privileged(user):
            uid = user["uid"]
            return {"privileged": None if uid is None else uid == 0}

        aggregate.combine(merge_or_none)

    registry.aggregate("identity", confines=posix)(identity_fact)

    flat = (
        ("identity.user", "user", (LegacyAlias("id"),)),
        ("identity.uid", "uid", ()),
        ("identity.group", "group", (LegacyAlias("gid"),)),
        ("identity.gid", "gid", ()),
        ("identity.privileged", "privileged", ()),
    )
    for name, key, aliases in flat:
        registry.add(
            name,
            lambda key=key: identity.resolve(key),
            confines=posix,
            aliases=aliases,
        )
