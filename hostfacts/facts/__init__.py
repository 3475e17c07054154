# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Built-in fact catalog.

Registers the sample platform facts shipped with the engine together with
the probes their confines use.
"""

from __future__ import annotations

import platform
from typing import Optional

from hostfacts.core.config import EngineConfig, configure_logging
from hostfacts.core.registry import FactRegistry
from hostfacts.execution.confine import ProbeRegistry
from hostfacts.execution.fact_resolver import FactResolver
from hostfacts.resolvers.base import BaseResolver
from hostfacts.resolvers.identity import PosixIdentityResolver
from hostfacts.resolvers.os_release import OsReleaseResolver
from hostfacts.resolvers.release_file import ReleaseFileResolver

from .identity import register_identity_facts
from .release import register_release_facts, release_hash_from_string


def register_builtin_facts(
    registry: FactRegistry,
    probes: ProbeRegistry,
    config: Optional[EngineConfig] = None,
) -> list[BaseResolver]:
    """Register built-in probes and fact definitions.

    Returns:
        The resolvers backing the definitions, so their caches can be reset
    """
    config = config or EngineConfig()
    os_release = OsReleaseResolver(config.os_release_path)
    release_file = ReleaseFileResolver()
    identity = PosixIdentityResolver()

    probes.register("kernel", platform.system)
    probes.register("os_id", lambda: os_release.resolve("id"))

    register_release_facts(registry, os_release, release_file, _release_file_options(config))
    register_identity_facts(registry, identity)
    return [os_release, release_file, identity]


def _release_file_options(config: EngineConfig) -> Optional[dict]:
    if not config.release_file:
        return None
    options = {"release_file": config.release_file}
    if config.release_regex:
        options["regex"] = config.release_regex
    return options


def build_fact_resolver(config: Optional[EngineConfig] = None, **kwargs) -> FactResolver:
    """Create a FactResolver with a fresh registry holding the built-in catalog.

    Also applies config.log_level to the package logger.
    """
    config = config or EngineConfig()
    configure_logging(config.log_level)
    registry = FactRegistry()
    probes = ProbeRegistry()
    resolvers = register_builtin_facts(registry, probes, config)
    return FactResolver(registry, probes, config=config, resolvers=resolvers, **kwargs)


__all__ = [
    "build_fact_resolver",
    "register_builtin_facts",
    "release_hash_from_string",
]
