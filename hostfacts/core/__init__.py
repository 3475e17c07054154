# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Definitions, registry, configuration and value helpers."""

from .config import (
    AggregateOptions,
    ChunkOptions,
    EngineConfig,
    configure_logging,
)
from .errors import ConfigurationError
from .models import (
    ConfinePredicate,
    FactDefinition,
    FactType,
    LegacyAlias,
    ResolutionKind,
    ResolvedFact,
    confine,
)
from .registry import FactRegistry
from .values import DeepMergeError, deep_freeze, deep_merge, last_write_wins_merge, thaw

__all__ = [
    "AggregateOptions",
    "ChunkOptions",
    "ConfigurationError",
    "ConfinePredicate",
    "DeepMergeError",
    "EngineConfig",
    "FactDefinition",
    "FactRegistry",
    "FactType",
    "LegacyAlias",
    "ResolutionKind",
    "ResolvedFact",
    "configure_logging",
    "confine",
    "deep_freeze",
    "deep_merge",
    "last_write_wins_merge",
    "thaw",
]
