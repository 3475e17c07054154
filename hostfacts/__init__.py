# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""hostfacts - structured facts about a host, selected and composed by a resolution engine.

Facts are produced by small platform-specific definitions. The engine picks
the one definition that applies to this host (confines and weight), composes
multi-step facts from dependent chunks (aggregates), and keeps expensive
probes from running twice (resolver caches).

Submodules:
- core: Definitions, registry, configuration and value helpers
- execution: Dependency graph, aggregates, confine evaluation, selection, FactResolver
- resolvers: Cached collaborators that read raw values from the host
- facts: Built-in fact catalog

Main classes:
- FactRegistry: Where fact definitions are registered
- FactResolver: Resolves a fact name into ResolvedFact records
- Aggregate: Chunked computation behind aggregate facts
"""

from hostfacts.core.config import EngineConfig, configure_logging
from hostfacts.core.errors import ConfigurationError
from hostfacts.core.models import (
    ConfinePredicate,
    FactDefinition,
    FactType,
    LegacyAlias,
    ResolutionKind,
    ResolvedFact,
    confine,
)
from hostfacts.core.registry import FactRegistry
from hostfacts.execution import (
    Aggregate,
    ConfineEvaluator,
    DefinitionSelector,
    DependencyError,
    DependencyGraph,
    FactResolver,
    ProbeRegistry,
)
from hostfacts.facts import build_fact_resolver, register_builtin_facts
from hostfacts.resolvers import BaseResolver, ProbeError, ResolverCache

__version__ = "0.1.0"

__all__ = [
    # Core
    "ConfigurationError",
    "ConfinePredicate",
    "EngineConfig",
    "FactDefinition",
    "FactRegistry",
    "FactType",
    "LegacyAlias",
    "ResolutionKind",
    "ResolvedFact",
    "configure_logging",
    "confine",
    # Execution
    "Aggregate",
    "ConfineEvaluator",
    "DefinitionSelector",
    "DependencyError",
    "DependencyGraph",
    "FactResolver",
    "ProbeRegistry",
    # Resolvers
    "BaseResolver",
    "ProbeError",
    "ResolverCache",
    # Catalog
    "build_fact_resolver",
    "register_builtin_facts",
]
