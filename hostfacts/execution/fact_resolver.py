# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Fact resolution: from a fact name to an ordered list of resolved records.

For a requested name the resolver:
1. Gathers every registered definition for the name
2. Keeps the ones whose confines hold on this host
3. Picks the highest weight (ties: overrides, then registration order)
4. Runs the winner: a simple call, or an aggregate evaluation
5. Emits the primary record followed by its legacy aliases

A fact with no suitable definition resolves to a single record with a None
value. Results are memoized, so repeated requests return identical records.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable, Optional

from hostfacts.core.config import EngineConfig
from hostfacts.core.errors import ConfigurationError
from hostfacts.core.models import FactDefinition, FactType, ResolvedFact
from hostfacts.core.registry import FactRegistry
from hostfacts.execution.aggregate import Aggregate, DependencyError
from hostfacts.execution.confine import ConfineEvaluator, ProbeRegistry
from hostfacts.execution.selector import DefinitionSelector
from hostfacts.resolvers.base import BaseResolver

logger = logging.getLogger(__name__)

EventCallback = Callable[[str, dict], None]


class FactResolver:
    """
    Resolves facts from a registry of definitions.

    Usage:
        registry = FactRegistry()
        probes = ProbeRegistry({"kernel": platform.system})

        @registry.fact("kernel.name", confines=confine(kernel="Linux"))
        def kernel_name():
            return "Linux"

        resolver = FactResolver(registry, probes)
        for fact in resolver.resolve_fact("kernel.name"):
            print(fact.name, fact.value)
    """

    def __init__(
        self,
        registry: FactRegistry,
        probes: Optional[ProbeRegistry] = None,
        config: Optional[EngineConfig] = None,
        resolvers: Iterable[BaseResolver] = (),
        event_callback: Optional[EventCallback] = None,
    ):
        self.registry = registry
        self.probes = probes if probes is not None else ProbeRegistry()
        self.config = config or EngineConfig()
        self.evaluator = ConfineEvaluator(self.probes)
        self.selector = DefinitionSelector(self.evaluator)
        self._resolvers = list(resolvers)
        self._event_callback = event_callback

        self._lock = threading.RLock()
        self._cache: dict[str, tuple[ResolvedFact, ...]] = {}
        self._aggregates: dict[int, tuple[FactDefinition, Aggregate]] = {}

        # Facts that failed with an engine error during resolve_many/resolve_all
        self.errors: dict[str, Exception] = {}

        # Every record produced this session (for audit)
        self.resolution_log: list[ResolvedFact] = []

    def _emit_event(self, event_type: str, data: dict) -> None:
        """Emit a resolution event if callback is registered."""
        if self._event_callback:
            self._event_callback(event_type, data)

    def resolve_fact(self, name: str) -> list[ResolvedFact]:
        """Resolve one fact name into its records, primary first.

        Raises:
            DependencyError: If the selected aggregate has cyclic chunks
            ConfigurationError: If the selected definition is misconfigured
        """
        with self._lock:
            cached = self._cache.get(name)
            if cached is not None:
                return list(cached)

            records = self._resolve_uncached(name)
            if self.config.cache_results:
                self._cache[name] = records
            self.resolution_log.extend(records)
            return list(records)

    def _resolve_uncached(self, name: str) -> tuple[ResolvedFact, ...]:
        if self.config.is_blocked(name):
            logger.debug(f"Fact '{name}' is blocked")
            self._emit_event("fact_unavailable", {"name": name, "reason": "blocked"})
            return (ResolvedFact(name, None),)

        definitions = self.registry.definitions_for(name)
        winner = self.selector.select(definitions)
        if winner is None:
            logger.debug(
                f"No suitable definition for '{name}' ({len(definitions)} registered)"
            )
            self._emit_event("fact_unavailable", {"name": name, "reason": "no suitable definition"})
            return (ResolvedFact(name, None),)

        try:
            value = self._resolve_value(winner)
        except (DependencyError, ConfigurationError) as e:
            self._emit_event("fact_failed", {"name": name, "error": str(e)})
            raise

        records = self._build_records(winner, value, definitions)
        self._emit_event("fact_resolved", {
            "name": name,
            "definition": winner.label,
            "records": [r.name for r in records],
        })
        return records

    def _resolve_value(self, definition: FactDefinition) -> Any:
        if definition.is_aggregate:
            return self._aggregate_for(definition).evaluate()
        return definition.resolver()

    def _aggregate_for(self, definition: FactDefinition) -> Aggregate:
        entry = self._aggregates.get(definition.sequence)
        if entry is not None and entry[0] is definition:
            return entry[1]

        aggregate = Aggregate(definition.name, weight=definition.weight, fact_type=definition.fact_type)
        definition.resolver(aggregate)
        # Selection and record typing already used the definition's values
        if (aggregate.weight, aggregate.fact_type) != (definition.weight, definition.fact_type):
            raise ConfigurationError(
                f"Aggregate '{definition.name}' changed weight or fact_type inside its definition; "
                f"pass them when registering the aggregate instead"
            )
        self._aggregates[definition.sequence] = (definition, aggregate)
        return aggregate

    def _build_records(
        self,
        winner: FactDefinition,
        value: Any,
        definitions: list[FactDefinition],
    ) -> tuple[ResolvedFact, ...]:
        primary = ResolvedFact(winner.name, value, winner.fact_type)
        if primary.value is None:
            return (primary,)

        aliases = winner.aliases
        if not aliases and winner.is_override:
            # An override keeps the output contract of the built-in it replaces
            aliases = next(
                (d.aliases for d in definitions if not d.is_override and d.aliases),
                (),
            )

        return (primary,) + tuple(
            ResolvedFact(alias.name, alias.extract(primary.value), FactType.LEGACY)
            for alias in aliases
        )

    def resolve_many(self, names: Iterable[str]) -> list[ResolvedFact]:
        """Resolve several facts; an engine error only affects its own fact.

        A fact failing with DependencyError or ConfigurationError is logged,
        recorded in ``errors`` and returned as a None-valued record.
        """
        records: list[ResolvedFact] = []
        for name in names:
            try:
                records.extend(self.resolve_fact(name))
            except (DependencyError, ConfigurationError) as e:
                logger.error(f"Could not resolve fact '{name}': {e}")
                self.errors[name] = e
                records.append(ResolvedFact(name, None))
        return records

    def resolve_all(self) -> list[ResolvedFact]:
        """Resolve every registered fact name in registration order."""
        return self.resolve_many(self.registry.names())

    def clear_fact_cache(self) -> None:
        """Forget memoized records; aggregates re-evaluate on the next request."""
        with self._lock:
            self._cache.clear()
            self.errors.clear()

    def reset(self) -> None:
        """Return to a fresh state: records, aggregates, probe values and resolver caches."""
        with self._lock:
            self._cache.clear()
            self._aggregates.clear()
            self.errors.clear()
            self.resolution_log.clear()
            self.probes.clear()
            for resolver in self._resolvers:
                resolver.invalidate_cache()
