# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Registry of fact definitions.

Registration collaborators (the built-in catalog, custom fact loaders) add
definitions here before any fact is resolved. Registration order is kept and
used as the final tie-break when several definitions are equally suitable.

Usage:
    registry = FactRegistry()

    @registry.fact("os.release", confines=confine(kernel="Linux"), weight=10)
    def os_release():
        return {"full": "9.3", "major": "9", "minor": "3"}

    registry.definitions_for("os.release")
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Any, Callable, Iterable, Optional

from hostfacts.core.models import (
    ConfinePredicate,
    FactDefinition,
    FactType,
    LegacyAlias,
    ResolutionKind,
)

logger = logging.getLogger(__name__)


class FactRegistry:
    """Ordered store of FactDefinitions with an explicit lifecycle.

    Thread-safe for registration and lookup. ``clear()`` empties the registry
    between independent runs (and between tests).
    """

    def __init__(self, definitions: Optional[Iterable[FactDefinition]] = None):
        self._lock = threading.RLock()
        self._definitions: dict[str, list[FactDefinition]] = {}
        self._next_sequence = 0
        for definition in definitions or ():
            self.register(definition)

    def register(self, definition: FactDefinition) -> FactDefinition:
        """Register a definition and stamp it with its registration slot.

        Returns:
            The stored definition (a copy carrying its sequence number)
        """
        with self._lock:
            stored = dataclasses.replace(definition, sequence=self._next_sequence)
            self._next_sequence += 1
            self._definitions.setdefault(stored.name, []).append(stored)
        logger.debug(f"Registered fact definition {stored.label}")
        return stored

    def add(
        self,
        name: str,
        resolver: Callable[..., Any],
        kind: ResolutionKind = ResolutionKind.SIMPLE,
        confines: Iterable[ConfinePredicate] = (),
        weight: int = 0,
        aliases: Iterable[LegacyAlias | tuple] = (),
        fact_type: FactType = FactType.CORE,
    ) -> FactDefinition:
        """Build and register a definition programmatically."""
        return self.register(FactDefinition(
            name=name,
            resolver=resolver,
            kind=kind,
            confines=tuple(confines),
            weight=weight,
            aliases=tuple(aliases),
            fact_type=fact_type,
        ))

    def fact(self, name: str, **kwargs: Any):
        """Decorator to register a function as a fact definition.

        Example:
            @registry.fact("processors.count", confines=confine(kernel="Linux"))
            def processor_count():
                ...
        """
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.add(name, func, **kwargs)
            return func
        return decorator

    def aggregate(self, name: str, **kwargs: Any):
        """Decorator to register an aggregate definition.

        The decorated function receives the Aggregate and registers chunks on it.
        """
        return self.fact(name, kind=ResolutionKind.AGGREGATE, **kwargs)

    def definitions_for(self, name: str) -> list[FactDefinition]:
        """All definitions registered for a fact name, in registration order."""
        with self._lock:
            return list(self._definitions.get(name, ()))

    def names(self) -> list[str]:
        """Fact names in order of their first registration."""
        with self._lock:
            return list(self._definitions)

    def clear(self) -> None:
        """Remove every definition and restart registration numbering."""
        with self._lock:
            self._definitions.clear()
            self._next_sequence = 0

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._definitions

    def __len__(self) -> int:
        with self._lock:
            return sum(len(defs) for defs in self._definitions.values())
