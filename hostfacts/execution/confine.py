# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Confine evaluation: deciding which fact definitions apply to this host."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from hostfacts.core.models import ConfinePredicate, FactDefinition
from hostfacts.resolvers.base import ProbeError

logger = logging.getLogger(__name__)

ProbeFunction = Callable[[], Any]


class ProbeRegistry:
    """Named probe values fetched lazily and memoized.

    Probes are zero-argument callables supplied by collaborators (usually a
    thin wrapper around a resolver). A probe that is not registered, returns
    None, or fails with ProbeError/OSError yields None.

    Usage:
        probes = ProbeRegistry()
        probes.register("kernel", platform.system)

        @probes.probe("os_family")
        def os_family():
            return os_release.resolve("id_like")
    """

    def __init__(self, probes: Optional[dict[str, ProbeFunction]] = None):
        self._lock = threading.RLock()
        self._probes: dict[str, ProbeFunction] = dict(probes or {})
        self._values: dict[str, Any] = {}

    def register(self, name: str, func: ProbeFunction) -> None:
        """Register (or replace) a probe; a replaced probe's memoized value is dropped."""
        with self._lock:
            self._probes[name] = func
            self._values.pop(name, None)

    def probe(self, name: str):
        """Decorator form of register()."""
        def decorator(func: ProbeFunction) -> ProbeFunction:
            self.register(name, func)
            return func
        return decorator

    def lookup(self, name: str) -> Any:
        """Return the probe value, fetching it on first use."""
        with self._lock:
            if name in self._values:
                return self._values[name]
            func = self._probes.get(name)
            if func is None:
                logger.debug(f"No probe registered for '{name}'")
                return None
            try:
                value = func()
            except (ProbeError, OSError) as e:
                logger.debug(f"Probe '{name}' unavailable: {e}")
                value = None
            self._values[name] = value
            return value

    def clear(self) -> None:
        """Forget memoized values; registered probes stay."""
        with self._lock:
            self._values.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._probes


class ConfineEvaluator:
    """Checks a definition's confine predicates against probe values."""

    def __init__(self, probes: ProbeRegistry):
        self.probes = probes

    def predicate_holds(self, predicate: ConfinePredicate) -> bool:
        value = self.probes.lookup(predicate.probe)
        try:
            return predicate.matches(value)
        except Exception as e:
            logger.error(f"Confine {predicate} raised {type(e).__name__}: {e}")
            return False

    def suitable(self, definition: FactDefinition) -> bool:
        """True if every confine predicate of the definition holds.

        A definition without confines is suitable everywhere. Evaluation
        stops at the first failing predicate.
        """
        for predicate in definition.confines:
            if not self.predicate_holds(predicate):
                logger.debug(f"{definition.label} not suitable: {predicate} failed")
                return False
        return True
