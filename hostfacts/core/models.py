# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Fact definitions, confine predicates and resolved fact records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from hostfacts.core.errors import ConfigurationError
from hostfacts.core.values import deep_freeze, thaw


class FactType(str, Enum):
    """Type tag carried by every resolved fact record."""
    CORE = "core"
    LEGACY = "legacy"  # Backward-compatible alias of a core fact
    CUSTOM = "custom"  # Registered by a custom/external fact loader


class ResolutionKind(str, Enum):
    """How a fact definition produces its value."""
    SIMPLE = "simple"
    AGGREGATE = "aggregate"
    LEGACY_OVERRIDE = "legacy-override"


@dataclass(frozen=True)
class ResolvedFact:
    """A resolved fact record handed to output collaborators.

    The value is deep-frozen on construction.
    """
    name: str
    value: Any = None
    type: FactType = FactType.CORE

    def __post_init__(self):
        object.__setattr__(self, "value", deep_freeze(self.value))

    @property
    def is_legacy(self) -> bool:
        return self.type == FactType.LEGACY

    @property
    def is_resolved(self) -> bool:
        return self.value is not None

    def to_dict(self) -> dict:
        """Serialize with plain containers (JSON/YAML ready)."""
        return {
            "name": self.name,
            "value": thaw(self.value),
            "type": self.type.value,
        }


def _normalize(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower()
    if isinstance(value, Enum):
        return _normalize(value.value)
    return value


@dataclass(frozen=True)
class ConfinePredicate:
    """Restricts a definition to systems whose probe value matches.

    Either ``expected`` (a value, or a list/tuple/set of accepted values) or
    ``matcher`` (a callable receiving the probe value) is used. Strings are
    compared case-insensitively.
    """
    probe: str
    expected: Any = None
    matcher: Optional[Callable[[Any], bool]] = None

    def __post_init__(self):
        if self.matcher is None and self.expected is None:
            raise ConfigurationError(
                f"Confine on '{self.probe}' needs an expected value or a matcher"
            )

    def matches(self, value: Any) -> bool:
        """Check a probe value against this predicate. None never matches."""
        if value is None:
            return False
        if self.matcher is not None:
            return bool(self.matcher(value))
        if isinstance(self.expected, (list, tuple, set, frozenset)):
            accepted = [_normalize(v) for v in self.expected]
        else:
            accepted = [_normalize(self.expected)]
        return _normalize(value) in accepted

    def __str__(self) -> str:
        if self.matcher is not None:
            return f"{self.probe} matches {getattr(self.matcher, '__name__', 'matcher')}"
        return f"{self.probe} == {self.expected!r}"


def confine(**expectations: Any) -> list[ConfinePredicate]:
    """Build confine predicates from keyword arguments.

    Callables become matchers, anything else an expected value:

        confine(kernel="Linux", os_family=["RedHat", "Debian"])
    """
    return [
        ConfinePredicate(probe=name, matcher=expected) if callable(expected)
        else ConfinePredicate(probe=name, expected=expected)
        for name, expected in expectations.items()
    ]


@dataclass(frozen=True)
class LegacyAlias:
    """An extra record emitted after the primary fact.

    ``key`` selects a member of a mapping value; None re-emits the whole value.
    """
    name: str
    key: Optional[str] = None

    def extract(self, value: Any) -> Any:
        if self.key is None:
            return value
        if isinstance(value, Mapping):
            return value.get(self.key)
        return None


@dataclass(frozen=True)
class FactDefinition:
    """One candidate implementation of a named fact.

    Several definitions may share a name (platform variants); exactly one is
    selected per resolution. ``resolver`` is called with no arguments for
    simple and legacy-override definitions, and with an Aggregate to register
    chunks on for aggregate definitions.
    """
    name: str
    resolver: Callable[..., Any]
    kind: ResolutionKind = ResolutionKind.SIMPLE
    confines: tuple[ConfinePredicate, ...] = ()
    weight: int = 0
    aliases: tuple[LegacyAlias, ...] = ()
    fact_type: FactType = FactType.CORE
    sequence: int = -1  # Registration order, assigned by FactRegistry

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ConfigurationError(f"Fact name must be a non-empty string, got {self.name!r}")
        if not callable(self.resolver):
            raise ConfigurationError(f"Fact '{self.name}' needs a callable resolver")
        if isinstance(self.weight, bool) or not isinstance(self.weight, int):
            raise ConfigurationError(
                f"Fact '{self.name}' weight must be an integer, got {self.weight!r}"
            )
        object.__setattr__(self, "kind", ResolutionKind(self.kind))
        object.__setattr__(self, "fact_type", FactType(self.fact_type))
        object.__setattr__(self, "confines", tuple(self.confines))
        object.__setattr__(
            self, "aliases",
            tuple(a if isinstance(a, LegacyAlias) else LegacyAlias(*a) for a in self.aliases),
        )

    @property
    def is_aggregate(self) -> bool:
        return self.kind == ResolutionKind.AGGREGATE

    @property
    def is_override(self) -> bool:
        return self.kind == ResolutionKind.LEGACY_OVERRIDE

    @property
    def label(self) -> str:
        """Short description for logs: name, kind, weight and registration slot."""
        return f"{self.name}[{self.kind.value}, weight={self.weight}, #{self.sequence}]"
