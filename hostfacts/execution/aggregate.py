# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Aggregate facts: values computed from several named chunks.

An aggregate is evaluated in two parts. First every chunk runs, in dependency
order, receiving the results of the chunks it requires. Then all chunk results
are handed to the combinator as a mapping of chunk name -> result, and the
combinator's return value becomes the fact value.

Usage:
    aggregate = Aggregate("mountpoints")

    @aggregate.chunk("mountpoints")
    def mountpoints():
        return {"/": {"device": "/dev/sda1"}}

    @aggregate.chunk("mount_options", require=["mountpoints"])
    def mount_options(mountpoints):
        return {path: {"options": ["rw"]} for path in mountpoints}

    value = aggregate.evaluate()

Without a registered combinator all chunk results are deep merged: mappings
merge key by key, lists concatenate, and two scalars meeting at the same key
raise ConfigurationError.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Callable, Optional

from hostfacts.core.config import AggregateOptions, ChunkOptions, validate_options
from hostfacts.core.errors import ConfigurationError
from hostfacts.core.models import FactType
from hostfacts.core.values import (
    DeepMergeError,
    deep_freeze,
    deep_merge,
    last_write_wins_merge,
    thaw,
)
from hostfacts.execution.dag import DependencyGraph

logger = logging.getLogger(__name__)

_MISSING = object()


class DependencyError(Exception):
    """Raised when the chunks of an aggregate depend on each other in a cycle."""

    def __init__(self, aggregate_name: str, cycles: list[list[str]]):
        self.aggregate_name = aggregate_name
        self.cycles = cycles
        super().__init__(
            f"Could not order chunks of '{aggregate_name}'; "
            f"found the following dependency cycles: {cycles}"
        )


@dataclass
class Chunk:
    """A named sub-computation of an aggregate."""
    name: str
    producer: Callable[..., Any]
    dependencies: list[str] = field(default_factory=list)


def last_write_wins(results: Mapping[str, Any]) -> Any:
    """Combinator that merges chunks like the default, but lets later chunks win scalar collisions."""
    return functools.reduce(last_write_wins_merge, results.values(), None)


def merge_or_none(results: Mapping[str, Any]) -> Any:
    """Combinator that deep merges chunks and gives None when every merged key is None.

    For aggregates whose chunks all read the same probe: when the probe is
    unavailable the fact is absent rather than a mapping of None values.
    """
    merged = functools.reduce(deep_merge, results.values(), None)
    if isinstance(merged, Mapping) and all(value is None for value in merged.values()):
        return None
    return merged


class Aggregate:
    """Schedules the chunks of one aggregate fact and combines their results."""

    def __init__(self, name: str, **options: Any):
        self.name = name
        self._options = AggregateOptions(name=name)
        self._chunks: dict[str, Chunk] = {}
        self._combinator: Optional[Callable[[Mapping[str, Any]], Any]] = None
        self.deps = DependencyGraph()
        self.last_evaluated: Optional[str] = None
        if options:
            self.options(**options)

    def __repr__(self) -> str:
        return f"Aggregate({self.name!r}, chunks={list(self._chunks)})"

    # -- configuration ------------------------------------------------------

    def options(self, **options: Any) -> "Aggregate":
        """Set aggregate options (name, timeout, weight, fact_type).

        Raises:
            ConfigurationError: On unknown option names or invalid values
        """
        merged = {**self._options.model_dump(), **options}
        self._options = validate_options(AggregateOptions, merged, "Aggregate.options")
        if self._options.name:
            self.name = self._options.name
        return self

    @property
    def weight(self) -> int:
        return self._options.weight

    @property
    def timeout(self) -> Optional[float]:
        return self._options.timeout

    @property
    def fact_type(self) -> FactType:
        return self._options.fact_type

    @property
    def chunk_names(self) -> list[str]:
        return list(self._chunks)

    def chunk(self, name: str, producer: Optional[Callable[..., Any]] = None, **options: Any):
        """Define a chunk of this aggregate.

        Can be called directly or used as a decorator:

            aggregate.chunk("mountpoints", read_mountpoints)

            @aggregate.chunk("mount_options", require=["mountpoints"])
            def mount_options(mountpoints):
                ...

        Args:
            name: Name unique to this aggregate
            producer: Callable receiving the results of the required chunks,
                in the order they are listed in ``require``
            **options: Only ``require`` (a chunk name or list of names) is accepted

        Returns:
            The aggregate when called directly, the producer when used as a decorator

        Raises:
            ConfigurationError: On a non-string name, missing producer or unknown options
        """
        if not isinstance(name, str) or not name:
            raise ConfigurationError(
                f"Aggregate.chunk expected chunk name to be a string, got {name!r}"
            )
        if isinstance(options.get("require"), str):
            options["require"] = [options["require"]]
        chunk_options = validate_options(ChunkOptions, options, "Aggregate.chunk")

        def register(func: Callable[..., Any]) -> Callable[..., Any]:
            if not callable(func):
                raise ConfigurationError(f"Aggregate.chunk '{name}' requires a callable producer")
            self.deps[name] = chunk_options.require
            self._chunks[name] = Chunk(name=name, producer=func, dependencies=list(chunk_options.require))
            return func

        if producer is None:
            return register
        register(producer)
        return self

    def combine(self, producer: Optional[Callable[[Mapping[str, Any]], Any]] = None):
        """Define how all chunk results are combined into the fact value.

        The combinator receives a read-only mapping of chunk name -> result
        holding every chunk. Usable directly or as a decorator.

        Raises:
            ConfigurationError: If the combinator is not callable
        """
        def register(func):
            if not callable(func):
                raise ConfigurationError("Aggregate.combine requires a callable combinator")
            self._combinator = func
            return func

        if producer is None:
            return register
        register(producer)
        return self

    # -- evaluation ---------------------------------------------------------

    def evaluate(self) -> Any:
        """Run every chunk in dependency order and combine the results.

        Re-evaluating recomputes all chunks from scratch. A failed evaluation
        does not count as evaluated.

        Raises:
            DependencyError: If chunk dependencies form a cycle; no chunk runs
            ConfigurationError: On unknown chunk dependencies or a merge conflict
        """
        if self.last_evaluated:
            logger.warning(
                f"Already evaluated {self.name} at {self.last_evaluated}, reevaluating anyways"
            )
        started = datetime.now().isoformat()

        results = self._run_chunks()
        value = self._combine_results(results)
        self.last_evaluated = started
        return value

    def _order_chunks(self) -> list[Chunk]:
        cycles = self.deps.cycles()
        if cycles:
            raise DependencyError(self.name, cycles)

        missing = self.deps.missing_dependencies()
        if missing:
            raise ConfigurationError(
                f"Chunks of '{self.name}' require unknown chunks: {missing}"
            )

        return [self._chunks[name] for name in self.deps.topological_order()]

    def _run_chunks(self) -> dict[str, Any]:
        results: dict[str, Any] = {}
        for chunk in self._order_chunks():
            inputs = [results[dep] for dep in chunk.dependencies]
            logger.debug(f"Evaluating chunk {self.name}.{chunk.name} with {len(inputs)} input(s)")
            results[chunk.name] = deep_freeze(chunk.producer(*inputs))
        return results

    def _combine_results(self, results: dict[str, Any]) -> Any:
        if self._combinator is not None:
            return self._combinator(MappingProxyType(results))
        return self._default_combine(results)

    def _default_combine(self, results: dict[str, Any]) -> Any:
        merged: Any = None
        merged_names: list[str] = []
        for name, value in results.items():
            if not merged_names:
                merged = thaw(value)
            else:
                try:
                    merged = deep_merge(merged, value)
                except DeepMergeError as e:
                    owners = [
                        earlier for earlier in merged_names
                        if _value_at(results[earlier], e.path) not in (_MISSING, None)
                    ] or merged_names
                    raise ConfigurationError(
                        f"Could not deep merge all chunks of '{self.name}': chunk '{name}' "
                        f"conflicts with {owners} (Original error: {e}), ensure that chunks "
                        f"return either a list or a dict or register a combinator"
                    ) from e
            merged_names.append(name)
        return merged


def _value_at(value: Any, path: tuple) -> Any:
    for key in path:
        if not isinstance(value, Mapping) or key not in value:
            return _MISSING
        value = value[key]
    return value
