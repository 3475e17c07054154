# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Value helpers for resolved facts: deep freezing and deep merging.

Chunk results and resolved fact values are deep-frozen so that no producer
can mutate a value another component already holds:

- dict  -> MappingProxyType over a frozen copy
- list  -> tuple
- set   -> frozenset

``thaw`` reverses the conversion for consumers that need plain containers
(serializers, merge results).
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional


class DeepMergeError(ValueError):
    """Raised when two values cannot be deep merged."""

    def __init__(self, left: Any, right: Any, path: tuple = ()):
        self.left = left
        self.right = right
        self.path = tuple(path)
        msg = (
            f"Cannot merge {left!r}:{type(left).__name__} and "
            f"{right!r}:{type(right).__name__}"
        )
        if self.path:
            msg += " at root" + "".join(f"[{part!r}]" for part in self.path)
        super().__init__(msg)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def deep_freeze(value: Any) -> Any:
    """Return an immutable deep copy of ``value``."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: deep_freeze(v) for k, v in value.items()})
    if _is_sequence(value):
        return tuple(deep_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(deep_freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Return a mutable deep copy of a (possibly frozen) value."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if _is_sequence(value):
        return [thaw(v) for v in value]
    if isinstance(value, frozenset):
        return set(thaw(v) for v in value)
    return value


def deep_merge(left: Any, right: Any, path: Optional[tuple] = None) -> Any:
    """Deep merge two values.

    Mappings merge key by key (recursing into shared keys), sequences
    concatenate, and ``None`` yields to the other side. Any other collision
    raises DeepMergeError, even when both sides are equal.

    Args:
        left: Value merged so far
        right: Value to merge on top
        path: Key path of the current position (for error messages)

    Returns:
        A new, mutable merged value

    Raises:
        DeepMergeError: If two non-mergeable values collide
    """
    path = path or ()
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        result = {k: thaw(v) for k, v in left.items()}
        for key, value in right.items():
            if key in result:
                result[key] = deep_merge(result[key], value, path + (key,))
            else:
                result[key] = thaw(value)
        return result
    if _is_sequence(left) and _is_sequence(right):
        return thaw(left) + thaw(right)
    if right is None:
        return thaw(left)
    if left is None:
        return thaw(right)
    raise DeepMergeError(left, right, path)


def last_write_wins_merge(left: Any, right: Any) -> Any:
    """Tolerant variant of deep_merge: on a scalar collision the right side wins."""
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        result = {k: thaw(v) for k, v in left.items()}
        for key, value in right.items():
            result[key] = last_write_wins_merge(result[key], value) if key in result else thaw(value)
        return result
    if _is_sequence(left) and _is_sequence(right):
        return thaw(left) + thaw(right)
    return thaw(left) if right is None else thaw(right)
