"""Tests for deep freezing and deep merging."""

from types import MappingProxyType

import pytest

from hostfacts.core.values import (
    DeepMergeError,
    deep_freeze,
    deep_merge,
    last_write_wins_merge,
    thaw,
)


class TestFreeze:
    """Tests for deep_freeze and thaw."""

    def test_nested_structures_frozen(self):
        frozen = deep_freeze({"a": [1, {"b": {2, 3}}]})

        assert isinstance(frozen, MappingProxyType)
        assert isinstance(frozen["a"], tuple)
        assert isinstance(frozen["a"][1], MappingProxyType)
        assert frozen["a"][1]["b"] == frozenset({2, 3})

    def test_freeze_copies(self):
        original = {"a": [1]}
        frozen = deep_freeze(original)
        original["a"].append(2)
        assert frozen["a"] == (1,)

    def test_thaw_round_trip(self):
        value = {"a": [1, {"b": "c"}]}
        assert thaw(deep_freeze(value)) == value
        assert isinstance(thaw(deep_freeze(value))["a"], list)


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_none_yields(self):
        assert deep_merge(None, {"a": 1}) == {"a": 1}
        assert deep_merge({"a": 1}, None) == {"a": 1}
        assert deep_merge({"a": None}, {"a": 2}) == {"a": 2}

    def test_equal_scalars_still_conflict(self):
        with pytest.raises(DeepMergeError):
            deep_merge({"a": 1}, {"a": 1})

    def test_error_carries_path_and_values(self):
        with pytest.raises(DeepMergeError) as exc_info:
            deep_merge({"os": {"name": "gentoo"}}, {"os": {"name": "debian"}})

        error = exc_info.value
        assert error.path == ("os", "name")
        assert (error.left, error.right) == ("gentoo", "debian")
        assert "at root['os']['name']" in str(error)

    def test_mapping_and_list_conflict(self):
        with pytest.raises(DeepMergeError, match="dict and"):
            deep_merge({"a": 1}, [1])

    def test_inputs_not_mutated(self):
        left = {"a": {"b": 1}}
        right = {"a": {"c": 2}}
        deep_merge(left, right)
        assert left == {"a": {"b": 1}}

    def test_last_write_wins(self):
        assert last_write_wins_merge({"a": 1, "b": {"c": 1}}, {"b": {"c": 2}}) == {"a": 1, "b": {"c": 2}}
