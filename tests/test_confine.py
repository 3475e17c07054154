"""Tests for confine predicates and the confine evaluator."""

import pytest

from hostfacts.core.errors import ConfigurationError
from hostfacts.core.models import ConfinePredicate, FactDefinition, confine
from hostfacts.execution.confine import ConfineEvaluator, ProbeRegistry
from hostfacts.resolvers.base import ProbeError


def definition(*confines):
    return FactDefinition(name="os.release", resolver=lambda: "1.0", confines=confines)


class TestConfinePredicate:
    """Tests for ConfinePredicate matching."""

    def test_equality_is_case_insensitive(self):
        assert ConfinePredicate("kernel", expected="linux").matches("Linux")

    def test_accepts_list_of_values(self):
        predicate = ConfinePredicate("os_id", expected=["rhel", "centos"])
        assert predicate.matches("CentOS")
        assert not predicate.matches("debian")

    def test_non_string_values(self):
        assert ConfinePredicate("is_virtual", expected=True).matches(True)
        assert not ConfinePredicate("is_virtual", expected=True).matches(False)

    def test_matcher(self):
        predicate = ConfinePredicate("kernelmajversion", matcher=lambda v: int(v) >= 5)
        assert predicate.matches("6")
        assert not predicate.matches("4")

    def test_none_never_matches(self):
        assert not ConfinePredicate("kernel", expected="Linux").matches(None)
        assert not ConfinePredicate("kernel", matcher=lambda v: True).matches(None)

    def test_needs_expected_or_matcher(self):
        with pytest.raises(ConfigurationError):
            ConfinePredicate("kernel")

    def test_confine_helper(self):
        predicates = confine(kernel="Linux", os_id=lambda v: v.startswith("gen"))
        assert [p.probe for p in predicates] == ["kernel", "os_id"]
        assert predicates[0].expected == "Linux"
        assert predicates[1].matcher is not None


class TestProbeRegistry:
    """Tests for ProbeRegistry."""

    def test_values_are_memoized(self):
        calls = []
        probes = ProbeRegistry()

        @probes.probe("kernel")
        def kernel():
            calls.append(1)
            return "Linux"

        assert probes.lookup("kernel") == "Linux"
        assert probes.lookup("kernel") == "Linux"
        assert calls == [1]

    def test_unregistered_probe_is_none(self):
        assert ProbeRegistry().lookup("kernel") is None

    def test_probe_failure_is_none(self):
        def unavailable():
            raise ProbeError("sysctl missing")

        probes = ProbeRegistry({"hw_model": unavailable})
        assert probes.lookup("hw_model") is None

    def test_clear_refetches(self):
        values = iter(["Linux", "Darwin"])
        probes = ProbeRegistry({"kernel": lambda: next(values)})
        assert probes.lookup("kernel") == "Linux"
        probes.clear()
        assert probes.lookup("kernel") == "Darwin"


class TestConfineEvaluator:
    """Tests for ConfineEvaluator."""

    def test_no_confines_is_suitable(self):
        assert ConfineEvaluator(ProbeRegistry()).suitable(definition())

    def test_all_predicates_must_hold(self, probes):
        evaluator = ConfineEvaluator(probes)
        assert evaluator.suitable(definition(*confine(kernel="Linux", os_id="gentoo")))
        assert not evaluator.suitable(definition(*confine(kernel="Linux", os_id="debian")))

    def test_short_circuits_on_first_false(self):
        fetched = []
        probes = ProbeRegistry({
            "kernel": lambda: fetched.append("kernel") or "Windows",
            "os_id": lambda: fetched.append("os_id") or "gentoo",
        })
        evaluator = ConfineEvaluator(probes)

        assert not evaluator.suitable(definition(*confine(kernel="Linux", os_id="gentoo")))
        assert fetched == ["kernel"]

    def test_unavailable_probe_makes_predicate_false(self):
        evaluator = ConfineEvaluator(ProbeRegistry())
        assert not evaluator.suitable(definition(*confine(kernel="Linux")))

    def test_raising_matcher_is_false(self, probes):
        def broken(value):
            raise RuntimeError("boom")

        evaluator = ConfineEvaluator(probes)
        assert not evaluator.suitable(definition(*confine(kernel=broken)))
