# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Pytest configuration and shared fixtures."""

import logging

import pytest

from hostfacts.core.registry import FactRegistry
from hostfacts.execution.confine import ProbeRegistry
from hostfacts.execution.fact_resolver import FactResolver


@pytest.fixture
def registry():
    """A fresh, empty fact registry, cleared after the test."""
    registry = FactRegistry()
    yield registry
    registry.clear()


@pytest.fixture
def probes():
    """Probe values of a Linux host."""
    return ProbeRegistry({
        "kernel": lambda: "Linux",
        "os_id": lambda: "gentoo",
    })


@pytest.fixture
def resolver(registry, probes):
    """A FactResolver over the fresh registry and Linux probes."""
    resolver = FactResolver(registry, probes)
    yield resolver
    resolver.reset()


@pytest.fixture(autouse=True)
def propagate_package_logs():
    """Let caplog see hostfacts records and undo any configure_logging() call."""
    package_logger = logging.getLogger("hostfacts")
    old_propagate = package_logger.propagate
    old_level = package_logger.level
    old_handlers = list(package_logger.handlers)
    package_logger.propagate = True
    yield
    package_logger.propagate = old_propagate
    package_logger.setLevel(old_level)
    package_logger.handlers = old_handlers
