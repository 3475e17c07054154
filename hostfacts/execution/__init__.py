# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Fact resolution engine: dependency graph, aggregates, confines and selection."""

from .dag import DependencyGraph
from .aggregate import Aggregate, Chunk, DependencyError, last_write_wins, merge_or_none
from .confine import ConfineEvaluator, ProbeRegistry
from .selector import DefinitionSelector
from .fact_resolver import FactResolver

__all__ = [
    "Aggregate",
    "Chunk",
    "ConfineEvaluator",
    "DefinitionSelector",
    "DependencyError",
    "DependencyGraph",
    "FactResolver",
    "ProbeRegistry",
    "last_write_wins",
    "merge_or_none",
]
