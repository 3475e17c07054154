# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Selection of the single applicable definition among competing candidates."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from hostfacts.core.models import FactDefinition
from hostfacts.execution.confine import ConfineEvaluator

logger = logging.getLogger(__name__)


def _selection_key(definition: FactDefinition) -> tuple[int, bool, int]:
    # Highest weight first; on equal weight an override supersedes a
    # built-in; otherwise the earliest registration wins.
    return definition.weight, definition.is_override, -definition.sequence


class DefinitionSelector:
    """Filters candidates by their confines and picks the highest weight."""

    def __init__(self, evaluator: ConfineEvaluator):
        self.evaluator = evaluator

    def suitable_definitions(self, definitions: Iterable[FactDefinition]) -> list[FactDefinition]:
        return [d for d in definitions if self.evaluator.suitable(d)]

    def select(self, definitions: Iterable[FactDefinition]) -> Optional[FactDefinition]:
        """Pick the definition to resolve, or None if none is suitable here."""
        suitable = self.suitable_definitions(definitions)
        if not suitable:
            return None
        winner = max(suitable, key=_selection_key)
        if len(suitable) > 1:
            logger.info(
                f"Selected {winner.label} among {len(suitable)} suitable definitions"
            )
        return winner
