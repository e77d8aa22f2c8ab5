#!/usr/bin/env python3
"""
Conflict Detector
Finds recipes that share an id or produce the same primary output
"""

import logging
from collections import OrderedDict
from typing import Dict, List

from data_models import (
    Recipe, RecipeConflict, ConflictReport, ConflictSeverity, ConflictType,
    UNKNOWN_OUTPUT, primary_output
)

UNKNOWN_LOCATION = "unknown"

class ConflictDetector:
    """Groups a recipe corpus by id and by output in a single pass each"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def detect(self, corpus: List[Recipe]) -> ConflictReport:
        """Detect duplicate ids (errors) and duplicate outputs (warnings)"""
        self.logger.info(f"Detecting conflicts in {len(corpus)} recipes...")

        report = ConflictReport()
        for conflict in self._duplicate_id_conflicts(corpus):
            report.conflicts.append(conflict)
            report.affected_recipes.update(conflict.recipes)
        for conflict in self._duplicate_output_conflicts(corpus):
            report.conflicts.append(conflict)
            report.affected_recipes.update(conflict.recipes)

        self.logger.info(f"Found {len(report.errors())} errors and {len(report.warnings())} warnings")
        return report

    def _duplicate_id_conflicts(self, corpus: List[Recipe]) -> List[RecipeConflict]:
        locations_by_id: Dict[str, List[str]] = OrderedDict()
        for index, recipe in enumerate(corpus):
            if not recipe.id:
                self.logger.warning(f"Skipping recipe #{index} without an id "
                                    f"({recipe.source_location or UNKNOWN_LOCATION})")
                continue
            locations_by_id.setdefault(recipe.id, []).append(recipe.source_location or UNKNOWN_LOCATION)

        conflicts = []
        for recipe_id, locations in locations_by_id.items():
            if len(locations) < 2:
                continue
            distinct = list(OrderedDict.fromkeys(locations))
            conflicts.append(RecipeConflict(
                conflict_type=ConflictType.DUPLICATE_ID,
                severity=ConflictSeverity.ERROR,
                recipes=[recipe_id],
                message=(f'Recipe ID "{recipe_id}" is defined {len(locations)} times '
                         f'across {len(distinct)} source location(s)'),
                suggestion="Rename one of the recipes to use a unique ID",
                source_locations=distinct
            ))
            self.logger.debug(f"Duplicate id {recipe_id} in {', '.join(distinct)}")
        return conflicts

    def _duplicate_output_conflicts(self, corpus: List[Recipe]) -> List[RecipeConflict]:
        recipes_by_output: Dict[str, Dict[str, None]] = OrderedDict()
        locations_by_output: Dict[str, Dict[str, None]] = {}
        for recipe in corpus:
            output = primary_output(recipe)
            if output == UNKNOWN_OUTPUT or not recipe.id:
                continue
            recipes_by_output.setdefault(output, OrderedDict())[recipe.id] = None
            locations_by_output.setdefault(output, OrderedDict())[recipe.source_location or UNKNOWN_LOCATION] = None

        conflicts = []
        for output, recipe_ids in recipes_by_output.items():
            if len(recipe_ids) < 2:
                continue
            conflicts.append(RecipeConflict(
                conflict_type=ConflictType.DUPLICATE_OUTPUT,
                severity=ConflictSeverity.WARNING,
                recipes=list(recipe_ids),
                message=f'Multiple recipes ({len(recipe_ids)}) produce "{output}"',
                suggestion="This may be intentional, but ensure recipe priorities are set correctly",
                output_id=output,
                source_locations=list(locations_by_output[output])
            ))
        return conflicts

def detect(corpus: List[Recipe]) -> ConflictReport:
    """Detect conflicts across a recipe corpus"""
    return ConflictDetector().detect(corpus)
