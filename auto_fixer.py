#!/usr/bin/env python3
"""
Auto-Fixer
Renames duplicate recipe ids with a numeric suffix and reports every rename
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from data_models import Recipe, ConflictReport, IdCollisionExhausted

DEFAULT_MAX_ATTEMPTS = 10000
FIRST_SUFFIX = 2

@dataclass
class RenameRecord:
    """One occurrence that received a new id"""
    index: int
    old_id: str
    new_id: str
    source_location: Optional[str] = None

@dataclass
class AutoFixResult:
    """Fixed corpus plus an explicit record of what changed"""
    fixed: List[Recipe]
    changes: Dict[str, List[str]] = field(default_factory=dict)
    renames: List[RenameRecord] = field(default_factory=list)
    failures: List[IdCollisionExhausted] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.renames)

    def to_dict(self) -> Dict[str, object]:
        return {
            'changes': {old: list(new) for old, new in self.changes.items()},
            'renames': [vars(rename).copy() for rename in self.renames],
            'failures': [vars(failure).copy() for failure in self.failures]
        }

class AutoFixer:
    """Assigns `<id>_<n>` to every repeated occurrence of an id"""

    def __init__(self, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self.max_attempts = max_attempts
        self.logger = logging.getLogger(__name__)

    def fix(self, corpus: List[Recipe], report: Optional[ConflictReport] = None) -> AutoFixResult:
        """Rename duplicates; the first occurrence of each id keeps it

        With a report only the ids it flags as duplicate_id are renamed.
        """
        targets: Optional[Set[str]] = set(report.duplicate_ids()) if report is not None else None
        taken: Set[str] = {recipe.id for recipe in corpus if recipe.id}
        seen: Set[str] = set()
        next_suffix: Dict[str, int] = {}
        result = AutoFixResult(fixed=[])

        for index, recipe in enumerate(corpus):
            fixed_recipe = copy.deepcopy(recipe)
            result.fixed.append(fixed_recipe)

            if not recipe.id or recipe.id not in seen:
                seen.add(recipe.id)
                continue
            if targets is not None and recipe.id not in targets:
                continue

            new_id = self._next_free_id(recipe.id, taken, next_suffix)
            if new_id is None:
                self.logger.warning(f"Gave up renaming {recipe.id} (occurrence #{index}) "
                                    f"after {self.max_attempts} attempts")
                result.failures.append(IdCollisionExhausted(
                    original_id=recipe.id,
                    index=index,
                    attempts=self.max_attempts,
                    source_location=recipe.source_location
                ))
                continue

            taken.add(new_id)
            fixed_recipe.id = new_id
            result.changes.setdefault(recipe.id, []).append(new_id)
            result.renames.append(RenameRecord(index, recipe.id, new_id, recipe.source_location))
            self.logger.info(f"Renamed duplicate {recipe.id} -> {new_id}")

        self.logger.info(f"Auto-fix renamed {len(result.renames)} recipes, {len(result.failures)} failed")
        return result

    def _next_free_id(self, recipe_id: str, taken: Set[str], next_suffix: Dict[str, int]) -> Optional[str]:
        suffix = next_suffix.get(recipe_id, FIRST_SUFFIX)
        for _ in range(self.max_attempts):
            candidate = f"{recipe_id}_{suffix}"
            suffix += 1
            if candidate not in taken:
                next_suffix[recipe_id] = suffix
                return candidate
        next_suffix[recipe_id] = suffix
        return None

def suggest_id_fix(conflicting_id: str, existing_ids: Set[str],
                   max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> Optional[str]:
    """First `<id>_<n>` not in existing_ids, or None past the attempt bound"""
    return AutoFixer(max_attempts)._next_free_id(conflicting_id, set(existing_ids), {})

def auto_fix(corpus: List[Recipe], report: Optional[ConflictReport] = None,
             max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> AutoFixResult:
    """Rename duplicate ids across a corpus"""
    return AutoFixer(max_attempts).fix(corpus, report)
