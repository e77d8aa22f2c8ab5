#!/usr/bin/env python3
"""
Recipe Modifier
Pure bulk transforms over a single recipe, plus an undoable history of them
"""

import copy
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

from data_models import Recipe, InvalidTransform, TransformResult, is_tag

logger = logging.getLogger(__name__)

def _rejected(recipe: Recipe, transform: str, reason: str) -> TransformResult:
    logger.warning(f"Rejected {transform} on {recipe.id or '<no id>'}: {reason}")
    return TransformResult(recipe, InvalidTransform(transform, reason))

def change_id(recipe: Recipe, new_id: str) -> TransformResult:
    if not new_id or not new_id.strip():
        return _rejected(recipe, "change_id", "new id must not be empty")
    modified = copy.deepcopy(recipe)
    modified.id = new_id.strip()
    return TransformResult(modified)

def remove_ingredient(recipe: Recipe, match_id: str) -> TransformResult:
    """Drop every ingredient whose item or tag equals match_id"""
    if not match_id:
        return _rejected(recipe, "remove_ingredient", "nothing to match")
    modified = copy.deepcopy(recipe)
    modified.ingredients = [ing for ing in modified.ingredients if not ing.matches(match_id)]
    removed = len(recipe.ingredients) - len(modified.ingredients)
    logger.debug(f"Removed {removed} ingredient(s) matching {match_id} from {recipe.id}")
    return TransformResult(modified)

def replace_ingredient(recipe: Recipe, old_id: str, new_id: str) -> TransformResult:
    """Swap matching ingredients for new_id, keeping their count and metadata

    A '#'-prefixed replacement becomes a tag reference, anything else a
    concrete item.
    """
    if not old_id or not new_id:
        return _rejected(recipe, "replace_ingredient", "both the old and the new identifier are required")
    modified = copy.deepcopy(recipe)
    for ingredient in modified.ingredients:
        if not ingredient.matches(old_id):
            continue
        if is_tag(new_id):
            ingredient.item, ingredient.tag = None, new_id
        else:
            ingredient.item, ingredient.tag = new_id, None
        ingredient.display_name = None
    return TransformResult(modified)

def change_output(recipe: Recipe, new_id: str) -> TransformResult:
    """Point the primary result at a different item"""
    if not new_id:
        return _rejected(recipe, "change_output", "new output must not be empty")
    if not recipe.results:
        return _rejected(recipe, "change_output", "recipe has no result to change")
    modified = copy.deepcopy(recipe)
    modified.results[0].item = new_id
    modified.results[0].display_name = None
    return TransformResult(modified)

def multiply_output_count(recipe: Recipe, factor: Union[int, float]) -> TransformResult:
    """Scale the primary result's count, flooring the product"""
    if not recipe.results:
        return _rejected(recipe, "multiply_output_count", "recipe has no result to multiply")
    if isinstance(factor, bool) or not isinstance(factor, (int, float)) or not math.isfinite(factor):
        return _rejected(recipe, "multiply_output_count", f"factor {factor!r} is not a finite number")
    new_count = math.floor(recipe.results[0].count * factor)
    if new_count < 1:
        return _rejected(recipe, "multiply_output_count",
                         f"factor {factor} would give a count of {new_count}")
    modified = copy.deepcopy(recipe)
    modified.results[0].count = new_count
    return TransformResult(modified)

# Transforms as values, for hosts that queue, replay or undo them

@dataclass
class ChangeId:
    new_id: str

    def apply(self, recipe: Recipe) -> TransformResult:
        return change_id(recipe, self.new_id)

@dataclass
class RemoveIngredient:
    match_id: str

    def apply(self, recipe: Recipe) -> TransformResult:
        return remove_ingredient(recipe, self.match_id)

@dataclass
class ReplaceIngredient:
    old_id: str
    new_id: str

    def apply(self, recipe: Recipe) -> TransformResult:
        return replace_ingredient(recipe, self.old_id, self.new_id)

@dataclass
class ChangeOutput:
    new_id: str

    def apply(self, recipe: Recipe) -> TransformResult:
        return change_output(recipe, self.new_id)

@dataclass
class MultiplyOutputCount:
    factor: float

    def apply(self, recipe: Recipe) -> TransformResult:
        return multiply_output_count(recipe, self.factor)

Transform = Union[ChangeId, RemoveIngredient, ReplaceIngredient, ChangeOutput, MultiplyOutputCount]

TRANSFORMS = {
    "change_id": ChangeId,
    "remove_ingredient": RemoveIngredient,
    "replace_ingredient": ReplaceIngredient,
    "change_output": ChangeOutput,
    "multiply_output_count": MultiplyOutputCount,
}

def modify(recipe: Recipe, transform: Transform) -> TransformResult:
    """Apply one transform value to a recipe"""
    return transform.apply(recipe)

@dataclass
class TransformRecord:
    """A transform that was applied, with the recipe before and after"""
    transform: Transform
    before: Recipe
    after: Recipe
    timestamp: datetime = field(default_factory=datetime.now)

class TransformHistory:
    """Undo/redo stack of applied transforms for one editing session

    The history holds snapshots only; the host decides what the current
    recipe is.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.records: List[TransformRecord] = []
        self.redo_stack: List[TransformRecord] = []

    def apply(self, recipe: Recipe, transform: Transform) -> TransformResult:
        result = modify(recipe, transform)
        if result.ok:
            self.records.append(TransformRecord(transform, copy.deepcopy(recipe), copy.deepcopy(result.recipe)))
            self.redo_stack.clear()
            self.logger.debug(f"Applied {transform!r} to {recipe.id}")
        return result

    @property
    def can_undo(self) -> bool:
        return bool(self.records)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def undo(self) -> Optional[Recipe]:
        """Recipe as it was before the last transform, or None"""
        if not self.records:
            return None
        record = self.records.pop()
        self.redo_stack.append(record)
        return copy.deepcopy(record.before)

    def redo(self) -> Optional[Recipe]:
        """Recipe as it was after the last undone transform, or None"""
        if not self.redo_stack:
            return None
        record = self.redo_stack.pop()
        self.records.append(record)
        return copy.deepcopy(record.after)

    def clear(self):
        self.records.clear()
        self.redo_stack.clear()
