#!/usr/bin/env python3
"""
Recipe Validation
Field-level checks run before a recipe is saved or generated
"""

import re
from dataclasses import dataclass, field
from typing import List

from data_models import Recipe, ConflictSeverity

RECIPE_ID_RE = re.compile(r'^[a-z0-9_]+:[a-z0-9_/]+$')
MAX_STACK_SIZE = 64
MAX_SHAPELESS_INGREDIENTS = 9
SHAPED_TYPES = {"minecraft:crafting_shaped", "create:mechanical_crafting"}
SHAPELESS_TYPES = {"minecraft:crafting_shapeless"}
TIME_PROPERTIES = ("processingTime", "cookingTime")

@dataclass
class ValidationIssue:
    field: str
    message: str
    severity: ConflictSeverity = ConflictSeverity.ERROR

@dataclass
class ValidationResult:
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error(self, field_name: str, message: str):
        self.errors.append(ValidationIssue(field_name, message))

    def warn(self, field_name: str, message: str):
        self.warnings.append(ValidationIssue(field_name, message, ConflictSeverity.WARNING))

def validate_recipe_id(recipe_id: str, result: ValidationResult):
    if not recipe_id or not recipe_id.strip():
        result.error("id", "Recipe ID is required")
    elif not RECIPE_ID_RE.match(recipe_id):
        result.error("id", 'Recipe ID must be in format "namespace:path" (lowercase, numbers, underscores only)')

def _validate_results(recipe: Recipe, result: ValidationResult):
    if not recipe.results:
        result.error("results", "At least one result is required")
    for index, output in enumerate(recipe.results):
        name = f"results[{index}]"
        if not output.item:
            result.error(name, "Result item is required")
        if output.count < 1:
            result.error(f"{name}.count", "Count must be at least 1")
        elif output.count > MAX_STACK_SIZE and not output.fluid:
            result.warn(f"{name}.count", f"Item count above {MAX_STACK_SIZE} exceeds a normal stack")
        if output.chance is not None and not 0 <= output.chance <= 1:
            result.error(f"{name}.chance", "Chance must be between 0 and 1")

def _validate_ingredients(recipe: Recipe, result: ValidationResult):
    for index, ingredient in enumerate(recipe.ingredients):
        name = f"ingredients[{index}]"
        if not ingredient.identifier:
            result.error(name, "Ingredient needs an item or a tag")
        if ingredient.count < 1:
            result.error(f"{name}.count", "Count must be at least 1")
        elif ingredient.count > MAX_STACK_SIZE and not ingredient.fluid:
            result.warn(f"{name}.count", f"Item count above {MAX_STACK_SIZE} exceeds a normal stack")

def _validate_shaped(recipe: Recipe, result: ValidationResult):
    pattern = recipe.properties.get("pattern") or []
    if not pattern:
        result.error("pattern", "Pattern is required for shaped crafting")
        return
    if any(len(row) != len(pattern[0]) for row in pattern):
        result.error("pattern", "All pattern rows must have the same width")
    if not recipe.ingredients:
        result.error("key", "At least one ingredient is required")
    keys = {ingredient.metadata.get("key") for ingredient in recipe.ingredients}
    missing = sorted({symbol for row in pattern for symbol in row if symbol != " "} - keys)
    if missing:
        result.error("key", f"Pattern symbols without an ingredient: {', '.join(missing)}")

def validate_recipe(recipe: Recipe) -> ValidationResult:
    """Collect every error and warning for one recipe"""
    result = ValidationResult()
    validate_recipe_id(recipe.id, result)
    _validate_results(recipe, result)
    _validate_ingredients(recipe, result)

    if recipe.recipe_type in SHAPED_TYPES:
        _validate_shaped(recipe, result)
    elif recipe.recipe_type in SHAPELESS_TYPES:
        if not recipe.ingredients:
            result.error("ingredients", "At least one ingredient is required")
        elif len(recipe.ingredients) > MAX_SHAPELESS_INGREDIENTS:
            result.error("ingredients", f"Maximum {MAX_SHAPELESS_INGREDIENTS} ingredients allowed for shapeless crafting")

    for key in TIME_PROPERTIES:
        value = recipe.properties.get(key)
        if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0):
            result.error(key, f"{key} must be a positive number of ticks")
    return result
