import pytest

from data_models import IngredientRef, Recipe, ResultRef
from recipe_validation import ValidationResult, validate_recipe, validate_recipe_id


def fields(issues) -> list:
    return [issue.field for issue in issues]


@pytest.mark.parametrize(
    "recipe_id,valid",
    (
        ("modpack:copper_ingot", True),
        ("create:crushing/copper_ore", True),
        ("", False),
        ("   ", False),
        ("no_namespace", False),
        ("Modpack:Copper", False),
        ("modpack:copper-ingot", False),
    ),
)
def test_validate_recipe_id(recipe_id: str, valid: bool) -> None:
    result = ValidationResult()
    validate_recipe_id(recipe_id, result)
    assert result.is_valid == valid


def test_valid_smelting_recipe() -> None:
    recipe = Recipe(
        "modpack:glass", "minecraft:smelting",
        [IngredientRef(tag="#forge:sand")],
        [ResultRef("minecraft:glass")],
        {"cookingTime": 200},
    )
    result = validate_recipe(recipe)
    assert result.is_valid
    assert result.warnings == []


def test_result_problems() -> None:
    recipe = Recipe(
        "modpack:bad", "minecraft:smelting",
        [IngredientRef(item="a:b")],
        [ResultRef(""), ResultRef("a:b", 0), ResultRef("a:b", 1, 1.5), ResultRef("a:b", 128)],
    )
    result = validate_recipe(recipe)
    assert fields(result.errors) == ["results[0]", "results[1].count", "results[2].chance"]
    assert fields(result.warnings) == ["results[3].count"]


def test_large_fluid_amounts_are_fine() -> None:
    recipe = Recipe(
        "modpack:lava", "create:emptying",
        [IngredientRef(item="minecraft:lava_bucket")],
        [ResultRef("minecraft:lava", 1000, fluid=True)],
    )
    assert validate_recipe(recipe).warnings == []


def test_missing_results_and_ingredient_identifier() -> None:
    recipe = Recipe("modpack:x", "minecraft:smelting", [IngredientRef(count=0)])
    result = validate_recipe(recipe)
    assert fields(result.errors) == ["results", "ingredients[0]", "ingredients[0].count"]


def test_shaped_checks() -> None:
    recipe = Recipe(
        "modpack:hopper", "minecraft:crafting_shaped",
        [IngredientRef(item="minecraft:iron_ingot", metadata={"key": "I"})],
        [ResultRef("minecraft:hopper")],
        {"pattern": ["I I", "ICI", " I"]},
    )
    result = validate_recipe(recipe)
    assert [issue.message for issue in result.errors] == [
        "All pattern rows must have the same width",
        "Pattern symbols without an ingredient: C",
    ]


def test_shaped_needs_pattern() -> None:
    recipe = Recipe("modpack:x", "create:mechanical_crafting", results=[ResultRef("a:b")])
    assert fields(validate_recipe(recipe).errors) == ["pattern"]


@pytest.mark.parametrize("count,valid", ((0, False), (1, True), (9, True), (10, False)))
def test_shapeless_ingredient_count(count: int, valid: bool) -> None:
    recipe = Recipe(
        "modpack:x", "minecraft:crafting_shapeless",
        [IngredientRef(item="minecraft:stick") for _ in range(count)],
        [ResultRef("a:b")],
    )
    assert validate_recipe(recipe).is_valid == valid


@pytest.mark.parametrize("value", (0, -5, "fast", True))
def test_time_properties_must_be_positive(value) -> None:
    recipe = Recipe(
        "modpack:x", "create:milling",
        [IngredientRef(item="a:b")],
        [ResultRef("c:d")],
        {"processingTime": value},
    )
    assert fields(validate_recipe(recipe).errors) == ["processingTime"]
