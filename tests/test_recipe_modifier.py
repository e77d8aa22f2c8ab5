import pytest

from data_models import IngredientRef, Recipe, ResultRef
from recipe_modifier import (
    ChangeId,
    ChangeOutput,
    MultiplyOutputCount,
    ReplaceIngredient,
    TRANSFORMS,
    TransformHistory,
    change_id,
    change_output,
    modify,
    multiply_output_count,
    remove_ingredient,
    replace_ingredient,
)


@pytest.fixture
def brass() -> Recipe:
    return Recipe(
        "create:brass", "create:mixing",
        [
            IngredientRef(item="minecraft:copper_ingot", count=2, metadata={"slot": 0}),
            IngredientRef(tag="#forge:ingots/zinc"),
            IngredientRef(item="minecraft:copper_ingot"),
        ],
        [ResultRef("create:brass_ingot", 3, display_name="Brass Ingot"), ResultRef("create:zinc_nugget")],
        {"heated": True},
        source_location="create.js#0",
    )


def test_change_id(brass: Recipe) -> None:
    result = change_id(brass, "  modpack:brass  ")
    assert result.ok
    assert result.recipe.id == "modpack:brass"
    assert brass.id == "create:brass"


@pytest.mark.parametrize("new_id", ("", "   "))
def test_change_id_rejects_empty(brass: Recipe, new_id: str) -> None:
    result = change_id(brass, new_id)
    assert not result.ok
    assert result.error.transform == "change_id"
    assert result.recipe is brass


def test_remove_ingredient_matches_items_and_tags(brass: Recipe) -> None:
    assert [i.identifier for i in remove_ingredient(brass, "minecraft:copper_ingot").recipe.ingredients] == [
        "#forge:ingots/zinc",
    ]
    assert len(remove_ingredient(brass, "#forge:ingots/zinc").recipe.ingredients) == 2
    assert remove_ingredient(brass, "minecraft:dirt").recipe == brass
    assert len(brass.ingredients) == 3


def test_replace_ingredient_keeps_count_and_metadata(brass: Recipe) -> None:
    result = replace_ingredient(brass, "minecraft:copper_ingot", "#forge:ingots/copper")
    first = result.recipe.ingredients[0]
    assert first.tag == "#forge:ingots/copper"
    assert first.item is None
    assert first.count == 2
    assert first.metadata == {"slot": 0}
    assert result.recipe.ingredients[2].tag == "#forge:ingots/copper"

    back = replace_ingredient(result.recipe, "#forge:ingots/copper", "minecraft:iron_ingot")
    assert [i.item for i in back.recipe.ingredients] == ["minecraft:iron_ingot", None, "minecraft:iron_ingot"]


def test_replace_ingredient_rejects_missing_arguments(brass: Recipe) -> None:
    assert not replace_ingredient(brass, "", "a:b").ok
    assert not replace_ingredient(brass, "a:b", "").ok


def test_change_output_only_touches_first_result(brass: Recipe) -> None:
    result = change_output(brass, "create:andesite_alloy")
    assert result.recipe.results[0].item == "create:andesite_alloy"
    assert result.recipe.results[0].count == 3
    assert result.recipe.results[0].display_name is None
    assert result.recipe.results[1] == brass.results[1]


def test_change_output_needs_a_result() -> None:
    result = change_output(Recipe("a:b", "minecraft:smelting"), "c:d")
    assert not result.ok
    assert "no result" in result.error.reason


@pytest.mark.parametrize(
    "factor,expected",
    (
        (2, 6),
        (1.5, 4),
        (0.5, 1),
        (1, 3),
    ),
)
def test_multiply_output_count_floors(brass: Recipe, factor, expected: int) -> None:
    result = multiply_output_count(brass, factor)
    assert result.ok
    assert result.recipe.results[0].count == expected
    assert result.recipe.results[1].count == 1


@pytest.mark.parametrize("factor", (0, 0.2, -1, float("nan"), float("inf"), True, "2"))
def test_multiply_output_count_rejects(brass: Recipe, factor) -> None:
    result = multiply_output_count(brass, factor)
    assert not result.ok
    assert result.recipe.results[0].count == 3


def test_modify_preserves_other_fields(brass: Recipe) -> None:
    result = modify(brass, ChangeOutput("x:y"))
    assert result.recipe.properties == brass.properties
    assert result.recipe.source_location == "create.js#0"
    assert result.recipe.ingredients == brass.ingredients


def test_transform_registry() -> None:
    assert TRANSFORMS["replace_ingredient"]("a:b", "c:d") == ReplaceIngredient("a:b", "c:d")
    assert set(TRANSFORMS) == {
        "change_id", "remove_ingredient", "replace_ingredient", "change_output", "multiply_output_count",
    }


def test_history_undo_redo(brass: Recipe) -> None:
    history = TransformHistory()
    renamed = history.apply(brass, ChangeId("modpack:brass")).recipe
    doubled = history.apply(renamed, MultiplyOutputCount(2)).recipe
    assert doubled.results[0].count == 6
    assert history.can_undo and not history.can_redo

    assert history.undo() == renamed
    assert history.undo() == brass
    assert history.undo() is None
    assert history.can_redo

    assert history.redo() == renamed
    history.apply(renamed, ChangeOutput("x:y"))
    assert not history.can_redo
    assert history.redo() is None


def test_history_skips_rejected_transforms(brass: Recipe) -> None:
    history = TransformHistory()
    result = history.apply(brass, MultiplyOutputCount(0))
    assert not result.ok
    assert not history.can_undo
    history.apply(brass, ChangeId("a:b"))
    history.clear()
    assert not history.can_undo
