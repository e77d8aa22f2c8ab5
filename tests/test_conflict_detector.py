from data_models import (
    ConflictSeverity,
    ConflictType,
    IngredientRef,
    Recipe,
    ResultRef,
)
from conflict_detector import detect


def smelting(recipe_id: str, output: str, location: str = None) -> Recipe:
    return Recipe(
        recipe_id, "minecraft:smelting",
        [IngredientRef(item="minecraft:raw_copper")],
        [ResultRef(output)],
        source_location=location,
    )


def test_empty_corpus_has_no_conflicts() -> None:
    report = detect([])
    assert report.conflicts == []
    assert report.affected_recipes == set()


def test_duplicate_id_across_files() -> None:
    corpus = [
        smelting("copper_ore_crushing", "create:crushed_raw_copper", "kubejs/server_scripts/create.js#0"),
        smelting("copper_ore_crushing", "create:crushed_raw_copper", "kubejs/server_scripts/ores.js#3"),
        smelting("iron_nugget", "minecraft:iron_nugget", "kubejs/server_scripts/ores.js#4"),
    ]
    report = detect(corpus)
    errors = report.errors()
    assert len(errors) == 1
    conflict = errors[0]
    assert conflict.conflict_type == ConflictType.DUPLICATE_ID
    assert conflict.recipes == ["copper_ore_crushing"]
    assert conflict.message == 'Recipe ID "copper_ore_crushing" is defined 2 times across 2 source location(s)'
    assert conflict.suggestion == "Rename one of the recipes to use a unique ID"
    assert conflict.source_locations == [
        "kubejs/server_scripts/create.js#0",
        "kubejs/server_scripts/ores.js#3",
    ]
    assert "copper_ore_crushing" in report.affected_recipes


def test_duplicate_output_is_a_warning() -> None:
    corpus = [
        smelting("a", "minecraft:copper_ingot"),
        smelting("b", "minecraft:copper_ingot"),
        smelting("c", "minecraft:copper_ingot"),
    ]
    report = detect(corpus)
    assert report.errors() == []
    warnings = report.warnings()
    assert len(warnings) == 1
    assert warnings[0].severity == ConflictSeverity.WARNING
    assert warnings[0].recipes == ["a", "b", "c"]
    assert warnings[0].output_id == "minecraft:copper_ingot"
    assert warnings[0].message == 'Multiple recipes (3) produce "minecraft:copper_ingot"'
    assert warnings[0].source_locations == ["unknown"]
    assert report.affected_recipes == {"a", "b", "c"}


def test_duplicate_ids_in_one_file_count_every_occurrence() -> None:
    corpus = [smelting("x", "a:b", "one.js#0"), smelting("x", "c:d", "one.js#1"), smelting("x", "e:f", "one.js#2")]
    conflict = detect(corpus).errors()[0]
    assert conflict.message == 'Recipe ID "x" is defined 3 times across 3 source location(s)'


def test_same_recipe_twice_is_one_output_entry() -> None:
    corpus = [smelting("x", "a:b"), smelting("x", "a:b")]
    report = detect(corpus)
    assert len(report.errors()) == 1
    assert report.warnings() == []


def test_recipes_without_results_or_ids_are_skipped() -> None:
    corpus = [
        Recipe("a", "minecraft:smelting"),
        Recipe("b", "minecraft:smelting"),
        smelting("", "minecraft:glass"),
        smelting("", "minecraft:glass"),
        smelting("c", "minecraft:glass"),
    ]
    report = detect(corpus)
    assert report.conflicts == []


def test_duplicate_output_only_looks_at_first_result() -> None:
    corpus = [
        Recipe("a", "create:milling", results=[ResultRef("x:one"), ResultRef("x:shared")]),
        Recipe("b", "create:milling", results=[ResultRef("x:two"), ResultRef("x:shared")]),
    ]
    assert detect(corpus).conflicts == []


def test_detection_is_deterministic() -> None:
    corpus = [smelting(f"r{i % 3}", f"out:{i % 2}", f"f{i}.js#0") for i in range(9)]
    first = detect(corpus).to_dict()
    second = detect(list(corpus)).to_dict()
    assert first == second
