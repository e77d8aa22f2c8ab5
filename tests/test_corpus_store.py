import json
from pathlib import Path

import pytest

from auto_fixer import auto_fix
from conflict_detector import detect
from corpus_store import CorpusStore, insert_snippet, merge_entry, same_code
from data_models import IngredientRef, Recipe, ResultRef
from recipe_modifier import change_output
from schema_adapters import render_script

ORES_SCRIPT = """ServerEvents.recipes(event => {
  event.remove({ output: 'minecraft:copper_ingot' })
  event.smelting('minecraft:copper_ingot', 'minecraft:raw_copper').xp(0.7).id('modpack:copper_ingot')
  event.recipes.create.milling([
    'create:crushed_raw_copper',
    Item.of('create:experience_nugget').withChance(0.75)
  ], 'minecraft:raw_copper')
  event.unknownMachine('a:b')
})
"""


@pytest.fixture
def root(tmp_path: Path) -> Path:
    (tmp_path / "ores.js").write_text(ORES_SCRIPT, encoding="utf-8")
    data = tmp_path / "data"
    data.mkdir()
    (data / "recipes.json").write_text(json.dumps({"recipes": [
        {"id": "modpack:glass", "type": "minecraft:smelting",
         "ingredients": ["#forge:sand"], "result": "minecraft:glass"},
        {"type": "minecraft:stonecutting",
         "ingredients": [{"item": "minecraft:stone"}], "results": [{"item": "minecraft:stone_bricks"}]},
    ]}), encoding="utf-8")
    (data / "single.json").write_text(json.dumps(
        {"id": "modpack:torch", "type": "minecraft:crafting_shapeless",
         "ingredients": ["minecraft:stick", "minecraft:coal"], "result": {"item": "minecraft:torch", "count": 4}}
    ), encoding="utf-8")
    (data / "broken.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "README.txt").write_text("event.smelting('a:b', 'c:d')", encoding="utf-8")
    return tmp_path


def test_load_corpus(root: Path) -> None:
    store = CorpusStore(root)
    corpus = store.load_corpus()
    assert [(r.id, r.source_location) for r in corpus] == [
        ("modpack:glass", "data/recipes.json#0"),
        ("recipes_1", "data/recipes.json#1"),
        ("modpack:torch", "data/single.json"),
        ("modpack:copper_ingot", "ores.js#0"),
        ("ores_1", "ores.js#1"),
    ]
    assert [(f.location, f.failure.text) for f in store.decode_failures] == [
        ("ores.js#2", "event.unknownMachine('a:b')"),
    ]


def test_loaded_script_recipes_keep_their_text(root: Path) -> None:
    recipe = CorpusStore(root).load_file(root / "ores.js")[0]
    assert recipe.raw == "event.smelting('minecraft:copper_ingot', 'minecraft:raw_copper').xp(0.7).id('modpack:copper_ingot')"
    assert recipe.properties == {"xp": 0.7}
    assert recipe.ingredients[0].display_name == "raw_copper"


def test_missing_root_gives_empty_corpus(tmp_path: Path) -> None:
    assert CorpusStore(tmp_path / "nowhere").load_corpus() == []


def test_malformed_json_entries_become_failures(tmp_path: Path) -> None:
    (tmp_path / "a.json").write_text(json.dumps(
        {"id": "x:bad", "type": "minecraft:smelting", "result": {"item": "x:bad", "count": "two"}}
    ), encoding="utf-8")
    (tmp_path / "b.json").write_text(json.dumps(
        {"id": "x:ok", "type": "minecraft:smelting", "ingredients": ["x:in"], "result": "x:out"}
    ), encoding="utf-8")
    (tmp_path / "c.json").write_text(json.dumps([
        {"id": "x:tag", "ingredients": [{"tag": 5}], "result": "x:t"},
        {"id": "x:props", "properties": [1], "result": "x:p"},
    ]), encoding="utf-8")

    store = CorpusStore(tmp_path)
    assert [r.id for r in store.load_corpus()] == ["x:ok"]
    assert [f.location for f in store.decode_failures] == ["a.json", "c.json#0", "c.json#1"]
    assert all(f.failure.reason.startswith("malformed recipe entry") for f in store.decode_failures)
    assert store.decode_failures[0].failure.recipe_type == "minecraft:smelting"
    assert store.decode_failures[1].failure.recipe_type is None


def test_save_replaces_script_snippet_in_place(root: Path) -> None:
    store = CorpusStore(root)
    original = store.load_file(root / "ores.js")[0]
    modified = change_output(original, "minecraft:iron_ingot").recipe

    saved = store.save(modified)
    assert saved.ok
    assert saved.location == "ores.js#0"

    text = (root / "ores.js").read_text(encoding="utf-8")
    assert "event.smelting('minecraft:iron_ingot', 'minecraft:raw_copper').xp(0.7).id('modpack:copper_ingot')" in text
    assert "minecraft:copper_ingot', 'minecraft:raw_copper'" not in text
    assert "event.remove({ output: 'minecraft:copper_ingot' })" in text
    assert "event.unknownMachine('a:b')" in text

    reloaded = CorpusStore(root).load_file(root / "ores.js")
    assert reloaded[0] == modified
    assert reloaded[1].id == "ores_1"


def test_save_can_rewrite_the_same_recipe_twice(root: Path) -> None:
    store = CorpusStore(root)
    recipe = store.load_file(root / "ores.js")[1]
    first = change_output(recipe, "create:crushed_raw_iron").recipe
    assert store.save(first).location == "ores.js#1"
    second = change_output(first, "create:crushed_raw_gold").recipe
    assert store.save(second).location == "ores.js#1"

    reloaded = CorpusStore(root).load_file(root / "ores.js")
    assert [r.results[0].item for r in reloaded] == ["minecraft:copper_ingot", "create:crushed_raw_gold"]


def test_save_new_recipe_into_existing_script(root: Path) -> None:
    store = CorpusStore(root)
    recipe = Recipe("modpack:stone", "minecraft:smelting",
                    [IngredientRef(item="minecraft:cobblestone")], [ResultRef("minecraft:stone")])
    saved = store.save(recipe, "ores.js")
    assert saved.location == "ores.js#3"
    assert recipe.source_location == "ores.js#3"

    text = (root / "ores.js").read_text(encoding="utf-8")
    assert text.endswith(
        "  event.unknownMachine('a:b')\n"
        "  event.smelting('minecraft:stone', 'minecraft:cobblestone').id('modpack:stone')\n"
        "})\n"
    )


def test_save_creates_missing_script(root: Path) -> None:
    store = CorpusStore(root)
    recipe = Recipe("modpack:stone", "minecraft:smelting",
                    [IngredientRef(item="minecraft:cobblestone")], [ResultRef("minecraft:stone")])
    saved = store.save(recipe, "generated/new.js")
    assert saved.location == "generated/new.js#0"
    snippet = "event.smelting('minecraft:stone', 'minecraft:cobblestone').id('modpack:stone')"
    assert (root / "generated" / "new.js").read_text(encoding="utf-8") == render_script([snippet])
    assert recipe.raw == snippet


def test_save_json_entry(root: Path) -> None:
    store = CorpusStore(root)
    corpus = store.load_corpus()
    unnamed = corpus[1]
    unnamed.id = "modpack:stone_bricks"
    saved = store.save(unnamed)
    assert saved.location == "data/recipes.json#1"

    document = json.loads((root / "data" / "recipes.json").read_text(encoding="utf-8"))
    assert document["recipes"][1]["id"] == "modpack:stone_bricks"
    assert document["recipes"][0]["id"] == "modpack:glass"


def test_save_keeps_datapack_fields(tmp_path: Path) -> None:
    smelt = {"type": "minecraft:smelting", "id": "a:smelt", "ingredients": ["a:ore"],
             "result": "a:ingot", "experience": 1.0, "cookingtime": 200}
    (tmp_path / "recipes.json").write_text(json.dumps([smelt, smelt]), encoding="utf-8")
    store = CorpusStore(tmp_path)
    corpus = store.load_corpus()
    fixed = auto_fix(corpus, detect(corpus)).fixed

    saved = store.save(fixed[1])
    assert saved.ok
    assert saved.location == "recipes.json#1"

    document = json.loads((tmp_path / "recipes.json").read_text(encoding="utf-8"))
    assert document[0] == smelt
    assert document[1] == {"type": "minecraft:smelting", "id": "a:smelt_2", "ingredients": [{"item": "a:ore"}],
                           "result": "a:ingot", "experience": 1.0, "cookingtime": 200}
    assert CorpusStore(tmp_path).load_corpus()[1] == fixed[1]


def test_merge_entry_keeps_stored_layout() -> None:
    existing = {"type": "t:x", "id": "a:b", "result": "a:c", "stale": 1}
    entry = Recipe("a:b", "t:x", [], [ResultRef("a:c", 2)], {"id": "shadow"}).to_dict()
    merged = merge_entry(existing, entry)
    assert merged == {"type": "t:x", "id": "a:b", "result": {"item": "a:c", "count": 2},
                      "ingredients": [], "properties": {"id": "shadow"}}
    assert list(merged) == ["type", "id", "result", "ingredients", "properties"]


def test_save_single_json_document(root: Path) -> None:
    store = CorpusStore(root)
    torch = [r for r in store.load_corpus() if r.id == "modpack:torch"][0]
    torch.results[0].count = 8
    assert store.save(torch).location == "data/single.json"
    assert CorpusStore(root).load_file(root / "data" / "single.json")[0].results[0].count == 8


def test_save_reports_io_errors(root: Path) -> None:
    recipe = Recipe("modpack:x", "minecraft:smelting", [IngredientRef(item="a:b")], [ResultRef("c:d")])
    result = CorpusStore(root).save(recipe, "missing/recipes.json#2")
    assert not result.ok
    assert result.error


def test_save_reports_unencodable_recipes(root: Path) -> None:
    recipe = Recipe("modpack:x", "botania:mana_infusion", [IngredientRef(item="a:b")], [ResultRef("c:d")])
    result = CorpusStore(root).save(recipe, "ores.js")
    assert not result.ok
    assert (root / "ores.js").read_text(encoding="utf-8") == ORES_SCRIPT


def test_insert_snippet_without_recipes_block() -> None:
    text, offset = insert_snippet("// startup\n", "event.smelting('a:b', 'c:d')")
    assert text == "// startup\n\n" + render_script(["event.smelting('a:b', 'c:d')"])
    assert text[offset:].startswith("ServerEvents.recipes(")


def test_same_code_ignores_layout() -> None:
    assert same_code("event.shapeless('a:b', [\n  'c:d'\n])", "event.shapeless('a:b', [\n    'c:d'\n  ])")
    assert not same_code("event.smelting('a:b', 'c:d')", "event.smelting('a:b', 'e:f')")
