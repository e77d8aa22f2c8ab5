import json
from pathlib import Path

from item_registry import StaticItemRegistry


def test_from_file(tmp_path: Path) -> None:
    path = tmp_path / "items.json"
    path.write_text(json.dumps({
        "minecraft:stick": "Stick",
        "create:brass_ingot": {"displayName": "Brass Ingot", "texture": "create:item/brass_ingot"},
        "farmersdelight:cabbage": {"name": "Cabbage", "modId": "farmers_delight"},
        "broken:entry": 5,
    }), encoding="utf-8")
    registry = StaticItemRegistry.from_file(path)
    assert len(registry) == 3
    assert registry.resolve("minecraft:stick").display_name == "Stick"
    assert registry.resolve("minecraft:stick").mod_id == "minecraft"
    assert registry.resolve("create:brass_ingot").texture == "create:item/brass_ingot"
    assert registry.resolve("farmersdelight:cabbage").mod_id == "farmers_delight"
    assert registry.resolve("minecraft:dirt") is None


def test_unreadable_file_gives_empty_registry(tmp_path: Path) -> None:
    assert len(StaticItemRegistry.from_file(tmp_path / "missing.json")) == 0
    (tmp_path / "bad.json").write_text("[1, 2]", encoding="utf-8")
    assert len(StaticItemRegistry.from_file(tmp_path / "bad.json")) == 0
