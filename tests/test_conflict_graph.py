from pathlib import Path

from conflict_detector import detect
from conflict_graph import (
    build_conflict_graph,
    conflict_clusters,
    item_node,
    recipe_node,
    render_conflict_graph,
)
from data_models import ConflictSeverity, IngredientRef, Recipe, ResultRef


def make_corpus() -> list:
    return [
        Recipe("modpack:crushing", "create:crushing", [IngredientRef(item="minecraft:copper_ore")],
               [ResultRef("create:crushed_raw_copper")], source_location="create.js#0"),
        Recipe("modpack:crushing", "create:crushing", [IngredientRef(item="minecraft:copper_ore")],
               [ResultRef("create:crushed_raw_copper", 2)], source_location="ores.js#0"),
        Recipe("modpack:ingot_a", "minecraft:smelting", [IngredientRef(item="minecraft:raw_copper")],
               [ResultRef("minecraft:copper_ingot")]),
        Recipe("modpack:ingot_b", "minecraft:blasting", [IngredientRef(tag="#forge:raw_materials/copper")],
               [ResultRef("minecraft:copper_ingot")]),
        Recipe("modpack:glass", "minecraft:smelting", [IngredientRef(tag="#forge:sand")],
               [ResultRef("minecraft:glass")]),
    ]


def test_build_conflict_graph() -> None:
    corpus = make_corpus()
    graph = build_conflict_graph(corpus, detect(corpus))

    crushing = graph.nodes[recipe_node("modpack:crushing")]
    assert crushing["severity"] == ConflictSeverity.ERROR
    assert crushing["occurrences"] == 2
    assert crushing["locations"] == ["create.js#0", "ores.js#0"]

    assert graph.nodes[recipe_node("modpack:ingot_a")]["severity"] == ConflictSeverity.WARNING
    assert graph.nodes[recipe_node("modpack:glass")]["severity"] is None
    assert graph.nodes[item_node("minecraft:copper_ingot")]["severity"] == ConflictSeverity.WARNING

    edge = graph.edges[item_node("#forge:sand"), recipe_node("modpack:glass")]
    assert edge["relation"] == "ingredient"
    assert graph.edges[recipe_node("modpack:glass"), item_node("minecraft:glass")]["relation"] == "produces"


def test_conflict_clusters_skip_clean_components() -> None:
    corpus = make_corpus()
    clusters = conflict_clusters(build_conflict_graph(corpus, detect(corpus)))
    assert len(clusters) == 2
    assert all(recipe_node("modpack:glass") not in cluster for cluster in clusters)


def test_render_conflict_graph(tmp_path: Path) -> None:
    corpus = make_corpus()
    graph = build_conflict_graph(corpus, detect(corpus))
    output = render_conflict_graph(graph, tmp_path / "graphs" / "conflicts.html", conflicts_only=True)
    assert output.exists()
    assert "modpack:crushing" in output.read_text(encoding="utf-8")
