#!/usr/bin/env python3
"""
Conflict Graph
Graph view of recipes, the items they consume and produce, and the conflicts
between them
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Set

import networkx as nx
import plotly.graph_objects as go
import plotly.offline as pyo

from data_models import (
    Recipe, ConflictReport, ConflictSeverity, ConflictType, severity_to_color
)

logger = logging.getLogger(__name__)

NO_ISSUES_COLOR = "#4CAF50"
ITEM_COLOR = "#2196F3"
RECIPE_PREFIX = "recipe:"
ITEM_PREFIX = "item:"

def recipe_node(recipe_id: str) -> str:
    return f"{RECIPE_PREFIX}{recipe_id}"

def item_node(identifier: str) -> str:
    return f"{ITEM_PREFIX}{identifier}"

def build_conflict_graph(corpus: List[Recipe], report: ConflictReport) -> nx.DiGraph:
    """Directed graph: ingredient -> recipe -> result, annotated with conflicts

    Recipes sharing an id collapse into one node whose `occurrences` counts
    them.
    """
    severity_by_recipe: Dict[str, ConflictSeverity] = {}
    shared_outputs: Set[str] = set()
    for conflict in report.conflicts:
        for recipe_id in conflict.recipes:
            current = severity_by_recipe.get(recipe_id)
            if current != ConflictSeverity.ERROR:
                severity_by_recipe[recipe_id] = conflict.severity
        if conflict.conflict_type == ConflictType.DUPLICATE_OUTPUT and conflict.output_id:
            shared_outputs.add(conflict.output_id)

    graph = nx.DiGraph()
    for recipe in corpus:
        if not recipe.id:
            continue
        node = recipe_node(recipe.id)
        if node in graph:
            graph.nodes[node]['occurrences'] += 1
            graph.nodes[node]['locations'].append(recipe.source_location or "unknown")
        else:
            severity = severity_by_recipe.get(recipe.id)
            graph.add_node(node,
                kind="recipe",
                name=recipe.id,
                recipe_type=recipe.recipe_type,
                severity=severity,
                color=severity_to_color(severity) if severity else NO_ISSUES_COLOR,
                occurrences=1,
                locations=[recipe.source_location or "unknown"]
            )

        for ingredient in recipe.ingredients:
            identifier = ingredient.identifier
            if not identifier:
                continue
            _add_item(graph, identifier, ingredient.display_name, identifier in shared_outputs)
            graph.add_edge(item_node(identifier), node, relation="ingredient", amount=ingredient.count)
        for result in recipe.results:
            if not result.item:
                continue
            _add_item(graph, result.item, result.display_name, result.item in shared_outputs)
            graph.add_edge(node, item_node(result.item), relation="produces", amount=result.count)

    logger.info(f"Graph built: {len(graph.nodes)} nodes, {len(graph.edges)} edges")
    return graph

def _add_item(graph: nx.DiGraph, identifier: str, display_name: Optional[str], shared: bool):
    node = item_node(identifier)
    if node in graph:
        return
    graph.add_node(node,
        kind="item",
        name=display_name or identifier,
        severity=ConflictSeverity.WARNING if shared else None,
        color=severity_to_color(ConflictSeverity.WARNING) if shared else ITEM_COLOR
    )

def conflict_clusters(graph: nx.DiGraph) -> List[Set[str]]:
    """Connected groups of nodes that contain at least one conflict, largest first"""
    clusters = [component for component in nx.weakly_connected_components(graph)
                if any(graph.nodes[node].get('severity') for node in component)]
    return sorted(clusters, key=len, reverse=True)

def _node_tooltip(graph: nx.DiGraph, node: str) -> str:
    data = graph.nodes[node]
    lines = [f"<b>{data['name']}</b>"]
    if data['kind'] == "recipe":
        lines.append(f"Type: {data['recipe_type'] or 'unknown'}")
        if data['occurrences'] > 1:
            lines.append(f"Defined {data['occurrences']} times")
        lines.append("Locations: " + ", ".join(data['locations']))
    if data.get('severity'):
        lines.append(f"Severity: {data['severity'].value.upper()}")
    return "<br>".join(lines)

def render_conflict_graph(graph: nx.DiGraph, output_file: Path, conflicts_only: bool = False) -> Path:
    """Write an interactive HTML view of the graph"""
    logger.info("Generating Plotly visualization...")
    if conflicts_only:
        graph = graph.subgraph(set().union(*conflict_clusters(graph))).copy()

    pos = nx.spring_layout(graph, k=3, iterations=50, seed=42) if len(graph) else {}

    edge_x: List[Optional[float]] = []
    edge_y: List[Optional[float]] = []
    for source, target in graph.edges():
        x0, y0 = pos[source]
        x1, y1 = pos[target]
        edge_x.extend([x0, x1, None])
        edge_y.extend([y0, y1, None])
    traces = [go.Scatter(
        x=edge_x, y=edge_y,
        mode='lines',
        line=dict(width=1, color='#888888'),
        hoverinfo='none',
        name="Ingredients / Results",
        opacity=0.6
    )]

    symbol_map = {'recipe': 'square', 'item': 'circle'}
    for kind in ("recipe", "item"):
        nodes = [node for node, data in graph.nodes(data=True) if data['kind'] == kind]
        traces.append(go.Scatter(
            x=[pos[node][0] for node in nodes],
            y=[pos[node][1] for node in nodes],
            mode='markers+text',
            marker=dict(
                size=[30 if graph.nodes[node].get('severity') else 18 for node in nodes],
                color=[graph.nodes[node]['color'] for node in nodes],
                symbol=symbol_map[kind],
                line=dict(width=2, color='white')
            ),
            text=[graph.nodes[node]['name'] for node in nodes],
            textposition="top center",
            textfont=dict(size=9),
            hovertext=[_node_tooltip(graph, node) for node in nodes],
            hoverinfo='text',
            name=f"{kind.title()}s"
        ))

    fig = go.Figure(data=traces)
    fig.update_layout(
        title={'text': "🎯 Recipe Conflict Graph", 'x': 0.5, 'font': {'size': 24}},
        showlegend=True,
        hovermode='closest',
        margin=dict(b=20, l=5, r=5, t=40),
        annotations=[dict(
            text="🔴 Duplicate IDs | 🟡 Shared Outputs | 🟢 No Issues<br>🟦 Recipes | 🔵 Items",
            showarrow=False,
            xref="paper", yref="paper",
            x=0.005, y=-0.002,
            xanchor='left', yanchor='bottom',
            font=dict(size=12)
        )],
        xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        plot_bgcolor='rgba(0,0,0,0)',
        paper_bgcolor='rgba(0,0,0,0)'
    )

    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    pyo.plot(fig, filename=str(output_file), auto_open=False)
    logger.info(f"Graph saved to: {output_file}")
    return output_file
