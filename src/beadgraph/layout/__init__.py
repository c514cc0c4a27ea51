"""Layered layout pipeline: levels -> columns -> edges."""

from beadgraph.layout.columns import canvas_height, canvas_width, group_by_level, layout_columns
from beadgraph.layout.edges import compute_edges
from beadgraph.layout.levels import (
    assign_levels,
    build_dependency_graph,
    cycle_components,
    cycle_members,
    find_cycle_members,
    leveled_items,
)
from beadgraph.layout.types import (
    Edge,
    InteractionState,
    Item,
    LayoutResult,
    LeveledItem,
    Point,
    PositionedNode,
)

__all__ = [
    "Edge",
    "InteractionState",
    "Item",
    "LayoutResult",
    "LeveledItem",
    "Point",
    "PositionedNode",
    "assign_levels",
    "build_dependency_graph",
    "canvas_height",
    "canvas_width",
    "compute_edges",
    "cycle_components",
    "cycle_members",
    "find_cycle_members",
    "group_by_level",
    "layout_columns",
    "leveled_items",
]
