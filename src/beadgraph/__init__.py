"""beadgraph: layered layout for work-item dependency graphs."""

from beadgraph.api import coerce_items, compute_layout
from beadgraph.config import CyclePolicy, LayoutConfig
from beadgraph.errors import BeadGraphError, InvalidItemError, LayoutConfigError
from beadgraph.layout.types import Edge, InteractionState, Item, LayoutResult, Point, PositionedNode

__version__ = "0.1.0"

__all__ = [
    "BeadGraphError",
    "CyclePolicy",
    "Edge",
    "InteractionState",
    "InvalidItemError",
    "Item",
    "LayoutConfig",
    "LayoutConfigError",
    "LayoutResult",
    "Point",
    "PositionedNode",
    "coerce_items",
    "compute_layout",
]
