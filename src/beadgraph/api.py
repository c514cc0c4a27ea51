"""Public API: records in, layout out."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from typing import Any

from beadgraph.config import DEFAULT_CONFIG, LayoutConfig
from beadgraph.errors import InvalidItemError
from beadgraph.layout.columns import canvas_height, canvas_width, group_by_level, layout_columns
from beadgraph.layout.edges import compute_edges
from beadgraph.layout.levels import (
    assign_levels,
    build_dependency_graph,
    cycle_components,
    cycle_members,
    leveled_items,
)
from beadgraph.layout.types import InteractionState, Item, LayoutResult

logger = logging.getLogger(__name__)


def coerce_items(records: Iterable[Item | Mapping[str, Any]]) -> list[Item]:
    """Convert host records into Items, skipping the ones that cannot be used.

    Items pass through unchanged. A skipped record is logged, never raised,
    so one bad record from the backend does not blank the whole view.
    """
    items: list[Item] = []
    for pos, record in enumerate(records):
        if isinstance(record, Item):
            items.append(record)
            continue
        try:
            items.append(Item.from_mapping(record))
        except InvalidItemError as exc:
            logger.warning("Skipping record %d: %s", pos, exc)
    return items


def compute_layout(
    items: Sequence[Item | Mapping[str, Any]],
    hovered_id: str | None = None,
    selected_id: str | None = None,
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """Lay out a batch of items as a top-to-bottom dependency graph.

    Runs level assignment, column placement and edge computation in one
    pass. Never raises for any shape of dependency data: dangling ids are
    ignored, cycles are broken according to ``config.cycle_policy`` and an
    empty batch gives an empty result with zero canvas size.
    """
    cfg = config or DEFAULT_CONFIG
    batch = coerce_items(items)
    if not batch:
        return LayoutResult()

    graph = build_dependency_graph(batch)
    cycles = cycle_components(graph)

    levels = assign_levels(batch, cfg.cycle_policy, graph=graph)
    leveled = leveled_items(batch, levels)
    interaction = InteractionState(hovered_id=hovered_id, selected_id=selected_id)

    nodes = [
        replace(n, highlighted=interaction.matches(n.id)) for n in layout_columns(leveled, cfg)
    ]

    edges = compute_edges(nodes, interaction, cycles)

    groups = group_by_level(leveled)
    result = LayoutResult(
        nodes=nodes,
        edges=edges,
        canvas_width=canvas_width(groups, cfg),
        canvas_height=canvas_height(groups[-1][0] + 1, cfg),
        cyclic_ids=cycle_members(batch, cycles),
    )
    logger.debug(
        "Layout: %d node(s), %d edge(s), %d level(s), canvas %sx%s",
        len(result.nodes),
        len(result.edges),
        result.level_count,
        result.canvas_width,
        result.canvas_height,
    )
    return result
