"""Column layout: place leveled items on a centred, stacked grid.

Every node has the same extent. Levels are stacked top to bottom and each
level is centred horizontally on the canvas, whose width is set by the
widest level.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from beadgraph.config import DEFAULT_CONFIG, LayoutConfig
from beadgraph.layout.types import LeveledItem, PositionedNode

logger = logging.getLogger(__name__)


def group_by_level(leveled: Sequence[LeveledItem]) -> list[tuple[int, list[LeveledItem]]]:
    """Group items by level: ascending levels, input order within a level."""
    groups: dict[int, list[LeveledItem]] = {}
    for li in leveled:
        groups.setdefault(li.level, []).append(li)
    return sorted(groups.items(), key=lambda kv: kv[0])


def group_width(count: int, config: LayoutConfig = DEFAULT_CONFIG) -> float:
    """Width spanned by ``count`` nodes laid side by side."""
    if count <= 0:
        return 0
    return count * config.column_stride - config.column_gap


def canvas_width(groups: Sequence[tuple[int, list[LeveledItem]]], config: LayoutConfig = DEFAULT_CONFIG) -> float:
    """Canvas width: the widest level plus padding on both sides."""
    widest = max((len(members) for _, members in groups), default=0)
    if widest == 0:
        return 0
    return group_width(widest, config) + 2 * config.padding


def canvas_height(level_count: int, config: LayoutConfig = DEFAULT_CONFIG) -> float:
    """Canvas height: the bottom of the deepest level plus padding."""
    if level_count <= 0:
        return 0
    return 2 * config.padding + level_count * config.node_height + (level_count - 1) * config.level_gap


def level_y(level: int, config: LayoutConfig = DEFAULT_CONFIG) -> float:
    return config.padding + level * config.level_stride


def layout_columns(
    leveled: Sequence[LeveledItem],
    config: LayoutConfig = DEFAULT_CONFIG,
) -> list[PositionedNode]:
    """Assign a bounding box to every leveled item.

    Nodes are returned level by level, in input order within each level.
    Within a level consecutive nodes are ``column_gap`` apart, so they never
    overlap; levels are ``level_gap`` apart, so their y-ranges never meet.
    """
    groups = group_by_level(leveled)
    total_w = canvas_width(groups, config)

    nodes: list[PositionedNode] = []
    for level, members in groups:
        start_x = (total_w - group_width(len(members), config)) / 2
        y = level_y(level, config)
        for column, li in enumerate(members):
            nodes.append(
                PositionedNode(
                    item=li.item,
                    level=level,
                    column=column,
                    x=start_x + column * config.column_stride,
                    y=y,
                    width=config.node_width,
                    height=config.node_height,
                )
            )

    logger.debug("Placed %d node(s) in %d level(s), canvas width %s", len(nodes), len(groups), total_w)
    return nodes
