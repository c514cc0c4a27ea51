"""Edge computation: one edge per resolvable dependency entry."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from beadgraph.layout.types import NO_INTERACTION, Edge, InteractionState, PositionedNode


def compute_edges(
    nodes: Sequence[PositionedNode],
    interaction: InteractionState = NO_INTERACTION,
    cycle_groups: Iterable[Iterable[str]] = (),
) -> list[Edge]:
    """Route an edge from each dependency's bottom centre to its dependent's top centre.

    Edges follow node order, then ``depends_on`` order. A dependency id with
    no node in ``nodes`` yields no edge. Duplicate entries in ``depends_on``
    yield duplicate edges, one per literal entry.

    Args:
        nodes:        Positioned nodes of the current batch.
        interaction:  Hover/selection state; an edge is highlighted when
                      either endpoint matches.
        cycle_groups: Groups of ids that form a cycle. Edges with both ends
                      in the same group are flagged ``cyclic``.
    """
    # Last node wins for duplicate ids, as in level assignment.
    by_id = {n.id: n for n in nodes}

    group_of: dict[str, int] = {}
    for gi, group in enumerate(cycle_groups):
        for member in group:
            group_of[member] = gi

    edges: list[Edge] = []
    for node in nodes:
        for dep_id in node.item.depends_on:
            dep_node = by_id.get(dep_id)
            if dep_node is None:
                continue
            dep_group = group_of.get(dep_id)
            edges.append(
                Edge(
                    from_id=dep_id,
                    to_id=node.id,
                    from_anchor=dep_node.bottom_center,
                    to_anchor=node.top_center,
                    highlighted=interaction.matches(dep_id) or interaction.matches(node.id),
                    cyclic=dep_group is not None and dep_group == group_of.get(node.id),
                )
            )
    return edges
