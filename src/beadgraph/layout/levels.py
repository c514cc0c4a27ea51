"""Level assignment: rank every item below all of its dependencies.

Two cycle policies are supported (see ``CyclePolicy``):

  BREAK     Iterative depth-first resolution with three-colour marking.
            A dependency still being resolved when it is reached again
            contributes level 0, which breaks the cycle at that edge.
  CONDENSE  Strongly connected components are collapsed (networkx
            condensation) and every member of a component shares a level.

Both policies ignore dependency ids that are not part of the batch, visit
roots in input order, and return a level for every input id.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum

import networkx as nx

from beadgraph.config import CyclePolicy
from beadgraph.layout.types import Item, LeveledItem

logger = logging.getLogger(__name__)


# ─── Dependency Graph ─────────────────────────────────────────────────────────


def index_items(items: Sequence[Item]) -> dict[str, Item]:
    """Map id -> item. With duplicate ids the last item wins."""
    return {item.id: item for item in items}


def present_deps(item: Item, index: dict[str, Item]) -> list[str]:
    """Dependencies of ``item`` that resolve inside the batch, in list order."""
    return [dep for dep in item.depends_on if dep in index]


def build_dependency_graph(items: Sequence[Item]) -> nx.DiGraph:
    """Build a DiGraph with an edge dep -> item for every resolvable reference.

    Nodes are added in input order so that iteration over the graph is
    deterministic. Self-references become self-loops.
    """
    index = index_items(items)
    g: nx.DiGraph = nx.DiGraph()
    for item in items:
        g.add_node(item.id)
    for item in index.values():
        for dep in present_deps(item, index):
            g.add_edge(dep, item.id)
    return g


def cycle_components(graph: nx.DiGraph) -> list[set[str]]:
    """Strongly connected components that form a cycle.

    A component counts when it has more than one member or its single
    member depends on itself.
    """
    return [
        comp
        for comp in nx.strongly_connected_components(graph)
        if len(comp) > 1 or any(graph.has_edge(n, n) for n in comp)
    ]


def cycle_members(items: Sequence[Item], components: list[set[str]]) -> tuple[str, ...]:
    """Ids from ``components`` in input order."""
    members = set().union(*components)
    return tuple(dict.fromkeys(item.id for item in items if item.id in members))


def find_cycle_members(items: Sequence[Item]) -> tuple[str, ...]:
    """Ids that take part in a dependency cycle, in input order."""
    return cycle_members(items, cycle_components(build_dependency_graph(items)))


# ─── BREAK Policy (iterative DFS) ─────────────────────────────────────────────


class _Mark(Enum):
    IN_PROGRESS = 1
    DONE = 2


@dataclass
class _Frame:
    """One item on the explicit DFS stack."""

    id: str
    pending: Iterator[str]
    level: int = 0
    back_edges: list[str] = field(default_factory=list)


def _assign_levels_dfs(items: Sequence[Item]) -> dict[str, int]:
    index = index_items(items)
    levels: dict[str, int] = {}
    marks: dict[str, _Mark] = {}
    broken = 0

    for root in items:
        if marks.get(root.id) is _Mark.DONE:
            continue

        marks[root.id] = _Mark.IN_PROGRESS
        stack = [_Frame(id=root.id, pending=iter(present_deps(index[root.id], index)))]

        while stack:
            frame = stack[-1]
            descended = False

            for dep in frame.pending:
                mark = marks.get(dep)
                if mark is _Mark.DONE:
                    frame.level = max(frame.level, levels[dep] + 1)
                elif mark is _Mark.IN_PROGRESS:
                    # Back edge: the dependency counts as level 0.
                    frame.level = max(frame.level, 1)
                    frame.back_edges.append(dep)
                else:
                    marks[dep] = _Mark.IN_PROGRESS
                    stack.append(_Frame(id=dep, pending=iter(present_deps(index[dep], index))))
                    descended = True
                    break

            if descended:
                continue

            stack.pop()
            levels[frame.id] = frame.level
            marks[frame.id] = _Mark.DONE
            if frame.back_edges:
                broken += len(frame.back_edges)
                logger.debug("Broke cycle edges %s -> %s", frame.back_edges, frame.id)
            if stack:
                parent = stack[-1]
                parent.level = max(parent.level, frame.level + 1)

    if broken:
        logger.debug("Dependency cycles: %d edge(s) ignored for levelling", broken)
    return levels


# ─── CONDENSE Policy (SCC collapsing) ─────────────────────────────────────────


def _assign_levels_condensed(items: Sequence[Item], graph: nx.DiGraph) -> dict[str, int]:
    if graph.number_of_nodes() == 0:
        return {}

    condensed = nx.condensation(graph)
    membership: dict[str, int] = condensed.graph["mapping"]

    # Longest path from any source component.
    comp_level: dict[int, int] = {}
    for comp in nx.topological_sort(condensed):
        preds = [comp_level[p] + 1 for p in condensed.predecessors(comp)]
        comp_level[comp] = max(preds, default=0)

    return {item.id: comp_level[membership[item.id]] for item in items}


# ─── Public API ───────────────────────────────────────────────────────────────


def assign_levels(
    items: Sequence[Item],
    policy: CyclePolicy = CyclePolicy.BREAK,
    graph: nx.DiGraph | None = None,
) -> dict[str, int]:
    """Compute a level for every item.

    Level 0 holds items with no resolvable dependencies. Any other item sits
    one level below its deepest resolvable dependency, except across edges
    that close a cycle.

    Args:
        items:  The batch, in host order.
        policy: How to level items that take part in a cycle.
        graph:  The batch's dependency graph, if the caller already built
                one with ``build_dependency_graph``. Only CONDENSE uses it.

    Returns:
        A dict with an entry for every input id.
    """
    policy = CyclePolicy(policy)
    if policy is CyclePolicy.CONDENSE:
        if graph is None:
            graph = build_dependency_graph(items)
        levels = _assign_levels_condensed(items, graph)
    else:
        levels = _assign_levels_dfs(items)

    logger.debug(
        "Assigned %d item(s) to %d level(s) using %s policy",
        len(levels),
        max(levels.values(), default=-1) + 1,
        policy.value,
    )
    return levels


def leveled_items(items: Sequence[Item], levels: dict[str, int]) -> list[LeveledItem]:
    """Attach levels to items, preserving input order."""
    return [LeveledItem(item=item, level=levels.get(item.id, 0)) for item in items]
