"""Tests for layout/levels.py — level assignment and cycle detection.

Covers:
  - assign_levels under the BREAK policy (iterative DFS)
  - assign_levels under the CONDENSE policy (SCC collapsing)
  - dangling references, self-references, duplicate ids
  - stack safety on long chains and long cycles
  - build_dependency_graph / find_cycle_members / leveled_items helpers
"""

from __future__ import annotations

import logging

import pytest

from beadgraph.config import CyclePolicy
from beadgraph.layout.levels import (
    assign_levels,
    build_dependency_graph,
    cycle_components,
    cycle_members,
    find_cycle_members,
    leveled_items,
)
from beadgraph.layout.types import Item

# ─── Helpers ──────────────────────────────────────────────────────────────────


def item(item_id: str, *deps: str) -> Item:
    """Create an Item with the given dependency ids."""
    return Item(id=item_id, depends_on=deps)


def assert_monotonic(items: list[Item], levels: dict[str, int], exempt: set[str] = frozenset()) -> None:
    """Every present, non-cyclic dependency sits on a strictly lower level."""
    ids = {i.id for i in items}
    for it in items:
        for dep in it.depends_on:
            if dep not in ids or (dep in exempt and it.id in exempt):
                continue
            assert levels[dep] < levels[it.id], f"{dep} (L{levels[dep]}) must be above {it.id} (L{levels[it.id]})"


# ─── BREAK Policy ─────────────────────────────────────────────────────────────


class TestAssignLevels:
    def test_empty_input(self):
        """No items → empty level map."""
        assert assign_levels([]) == {}

    def test_isolated_items_are_level_zero(self):
        """Items without dependencies all land on level 0."""
        levels = assign_levels([item("A"), item("B"), item("C")])
        assert levels == {"A": 0, "B": 0, "C": 0}

    def test_simple_chain(self):
        """A ← B ← C — levels 0, 1, 2."""
        levels = assign_levels([item("A"), item("B", "A"), item("C", "B")])
        assert levels == {"A": 0, "B": 1, "C": 2}

    def test_chain_given_in_reverse_order(self):
        """Input order does not change levels of an acyclic graph."""
        levels = assign_levels([item("C", "B"), item("B", "A"), item("A")])
        assert levels == {"A": 0, "B": 1, "C": 2}

    def test_transitive_and_direct_dependency(self):
        """A, B(A), C(A, B) — C sits below its deepest dependency."""
        levels = assign_levels([item("A"), item("B", "A"), item("C", "A", "B")])
        assert levels == {"A": 0, "B": 1, "C": 2}

    def test_diamond(self):
        """A → B, A → C, B → D, C → D."""
        items = [item("A"), item("B", "A"), item("C", "A"), item("D", "B", "C")]
        levels = assign_levels(items)
        assert levels == {"A": 0, "B": 1, "C": 1, "D": 2}

    def test_uneven_branches_take_the_deepest(self):
        """D depends on a short and a long branch; the long one wins."""
        items = [item("A"), item("B", "A"), item("C", "B"), item("D", "A", "C")]
        assert assign_levels(items)["D"] == 3

    def test_only_dangling_dependencies(self):
        """An item whose dependencies are all unknown gets level 0."""
        levels = assign_levels([item("A", "ghost-1", "ghost-2")])
        assert levels == {"A": 0}

    def test_dangling_mixed_with_present(self):
        """Unknown ids are ignored; present ones still count."""
        levels = assign_levels([item("A"), item("B", "ghost", "A")])
        assert levels == {"A": 0, "B": 1}

    def test_every_input_id_has_a_level(self):
        """Output covers every input id, connected or not."""
        items = [item("A"), item("B", "A"), item("lonely"), item("X", "nope")]
        levels = assign_levels(items)
        assert set(levels) == {"A", "B", "lonely", "X"}

    def test_monotonic_on_larger_dag(self):
        """Level monotonicity holds across a layered fan-out/fan-in graph."""
        items = [
            item("root"),
            item("a1", "root"),
            item("a2", "root"),
            item("a3", "root"),
            item("b1", "a1", "a2"),
            item("b2", "a3"),
            item("c1", "b1", "b2", "root"),
            item("c2", "a2"),
            item("d1", "c1", "c2", "missing"),
        ]
        assert_monotonic(items, assign_levels(items))


# ─── Cycles (BREAK) ───────────────────────────────────────────────────────────


class TestCycleBreaking:
    def test_two_cycle_terminates(self):
        """X ↔ Y — resolves to finite levels; the re-entered dependency counts as 0."""
        levels = assign_levels([item("X", "Y"), item("Y", "X")])
        assert levels == {"X": 2, "Y": 1}

    def test_two_cycle_is_deterministic(self):
        """Same input twice → same levels."""
        items = [item("X", "Y"), item("Y", "X")]
        assert assign_levels(items) == assign_levels(items)

    def test_self_reference(self):
        """A self-dependent item terminates with a finite level."""
        levels = assign_levels([item("S", "S")])
        assert levels == {"S": 1}

    def test_dependents_of_a_cycle_stay_below_it(self):
        """Z depends on a cycle member and still sits below it."""
        items = [item("X", "Y"), item("Y", "X"), item("Z", "X")]
        levels = assign_levels(items)
        assert levels["Z"] > levels["X"]
        assert_monotonic(items, levels, exempt={"X", "Y"})

    def test_long_chain_does_not_recurse(self):
        """A 5000-deep chain visited from its deepest end completes."""
        n = 5000
        items = [item(f"n{i}", f"n{i - 1}") if i else item("n0") for i in range(n)]
        items.reverse()
        levels = assign_levels(items)
        assert levels["n0"] == 0
        assert levels[f"n{n - 1}"] == n - 1

    def test_long_cycle_terminates(self):
        """A 5000-node ring completes; the root closes the ring."""
        n = 5000
        items = [item(f"n{i}", f"n{(i - 1) % n}") for i in range(n)]
        levels = assign_levels(items)
        assert len(levels) == n
        assert levels["n1"] == 1
        assert levels["n0"] == n

    def test_duplicate_ids_do_not_raise(self):
        """Duplicate ids are the caller's problem, but must not crash."""
        levels = assign_levels([item("A"), item("A", "B"), item("B")])
        assert set(levels) == {"A", "B"}


# ─── CONDENSE Policy ──────────────────────────────────────────────────────────


class TestCondensePolicy:
    def test_two_cycle_shares_level(self):
        """X ↔ Y — both members collapse onto level 0."""
        levels = assign_levels([item("X", "Y"), item("Y", "X")], CyclePolicy.CONDENSE)
        assert levels == {"X": 0, "Y": 0}

    def test_cycle_below_entry_point(self):
        """A feeds a B → C → D → B cycle — the whole cycle sits on level 1."""
        items = [item("A"), item("B", "A", "D"), item("C", "B"), item("D", "C")]
        levels = assign_levels(items, CyclePolicy.CONDENSE)
        assert levels == {"A": 0, "B": 1, "C": 1, "D": 1}

    def test_dependent_of_cycle(self):
        """Z depends on a condensed cycle and sits one level below it."""
        items = [item("X", "Y"), item("Y", "X"), item("Z", "X")]
        levels = assign_levels(items, CyclePolicy.CONDENSE)
        assert levels == {"X": 0, "Y": 0, "Z": 1}

    def test_matches_break_policy_on_dag(self):
        """Without cycles both policies agree."""
        items = [item("A"), item("B", "A"), item("C", "A", "B"), item("D", "ghost")]
        assert assign_levels(items, CyclePolicy.CONDENSE) == assign_levels(items, CyclePolicy.BREAK)

    def test_empty_input(self):
        """No items → empty level map."""
        assert assign_levels([], CyclePolicy.CONDENSE) == {}

    def test_long_cycle_terminates(self):
        """A 5000-node ring collapses onto a single level."""
        n = 5000
        items = [item(f"n{i}", f"n{(i - 1) % n}") for i in range(n)]
        levels = assign_levels(items, CyclePolicy.CONDENSE)
        assert set(levels.values()) == {0}


# ─── Helpers Under Test ───────────────────────────────────────────────────────


class TestDependencyGraph:
    def test_edges_point_from_dependency_to_dependent(self):
        """B depends on A → edge A → B."""
        g = build_dependency_graph([item("A"), item("B", "A")])
        assert list(g.edges()) == [("A", "B")]

    def test_dangling_ids_are_not_nodes(self):
        """Unknown dependency ids never become graph nodes."""
        g = build_dependency_graph([item("A", "ghost")])
        assert list(g.nodes) == ["A"]
        assert g.number_of_edges() == 0

    def test_nodes_in_input_order(self):
        """Node iteration follows input order."""
        g = build_dependency_graph([item("C"), item("A"), item("B")])
        assert list(g.nodes) == ["C", "A", "B"]


class TestFindCycleMembers:
    def test_acyclic(self):
        """A DAG has no cycle members."""
        assert find_cycle_members([item("A"), item("B", "A")]) == ()

    def test_members_in_input_order(self):
        """Members are reported in input order, bystanders excluded."""
        items = [item("Z", "X"), item("Y", "X"), item("free"), item("X", "Y")]
        assert find_cycle_members(items) == ("Y", "X")

    def test_self_loop_counts(self):
        """A self-reference is a cycle of one."""
        assert find_cycle_members([item("S", "S"), item("T")]) == ("S",)


class TestLeveledItems:
    def test_preserves_input_order(self):
        """leveled_items keeps host order and attaches each level."""
        items = [item("B", "A"), item("A")]
        result = leveled_items(items, {"A": 0, "B": 1})
        assert [(li.id, li.level) for li in result] == [("B", 1), ("A", 0)]


class TestCycleMembers:
    def test_orders_components_by_input(self):
        """cycle_members reports component ids in input order."""
        items = [item("Z", "X"), item("Y", "X"), item("X", "Y")]
        comps = cycle_components(build_dependency_graph(items))
        assert cycle_members(items, comps) == ("Y", "X")

    def test_no_components(self):
        """No components → no members."""
        assert cycle_members([item("A")], []) == ()


class TestPrebuiltGraph:
    def test_condense_uses_given_graph(self):
        """A graph built by the caller gives the same levels as building one here."""
        items = [item("A"), item("B", "A", "D"), item("C", "B"), item("D", "C")]
        graph = build_dependency_graph(items)
        assert assign_levels(items, CyclePolicy.CONDENSE, graph=graph) == assign_levels(items, CyclePolicy.CONDENSE)

    def test_break_ignores_graph(self):
        """The DFS policy does not need the graph."""
        items = [item("X", "Y"), item("Y", "X")]
        graph = build_dependency_graph(items)
        assert assign_levels(items, CyclePolicy.BREAK, graph=graph) == {"X": 2, "Y": 1}


class TestCycleLogging:
    @pytest.mark.parametrize("policy", list(CyclePolicy))
    def test_cycles_log_below_warning(self, caplog, policy):
        """Repeated layouts of a cyclic batch stay out of WARNING logs."""
        items = [item("X", "Y"), item("Y", "X"), item("S", "S")]
        with caplog.at_level(logging.DEBUG, logger="beadgraph"):
            for _ in range(3):
                assign_levels(items, policy)
        assert caplog.records, "expected debug output"
        assert all(r.levelno < logging.WARNING for r in caplog.records)
