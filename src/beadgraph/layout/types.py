"""Layout types shared by the level, column and edge passes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from beadgraph.errors import InvalidItemError

# Record keys accepted for the dependency list, in lookup order.
DEPENDS_ON_KEYS = ("depends_on", "dependsOn")


# ─── Input ────────────────────────────────────────────────────────────────────


@dataclass
class Item:
    """A work item as supplied by the host.

    ``depends_on`` may name ids that are not part of the batch; those
    references are ignored by every pass. ``metadata`` carries the record's
    remaining fields (title, status, assignee...) untouched.
    """

    id: str
    depends_on: tuple[str, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.depends_on = _normalise_deps(self.depends_on)

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> Item:
        """Build an Item from a backend record such as a bead JSON object.

        Raises:
            InvalidItemError: If the record is not a mapping or has no
                non-empty ``id``.
        """
        if not isinstance(record, Mapping):
            raise InvalidItemError(f"Expected a mapping, got {type(record).__name__}")

        raw_id = record.get("id")
        if raw_id is None or str(raw_id) == "":
            raise InvalidItemError("Record has no id")

        deps: Any = ()
        for key in DEPENDS_ON_KEYS:
            if record.get(key) is not None:
                deps = record[key]
                break

        metadata = {k: v for k, v in record.items() if k != "id" and k not in DEPENDS_ON_KEYS}
        return cls(id=str(raw_id), depends_on=deps, metadata=metadata)


def _normalise_deps(deps: Any) -> tuple[str, ...]:
    """Coerce a dependency list into a tuple of strings.

    A bare string is a single dependency; ``None`` is no dependencies.
    """
    if deps is None:
        return ()
    if isinstance(deps, str):
        return (deps,)
    if isinstance(deps, Iterable):
        return tuple(str(d) for d in deps if d is not None)
    return (str(deps),)


@dataclass(frozen=True)
class InteractionState:
    """Hover/selection state of the host view, used only for highlighting."""

    hovered_id: str | None = None
    selected_id: str | None = None

    def matches(self, item_id: str) -> bool:
        return item_id in (self.hovered_id, self.selected_id)


NO_INTERACTION = InteractionState()


# ─── Pass Outputs ─────────────────────────────────────────────────────────────


@dataclass
class LeveledItem:
    """An item with its assigned level (0 = top row)."""

    item: Item
    level: int

    @property
    def id(self) -> str:
        return self.item.id


@dataclass
class PositionedNode:
    """A positioned node in layout-space units.

    ``column`` is the node's index within its level, in input order.
    """

    item: Item
    level: int
    column: int
    x: float
    y: float
    width: float
    height: float
    highlighted: bool = False

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def bottom_center(self) -> Point:
        return Point(x=self.x + self.width / 2, y=self.y + self.height)

    @property
    def top_center(self) -> Point:
        return Point(x=self.x + self.width / 2, y=self.y)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "depends_on": list(self.item.depends_on),
            "metadata": dict(self.item.metadata),
            "level": self.level,
            "column": self.column,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "highlighted": self.highlighted,
        }


@dataclass(frozen=True)
class Point:
    """An anchor point in layout-space units."""

    x: float
    y: float


@dataclass
class Edge:
    """A dependency edge, drawn from the dependency down to its dependent.

    ``cyclic`` marks edges whose endpoints sit in the same dependency cycle;
    those are the only edges allowed to point upward or sideways.
    """

    from_id: str
    to_id: str
    from_anchor: Point
    to_anchor: Point
    highlighted: bool = False
    cyclic: bool = False

    @property
    def key(self) -> str:
        return f"{self.from_id}-{self.to_id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "from_id": self.from_id,
            "to_id": self.to_id,
            "from_anchor": {"x": self.from_anchor.x, "y": self.from_anchor.y},
            "to_anchor": {"x": self.to_anchor.x, "y": self.to_anchor.y},
            "highlighted": self.highlighted,
            "cyclic": self.cyclic,
        }


@dataclass
class LayoutResult:
    """Self-contained layout output: everything a host view needs to draw."""

    nodes: list[PositionedNode] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    canvas_width: float = 0
    canvas_height: float = 0
    cyclic_ids: tuple[str, ...] = ()

    @property
    def level_count(self) -> int:
        return max((n.level for n in self.nodes), default=-1) + 1

    def node(self, item_id: str) -> PositionedNode | None:
        """Return the node with ``item_id``, or None. The last one wins for duplicate ids."""
        for n in reversed(self.nodes):
            if n.id == item_id:
                return n
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "canvas_width": self.canvas_width,
            "canvas_height": self.canvas_height,
            "level_count": self.level_count,
            "cyclic_ids": list(self.cyclic_ids),
        }
