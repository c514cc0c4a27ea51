"""Layout configuration: geometry constants and cycle policy.

Defaults match the dashboard's dependency view. Every value can be
overridden per call through ``LayoutConfig`` or from the environment:

    BEADGRAPH_NODE_WIDTH     node box width
    BEADGRAPH_NODE_HEIGHT    node box height
    BEADGRAPH_COLUMN_GAP     horizontal gap between nodes in a level
    BEADGRAPH_LEVEL_GAP      vertical gap between levels
    BEADGRAPH_PADDING        outer canvas padding
    BEADGRAPH_CYCLE_POLICY   "break" or "condense"
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from beadgraph.errors import LayoutConfigError

logger = logging.getLogger(__name__)

# ─── Defaults ─────────────────────────────────────────────────────────────────

NODE_WIDTH: int = 180
NODE_HEIGHT: int = 60
COLUMN_GAP: int = 24  # horizontal gap between nodes in the same level
LEVEL_GAP: int = 100  # vertical gap between consecutive levels
PADDING: int = 40  # outer canvas padding on every side

ENV_PREFIX = "BEADGRAPH_"


class CyclePolicy(str, Enum):
    """How items that take part in a dependency cycle are levelled.

    BREAK:    depth-first resolution; a dependency that is still being
              resolved counts as level 0. Matches the dashboard.
    CONDENSE: every strongly connected component shares one level.
    """

    BREAK = "break"
    CONDENSE = "condense"


# ─── Config ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LayoutConfig:
    """Geometry and policy knobs for a single ``compute_layout`` call."""

    node_width: float = NODE_WIDTH
    node_height: float = NODE_HEIGHT
    column_gap: float = COLUMN_GAP
    level_gap: float = LEVEL_GAP
    padding: float = PADDING
    cycle_policy: CyclePolicy = CyclePolicy.BREAK

    def __post_init__(self) -> None:
        for name in ("node_width", "node_height", "column_gap", "level_gap", "padding"):
            if not math.isfinite(getattr(self, name)):
                raise LayoutConfigError(f"{name} must be a finite number, got {getattr(self, name)!r}")
        for name in ("node_width", "node_height"):
            if getattr(self, name) <= 0:
                raise LayoutConfigError(f"{name} must be positive, got {getattr(self, name)!r}")
        for name in ("column_gap", "level_gap", "padding"):
            if getattr(self, name) < 0:
                raise LayoutConfigError(f"{name} must not be negative, got {getattr(self, name)!r}")
        if not isinstance(self.cycle_policy, CyclePolicy):
            try:
                object.__setattr__(self, "cycle_policy", CyclePolicy(self.cycle_policy))
            except ValueError as exc:
                choices = ", ".join(p.value for p in CyclePolicy)
                raise LayoutConfigError(
                    f"Unknown cycle policy {self.cycle_policy!r}. Available policies: {choices}"
                ) from exc

    @property
    def column_stride(self) -> float:
        """Horizontal distance between the left edges of neighbouring nodes."""
        return self.node_width + self.column_gap

    @property
    def level_stride(self) -> float:
        """Vertical distance between the tops of consecutive levels."""
        return self.node_height + self.level_gap

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> LayoutConfig:
        """Build a config from ``BEADGRAPH_*`` environment variables.

        Unset variables keep their defaults.

        Raises:
            LayoutConfigError: If a numeric override cannot be parsed or a
                value is out of range.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}

        for name in ("node_width", "node_height", "column_gap", "level_gap", "padding"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is None or not raw.strip():
                continue
            try:
                overrides[name] = float(raw)
            except ValueError as exc:
                raise LayoutConfigError(f"{ENV_PREFIX}{name.upper()} must be a number, got {raw!r}") from exc

        policy = env.get(ENV_PREFIX + "CYCLE_POLICY")
        if policy and policy.strip():
            overrides["cycle_policy"] = policy.strip().lower()

        if overrides:
            logger.debug("Layout config overrides from environment: %s", sorted(overrides))
        return cls(**overrides)


DEFAULT_CONFIG = LayoutConfig()
