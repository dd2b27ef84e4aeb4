"""
Configuration and type definitions for the plant growth engine.

This module defines all constants, state representations, and configuration
for the turn-based tendril growth game.

Game State:
    nodes: Arena of PlantNode, indexed by node id
    growing_tips: Ids of nodes that can still grow forward
    turn: Turn counter (0 before initialization, 1 after)
    powers: Allocated power points (growth, branchiness, resilience)
    environment: Bounding rectangle plus modifier zones
    points_spent: Every power point ever allocated

All state values are immutable. Engine operations return new states.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple

from tendril.errors import UnknownPower

# Power names, in display order
POWER_NAMES = ("growth", "branchiness", "resilience")

ZONE_TYPES = ("fertile", "rocky", "dry", "water", "shaded")


class Bounds(NamedTuple):
    """Axis-aligned rectangle, inclusive on every edge."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def is_valid(self) -> bool:
        """Check the rectangle is non-degenerate in ordering."""
        return self.min_x <= self.max_x and self.min_y <= self.max_y


class ZoneProperties(NamedTuple):
    """Modifiers a zone applies to whatever grows inside it."""

    growth_multiplier: float = 1.0
    energy_cost: float = 0.0
    health_drain: float = 0.0


class EnvironmentZone(NamedTuple):
    """A named rectangular region with growth modifiers."""

    id: str
    type: str  # one of ZONE_TYPES
    bounds: Bounds
    properties: ZoneProperties


class Environment(NamedTuple):
    """
    The static playing field.

    Only `bounds` constrains placement. Zones carry modifiers that the
    turn pipeline does not consult (see environment.zone_modifiers_at).
    """

    bounds: Bounds
    zones: tuple[EnvironmentZone, ...] = ()


class GamePowers(NamedTuple):
    """
    Allocated power points.

    Each counter only rises through allocation, except when a feature
    consumes a point as a one-shot charge.
    """

    growth: int = 0  # Extra growth distance
    branchiness: int = 0  # Extra branch probability
    resilience: int = 0  # Extra thickening

    def total(self) -> int:
        return self.growth + self.branchiness + self.resilience

    def get(self, name: str) -> int:
        """Look up a counter by name."""
        if name not in POWER_NAMES:
            raise UnknownPower(
                f"Unknown power '{name}' (expected one of {', '.join(POWER_NAMES)})"
            )
        return getattr(self, name)

    def with_delta(self, name: str, delta: int) -> "GamePowers":
        """Return a copy with one counter shifted by delta."""
        return self._replace(**{name: self.get(name) + delta})


class PlantNode(NamedTuple):
    """
    A single point of the plant structure.

    Position, parent, heading and curviness are fixed at creation. Only
    `thickness`, `is_growing_tip` and the append-only `children` change
    afterwards.

    Attributes:
        id: Arena index, unique for the lifetime of the game
        x, y: Plane coordinates
        parent_id: Id of the parent node (None for the root)
        children: Ids of child nodes, in creation order
        is_growing_tip: True until this node spawns its forward child
        thickness: Structural thickness (never below the configured floor)
        color: Cosmetic color tag, inherited from the parent
        creation_turn: Turn on which the node was created
        growth_direction: Heading (radians) used when the node was created
        curviness: Personal heading bias (radians, bounded)
        curviness_rate: Per-turn change of curviness (radians, bounded)
    """

    id: int
    x: float
    y: float
    parent_id: int | None
    children: tuple[int, ...]
    is_growing_tip: bool
    thickness: float
    color: str
    creation_turn: int
    growth_direction: float
    curviness: float
    curviness_rate: float

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def age(self, turn: int) -> int:
        """Turns elapsed since creation."""
        return turn - self.creation_turn


class GameState(NamedTuple):
    """
    Complete state of a game at a given turn.

    `nodes[i].id == i` for every node; `growing_tips` keeps insertion order
    so that random draws are consumed in a stable sequence.
    """

    nodes: tuple[PlantNode, ...]
    growing_tips: tuple[int, ...]
    turn: int
    powers: GamePowers
    environment: Environment
    points_spent: int = 0

    @classmethod
    def empty(cls, environment: Environment) -> "GameState":
        """Create the uninitialized (turn 0) state."""
        return cls(
            nodes=(),
            growing_tips=(),
            turn=0,
            powers=GamePowers(),
            environment=environment,
            points_spent=0,
        )

    @property
    def root(self) -> PlantNode | None:
        return self.nodes[0] if self.nodes else None


@dataclass(frozen=True)
class GrowthConfig:
    """
    Complete engine configuration.

    Angles are in radians. Defaults reproduce the reference game balance.
    """

    # Root node
    origin: tuple[float, float] = (0.0, 0.0)
    root_thickness: float = 2.0
    root_color: str = "#4ade80"

    # Thickness floor and per-generation thinning
    min_thickness: float = 0.8
    growth_thickness_decrement: float = 0.3  # Forward growth
    branch_thickness_decrement: float = 0.5  # Lateral branches thin faster

    # Growth distance = base + per_point * growth
    base_growth_distance: float = 1.5
    growth_per_point: float = 0.5

    # Curviness random walk
    # The rate drifts by at most +/- jitter per turn, then curviness
    # drifts by the rate. Both are clamped.
    max_curviness: float = math.pi / 12  # 15 degrees
    max_curviness_rate: float = math.pi / 180  # 1 degree per turn
    curviness_rate_jitter: float = math.pi / 600  # 0.3 degrees

    # Thickening factor = base + per_point * resilience
    base_resilience: float = 0.02
    resilience_per_point: float = 0.01

    # Branch probability = base + per_point * branchiness
    # Base is 0: no branching without branchiness points.
    base_branch_chance: float = 0.0
    branch_chance_per_point: float = 0.04
    branch_angle: float = math.pi / 6  # 30 degrees off the parent heading
    branch_window: int = 8  # Turns after creation a node may still branch

    def __post_init__(self) -> None:
        if self.base_growth_distance < 0 or self.growth_per_point < 0:
            raise ValueError("Growth distances must be nonnegative")
        if self.min_thickness <= 0:
            raise ValueError("Minimum thickness must be positive")
        if self.root_thickness < self.min_thickness:
            raise ValueError("Root thickness must be at least the minimum thickness")
        if self.max_curviness <= 0 or self.max_curviness_rate <= 0:
            raise ValueError("Curviness bounds must be positive")
        if self.curviness_rate_jitter < 0:
            raise ValueError("Curviness rate jitter must be nonnegative")
        if self.base_branch_chance < 0 or self.branch_chance_per_point < 0:
            raise ValueError("Branch chances must be nonnegative")
        if self.branch_window < 0:
            raise ValueError("Branch window must be nonnegative")
