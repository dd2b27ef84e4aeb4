"""
Tendril Growth Engine

A turn-based plant growth game: a tendril extends across a bounded plane
by random walks with momentum, sprouts side branches and thickens, biased
by the powers the player allocates points to.

Modules:
    config: Constants, configuration and state types
    errors: Failures reported by directed actions
    environment: Playing field bounds and modifier zones
    graph: Node arena lookups, invariants and segment lengths
    ledger: Power point accounting and allocation
    growth: Forward growth of growing tips
    thickening: Length-proportional thickening
    branching: Lateral branching within the eligibility window
    engine: Turn orchestration and driver entry points
    policies: Allocation policies (hand-coded baselines, random)
    rollout: Full game simulation
"""

from tendril.branching import sprout_branch
from tendril.config import (
    POWER_NAMES,
    Bounds,
    Environment,
    EnvironmentZone,
    GamePowers,
    GameState,
    GrowthConfig,
    PlantNode,
    ZoneProperties,
)
from tendril.engine import (
    PlantStats,
    advance_turn,
    allocate,
    initialize,
    next_turn,
    stats,
)
from tendril.environment import default_environment, make_environment
from tendril.errors import (
    InsufficientPower,
    InvalidNodeReference,
    InvalidTipReference,
    OutOfBounds,
    TendrilError,
    UnknownPower,
)
from tendril.growth import grow_tip
from tendril.policies import (
    baseline_policy,
    bushy_policy,
    growth_focused_policy,
    idle_policy,
    make_random_policy,
)
from tendril.rollout import Trajectory, compare_policies, run_game

__all__ = [
    # Config
    "POWER_NAMES",
    "Bounds",
    "Environment",
    "EnvironmentZone",
    "GamePowers",
    "GameState",
    "GrowthConfig",
    "PlantNode",
    "ZoneProperties",
    "default_environment",
    "make_environment",
    # Errors
    "TendrilError",
    "InvalidNodeReference",
    "InvalidTipReference",
    "OutOfBounds",
    "InsufficientPower",
    "UnknownPower",
    # Engine
    "PlantStats",
    "initialize",
    "advance_turn",
    "next_turn",
    "allocate",
    "stats",
    # Directed actions
    "grow_tip",
    "sprout_branch",
    # Policies
    "baseline_policy",
    "bushy_policy",
    "growth_focused_policy",
    "idle_policy",
    "make_random_policy",
    # Simulation
    "Trajectory",
    "run_game",
    "compare_policies",
]
