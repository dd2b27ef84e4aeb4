"""
Turn engine - the entry points used by a game driver.

One turn runs three steps in a fixed order:

1. Growth: every growing tip tries to extend by one segment
2. Thickening: the length-proportional budget is spread over all nodes
3. Branching: young, superseded nodes may sprout side branches

Later steps see the nodes produced by earlier ones: thickening uses the
post-growth length, and nodes converted during growth are immediately
eligible to branch.

All functions are pure. The driver owns the current GameState and replaces
it with the returned one; the engine keeps no reference to either.
"""

import logging
from typing import NamedTuple

import jax.numpy as jnp
import jax.random as jr
from jax import Array

from tendril import branching, graph, growth, ledger, thickening
from tendril.config import Environment, GameState, GrowthConfig, PlantNode
from tendril.environment import contains, default_environment

logger = logging.getLogger(__name__)


class PlantStats(NamedTuple):
    """Read-only summary of a state for display."""

    total_nodes: int
    total_length: float
    growing_tip_count: int
    turn: int

    def as_dict(self) -> dict[str, float]:
        return {
            "totalNodes": self.total_nodes,
            "totalLength": self.total_length,
            "growingTipCount": self.growing_tip_count,
            "turn": self.turn,
        }


def create_root(key: Array, turn: int, config: GrowthConfig) -> PlantNode:
    """
    Create the root node at the configured origin.

    Heading is uniform in [0, 2*pi); curviness and its rate are uniform
    within their bounds.
    """
    k_heading, k_curviness = jr.split(key)
    heading = jr.uniform(k_heading, minval=0.0, maxval=2 * jnp.pi)
    curviness, curviness_rate = branching.random_curviness(k_curviness, config)
    x, y = config.origin
    return PlantNode(
        id=0,
        x=float(x),
        y=float(y),
        parent_id=None,
        children=(),
        is_growing_tip=True,
        thickness=config.root_thickness,
        color=config.root_color,
        creation_turn=turn,
        growth_direction=float(heading),
        curviness=curviness,
        curviness_rate=curviness_rate,
    )


def initialize(
    key: Array,
    config: GrowthConfig | None = None,
    environment: Environment | None = None,
) -> GameState:
    """
    Start a new game: a single root tip on turn 1 with no powers allocated.

    Args:
        key: JAX random key for the root's heading and curviness
        config: Engine configuration (defaults to GrowthConfig())
        environment: Playing field (defaults to default_environment())

    Raises:
        ValueError: If the configured origin lies outside the environment
    """
    if config is None:
        config = GrowthConfig()
    if environment is None:
        environment = default_environment()

    if not contains(environment.bounds, *config.origin):
        raise ValueError(f"Origin {config.origin} lies outside the environment")

    root = create_root(key, turn=1, config=config)
    state = GameState.empty(environment)
    return state._replace(nodes=(root,), growing_tips=(root.id,), turn=1)


def advance_turn(
    state: GameState,
    turn: int,
    key: Array,
    config: GrowthConfig | None = None,
) -> GameState:
    """
    Run one full turn: growth, thickening, branching.

    Args:
        state: Current state
        turn: The new turn number (supplied by the driver)
        key: JAX random key for this turn
        config: Engine configuration (defaults to GrowthConfig())

    Returns:
        The next state, with `turn` set to the given turn

    Raises:
        ValueError: If the game is not initialized or turn does not move
            forward
    """
    if config is None:
        config = GrowthConfig()
    if not state.nodes:
        raise ValueError("Game is not initialized")
    if turn <= state.turn:
        raise ValueError(f"Turn must advance past {state.turn}, got {turn}")

    growth_key, branch_key = jr.split(key)

    next_state = growth.grow_tips(state, turn, growth_key, config)
    next_state = thickening.thicken(next_state, config)
    next_state = branching.branch_nodes(next_state, turn, branch_key, config)
    next_state = next_state._replace(turn=turn)

    logger.info(
        "Turn %d: %d nodes (+%d), %d growing tips",
        turn,
        len(next_state.nodes),
        len(next_state.nodes) - len(state.nodes),
        len(next_state.growing_tips),
    )
    return next_state


def next_turn(
    state: GameState,
    key: Array,
    config: GrowthConfig | None = None,
) -> GameState:
    """Advance to state.turn + 1."""
    return advance_turn(state, state.turn + 1, key, config)


def allocate(state: GameState, power_name: str) -> GameState:
    """Allocate one point to a power (see ledger.allocate)."""
    return ledger.allocate(state, power_name)


def stats(state: GameState) -> PlantStats:
    """Summarize a state. Does not modify it."""
    return PlantStats(
        total_nodes=len(state.nodes),
        total_length=graph.total_length(state.nodes),
        growing_tip_count=len(state.growing_tips),
        turn=state.turn,
    )
