"""
Forward growth of growing tips.

Each turn every growing tip tries to extend the plant by one segment:

1. Growth distance: d = base + per_point * growth
2. Curviness rate drifts: r' = clip(r + U(-jitter, jitter), -r_max, r_max)
3. Curviness drifts by the rate: c' = clip(c + r', -c_max, c_max)
4. Heading: theta' = theta + c'
5. Position: p' = p + d * (cos theta', sin theta')
6. If p' is inside the environment bounds, a new tip is created there and
   the old tip stops growing; otherwise the tip waits, unchanged.

Steps 2-3 are a bounded random walk with momentum: the heading bias
changes smoothly because its own rate of change moves slowly.
"""

import logging
from typing import NamedTuple

import jax.numpy as jnp
import jax.random as jr
from jax import Array

from tendril import graph
from tendril.config import GamePowers, GameState, GrowthConfig, PlantNode
from tendril.environment import contains
from tendril.errors import InvalidTipReference, OutOfBounds

logger = logging.getLogger(__name__)


class GrowthProposal(NamedTuple):
    """Where a tip would grow to, before the bounds check."""

    x: float
    y: float
    heading: float
    curviness: float
    curviness_rate: float


def growth_distance(powers: GamePowers, config: GrowthConfig) -> float:
    """Segment length for this turn: base plus the growth power bonus."""
    return config.base_growth_distance + config.growth_per_point * powers.growth


def clamp(value: float, bound: float) -> float:
    """Clamp value to [-bound, bound] in Python floats."""
    return min(bound, max(-bound, value))


def drift_curviness(
    curviness: float,
    curviness_rate: float,
    key: Array,
    config: GrowthConfig,
) -> tuple[float, float]:
    """
    Advance the curviness random walk by one turn.

    Args:
        curviness: Current heading bias (radians)
        curviness_rate: Current change of curviness per turn (radians)
        key: JAX random key for the rate perturbation
        config: Engine configuration (bounds and jitter)

    Returns:
        (new_curviness, new_curviness_rate), both clamped to their bounds
    """
    jitter = config.curviness_rate_jitter
    # float32 bounds round outward, so clamp after converting
    perturbation = clamp(float(jr.uniform(key, minval=-jitter, maxval=jitter)), jitter)
    new_rate = clamp(curviness_rate + perturbation, config.max_curviness_rate)
    new_curviness = clamp(curviness + new_rate, config.max_curviness)
    return new_curviness, new_rate


def propose_growth(
    tip: PlantNode,
    powers: GamePowers,
    key: Array,
    config: GrowthConfig,
) -> GrowthProposal:
    """Compute the next position and heading for a tip."""
    distance = growth_distance(powers, config)
    curviness, curviness_rate = drift_curviness(
        tip.curviness, tip.curviness_rate, key, config
    )
    heading = tip.growth_direction + curviness
    return GrowthProposal(
        x=float(tip.x + distance * jnp.cos(heading)),
        y=float(tip.y + distance * jnp.sin(heading)),
        heading=heading,
        curviness=curviness,
        curviness_rate=curviness_rate,
    )


def _extend_tip(
    nodes: list[PlantNode],
    tip: PlantNode,
    proposal: GrowthProposal,
    turn: int,
    config: GrowthConfig,
) -> PlantNode:
    """Create the forward child of a tip in a working arena."""
    child = PlantNode(
        id=len(nodes),
        x=proposal.x,
        y=proposal.y,
        parent_id=tip.id,
        children=(),
        is_growing_tip=True,
        thickness=max(
            config.min_thickness, tip.thickness - config.growth_thickness_decrement
        ),
        color=tip.color,
        creation_turn=turn,
        growth_direction=proposal.heading,
        curviness=proposal.curviness,
        curviness_rate=proposal.curviness_rate,
    )
    graph.append_node(nodes, child)
    graph.convert_tip(nodes, tip.id, child.id)
    return child


def grow_tips(
    state: GameState,
    turn: int,
    key: Array,
    config: GrowthConfig | None = None,
) -> GameState:
    """
    Grow every growing tip by one segment.

    Tips that are missing, already converted, or whose next position is out
    of bounds are skipped and stay as they are. This step never raises for
    a single tip.

    Args:
        state: State before growth
        turn: Turn number stamped on new nodes
        key: JAX random key (one draw per tip)
        config: Engine configuration (defaults to GrowthConfig())

    Returns:
        State with new tips appended and grown tips converted
    """
    if config is None:
        config = GrowthConfig()

    nodes = list(state.nodes)
    bounds = state.environment.bounds
    converted: set[int] = set()
    new_tips: list[int] = []

    for tip_id in state.growing_tips:
        tip = graph.get_node(nodes, tip_id)
        if tip is None or not tip.is_growing_tip:
            logger.debug("Skipping stale growing tip %d", tip_id)
            continue

        key, subkey = jr.split(key)
        proposal = propose_growth(tip, state.powers, subkey, config)

        if not contains(bounds, proposal.x, proposal.y):
            logger.debug(
                "Tip %d held back: (%.2f, %.2f) is out of bounds",
                tip_id,
                proposal.x,
                proposal.y,
            )
            continue

        child = _extend_tip(nodes, tip, proposal, turn, config)
        converted.add(tip_id)
        new_tips.append(child.id)

    growing_tips = tuple(
        tip_id for tip_id in state.growing_tips if tip_id not in converted
    ) + tuple(new_tips)

    return state._replace(nodes=tuple(nodes), growing_tips=growing_tips)


def grow_tip(
    state: GameState,
    tip_id: int,
    key: Array,
    config: GrowthConfig | None = None,
) -> GameState:
    """
    Grow a single named tip, stamping the new node with the current turn.

    Raises:
        InvalidTipReference: If tip_id is unknown or no longer a growing tip
        OutOfBounds: If the tip's next position is outside the environment

    On failure the input state is left as it was.
    """
    if config is None:
        config = GrowthConfig()

    tip = graph.get_node(state.nodes, tip_id)
    if tip is None:
        raise InvalidTipReference(f"Node {tip_id} does not exist")
    if not tip.is_growing_tip:
        raise InvalidTipReference(f"Node {tip_id} is no longer a growing tip")

    proposal = propose_growth(tip, state.powers, key, config)
    if not contains(state.environment.bounds, proposal.x, proposal.y):
        raise OutOfBounds(
            f"Tip {tip_id} would grow to ({proposal.x:.2f}, {proposal.y:.2f}), "
            f"outside the field {tuple(state.environment.bounds)}"
        )

    nodes = list(state.nodes)
    child = _extend_tip(nodes, tip, proposal, state.turn, config)
    growing_tips = tuple(t for t in state.growing_tips if t != tip_id) + (child.id,)
    return state._replace(nodes=tuple(nodes), growing_tips=growing_tips)
