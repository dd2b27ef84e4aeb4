"""
Lateral branching.

A node can sprout a side branch while it is young. Eligibility:
    - the node is no longer a growing tip (it has been superseded by
      forward growth), and
    - turn - creation_turn <= branch_window

Every eligible node draws once per turn and branches with probability

    p = clip(base + per_point * branchiness, 0, 1)

A branch starts at the node's position plus one growth distance along
growth_direction + branch_angle, gets fresh random curviness and rate, and
joins the growing tips. Out-of-bounds branches are dropped. A node keeps
drawing every turn inside its window, so it may branch more than once.
"""

import logging

import jax.numpy as jnp
import jax.random as jr
from jax import Array

from tendril import graph, ledger
from tendril.config import GamePowers, GameState, GrowthConfig, PlantNode
from tendril.environment import contains
from tendril.errors import InvalidNodeReference, OutOfBounds
from tendril.growth import GrowthProposal, clamp, growth_distance

logger = logging.getLogger(__name__)


def branch_probability(powers: GamePowers, config: GrowthConfig) -> float:
    """Chance that an eligible node branches this turn."""
    chance = config.base_branch_chance + config.branch_chance_per_point * powers.branchiness
    return min(1.0, max(0.0, chance))


def is_branch_eligible(node: PlantNode, turn: int, config: GrowthConfig) -> bool:
    """Check whether a node may branch on the given turn."""
    return not node.is_growing_tip and node.age(turn) <= config.branch_window


def random_curviness(key: Array, config: GrowthConfig) -> tuple[float, float]:
    """Draw a fresh (curviness, curviness_rate) pair within their bounds."""
    k_curviness, k_rate = jr.split(key)
    curviness = jr.uniform(
        k_curviness, minval=-config.max_curviness, maxval=config.max_curviness
    )
    curviness_rate = jr.uniform(
        k_rate, minval=-config.max_curviness_rate, maxval=config.max_curviness_rate
    )
    return (
        clamp(float(curviness), config.max_curviness),
        clamp(float(curviness_rate), config.max_curviness_rate),
    )


def propose_branch(
    node: PlantNode,
    powers: GamePowers,
    key: Array,
    config: GrowthConfig,
) -> GrowthProposal:
    """Compute where a side branch of node would start."""
    distance = growth_distance(powers, config)
    heading = node.growth_direction + config.branch_angle
    curviness, curviness_rate = random_curviness(key, config)
    return GrowthProposal(
        x=float(node.x + distance * jnp.cos(heading)),
        y=float(node.y + distance * jnp.sin(heading)),
        heading=heading,
        curviness=curviness,
        curviness_rate=curviness_rate,
    )


def _attach_branch(
    nodes: list[PlantNode],
    parent: PlantNode,
    proposal: GrowthProposal,
    turn: int,
    config: GrowthConfig,
) -> PlantNode:
    branch = PlantNode(
        id=len(nodes),
        x=proposal.x,
        y=proposal.y,
        parent_id=parent.id,
        children=(),
        is_growing_tip=True,
        thickness=max(
            config.min_thickness, parent.thickness - config.branch_thickness_decrement
        ),
        color=parent.color,
        creation_turn=turn,
        growth_direction=proposal.heading,
        curviness=proposal.curviness,
        curviness_rate=proposal.curviness_rate,
    )
    graph.append_node(nodes, branch)
    graph.add_child(nodes, parent.id, branch.id)
    return branch


def branch_nodes(
    state: GameState,
    turn: int,
    key: Array,
    config: GrowthConfig | None = None,
) -> GameState:
    """
    Give every eligible node its chance to branch.

    Only nodes present before this step are evaluated; branches created
    here are growing tips and would not be eligible anyway.

    Args:
        state: State after growth and thickening
        turn: Current turn (for the eligibility window and new nodes)
        key: JAX random key
        config: Engine configuration (defaults to GrowthConfig())

    Returns:
        State with new branch tips appended
    """
    if config is None:
        config = GrowthConfig()

    eligible = [
        node.id for node in state.nodes if is_branch_eligible(node, turn, config)
    ]
    if not eligible:
        return state

    probability = branch_probability(state.powers, config)
    activation_key, shape_key = jr.split(key)
    draws = jr.uniform(activation_key, (len(eligible),))
    shape_keys = jr.split(shape_key, len(eligible))

    nodes = list(state.nodes)
    bounds = state.environment.bounds
    new_tips: list[int] = []

    for node_id, draw, subkey in zip(eligible, draws, shape_keys):
        if float(draw) >= probability:
            continue

        parent = nodes[node_id]
        proposal = propose_branch(parent, state.powers, subkey, config)
        if not contains(bounds, proposal.x, proposal.y):
            logger.debug(
                "Branch from node %d dropped: (%.2f, %.2f) is out of bounds",
                node_id,
                proposal.x,
                proposal.y,
            )
            continue

        branch = _attach_branch(nodes, parent, proposal, turn, config)
        new_tips.append(branch.id)

    if not new_tips:
        return state

    logger.debug("Turn %d: %d new branches", turn, len(new_tips))
    return state._replace(
        nodes=tuple(nodes),
        growing_tips=state.growing_tips + tuple(new_tips),
    )


def sprout_branch(
    state: GameState,
    node_id: int,
    key: Array,
    config: GrowthConfig | None = None,
) -> GameState:
    """
    Force a branch from one node, consuming one branchiness point.

    The branch is stamped with the current turn. The eligibility window
    does not apply; growing tips still cannot branch.

    Raises:
        InvalidNodeReference: If node_id is unknown or is a growing tip
        InsufficientPower: If no branchiness point is left to consume
        OutOfBounds: If the branch would start outside the environment

    On failure the input state is left as it was.
    """
    if config is None:
        config = GrowthConfig()

    node = graph.get_node(state.nodes, node_id)
    if node is None:
        raise InvalidNodeReference(f"Node {node_id} does not exist")
    if node.is_growing_tip:
        raise InvalidNodeReference(f"Node {node_id} is a growing tip and cannot branch")

    charged = ledger.spend(state, "branchiness")
    # Distance uses the powers held before the charge is consumed
    proposal = propose_branch(node, state.powers, key, config)
    if not contains(state.environment.bounds, proposal.x, proposal.y):
        raise OutOfBounds(
            f"Branch from node {node_id} would start at "
            f"({proposal.x:.2f}, {proposal.y:.2f}), outside the field"
        )

    nodes = list(charged.nodes)
    branch = _attach_branch(nodes, node, proposal, charged.turn, config)
    return charged._replace(
        nodes=tuple(nodes),
        growing_tips=charged.growing_tips + (branch.id,),
    )
