"""
Node graph helpers: the plant as an arena of nodes.

Nodes live in a tuple indexed by id (`nodes[i].id == i`), so every lookup
is a constant-time index. Parent and child links are ids into the arena.

The graph only grows:
    - ids are assigned as len(nodes) and never reused
    - a node's parent always has a smaller id, so links cannot form a cycle
    - child lists are append-only

Steps work on a private list copy of the arena, use the `append_node`,
`convert_tip` and `add_child` helpers on it, and freeze it back into a
tuple before handing the state on.
"""

import logging
from collections.abc import Sequence

import jax.numpy as jnp
from jax import Array

from tendril.config import GameState, PlantNode

logger = logging.getLogger(__name__)


def get_node(nodes: Sequence[PlantNode], node_id: int) -> PlantNode | None:
    """Look up a node by id, or None if no such node exists."""
    if 0 <= node_id < len(nodes):
        return nodes[node_id]
    return None


def get_parent(nodes: Sequence[PlantNode], node: PlantNode) -> PlantNode | None:
    """Look up a node's parent, or None for the root or a dangling link."""
    if node.parent_id is None:
        return None
    return get_node(nodes, node.parent_id)


def children_of(nodes: Sequence[PlantNode], node_id: int) -> list[PlantNode]:
    """Child nodes of node_id, in creation order."""
    node = get_node(nodes, node_id)
    if node is None:
        return []
    return [nodes[child_id] for child_id in node.children]


def growing_tip_ids(nodes: Sequence[PlantNode]) -> tuple[int, ...]:
    """Ids of every node flagged as a growing tip, in id order."""
    return tuple(node.id for node in nodes if node.is_growing_tip)


def append_node(nodes: list[PlantNode], node: PlantNode) -> None:
    """Append a new node to a working arena; its id must be the next index."""
    if node.id != len(nodes):
        raise ValueError(f"Node id {node.id} does not match next arena slot {len(nodes)}")
    if node.parent_id is not None and not 0 <= node.parent_id < node.id:
        raise ValueError(f"Node {node.id} must have an existing, older parent")
    nodes.append(node)


def add_child(nodes: list[PlantNode], parent_id: int, child_id: int) -> None:
    """Append child_id to a parent's children, leaving its tip flag alone."""
    parent = nodes[parent_id]
    nodes[parent_id] = parent._replace(children=parent.children + (child_id,))


def convert_tip(nodes: list[PlantNode], tip_id: int, child_id: int) -> None:
    """Mark a tip as superseded by its forward child in one update."""
    tip = nodes[tip_id]
    nodes[tip_id] = tip._replace(
        children=tip.children + (child_id,),
        is_growing_tip=False,
    )


def segment_lengths(nodes: Sequence[PlantNode]) -> Array:
    """
    Length of the segment joining each node to its parent.

    The root contributes 0. A node whose parent cannot be resolved also
    contributes 0 rather than failing.

    Returns:
        lengths: [num_nodes] Euclidean distance to parent
    """
    num_nodes = len(nodes)
    if num_nodes == 0:
        return jnp.zeros(0)

    x = jnp.array([node.x for node in nodes])
    y = jnp.array([node.y for node in nodes])
    parent = jnp.array(
        [-1 if node.parent_id is None else node.parent_id for node in nodes]
    )

    resolvable = (parent >= 0) & (parent < num_nodes)
    safe_parent = jnp.where(resolvable, parent, 0)
    dx = x - x[safe_parent]
    dy = y - y[safe_parent]
    return jnp.where(resolvable, jnp.sqrt(dx**2 + dy**2), 0.0)


def total_length(nodes: Sequence[PlantNode]) -> float:
    """Total plant length: the sum of all segment lengths."""
    if not nodes:
        return 0.0
    return float(jnp.sum(segment_lengths(nodes)))


def is_consistent(state: GameState) -> bool:
    """
    Check the structural invariants of a state.

    - exactly one root, at id 0
    - every id equals its arena index
    - every parent exists, is older in id and not newer in creation turn
    - every child link points back at its parent
    - growing_tips holds exactly the flagged tips, without duplicates
    """
    nodes = state.nodes
    if not nodes:
        return state.growing_tips == ()

    roots = [node for node in nodes if node.parent_id is None]
    if len(roots) != 1 or roots[0].id != 0:
        logger.debug("Expected a single root at id 0, found %d roots", len(roots))
        return False

    for index, node in enumerate(nodes):
        if node.id != index:
            logger.debug("Node at index %d carries id %d", index, node.id)
            return False
        if node.parent_id is not None:
            if not 0 <= node.parent_id < node.id:
                logger.debug("Node %d has invalid parent %s", node.id, node.parent_id)
                return False
            if nodes[node.parent_id].creation_turn > node.creation_turn:
                logger.debug("Node %d is older than its parent", node.id)
                return False
        for child_id in node.children:
            child = get_node(nodes, child_id)
            if child is None or child.parent_id != node.id:
                logger.debug("Node %d lists foreign child %d", node.id, child_id)
                return False

    if len(set(state.growing_tips)) != len(state.growing_tips):
        return False
    return set(state.growing_tips) == set(growing_tip_ids(nodes))
