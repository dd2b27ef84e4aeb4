"""
Structural thickening.

Each turn the plant receives a thickening budget proportional to its total
length and its resilience:

    factor = base + per_point * resilience
    budget = total_length * factor

The budget is split evenly across every node (root, tips and all):

    increment = budget / max(1, num_nodes)

An even split does not depend on node order, so the step is deterministic
for a given node set.
"""

from tendril import graph
from tendril.config import GamePowers, GameState, GrowthConfig


def resilience_factor(powers: GamePowers, config: GrowthConfig) -> float:
    """Thickening per unit of plant length."""
    return config.base_resilience + config.resilience_per_point * powers.resilience


def thickening_budget(state: GameState, config: GrowthConfig) -> float:
    """Total thickness added to the plant this turn."""
    return graph.total_length(state.nodes) * resilience_factor(state.powers, config)


def thicken(state: GameState, config: GrowthConfig | None = None) -> GameState:
    """
    Add the per-node share of the thickening budget to every node.

    Args:
        state: State after growth
        config: Engine configuration (defaults to GrowthConfig())

    Returns:
        State with every node's thickness increased by the same amount
    """
    if config is None:
        config = GrowthConfig()
    if not state.nodes:
        return state

    increment = thickening_budget(state, config) / max(1, len(state.nodes))
    nodes = tuple(
        node._replace(thickness=node.thickness + increment) for node in state.nodes
    )
    return state._replace(nodes=nodes)
