"""
Full game rollout.

This module plays a complete game, combining:
- An allocation policy (standing in for the player)
- The power ledger
- The turn engine

The result is a trajectory containing every state from turn 1 to the final
turn plus the allocations made along the way.
"""

from dataclasses import dataclass

import jax.numpy as jnp
import jax.random as jr
from jax import Array

from tendril import engine, graph, ledger
from tendril.config import Environment, GameState, GrowthConfig
from tendril.policies import PolicyFn, baseline_policy


@dataclass
class Trajectory:
    """
    Complete record of a game.

    Contains:
    - states: GameState at each turn (states[0] is turn 1)
    - allocations: (turn, power) for every point allocated; `turn` is the
      turn that was played right after the allocation
    """

    states: list[GameState]
    allocations: list[tuple[int, str]]

    @property
    def final_state(self) -> GameState:
        return self.states[-1]

    def get_stat_arrays(self) -> dict[str, Array]:
        """Per-turn statistics as arrays for plotting."""
        stats = [engine.stats(state) for state in self.states]
        return {
            "turn": jnp.array([s.turn for s in stats]),
            "total_nodes": jnp.array([s.total_nodes for s in stats]),
            "total_length": jnp.array([s.total_length for s in stats]),
            "growing_tips": jnp.array([s.growing_tip_count for s in stats]),
        }

    def get_scalar_summary(self) -> dict[str, float]:
        """
        Compute scalar diagnostic summary of the game.

        - Turns: Final turn number
        - TotalNodes: Nodes in the final plant
        - TotalLength: Summed segment length of the final plant
        - GrowingTips: Growing tips at the end
        - Branches: Nodes created by branching (children beyond the first)
        - MaxThickness / MeanThickness: Structural investment
        - TurnsStalled: Turns on which no node was created
        - Growth / Branchiness / Resilience: Final power counters
        - PointsUnspent: Points still available at the end
        """
        final = self.final_state
        thickness = jnp.array([node.thickness for node in final.nodes])
        node_counts = [len(state.nodes) for state in self.states]
        stalled = sum(
            1 for before, after in zip(node_counts, node_counts[1:]) if after == before
        )
        branches = sum(max(0, len(node.children) - 1) for node in final.nodes)

        return {
            "Turns": final.turn,
            "TotalNodes": len(final.nodes),
            "TotalLength": graph.total_length(final.nodes),
            "GrowingTips": len(final.growing_tips),
            "Branches": branches,
            "MaxThickness": float(jnp.max(thickness)),
            "MeanThickness": float(jnp.mean(thickness)),
            "TurnsStalled": stalled,
            "Growth": final.powers.growth,
            "Branchiness": final.powers.branchiness,
            "Resilience": final.powers.resilience,
            "PointsUnspent": ledger.points_available(final),
        }

    def print_summary(self) -> None:
        """Print a formatted summary table to stdout."""
        summary = self.get_scalar_summary()
        print("\n" + "=" * 40)
        print("GAME SUMMARY")
        print("=" * 40)
        for key, value in summary.items():
            if isinstance(value, int):
                print(f"{key:20s}: {value:>10d}")
            else:
                print(f"{key:20s}: {value:>10.3f}")
        print("=" * 40)


def run_game(
    num_turns: int,
    key: Array,
    policy: PolicyFn = baseline_policy,
    config: GrowthConfig | None = None,
    environment: Environment | None = None,
) -> Trajectory:
    """
    Play a game from initialization up to and including turn num_turns.

    Before each turn the policy is asked once per available point; it may
    stop early by returning None.

    Args:
        num_turns: Final turn number (>= 1)
        key: JAX random key; equal keys give equal games
        policy: Allocation policy
        config: Engine configuration
        environment: Playing field (defaults to default_environment())

    Returns:
        Trajectory containing every state and allocation
    """
    if num_turns < 1:
        raise ValueError("num_turns must be at least 1")

    init_key, turn_key = jr.split(key)
    state = engine.initialize(init_key, config=config, environment=environment)

    states: list[GameState] = [state]
    allocations: list[tuple[int, str]] = []

    for turn in range(2, num_turns + 1):
        while ledger.points_available(state) > 0:
            power_name = policy(state, turn, num_turns)
            if power_name is None:
                break
            state = engine.allocate(state, power_name)
            allocations.append((turn, power_name))

        state = engine.advance_turn(state, turn, jr.fold_in(turn_key, turn), config)
        states.append(state)

    return Trajectory(states=states, allocations=allocations)


def compare_policies(
    policies_dict: dict[str, PolicyFn],
    num_turns: int,
    key: Array,
    config: GrowthConfig | None = None,
) -> dict[str, dict[str, float]]:
    """
    Play the same game (same key) under several policies.

    Args:
        policies_dict: Dictionary mapping policy names to functions
        num_turns: Final turn number
        key: JAX random key shared by every run
        config: Engine configuration

    Returns:
        Dictionary mapping policy names to their scalar summaries
    """
    results = {}
    for name, policy in policies_dict.items():
        trajectory = run_game(num_turns, key, policy=policy, config=config)
        results[name] = trajectory.get_scalar_summary()
    return results
