"""
Power allocation policies.

A policy stands in for the player: given the current state it names the
power to put the next point into, or returns None to keep points banked.

    policy(state, turn, num_turns) -> power name | None

The rollout asks the policy once per available point, before each turn.
"""

from collections.abc import Callable

import jax.random as jr
from jax import Array

from tendril.config import POWER_NAMES, GameState

# Type alias for policy functions
PolicyFn = Callable[[GameState, int, int], str | None]


def baseline_policy(
    state: GameState,  # noqa: ARG001
    turn: int,
    num_turns: int,
) -> str | None:
    """
    Hand-coded baseline following a reach / spread / consolidate plan.

    - Early (0-30%): growth, to cover ground quickly
    - Mid (30-70%): branchiness, to fill the space that was reached
    - Late (70-100%): resilience, to thicken what exists

    Args:
        state: Current game state (unused, but API-compatible)
        turn: Turn about to be played
        num_turns: Final turn of the game

    Returns:
        Power name to allocate to
    """
    progress = turn / max(1, num_turns)
    if progress < 0.3:
        return "growth"
    if progress < 0.7:
        return "branchiness"
    return "resilience"


def growth_focused_policy(
    state: GameState,  # noqa: ARG001
    turn: int,  # noqa: ARG001
    num_turns: int,  # noqa: ARG001
) -> str | None:
    """Put every point into growth: one long, unbranched tendril."""
    return "growth"


def bushy_policy(
    state: GameState,
    turn: int,  # noqa: ARG001
    num_turns: int,  # noqa: ARG001
) -> str | None:
    """Alternate branchiness and growth, keeping branchiness ahead."""
    powers = state.powers
    if powers.branchiness <= powers.growth:
        return "branchiness"
    return "growth"


def idle_policy(
    state: GameState,  # noqa: ARG001
    turn: int,  # noqa: ARG001
    num_turns: int,  # noqa: ARG001
) -> str | None:
    """Never allocate. The plant grows on base rates alone."""
    return None


def make_random_policy(key: Array) -> PolicyFn:
    """
    Create a policy that picks a power uniformly at random.

    The choice depends only on the key, the turn and the number of points
    already spent, so replaying a game reproduces the same allocations.
    """

    def policy(state: GameState, turn: int, num_turns: int) -> str | None:  # noqa: ARG001
        subkey = jr.fold_in(jr.fold_in(key, turn), state.points_spent)
        index = int(jr.randint(subkey, (), 0, len(POWER_NAMES)))
        return POWER_NAMES[index]

    return policy
