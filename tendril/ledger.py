"""
Power point ledger.

The player earns one point per elapsed turn and spends points by
allocating them to powers:

    earned    = max(0, turn - 1)
    available = earned - points_spent

`points_spent` counts every allocation ever made, so consuming a power as a
one-shot charge (see `spend`) lowers the counter without refunding a point.
"""

import logging

from tendril.config import POWER_NAMES, GameState
from tendril.errors import InsufficientPower, UnknownPower

logger = logging.getLogger(__name__)


def points_earned(state: GameState) -> int:
    """Points earned so far: one per turn after the first."""
    return max(0, state.turn - 1)


def points_spent(state: GameState) -> int:
    return state.points_spent


def points_available(state: GameState) -> int:
    """Points that can still be allocated."""
    return points_earned(state) - points_spent(state)


def _check_power_name(power_name: str) -> None:
    if power_name not in POWER_NAMES:
        raise UnknownPower(
            f"Unknown power '{power_name}' "
            f"(expected one of {', '.join(POWER_NAMES)})"
        )


def allocate(state: GameState, power_name: str) -> GameState:
    """
    Allocate one point to a power.

    Args:
        state: Current game state
        power_name: One of POWER_NAMES

    Returns:
        New state with the counter and points_spent incremented

    Raises:
        UnknownPower: If power_name is not a known power
        InsufficientPower: If no spendable point remains
    """
    _check_power_name(power_name)
    if points_available(state) <= 0:
        raise InsufficientPower(
            f"No power points available to allocate to '{power_name}' "
            f"(earned {points_earned(state)}, spent {points_spent(state)})"
        )

    powers = state.powers.with_delta(power_name, 1)
    logger.debug("Allocated a point to %s (now %d)", power_name, powers.get(power_name))
    return state._replace(powers=powers, points_spent=state.points_spent + 1)


def spend(state: GameState, power_name: str) -> GameState:
    """
    Consume one point of a power as a one-shot charge.

    Raises:
        UnknownPower: If power_name is not a known power
        InsufficientPower: If the counter is already 0
    """
    _check_power_name(power_name)
    if state.powers.get(power_name) <= 0:
        raise InsufficientPower(f"No '{power_name}' points left to spend")
    return state._replace(powers=state.powers.with_delta(power_name, -1))
