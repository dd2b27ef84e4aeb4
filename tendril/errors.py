"""
Errors raised by directed (single-target) engine actions.

The bulk per-turn pipeline never raises these: a tip that cannot grow or a
node that cannot branch is skipped for that turn. Only actions aimed at one
tip, node or power report a failure, and they leave the input state as it
was.
"""


class TendrilError(Exception):
    """Base class for engine errors."""


class InvalidNodeReference(TendrilError, LookupError):
    """A node id does not exist in the plant."""


class InvalidTipReference(InvalidNodeReference):
    """A tip id does not exist, or the node is no longer a growing tip."""


class OutOfBounds(TendrilError, ValueError):
    """A proposed placement falls outside the environment rectangle."""


class InsufficientPower(TendrilError, ValueError):
    """A power point was requested that is not available."""


class UnknownPower(TendrilError, ValueError):
    """A power name is not one of the known counters."""
