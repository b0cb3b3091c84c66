"""Exceptions raised by the Pandemic simulation engine.

All rule failures are detected synchronously and reported to the caller.
Losing conditions (cube exhaustion, empty player pile, eighth outbreak)
are not exceptions; they are published as match events.
"""


class PandemicError(Exception):
    """Base class for all rule failures."""
    pass


class IllegalStateTransition(PandemicError):
    """Raised when an operation is attempted in the wrong stage or out of turn."""
    pass


class InvalidMove(PandemicError):
    """Raised when a move or target is not allowed from the current position."""
    pass


class ResourceLimit(PandemicError):
    """Raised when a hand, draw or station limit blocks the operation."""
    pass


class RuleViolation(PandemicError):
    """Raised when an operation breaks a game rule regardless of position."""
    pass
