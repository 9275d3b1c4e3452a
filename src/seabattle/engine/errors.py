"""Exceptions raised by the seabattle engine.

Only caller bugs raise. Expected game-flow outcomes (a rejected placement, a
repeated shot) are reported through return values instead.
"""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """A precondition of an engine operation was violated."""


class InvalidLengthError(InvalidArgumentError):
    """Vessel length is not a positive integer."""


class OutOfBoundsError(InvalidArgumentError):
    """Attack coordinate lies outside the grid."""


class InvalidNameError(InvalidArgumentError):
    """Combatant name is empty or not a string."""


class InvalidKindError(InvalidArgumentError):
    """Combatant kind is not one of the recognised kinds."""


class InvalidOpponentError(InvalidArgumentError, TypeError):
    """Attack target is not a Combatant."""


class FleetPlacementError(RuntimeError):
    """Random placement could not fit a vessel within its attempt budget."""


class GridExhaustedError(RuntimeError):
    """Every cell of the opponent grid has already been shot."""
