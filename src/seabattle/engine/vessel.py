"""Vessel domain model for the seabattle engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import InvalidLengthError


@dataclass(frozen=True)
class Coordinate:
    """Immutable grid coordinate; ``x`` is the column, ``y`` the row."""

    x: int
    y: int

    def neighbours(self) -> tuple[Coordinate, ...]:
        """Return the orthogonal neighbours in left, right, up, down order."""
        return (
            Coordinate(self.x - 1, self.y),
            Coordinate(self.x + 1, self.y),
            Coordinate(self.x, self.y - 1),
            Coordinate(self.x, self.y + 1),
        )


class Orientation(Enum):
    """Allowed vessel orientations."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    def run(self, start: Coordinate, length: int) -> tuple[Coordinate, ...]:
        """Return the ``length`` cells starting at ``start`` in this direction."""
        if self is Orientation.HORIZONTAL:
            return tuple(Coordinate(start.x + offset, start.y) for offset in range(length))
        return tuple(Coordinate(start.x, start.y + offset) for offset in range(length))


class Vessel:
    """A single ship: its length and the damage it has taken so far."""

    __slots__ = ("_length", "_damage")

    def __init__(self, length: int) -> None:
        if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
            raise InvalidLengthError(f"Vessel length must be a positive integer, got {length!r}.")
        self._length = length
        self._damage = 0

    def __repr__(self) -> str:
        return f"Vessel(length={self._length}, damage={self._damage})"

    @property
    def length(self) -> int:
        return self._length

    @property
    def damage(self) -> int:
        return self._damage

    @property
    def remaining(self) -> int:
        """Number of undamaged cells left."""
        return self._length - self._damage

    def register_hit(self) -> None:
        """Record one hit; hits on a destroyed vessel are ignored."""
        if not self.is_destroyed():
            self._damage += 1

    def is_destroyed(self) -> bool:
        return self._damage >= self._length
