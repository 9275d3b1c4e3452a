"""Fleet definitions and the step-by-step placement helper used during setup."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Sequence

from .grid import Grid, Placement
from .vessel import Orientation, Vessel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FleetEntry:
    """One vessel class in a fleet and whether it has been placed yet."""

    name: str
    length: int
    placed: bool = False


STANDARD_FLEET: tuple[FleetEntry, ...] = (
    FleetEntry("Carrier", 5),
    FleetEntry("Battleship", 4),
    FleetEntry("Cruiser", 3),
    FleetEntry("Submarine", 3),
    FleetEntry("Destroyer", 2),
)


@dataclass(frozen=True)
class LayoutSlot:
    """Fixed start cell and orientation for one fleet entry."""

    x: int
    y: int
    orientation: Orientation


PRESET_LAYOUTS: dict[str, tuple[LayoutSlot, ...]] = {
    "human": (
        LayoutSlot(0, 0, Orientation.HORIZONTAL),
        LayoutSlot(0, 2, Orientation.HORIZONTAL),
        LayoutSlot(0, 4, Orientation.HORIZONTAL),
        LayoutSlot(5, 0, Orientation.VERTICAL),
        LayoutSlot(7, 0, Orientation.VERTICAL),
    ),
    "automated": (
        LayoutSlot(2, 1, Orientation.VERTICAL),
        LayoutSlot(5, 5, Orientation.HORIZONTAL),
        LayoutSlot(0, 7, Orientation.HORIZONTAL),
        LayoutSlot(7, 2, Orientation.VERTICAL),
        LayoutSlot(4, 9, Orientation.HORIZONTAL),
    ),
}


class FleetPlacement:
    """Walks through a fleet one vessel at a time.

    The driving layer asks for the current entry, toggles orientation and
    calls ``place_current`` with a start cell until ``all_placed`` is true.
    """

    def __init__(self, fleet: Sequence[FleetEntry] = STANDARD_FLEET) -> None:
        if not fleet:
            raise ValueError("A fleet needs at least one vessel.")
        self._fleet = [replace(entry, placed=False) for entry in fleet]
        self._index = 0
        self.orientation = Orientation.HORIZONTAL

    def entries(self) -> list[FleetEntry]:
        return list(self._fleet)

    def current_entry(self) -> FleetEntry | None:
        if self._index < len(self._fleet):
            return self._fleet[self._index]
        return None

    def confirm_placement(self) -> None:
        """Mark the current entry placed and advance to the next one."""
        if self._index < len(self._fleet):
            self._fleet[self._index] = replace(self._fleet[self._index], placed=True)
            self._index += 1

    def all_placed(self) -> bool:
        return self._index >= len(self._fleet)

    def toggle_orientation(self) -> Orientation:
        if self.orientation is Orientation.HORIZONTAL:
            self.orientation = Orientation.VERTICAL
        else:
            self.orientation = Orientation.HORIZONTAL
        return self.orientation

    def reset(self) -> None:
        self._fleet = [replace(entry, placed=False) for entry in self._fleet]
        self._index = 0
        self.orientation = Orientation.HORIZONTAL

    def place_current(self, grid: Grid, x: int, y: int) -> bool:
        """Try to put the current entry on ``grid``; advances only on success."""
        entry = self.current_entry()
        if entry is None:
            return False
        placed = grid.place_vessel(Vessel(entry.length), x, y, self.orientation)
        if placed:
            logger.debug(
                "fleet_entry_placed",
                extra={"vessel": entry.name, "owner": grid.owner, "remaining": self.remaining()},
            )
            self.confirm_placement()
        return placed

    def remaining(self) -> int:
        return len(self._fleet) - self._index

    def place_randomly(
        self, grid: Grid, rng: random.Random, max_attempts: int = 100
    ) -> list[Placement]:
        """Randomly place every entry not yet placed."""
        pending = self._fleet[self._index:]
        placements = grid.random_placement([entry.length for entry in pending], rng, max_attempts)
        for _ in pending:
            self.confirm_placement()
        return placements

    def place_preset(self, grid: Grid, layout: Sequence[LayoutSlot]) -> list[Placement]:
        """Place the remaining entries at fixed positions.

        Raises ValueError when the layout is too short or a slot does not fit.
        """
        pending = self._fleet[self._index:]
        if len(layout) < len(pending):
            raise ValueError(
                f"Layout has {len(layout)} slots but {len(pending)} vessels remain to be placed."
            )
        placements: list[Placement] = []
        for entry, slot in zip(pending, layout):
            self.orientation = slot.orientation
            if not self.place_current(grid, slot.x, slot.y):
                raise ValueError(
                    f"Preset slot ({slot.x}, {slot.y}, {slot.orientation.value}) "
                    f"cannot hold the {entry.name}."
                )
            placements.append(grid.placements()[-1])
        self.orientation = Orientation.HORIZONTAL
        return placements


def fleet_from_lengths(lengths: Sequence[int]) -> list[FleetEntry]:
    """Name a list of vessel lengths after the standard fleet where possible."""
    fleet: list[FleetEntry] = []
    for index, length in enumerate(lengths):
        if index < len(STANDARD_FLEET) and STANDARD_FLEET[index].length == length:
            fleet.append(STANDARD_FLEET[index])
        else:
            fleet.append(FleetEntry(f"Vessel {index + 1}", length))
    return fleet
