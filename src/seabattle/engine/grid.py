"""Single-combatant grid management for the seabattle engine."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from seabattle.telemetry import get_meter, get_tracer

from .errors import FleetPlacementError, InvalidArgumentError, OutOfBoundsError
from .vessel import Coordinate, Orientation, Vessel

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.grid")
meter = get_meter("seabattle.engine.grid")

PLACEMENT_COUNTER = meter.create_counter(
    "seabattle_engine_vessel_placements",
    unit="1",
    description="Number of attempted vessel placements",
)

ATTACK_COUNTER = meter.create_counter(
    "seabattle_engine_attacks",
    unit="1",
    description="Attacks received by a grid",
)


class AttackResult(Enum):
    """Outcome of firing at a grid coordinate."""

    HIT = "hit"
    MISS = "miss"
    ALREADY_SHOT = "already-shot"


class CellState(Enum):
    """State of a grid cell from the perspective of shots taken."""

    UNKNOWN = "unknown"
    MISS = "miss"
    HIT = "hit"


@dataclass(frozen=True)
class Placement:
    """One vessel together with the ordered cells it occupies."""

    vessel: Vessel
    cells: tuple[Coordinate, ...]
    orientation: Orientation


def _require_int(value: object, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{label} must be an integer, got {value!r}.")
    return value


@dataclass
class Grid:
    """An N×N board holding placed vessels and the shots taken against them."""

    size: int = 10
    owner: str = "unknown"
    _placements: list[Placement] = field(default_factory=list, init=False, repr=False)
    _occupied: dict[Coordinate, Placement] = field(default_factory=dict, init=False, repr=False)
    _shots: dict[Coordinate, CellState] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        if _require_int(self.size, "Grid size") <= 0:
            raise InvalidArgumentError(f"Grid size must be positive, got {self.size}.")

    def is_valid_coordinate(self, coord: Coordinate) -> bool:
        """Check whether a coordinate lies inside the grid boundaries."""
        return 0 <= coord.x < self.size and 0 <= coord.y < self.size

    def can_place(self, cells: Iterable[Coordinate]) -> bool:
        """Whether every cell is on the grid and unoccupied."""
        return all(self.is_valid_coordinate(cell) and cell not in self._occupied for cell in cells)

    def place_vessel(
        self,
        vessel: Vessel,
        x: int,
        y: int,
        orientation: Orientation | str = Orientation.HORIZONTAL,
    ) -> bool:
        """Place ``vessel`` with its first cell at ``(x, y)``.

        Returns False when the run leaves the grid, overlaps another vessel,
        or the vessel is already on this grid. Malformed arguments raise
        InvalidArgumentError.
        """
        if not isinstance(vessel, Vessel):
            raise InvalidArgumentError(f"Expected a Vessel, got {type(vessel).__name__}.")
        try:
            orientation = Orientation(orientation)
        except ValueError as exc:
            raise InvalidArgumentError(
                f"Orientation must be 'horizontal' or 'vertical', got {orientation!r}."
            ) from exc
        start = Coordinate(_require_int(x, "x"), _require_int(y, "y"))

        with tracer.start_as_current_span("grid.place_vessel") as span:
            span.set_attribute("vessel.length", vessel.length)
            span.set_attribute("vessel.orientation", orientation.value)
            span.set_attribute("vessel.start.x", start.x)
            span.set_attribute("vessel.start.y", start.y)
            span.set_attribute("grid.owner", self.owner)

            cells = orientation.run(start, vessel.length)
            already_placed = any(p.vessel is vessel for p in self._placements)
            if already_placed or not self.can_place(cells):
                span.set_attribute("placement.accepted", False)
                PLACEMENT_COUNTER.add(1, attributes={"result": "rejected", "owner": self.owner})
                logger.info(
                    "vessel_placement_rejected",
                    extra={
                        "owner": self.owner,
                        "length": vessel.length,
                        "orientation": orientation.value,
                        "x": start.x,
                        "y": start.y,
                        "duplicate": already_placed,
                    },
                )
                return False

            placement = Placement(vessel=vessel, cells=cells, orientation=orientation)
            self._placements.append(placement)
            for cell in cells:
                self._occupied[cell] = placement
            span.set_attribute("placement.accepted", True)
            PLACEMENT_COUNTER.add(1, attributes={"result": "success", "owner": self.owner})
            logger.info(
                "vessel_placed",
                extra={
                    "owner": self.owner,
                    "length": vessel.length,
                    "orientation": orientation.value,
                    "x": start.x,
                    "y": start.y,
                },
            )
            return True

    def receive_attack(self, x: int, y: int) -> AttackResult:
        """Resolve a shot at ``(x, y)``.

        Firing at a cell a second time returns ``ALREADY_SHOT`` and changes
        nothing. Coordinates off the grid raise OutOfBoundsError.
        """
        coord = Coordinate(_require_int(x, "x"), _require_int(y, "y"))
        with tracer.start_as_current_span("grid.receive_attack") as span:
            span.set_attribute("attack.x", coord.x)
            span.set_attribute("attack.y", coord.y)
            span.set_attribute("grid.owner", self.owner)
            if not self.is_valid_coordinate(coord):
                logger.error(
                    "attack_out_of_bounds",
                    extra={"x": coord.x, "y": coord.y, "size": self.size, "owner": self.owner},
                )
                raise OutOfBoundsError(
                    f"Attack at ({coord.x}, {coord.y}) is outside a {self.size}x{self.size} grid."
                )
            if coord in self._shots:
                span.set_attribute("attack.outcome", AttackResult.ALREADY_SHOT.value)
                ATTACK_COUNTER.add(1, attributes={"outcome": "already-shot", "owner": self.owner})
                logger.debug(
                    "attack_repeated", extra={"x": coord.x, "y": coord.y, "owner": self.owner}
                )
                return AttackResult.ALREADY_SHOT

            placement = self._occupied.get(coord)
            if placement is not None:
                placement.vessel.register_hit()
                self._shots[coord] = CellState.HIT
                span.set_attribute("attack.outcome", AttackResult.HIT.value)
                span.set_attribute("vessel.destroyed", placement.vessel.is_destroyed())
                ATTACK_COUNTER.add(1, attributes={"outcome": "hit", "owner": self.owner})
                logger.info(
                    "attack_hit",
                    extra={
                        "x": coord.x,
                        "y": coord.y,
                        "length": placement.vessel.length,
                        "destroyed": placement.vessel.is_destroyed(),
                        "owner": self.owner,
                    },
                )
                return AttackResult.HIT

            self._shots[coord] = CellState.MISS
            span.set_attribute("attack.outcome", AttackResult.MISS.value)
            ATTACK_COUNTER.add(1, attributes={"outcome": "miss", "owner": self.owner})
            logger.info("attack_miss", extra={"x": coord.x, "y": coord.y, "owner": self.owner})
            return AttackResult.MISS

    def all_vessels_destroyed(self) -> bool:
        """True once every placed vessel is destroyed; never true for an empty grid."""
        if not self._placements:
            return False
        return all(placement.vessel.is_destroyed() for placement in self._placements)

    def placements(self) -> list[Placement]:
        return list(self._placements)

    def hits(self) -> list[Coordinate]:
        return [coord for coord, state in self._shots.items() if state is CellState.HIT]

    def misses(self) -> list[Coordinate]:
        return [coord for coord, state in self._shots.items() if state is CellState.MISS]

    def cell_state(self, x: int, y: int) -> CellState:
        """Return the state of a cell after shots have been taken."""
        return self._shots.get(Coordinate(x, y), CellState.UNKNOWN)

    def has_been_shot(self, x: int, y: int) -> bool:
        return Coordinate(x, y) in self._shots

    def shot_count(self) -> int:
        return len(self._shots)

    def unshot_cells(self) -> list[Coordinate]:
        """Every coordinate not yet fired at, row by row."""
        return [
            Coordinate(x, y)
            for y in range(self.size)
            for x in range(self.size)
            if Coordinate(x, y) not in self._shots
        ]

    def vessel_at(self, x: int, y: int) -> Vessel | None:
        placement = self._occupied.get(Coordinate(x, y))
        return placement.vessel if placement is not None else None

    def vessels_remaining(self) -> int:
        return sum(1 for placement in self._placements if not placement.vessel.is_destroyed())

    def random_placement(
        self,
        lengths: Iterable[int],
        rng: random.Random,
        max_attempts: int = 100,
    ) -> list[Placement]:
        """Place one new vessel per length at random positions.

        Each vessel gets ``max_attempts`` tries; running out raises
        FleetPlacementError after removing every vessel this call placed.
        Returns the placements added by this call.
        """
        added: list[Placement] = []
        with tracer.start_as_current_span("grid.random_placement") as span:
            span.set_attribute("grid.owner", self.owner)
            for length in lengths:
                vessel = Vessel(length)
                attempts = 0
                placed = False
                while not placed and attempts < max_attempts:
                    orientation = Orientation.HORIZONTAL if rng.random() < 0.5 else Orientation.VERTICAL
                    x = rng.randrange(self.size)
                    y = rng.randrange(self.size)
                    placed = self.place_vessel(vessel, x, y, orientation)
                    attempts += 1
                if not placed:
                    self._remove_placements(added)
                    logger.error(
                        "random_placement_exhausted",
                        extra={
                            "length": length,
                            "attempts": attempts,
                            "rolled_back": len(added),
                            "owner": self.owner,
                        },
                    )
                    raise FleetPlacementError(
                        f"Could not place a vessel of length {length} after {attempts} attempts."
                    )
                added.append(self._placements[-1])
                logger.debug(
                    "random_vessel_placed",
                    extra={"length": length, "attempts": attempts, "owner": self.owner},
                )
            span.set_attribute("vessels.placed", len(added))
        return added

    def _remove_placements(self, placements: list[Placement]) -> None:
        """Take back placements made during setup; shot history is left alone."""
        for placement in placements:
            self._placements.remove(placement)
            for cell in placement.cells:
                del self._occupied[cell]
