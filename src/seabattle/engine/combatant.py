"""Combatants and the automated hunt/target attack strategy."""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum

from seabattle.telemetry import get_meter, get_tracer

from .errors import GridExhaustedError, InvalidKindError, InvalidNameError, InvalidOpponentError
from .grid import AttackResult, Grid
from .vessel import Coordinate

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.combatant")
meter = get_meter("seabattle.engine.combatant")

AUTOMATED_ATTACK_COUNTER = meter.create_counter(
    "seabattle_engine_automated_attacks",
    unit="1",
    description="Automated attacks by targeting mode and outcome",
)


class CombatantKind(Enum):
    """Who decides a combatant's shots."""

    HUMAN = "human"
    AUTOMATED = "automated"


class TargetingMode(Enum):
    """Automated targeting state, derived from the pending-target queue."""

    HUNTING = "hunting"
    TARGETING = "targeting"


@dataclass(frozen=True)
class AttackReport:
    """Where an automated attack landed and what it did."""

    x: int
    y: int
    result: AttackResult


class HuntTargetStrategy:
    """Random search until a hit, then work through the hit's neighbours.

    Neighbours of every hit go into one FIFO queue. Queue entries are not
    tied to the hit that produced them, so leads from two vessels interleave.
    """

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng
        self._pending: deque[Coordinate] = deque()

    @property
    def pending(self) -> tuple[Coordinate, ...]:
        return tuple(self._pending)

    @property
    def mode(self) -> TargetingMode:
        return TargetingMode.TARGETING if self._pending else TargetingMode.HUNTING

    def next_target(self, grid: Grid) -> tuple[Coordinate, TargetingMode]:
        """Pick the next cell to fire at on ``grid`` and the mode that chose it."""
        while self._pending:
            candidate = self._pending.popleft()
            # Someone else may have fired here since it was queued.
            if not grid.has_been_shot(candidate.x, candidate.y):
                return candidate, TargetingMode.TARGETING
            logger.debug("stale_target_discarded", extra={"x": candidate.x, "y": candidate.y})
        return self._hunt(grid), TargetingMode.HUNTING

    def record_hit(self, grid: Grid, coord: Coordinate) -> list[Coordinate]:
        """Queue the unexplored orthogonal neighbours of a hit; returns those added."""
        added: list[Coordinate] = []
        for neighbour in coord.neighbours():
            if not grid.is_valid_coordinate(neighbour):
                continue
            if neighbour in self._pending:
                continue
            if grid.has_been_shot(neighbour.x, neighbour.y):
                continue
            self._pending.append(neighbour)
            added.append(neighbour)
        return added

    def _hunt(self, grid: Grid) -> Coordinate:
        if grid.shot_count() >= grid.size * grid.size:
            raise GridExhaustedError("Every cell of the opponent grid has already been shot.")
        while True:
            x = self._rng.randrange(grid.size)
            y = self._rng.randrange(grid.size)
            if not grid.has_been_shot(x, y):
                return Coordinate(x, y)


class Combatant:
    """A named participant with its own grid.

    ``kind`` only tells the driving loop whether to ask a person for
    coordinates (``fire_at``) or to call ``automated_attack``.
    """

    def __init__(
        self,
        name: str,
        kind: CombatantKind | str = CombatantKind.HUMAN,
        *,
        grid_size: int = 10,
        rng: random.Random | None = None,
    ) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidNameError("Combatant name must be a non-empty string.")
        try:
            kind = CombatantKind(kind)
        except ValueError as exc:
            raise InvalidKindError(
                f"Combatant kind must be 'human' or 'automated', got {kind!r}."
            ) from exc

        self.name = name
        self.kind = kind
        self.grid = Grid(size=grid_size, owner=name)
        self._rng = rng if rng is not None else random.Random()
        self._strategy: HuntTargetStrategy | None = None

    def __repr__(self) -> str:
        return f"Combatant(name={self.name!r}, kind={self.kind.value!r})"

    @property
    def is_human(self) -> bool:
        return self.kind is CombatantKind.HUMAN

    @property
    def is_automated(self) -> bool:
        return self.kind is CombatantKind.AUTOMATED

    @property
    def pending_targets(self) -> tuple[Coordinate, ...] | None:
        """Snapshot of queued leads, or None before the first automated attack."""
        if self._strategy is None:
            return None
        return self._strategy.pending

    @property
    def targeting_mode(self) -> TargetingMode:
        if self._strategy is None:
            return TargetingMode.HUNTING
        return self._strategy.mode

    def fire_at(self, opponent: Combatant, x: int, y: int) -> AttackResult:
        """Fire at ``(x, y)`` on the opponent's grid and return its verdict."""
        self._check_opponent(opponent)
        return opponent.grid.receive_attack(x, y)

    def has_lost(self) -> bool:
        return self.grid.all_vessels_destroyed()

    def automated_attack(self, opponent: Combatant) -> AttackReport:
        """Choose a target with the hunt/target strategy and fire at it."""
        self._check_opponent(opponent)
        if self._strategy is None:
            self._strategy = HuntTargetStrategy(self._rng)

        with tracer.start_as_current_span("combatant.automated_attack") as span:
            span.set_attribute("attacker", self.name)
            span.set_attribute("defender", opponent.name)
            target, mode = self._strategy.next_target(opponent.grid)
            result = opponent.grid.receive_attack(target.x, target.y)
            queued: list[Coordinate] = []
            if result is AttackResult.HIT:
                queued = self._strategy.record_hit(opponent.grid, target)

            span.set_attribute("targeting.mode", mode.value)
            span.set_attribute("attack.x", target.x)
            span.set_attribute("attack.y", target.y)
            span.set_attribute("attack.outcome", result.value)
            span.set_attribute("targets.pending", len(self._strategy.pending))
            AUTOMATED_ATTACK_COUNTER.add(1, attributes={"mode": mode.value, "outcome": result.value})
            logger.info(
                "automated_attack",
                extra={
                    "attacker": self.name,
                    "defender": opponent.name,
                    "mode": mode.value,
                    "x": target.x,
                    "y": target.y,
                    "outcome": result.value,
                    "queued": len(queued),
                },
            )
            return AttackReport(x=target.x, y=target.y, result=result)

    def _check_opponent(self, opponent: object) -> None:
        if not isinstance(opponent, Combatant):
            logger.error(
                "invalid_opponent",
                extra={"attacker": self.name, "opponent_type": type(opponent).__name__},
            )
            raise InvalidOpponentError(
                f"Opponent must be a Combatant, got {type(opponent).__name__}."
            )
