"""Two-combatant match driver: turn order and win detection."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Sequence

from seabattle.settings import GameSettings
from seabattle.telemetry import get_tracer, record_game_metric

from .combatant import AttackReport, Combatant
from .grid import AttackResult, Grid
from .placement import FleetPlacement, LayoutSlot, fleet_from_lengths
from .vessel import Coordinate

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.match")


class MatchPhase(Enum):
    """High-level lifecycle of a match."""

    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(frozen=True)
class TurnOutcome:
    """Result of one turn as seen by the driving layer."""

    attacker: str
    x: int
    y: int
    result: AttackResult
    winner: str | None = None


@dataclass(frozen=True)
class GridSnapshot:
    """Read-only view of a grid for state queries."""

    vessels: tuple[tuple[Coordinate, ...], ...]
    hits: tuple[Coordinate, ...]
    misses: tuple[Coordinate, ...]
    vessels_remaining: int

    @classmethod
    def of(cls, grid: Grid) -> GridSnapshot:
        return cls(
            vessels=tuple(placement.cells for placement in grid.placements()),
            hits=tuple(grid.hits()),
            misses=tuple(grid.misses()),
            vessels_remaining=grid.vessels_remaining(),
        )


@dataclass(frozen=True)
class MatchState:
    """Immutable snapshot of the current match."""

    phase: MatchPhase
    current: str
    winner: str | None
    turns: int
    grids: Mapping[str, GridSnapshot]


class Match:
    """Alternates turns between two combatants until one fleet is destroyed."""

    def __init__(
        self,
        first: Combatant,
        second: Combatant,
        *,
        settings: GameSettings | None = None,
    ) -> None:
        if not isinstance(first, Combatant) or not isinstance(second, Combatant):
            raise TypeError("A match is played between two Combatant instances.")
        if first is second or first.name == second.name:
            raise ValueError("A match needs two distinct combatants.")
        if first.grid.size != second.grid.size:
            raise ValueError(
                f"Grid sizes differ: {first.name} has {first.grid.size}, "
                f"{second.name} has {second.grid.size}."
            )
        self.settings = settings
        self.combatants: tuple[Combatant, Combatant] = (first, second)
        self.phase = MatchPhase.SETUP
        self.current: Combatant = first
        self.winner: Combatant | None = None
        self.turns = 0

    def opponent_of(self, combatant: Combatant) -> Combatant:
        first, second = self.combatants
        return second if combatant is first else first

    def setup(
        self,
        rng: random.Random | None = None,
        layouts: Sequence[Sequence[LayoutSlot]] | None = None,
    ) -> None:
        """Place a fleet on both grids and start the match.

        Without explicit settings the default fleet is used on the
        combatants' grid size. Settings for a different grid size raise
        ValueError.
        """
        size = self.combatants[0].grid.size
        settings = self.settings or GameSettings(grid_size=size)
        if settings.grid_size != size:
            raise ValueError(
                f"Settings are for a {settings.grid_size}x{settings.grid_size} grid, "
                f"but the combatants play on {size}x{size}."
            )
        self.settings = settings
        with tracer.start_as_current_span("match.setup") as span:
            fleet = fleet_from_lengths(settings.fleet)
            rng = rng or random.Random(settings.seed)
            for index, combatant in enumerate(self.combatants):
                placement = FleetPlacement(fleet)
                if layouts is not None:
                    placement.place_preset(combatant.grid, layouts[index])
                else:
                    placement.place_randomly(combatant.grid, rng, settings.max_placement_attempts)
            span.set_attribute("fleet.size", len(fleet))
            span.set_attribute("layout", "preset" if layouts is not None else "random")
            self.start()

    def start(self) -> None:
        for combatant in self.combatants:
            if not combatant.grid.placements():
                raise RuntimeError(f"{combatant.name} has no vessels on their grid.")
        self.phase = MatchPhase.IN_PROGRESS
        self.current = self.combatants[0]
        self.winner = None
        logger.info(
            "match_started",
            extra={"phase": self.phase.value, "current_player": self.current.name},
        )

    def play_human_turn(self, x: int, y: int) -> TurnOutcome:
        """Fire the current combatant's shot at ``(x, y)``.

        A repeated shot is reported back without passing the turn.
        """
        with tracer.start_as_current_span("match.human_turn") as span:
            attacker = self._require_in_progress()
            span.set_attribute("attacker", attacker.name)
            result = attacker.fire_at(self.opponent_of(attacker), x, y)
            return self._resolve(attacker, x, y, result)

    def play_automated_turn(self) -> TurnOutcome:
        with tracer.start_as_current_span("match.automated_turn") as span:
            attacker = self._require_in_progress()
            span.set_attribute("attacker", attacker.name)
            report: AttackReport = attacker.automated_attack(self.opponent_of(attacker))
            return self._resolve(attacker, report.x, report.y, report.result)

    def play_turn(self) -> TurnOutcome:
        """Play one turn for an automated current combatant."""
        if not self.current.is_automated:
            raise RuntimeError(f"{self.current.name} is human-controlled; use play_human_turn.")
        return self.play_automated_turn()

    def run_automated(self, max_turns: int | None = None) -> Combatant:
        """Play automated turns until someone wins; returns the winner."""
        cells = sum(c.grid.size * c.grid.size for c in self.combatants)
        limit = max_turns if max_turns is not None else cells
        while self.winner is None:
            if self.turns >= limit:
                raise RuntimeError(f"Match did not finish within {limit} turns.")
            self.play_automated_turn()
        return self.winner

    def state(self) -> MatchState:
        """Return an immutable view of the current match."""
        return MatchState(
            phase=self.phase,
            current=self.current.name,
            winner=self.winner.name if self.winner else None,
            turns=self.turns,
            grids=MappingProxyType({c.name: GridSnapshot.of(c.grid) for c in self.combatants}),
        )

    def _require_in_progress(self) -> Combatant:
        if self.phase is not MatchPhase.IN_PROGRESS:
            logger.error("turn_rejected_match_not_in_progress", extra={"phase": self.phase.value})
            raise RuntimeError("Match is not in progress.")
        return self.current

    def _resolve(self, attacker: Combatant, x: int, y: int, result: AttackResult) -> TurnOutcome:
        if result is AttackResult.ALREADY_SHOT:
            return TurnOutcome(attacker=attacker.name, x=x, y=y, result=result)

        self.turns += 1
        record_game_metric(
            "seabattle_match_shots_total",
            1,
            {"attacker": attacker.name, "result": result.value},
        )
        for combatant in self.combatants:
            if combatant.has_lost():
                self.winner = self.opponent_of(combatant)
                self.phase = MatchPhase.FINISHED
                record_game_metric("seabattle_match_completed_total", 1, {"winner": self.winner.name})
                logger.info(
                    "match_finished",
                    extra={"winner": self.winner.name, "turns": self.turns},
                )
                return TurnOutcome(
                    attacker=attacker.name, x=x, y=y, result=result, winner=self.winner.name
                )

        self.current = self.opponent_of(attacker)
        return TurnOutcome(attacker=attacker.name, x=x, y=y, result=result)
