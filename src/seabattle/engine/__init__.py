"""Game-state engine: vessels, grids, combatants and the match driver."""

from .combatant import AttackReport, Combatant, CombatantKind, HuntTargetStrategy, TargetingMode
from .errors import (
    FleetPlacementError,
    GridExhaustedError,
    InvalidArgumentError,
    InvalidKindError,
    InvalidLengthError,
    InvalidNameError,
    InvalidOpponentError,
    OutOfBoundsError,
)
from .grid import AttackResult, CellState, Grid, Placement
from .match import Match, MatchPhase, MatchState, TurnOutcome
from .placement import PRESET_LAYOUTS, STANDARD_FLEET, FleetEntry, FleetPlacement, LayoutSlot
from .vessel import Coordinate, Orientation, Vessel

__all__ = [
    "AttackReport",
    "AttackResult",
    "CellState",
    "Combatant",
    "CombatantKind",
    "Coordinate",
    "FleetEntry",
    "FleetPlacement",
    "FleetPlacementError",
    "Grid",
    "GridExhaustedError",
    "HuntTargetStrategy",
    "InvalidArgumentError",
    "InvalidKindError",
    "InvalidLengthError",
    "InvalidNameError",
    "InvalidOpponentError",
    "LayoutSlot",
    "Match",
    "MatchPhase",
    "MatchState",
    "Orientation",
    "OutOfBoundsError",
    "Placement",
    "PRESET_LAYOUTS",
    "STANDARD_FLEET",
    "TargetingMode",
    "TurnOutcome",
    "Vessel",
]
