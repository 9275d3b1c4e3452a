"""Headless command-line driver that pits two automated combatants against each other."""

from __future__ import annotations

import argparse
import logging
import random
import time
from collections import Counter
from typing import Sequence

from seabattle.engine.combatant import Combatant, CombatantKind
from seabattle.engine.match import Match, MatchPhase, TurnOutcome
from seabattle.engine.placement import PRESET_LAYOUTS
from seabattle.settings import GameSettings, load_settings
from seabattle.telemetry import init_telemetry

logger = logging.getLogger(__name__)

SIDES = ("Alpha", "Bravo")


def _describe_turn(outcome: TurnOutcome) -> str:
    line = f"{outcome.attacker} fired at ({outcome.x}, {outcome.y}): {outcome.result.value}"
    if outcome.winner:
        line += f" - {outcome.winner} wins"
    return line


def play_match(
    settings: GameSettings,
    rng: random.Random,
    *,
    preset: bool = False,
    verbose: bool = False,
) -> Match:
    """Set up and play one automated match to completion."""
    first, second = (
        Combatant(
            side,
            CombatantKind.AUTOMATED,
            grid_size=settings.grid_size,
            rng=random.Random(rng.randrange(2**32)),
        )
        for side in SIDES
    )
    match = Match(first, second, settings=settings)
    layouts = (PRESET_LAYOUTS["human"], PRESET_LAYOUTS["automated"]) if preset else None
    match.setup(rng=rng, layouts=layouts)

    while match.phase is MatchPhase.IN_PROGRESS:
        if settings.automated_turn_delay:
            time.sleep(settings.automated_turn_delay)
        outcome = match.play_turn()
        if verbose:
            print(_describe_turn(outcome))
    return match


def run(
    games: int,
    settings: GameSettings,
    *,
    preset: bool = False,
    verbose: bool = False,
) -> Counter[str]:
    """Play ``games`` matches and return the number of wins per side."""
    rng = random.Random(settings.seed)
    wins: Counter[str] = Counter()
    total_turns = 0
    for number in range(1, games + 1):
        match = play_match(settings, rng, preset=preset, verbose=verbose)
        state = match.state()
        wins[str(state.winner)] += 1
        total_turns += state.turns
        print(f"Game {number}: {state.winner} won after {state.turns} shots.")

    if games:
        print(
            "Totals: "
            + ", ".join(f"{side}={wins[side]}" for side in SIDES)
            + f", average shots={total_turns / games:.1f}"
        )
    return wins


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate seabattle matches between two automated combatants.")
    parser.add_argument("--games", type=int, default=1, help="Number of matches to play.")
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducibility."
    )
    parser.add_argument("--size", type=int, default=None, help="Grid size (default 10).")
    parser.add_argument(
        "--delay", type=float, default=None, help="Seconds to wait before each automated shot."
    )
    parser.add_argument(
        "--preset",
        action="store_true",
        help="Use the fixed fleet layouts instead of random placement.",
    )
    parser.add_argument("--verbose", action="store_true", help="Print every shot.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.games < 0:
        parser.error("--games must not be negative")

    init_telemetry()
    overrides = {"seed": args.seed, "grid_size": args.size, "automated_turn_delay": args.delay}
    if any(value is not None for value in overrides.values()):
        settings = GameSettings.from_env(**overrides)
    else:
        settings = load_settings()
    if args.preset and (settings.grid_size != 10 or settings.fleet != [5, 4, 3, 3, 2]):
        parser.error("--preset requires the standard 10x10 grid and fleet")
    logger.info("simulation_started", extra={"games": args.games, "seed": settings.seed})
    run(args.games, settings, preset=args.preset, verbose=args.verbose)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
