"""Tests for fleet placement during setup."""

import random

import pytest

from seabattle.engine.grid import Grid
from seabattle.engine.placement import (
    PRESET_LAYOUTS,
    STANDARD_FLEET,
    FleetEntry,
    FleetPlacement,
    LayoutSlot,
    fleet_from_lengths,
)
from seabattle.engine.vessel import Orientation


def test_standard_fleet_lengths() -> None:
    assert [entry.length for entry in STANDARD_FLEET] == [5, 4, 3, 3, 2]


def test_step_by_step_placement() -> None:
    grid = Grid()
    placement = FleetPlacement()
    assert placement.current_entry() == FleetEntry("Carrier", 5)

    assert placement.place_current(grid, 8, 0) is False
    assert placement.current_entry().name == "Carrier"

    assert placement.place_current(grid, 0, 0) is True
    assert placement.current_entry().name == "Battleship"
    assert placement.entries()[0].placed

    assert placement.toggle_orientation() is Orientation.VERTICAL
    assert placement.place_current(grid, 9, 1)
    assert grid.placements()[-1].orientation is Orientation.VERTICAL
    assert placement.remaining() == 3


def test_all_placed_and_reset() -> None:
    grid = Grid()
    placement = FleetPlacement()
    for row in range(len(STANDARD_FLEET)):
        assert placement.place_current(grid, 0, row)
    assert placement.all_placed()
    assert placement.current_entry() is None
    assert placement.place_current(grid, 0, 8) is False

    placement.toggle_orientation()
    placement.reset()
    assert not placement.all_placed()
    assert placement.orientation is Orientation.HORIZONTAL
    assert not any(entry.placed for entry in placement.entries())


def test_entries_are_copies() -> None:
    placement = FleetPlacement()
    placement.entries().clear()
    assert len(placement.entries()) == 5


def test_place_randomly_fills_remaining_entries() -> None:
    grid = Grid()
    placement = FleetPlacement()
    placement.place_current(grid, 0, 0)
    placements = placement.place_randomly(grid, random.Random(4))
    assert [p.vessel.length for p in placements] == [4, 3, 3, 2]
    assert placement.all_placed()
    assert len(grid.placements()) == 5


@pytest.mark.parametrize("side", sorted(PRESET_LAYOUTS))
def test_preset_layouts_fit_the_standard_fleet(side: str) -> None:
    grid = Grid()
    placement = FleetPlacement()
    placement.place_preset(grid, PRESET_LAYOUTS[side])
    assert placement.all_placed()
    cells = [cell for p in grid.placements() for cell in p.cells]
    assert len(cells) == len(set(cells)) == 17


def test_preset_layout_must_fit() -> None:
    placement = FleetPlacement([FleetEntry("Destroyer", 2)])
    with pytest.raises(ValueError):
        placement.place_preset(Grid(), [LayoutSlot(9, 9, Orientation.HORIZONTAL)])
    with pytest.raises(ValueError):
        FleetPlacement([FleetEntry("Destroyer", 2)]).place_preset(Grid(), [])


def test_empty_fleet_is_rejected() -> None:
    with pytest.raises(ValueError):
        FleetPlacement([])


def test_fleet_from_lengths_names_standard_entries() -> None:
    fleet = fleet_from_lengths([5, 4, 2])
    assert [entry.name for entry in fleet] == ["Carrier", "Battleship", "Vessel 3"]
