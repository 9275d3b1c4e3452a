"""Tests for the Grid mechanics."""

import random

import pytest

from seabattle.engine.errors import FleetPlacementError, InvalidArgumentError, OutOfBoundsError
from seabattle.engine.grid import AttackResult, CellState, Grid
from seabattle.engine.vessel import Coordinate, Orientation, Vessel


def test_two_cell_vessel_is_sunk_then_repeat_fire_is_already_shot() -> None:
    grid = Grid()
    vessel = Vessel(2)
    assert grid.place_vessel(vessel, 0, 0, "horizontal") is True
    assert grid.placements()[0].cells == (Coordinate(0, 0), Coordinate(1, 0))

    assert grid.receive_attack(0, 0) is AttackResult.HIT
    assert not grid.all_vessels_destroyed()
    assert grid.receive_attack(1, 0) is AttackResult.HIT
    assert grid.all_vessels_destroyed()
    assert grid.receive_attack(0, 0) is AttackResult.ALREADY_SHOT


def test_placement_running_off_the_grid_is_rejected() -> None:
    grid = Grid(size=10)
    assert grid.place_vessel(Vessel(3), 8, 0, Orientation.HORIZONTAL) is False
    assert grid.placements() == []


def test_placement_start_off_the_grid_is_rejected() -> None:
    grid = Grid()
    assert grid.place_vessel(Vessel(2), -1, 0) is False
    assert grid.place_vessel(Vessel(2), 0, 10, Orientation.VERTICAL) is False
    assert grid.placements() == []


def test_colliding_placement_is_rejected() -> None:
    grid = Grid()
    assert grid.place_vessel(Vessel(3), 2, 2, Orientation.HORIZONTAL)
    assert grid.place_vessel(Vessel(3), 3, 0, Orientation.VERTICAL) is False
    assert len(grid.placements()) == 1


def test_adjacent_placement_is_allowed() -> None:
    grid = Grid()
    assert grid.place_vessel(Vessel(3), 0, 0, Orientation.HORIZONTAL)
    assert grid.place_vessel(Vessel(3), 0, 1, Orientation.HORIZONTAL)
    assert grid.place_vessel(Vessel(2), 3, 0, Orientation.VERTICAL)


def test_same_vessel_cannot_be_placed_twice() -> None:
    grid = Grid()
    vessel = Vessel(2)
    assert grid.place_vessel(vessel, 0, 0)
    assert grid.place_vessel(vessel, 5, 5) is False
    assert len(grid.placements()) == 1


def test_place_vessel_rejects_malformed_arguments() -> None:
    grid = Grid()
    with pytest.raises(InvalidArgumentError):
        grid.place_vessel(Vessel(2), 0, 0, "diagonal")
    with pytest.raises(InvalidArgumentError):
        grid.place_vessel("carrier", 0, 0)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        grid.place_vessel(Vessel(2), 0.5, 0)  # type: ignore[arg-type]


@pytest.mark.parametrize("size", [0, -3, 2.0])
def test_grid_rejects_invalid_size(size: object) -> None:
    with pytest.raises(InvalidArgumentError):
        Grid(size=size)  # type: ignore[arg-type]


def test_attack_out_of_bounds_raises() -> None:
    grid = Grid()
    with pytest.raises(OutOfBoundsError):
        grid.receive_attack(10, 0)
    with pytest.raises(OutOfBoundsError):
        grid.receive_attack(0, -1)
    assert grid.hits() == [] and grid.misses() == []


def test_repeat_fire_does_not_mutate_history_or_damage() -> None:
    grid = Grid()
    vessel = Vessel(3)
    grid.place_vessel(vessel, 4, 4, Orientation.VERTICAL)

    assert grid.receive_attack(4, 4) is AttackResult.HIT
    assert grid.receive_attack(0, 0) is AttackResult.MISS
    hits, misses = grid.hits(), grid.misses()

    for _ in range(3):
        assert grid.receive_attack(4, 4) is AttackResult.ALREADY_SHOT
        assert grid.receive_attack(0, 0) is AttackResult.ALREADY_SHOT

    assert grid.hits() == hits == [Coordinate(4, 4)]
    assert grid.misses() == misses == [Coordinate(0, 0)]
    assert vessel.damage == 1


def test_hit_and_miss_histories_are_disjoint() -> None:
    grid = Grid()
    grid.random_placement([5, 4, 3, 3, 2], random.Random(7))
    rng = random.Random(11)
    for _ in range(300):
        grid.receive_attack(rng.randrange(10), rng.randrange(10))
    assert not set(grid.hits()) & set(grid.misses())
    occupied = {cell for placement in grid.placements() for cell in placement.cells}
    assert set(grid.hits()) <= occupied


def test_empty_grid_is_never_defeated() -> None:
    assert Grid().all_vessels_destroyed() is False


def test_accessors_return_copies() -> None:
    grid = Grid()
    grid.place_vessel(Vessel(2), 0, 0)
    grid.receive_attack(0, 0)
    grid.receive_attack(9, 9)

    grid.hits().clear()
    grid.misses().append(Coordinate(3, 3))
    grid.placements().clear()

    assert grid.hits() == [Coordinate(0, 0)]
    assert grid.misses() == [Coordinate(9, 9)]
    assert len(grid.placements()) == 1


def test_cell_state_and_queries() -> None:
    grid = Grid(size=3)
    vessel = Vessel(2)
    grid.place_vessel(vessel, 1, 1, Orientation.VERTICAL)
    assert grid.cell_state(1, 1) is CellState.UNKNOWN
    grid.receive_attack(1, 1)
    grid.receive_attack(0, 0)
    assert grid.cell_state(1, 1) is CellState.HIT
    assert grid.cell_state(0, 0) is CellState.MISS
    assert grid.has_been_shot(1, 1)
    assert grid.vessel_at(1, 2) is vessel
    assert grid.vessel_at(2, 2) is None
    assert grid.vessels_remaining() == 1
    assert len(grid.unshot_cells()) == 7
    assert grid.shot_count() == 2


def test_random_placement_populates_fleet_without_overlap() -> None:
    grid = Grid()
    placements = grid.random_placement([5, 4, 3, 3, 2], random.Random(123))
    assert [p.vessel.length for p in placements] == [5, 4, 3, 3, 2]
    cells = [cell for p in grid.placements() for cell in p.cells]
    assert len(cells) == len(set(cells)) == 17
    assert all(grid.is_valid_coordinate(cell) for cell in cells)


def test_random_placement_gives_up_after_max_attempts() -> None:
    grid = Grid(size=2)
    with pytest.raises(FleetPlacementError):
        grid.random_placement([3], random.Random(0), max_attempts=20)
    assert grid.placements() == []


def test_failed_random_placement_removes_vessels_it_placed() -> None:
    grid = Grid(size=3)
    grid.place_vessel(Vessel(1), 2, 2)
    before = grid.placements()

    with pytest.raises(FleetPlacementError):
        grid.random_placement([2, 2, 3, 3, 3], random.Random(5), max_attempts=30)

    assert grid.placements() == before
    free = [cell for cell in grid.unshot_cells() if cell != Coordinate(2, 2)]
    assert grid.can_place(free)
    assert grid.vessel_at(0, 0) is None
