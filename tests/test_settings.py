"""Tests for environment-driven game settings."""

import pytest
from pydantic import ValidationError

from seabattle import settings as settings_module
from seabattle.settings import GameSettings


def test_defaults() -> None:
    settings = GameSettings()
    assert settings.grid_size == 10
    assert settings.fleet == [5, 4, 3, 3, 2]
    assert settings.seed is None
    assert settings.automated_turn_delay == 0.0


def test_from_env_reads_prefixed_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEABATTLE_GRID_SIZE", "8")
    monkeypatch.setenv("SEABATTLE_FLEET", "4, 3,2")
    monkeypatch.setenv("SEABATTLE_SEED", "17")
    monkeypatch.setenv("SEABATTLE_TURN_DELAY", "0.5")

    settings = GameSettings.from_env()
    assert settings.grid_size == 8
    assert settings.fleet == [4, 3, 2]
    assert settings.seed == 17
    assert settings.automated_turn_delay == 0.5


def test_overrides_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEABATTLE_SEED", "17")
    assert GameSettings.from_env(seed=3).seed == 3
    assert GameSettings.from_env(seed=None).seed == 17


@pytest.mark.parametrize(
    "kwargs",
    [
        {"grid_size": 0},
        {"fleet": []},
        {"fleet": [3, 0]},
        {"grid_size": 4, "fleet": [5]},
        {"grid_size": 2, "fleet": [2, 2, 2]},
        {"automated_turn_delay": -1},
    ],
)
def test_invalid_settings_are_rejected(kwargs: dict) -> None:
    with pytest.raises(ValidationError):
        GameSettings(**kwargs)


def test_load_settings_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    settings_module.load_settings.cache_clear()
    monkeypatch.setenv("SEABATTLE_GRID_SIZE", "12")
    first = settings_module.load_settings()
    monkeypatch.setenv("SEABATTLE_GRID_SIZE", "6")
    assert settings_module.load_settings() is first
    assert first.grid_size == 12
    settings_module.load_settings.cache_clear()
