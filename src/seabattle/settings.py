"""Game settings loaded from the environment."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator, model_validator

_ENV_FIELDS = {
    "grid_size": "SEABATTLE_GRID_SIZE",
    "fleet": "SEABATTLE_FLEET",
    "seed": "SEABATTLE_SEED",
    "automated_turn_delay": "SEABATTLE_TURN_DELAY",
    "max_placement_attempts": "SEABATTLE_MAX_PLACEMENT_ATTEMPTS",
}


class GameSettings(BaseModel):
    """Board size, fleet composition and pacing for a match."""

    grid_size: int = Field(default=10, gt=0)
    fleet: list[int] = Field(default_factory=lambda: [5, 4, 3, 3, 2], min_length=1)
    seed: int | None = None
    automated_turn_delay: float = Field(default=0.0, ge=0.0)
    max_placement_attempts: int = Field(default=100, gt=0)

    @field_validator("fleet", mode="before")
    @classmethod
    def _split_fleet(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("fleet")
    @classmethod
    def _positive_lengths(cls, value: list[int]) -> list[int]:
        if any(length <= 0 for length in value):
            raise ValueError("Vessel lengths must be positive.")
        return value

    @model_validator(mode="after")
    def _fleet_fits(self) -> "GameSettings":
        if max(self.fleet) > self.grid_size:
            raise ValueError(
                f"A vessel of length {max(self.fleet)} cannot fit on a {self.grid_size}x{self.grid_size} grid."
            )
        if sum(self.fleet) > self.grid_size * self.grid_size:
            raise ValueError("The fleet occupies more cells than the grid has.")
        return self

    @classmethod
    def from_env(cls, **overrides: Any) -> "GameSettings":
        """Build settings from `SEABATTLE_*` variables; explicit overrides win."""
        data: Dict[str, Any] = {}
        for field, env_name in _ENV_FIELDS.items():
            value = os.getenv(env_name)
            if value is not None and value.strip():
                data[field] = value.strip()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**data)


@lru_cache(maxsize=1)
def load_settings() -> GameSettings:
    """Load and cache game settings from the environment."""

    return GameSettings.from_env()
