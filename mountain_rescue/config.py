"""Tunable constants for the rescue simulation."""

from dataclasses import dataclass


# Cell contents
EMPTY = "empty"
SNOWPLOW = "snowplow"
MEDIC = "medic"
CARRIER = "carrier"
SNOW = "snow"
CLIMBER = "climber"
ROCK = "rock"

ROLES = (SNOWPLOW, MEDIC, CARRIER)


@dataclass(frozen=True)
class RescueConfig:
    grid_size: int = 12
    rock_probability: float = 0.05
    climber_probability: float = 0.08
    game_duration: int = 120  # seconds
    health_depletion_rate: int = 2  # per tick
    max_health: int = 100
    snow_fall_interval: int = 2  # seconds
    plow_points: int = 1
    heal_points: int = 5

    def __post_init__(self):
        if self.grid_size < 1:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        if self.game_duration < 1:
            raise ValueError(f"game_duration must be positive, got {self.game_duration}")
        for name in ("rock_probability", "climber_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if self.health_depletion_rate < 0:
            raise ValueError("health_depletion_rate must be non-negative")
        if self.max_health < 1:
            raise ValueError("max_health must be positive")
        if self.snow_fall_interval < 1:
            raise ValueError("snow_fall_interval must be at least one second")
        for name in ("plow_points", "heal_points"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")


DEFAULT_CONFIG = RescueConfig()
