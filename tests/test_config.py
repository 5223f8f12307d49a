import dataclasses

import pytest

from mountain_rescue.config import DEFAULT_CONFIG, RescueConfig


class TestRescueConfig:
    def test_defaults(self):
        assert DEFAULT_CONFIG.grid_size == 12
        assert DEFAULT_CONFIG.rock_probability == 0.05
        assert DEFAULT_CONFIG.climber_probability == 0.08
        assert DEFAULT_CONFIG.game_duration == 120
        assert DEFAULT_CONFIG.health_depletion_rate == 2
        assert DEFAULT_CONFIG.snow_fall_interval == 2

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.grid_size = 20

    @pytest.mark.parametrize(
        "overrides",
        [
            {"grid_size": 0},
            {"game_duration": 0},
            {"rock_probability": 1.5},
            {"climber_probability": -0.1},
            {"health_depletion_rate": -1},
            {"max_health": 0},
            {"snow_fall_interval": 0},
            {"plow_points": -3},
            {"heal_points": -1},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            RescueConfig(**overrides)
