from mountain_rescue.config import DEFAULT_CONFIG, ROLES, RescueConfig
from mountain_rescue.core import RescueState, new_game
from mountain_rescue.env import GameEnv

__all__ = ["DEFAULT_CONFIG", "ROLES", "RescueConfig", "RescueState", "new_game", "GameEnv"]
