import pytest

from mountain_rescue.config import CLIMBER, EMPTY, ROCK, SNOW, SNOWPLOW
from mountain_rescue.core import RescueState

SYMBOLS = {".": EMPTY, "s": SNOW, "r": ROCK, "P": SNOWPLOW}


@pytest.fixture
def make_state():
    """
    Build a RescueState from a dict of {(x, y): content} overrides on a snow board.

    Climbers are given as ("climber", health). The state is started unless
    `started=False` is passed.
    """
    def _make(cells=None, size=12, fill=SNOW, started=True, time_left=120):
        grid = [[{"content": fill} for _ in range(size)] for _ in range(size)]
        grid[0][0] = {"content": SNOWPLOW}
        for (x, y), content in (cells or {}).items():
            if isinstance(content, tuple):
                grid[y][x] = {"content": CLIMBER, "health": content[1]}
            else:
                grid[y][x] = {"content": SYMBOLS.get(content, content)}

        total_climbers = sum(1 for row in grid for c in row if c["content"] == CLIMBER)
        total_snow = sum(1 for row in grid for c in row if c["content"] == SNOW)
        state = RescueState(grid, total_climbers, total_snow, time_left=time_left)
        if started:
            state.game_started = True
            state.game_active = True
        return state

    return _make
