"""
Simulation core for Mountain Rescue.

All game rules live here as plain functions over an explicit `RescueState`.
Functions mutate the state they are given; randomness always comes from a
caller-supplied numpy Generator so games can be replayed from a seed.
"""

import logging

import numpy as np

from mountain_rescue.config import (
    CARRIER,
    CLIMBER,
    DEFAULT_CONFIG,
    EMPTY,
    MEDIC,
    ROCK,
    ROLES,
    SNOW,
    SNOWPLOW,
)

logger = logging.getLogger(__name__)

DIRECTIONS = ((0, -1), (0, 1), (-1, 0), (1, 0))

PHASE_NOT_STARTED = "not_started"
PHASE_ACTIVE = "active"
PHASE_ENDED = "ended"


class RescueState:
    def __init__(self, grid, total_climbers=0, total_snow=0, time_left=DEFAULT_CONFIG.game_duration):
        self.grid = grid
        self.player_pos = [0, 0]
        self.role = SNOWPLOW

        self.score = 0
        self.time_left = time_left
        self.game_active = False
        self.game_started = False

        self.total_climbers = total_climbers
        self.rescued_climbers = 0
        self.total_rescued_health = 0
        self.snow_plowed = 0
        self.total_snow = total_snow

    @property
    def size(self):
        return len(self.grid)

    @property
    def running(self):
        return self.game_active and self.game_started

    @property
    def phase(self):
        if not self.game_started:
            return PHASE_NOT_STARTED
        if self.game_active:
            return PHASE_ACTIVE
        return PHASE_ENDED

    def cell(self, x, y):
        return self.grid[y][x]

    def __repr__(self):
        return (
            f"RescueState(phase={self.phase}, pos={tuple(self.player_pos)}, role={self.role}, "
            f"score={self.score}, time_left={self.time_left})"
        )


# --- Grid Generator ---

def generate_grid(rng=None, config=DEFAULT_CONFIG):
    """
    Build a fresh board.

    Each cell is independently a rock, a full-health climber or snow. The
    top-left cell is always the snowplow's starting spot. Returns the grid
    together with the number of climbers and snow cells on it, counted after
    the top-left cell is overwritten.
    """
    if rng is None:
        rng = np.random.default_rng()

    size = config.grid_size
    grid = []
    for _ in range(size):
        row = []
        for _ in range(size):
            if rng.random() < config.rock_probability:
                row.append({"content": ROCK})
            elif rng.random() < config.climber_probability:
                row.append({"content": CLIMBER, "health": config.max_health})
            else:
                row.append({"content": SNOW})
        grid.append(row)
    grid[0][0] = {"content": SNOWPLOW}

    total_climbers = sum(1 for row in grid for cell in row if cell["content"] == CLIMBER)
    total_snow = sum(1 for row in grid for cell in row if cell["content"] == SNOW)
    return grid, total_climbers, total_snow


def new_game(rng=None, config=DEFAULT_CONFIG):
    grid, total_climbers, total_snow = generate_grid(rng, config)
    return RescueState(grid, total_climbers, total_snow, time_left=config.game_duration)


# --- Phase transitions ---

def start_game(state):
    if state.game_started:
        return False
    state.game_started = True
    state.game_active = True
    logger.info("Game started with %d climbers on the mountain", state.total_climbers)
    return True


def next_role(role):
    return ROLES[(ROLES.index(role) + 1) % len(ROLES)]


def set_role(state, role):
    if role not in ROLES:
        raise ValueError(f"Unknown role {role!r}, expected one of {', '.join(ROLES)}")
    if state.phase == PHASE_ENDED:
        return False
    state.role = role
    return True


def _end_game(state, reason):
    state.game_active = False
    logger.info(
        "Game over (%s): score=%d rescued=%d/%d",
        reason, state.score, state.rescued_climbers, state.total_climbers,
    )


# --- End Condition Evaluator ---

def live_climbers(grid):
    return sum(
        1 for row in grid for cell in row
        if cell["content"] == CLIMBER and cell["health"] > 0
    )


def is_game_over(state):
    return state.time_left <= 0 or live_climbers(state.grid) == 0


# --- Tick Engine ---

def tick(state, config=DEFAULT_CONFIG):
    """Advance one second. Returns True while the game keeps running."""
    if not state.running:
        return False

    state.time_left -= 1
    if state.time_left <= 0 or is_game_over(state):
        state.time_left = 0
        reason = "time up" if live_climbers(state.grid) else "no climbers left"
        _end_game(state, reason)
        return False

    for row in state.grid:
        for cell in row:
            if cell["content"] == CLIMBER and cell["health"] > 0:
                cell["health"] = max(0, cell["health"] - config.health_depletion_rate)
    return True


def fall_snow(state, rng=None):
    """Cover one random empty cell with fresh snow."""
    if not state.running:
        return None
    if rng is None:
        rng = np.random.default_rng()

    empty_cells = [
        (x, y)
        for y, row in enumerate(state.grid)
        for x, cell in enumerate(row)
        if cell["content"] == EMPTY
    ]
    if not empty_cells:
        return None

    x, y = empty_cells[int(rng.integers(len(empty_cells)))]
    state.grid[y][x] = {"content": SNOW}
    state.total_snow += 1
    logger.debug("Snow fell at (%d, %d)", x, y)
    return x, y


# --- Movement Resolver ---

def can_enter(role, cell):
    content = cell["content"]
    if content == ROCK:
        return False
    if content == SNOW and role != SNOWPLOW:
        return False
    if content == CLIMBER and role not in (MEDIC, CARRIER):
        return False
    return True


def move_player(state, dx, dy, config=DEFAULT_CONFIG):
    """Try to move the player one cell. Returns the points scored."""
    if not state.running or (dx, dy) not in DIRECTIONS:
        return 0

    x, y = state.player_pos
    last = state.size - 1
    new_x = max(0, min(last, x + dx))
    new_y = max(0, min(last, y + dy))
    if (new_x, new_y) == (x, y):
        return 0

    target = state.grid[new_y][new_x]
    if not can_enter(state.role, target):
        logger.debug("%s cannot enter %s at (%d, %d)", state.role, target["content"], new_x, new_y)
        return 0

    current = state.grid[y][x]
    if current["content"] != CLIMBER:
        state.grid[y][x] = {"content": EMPTY}

    points = 0
    if state.role == SNOWPLOW and target["content"] == SNOW:
        state.grid[new_y][new_x] = {"content": EMPTY}
        points = config.plow_points
        state.snow_plowed += 1
    elif state.role == MEDIC and target["content"] == CLIMBER:
        target["health"] = config.max_health
        points = config.heal_points
    elif state.role == CARRIER and target["content"] == CLIMBER:
        health = target["health"]
        points = health
        state.rescued_climbers += 1
        state.total_rescued_health += health
        state.grid[new_y][new_x] = {"content": EMPTY}

    state.score += points
    state.player_pos = [new_x, new_y]

    if is_game_over(state):
        _end_game(state, "no climbers left" if state.time_left > 0 else "time up")
    return points


# --- Summary ---

def average_rescued_health(state):
    if state.rescued_climbers == 0:
        return 0
    return round(state.total_rescued_health / state.rescued_climbers, 2)


def format_time(seconds):
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


def summary(state):
    """Final numbers for the game-over screen, or None while the game is still on."""
    if state.phase != PHASE_ENDED:
        return None
    return {
        "score": state.score,
        "rescued_climbers": state.rescued_climbers,
        "total_climbers": state.total_climbers,
        "average_rescued_health": average_rescued_health(state),
        "snow_plowed": state.snow_plowed,
        "total_snow": state.total_snow,
        "time_left": state.time_left,
        "time_remaining": format_time(state.time_left),
    }
