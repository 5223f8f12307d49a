from collections import deque

from mountain_rescue import core
from mountain_rescue.config import CARRIER, CLIMBER, SNOWPLOW

# Action index for each (dx, dy) step
MOVE_ACTIONS = {(0, -1): 1, (0, 1): 2, (-1, 0): 3, (1, 0): 4}


def _find_path_bfs(grid, start, is_goal, can_pass):
    """Shortest path from start to the nearest goal cell, excluding start itself."""
    size = len(grid)
    q = deque([start])
    came_from = {start: None}
    while q:
        x, y = q.popleft()
        if (x, y) != start and is_goal(x, y):
            path = []
            node = (x, y)
            while node != start:
                path.append(node)
                node = came_from[node]
            return path[::-1]
        for dx, dy in core.DIRECTIONS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < size and 0 <= ny < size and (nx, ny) not in came_from:
                if is_goal(nx, ny) or can_pass(nx, ny):
                    came_from[(nx, ny)] = (x, y)
                    q.append((nx, ny))
    return None


def _plan(state):
    grid = state.grid
    start = tuple(state.player_pos)

    def is_live_climber(x, y):
        cell = grid[y][x]
        return cell["content"] == CLIMBER and cell["health"] > 0

    def carrier_can_pass(x, y):
        return core.can_enter(CARRIER, grid[y][x]) and grid[y][x]["content"] != CLIMBER

    path = _find_path_bfs(grid, start, is_live_climber, carrier_can_pass)
    if path:
        return CARRIER, path[0]

    # No open route: plow toward the nearest climber, stopping next to it.
    def next_to_climber(x, y):
        return any(
            is_live_climber(x + dx, y + dy)
            for dx, dy in core.DIRECTIONS
            if 0 <= x + dx < len(grid) and 0 <= y + dy < len(grid)
        )

    def plow_can_pass(x, y):
        return core.can_enter(SNOWPLOW, grid[y][x])

    path = _find_path_bfs(grid, start, lambda x, y: next_to_climber(x, y) and plow_can_pass(x, y), plow_can_pass)
    if path:
        return SNOWPLOW, path[0]
    return None, None


def policy(env):
    # Strategy: press start, then rescue the nearest live climber. When a climber is
    # reachable over cleared ground, switch to carrier and walk the BFS path to it;
    # otherwise switch to snowplow and dig a path toward the nearest one.
    state = env.state
    if state.phase == core.PHASE_NOT_STARTED:
        return [0, 0 if env.last_space_held else 1, 0]
    if state.phase == core.PHASE_ENDED:
        return [0, 0, 0]

    role, step = _plan(state)
    if role is None:
        return [0, 0, 0]  # Nothing left to reach

    if role != state.role:
        return [0, 0, 0 if env.last_shift_held else 1]

    x, y = state.player_pos
    return [MOVE_ACTIONS[(step[0] - x, step[1] - y)], 0, 0]
