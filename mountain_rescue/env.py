import os

import gymnasium as gym
from gymnasium.spaces import MultiDiscrete
import numpy as np
import pygame
import pygame.gfxdraw

from mountain_rescue import core
from mountain_rescue.config import (
    CARRIER,
    CLIMBER,
    DEFAULT_CONFIG,
    MEDIC,
    ROCK,
    ROLES,
    SNOW,
    SNOWPLOW,
)
from mountain_rescue.timers import PeriodicTimer

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")


class GameEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    user_guide = (
        "Controls: Arrow keys move. Space starts the game. Shift cycles the role "
        "(snowplow, medic, carrier)."
    )

    game_description = (
        "A mountain rescue race. Plow through snow, heal stranded climbers and carry "
        "them to safety before the clock runs out or the climbers perish."
    )

    auto_advance = True

    # --- Constants ---
    SCREEN_WIDTH = 640
    SCREEN_HEIGHT = 400
    FPS = 30
    MAX_CELL_SIZE = 30
    GRID_ORIGIN = (20, 20)
    GRID_AREA = 360  # square area left of the side panel
    PANEL_X = 410
    MOVE_COOLDOWN_FRAMES = 4

    COLOR_BG = (30, 40, 70)
    COLOR_EMPTY = (200, 220, 245)
    COLOR_SNOW = (250, 250, 255)
    COLOR_ROCK = (110, 110, 120)
    COLOR_CLIMBER = (80, 190, 100)
    COLOR_DEFEATED = (60, 60, 60)
    COLOR_HEALTH_BG = (220, 220, 220)
    COLOR_HEALTH = (220, 50, 50)
    COLOR_TEXT = (230, 235, 255)
    COLOR_HIGHLIGHT = (255, 255, 255)

    ROLE_COLORS = {
        SNOWPLOW: (70, 140, 235),
        MEDIC: (230, 80, 80),
        CARRIER: (240, 200, 60),
    }

    def __init__(self, render_mode="rgb_array", config=None):
        super().__init__()

        self.render_mode = render_mode
        self.config = config or DEFAULT_CONFIG
        self.cell_size = max(4, min(self.MAX_CELL_SIZE, self.GRID_AREA // self.config.grid_size))

        self.observation_space = gym.spaces.Box(
            low=0, high=255, shape=(self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3), dtype=np.uint8
        )
        self.action_space = MultiDiscrete([5, 2, 2])

        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT))
        self.clock = pygame.time.Clock()
        self.font_large = pygame.font.Font(None, 44)
        self.font_medium = pygame.font.Font(None, 28)
        self.font_small = pygame.font.Font(None, 22)

        self.state = None
        self.steps = 0
        self.tick_timer = None
        self.snow_timer = None
        self.move_cooldown = 0
        self.last_space_held = False
        self.last_shift_held = False

        self.reset()

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        self._cancel_timers()

        self.state = core.new_game(self.np_random, self.config)
        if options and "role" in options:
            core.set_role(self.state, options["role"])

        self.steps = 0
        self.move_cooldown = 0
        self.last_space_held = False
        self.last_shift_held = False

        return self._get_observation(), self._get_info()

    def step(self, action):
        if self.state.phase == core.PHASE_ENDED:
            return self._get_observation(), 0, True, False, self._get_info()

        score_before = self.state.score
        self.steps += 1

        self._handle_input(action)
        self._update_timers()

        if self.state.phase == core.PHASE_ENDED:
            self._cancel_timers()

        reward = self.state.score - score_before
        terminated = self.state.phase == core.PHASE_ENDED

        return self._get_observation(), reward, terminated, False, self._get_info()

    # --- Intents ---

    def start(self):
        if core.start_game(self.state):
            self.tick_timer = PeriodicTimer(self.FPS)
            self.snow_timer = PeriodicTimer(self.FPS * self.config.snow_fall_interval)

    def select_role(self, role):
        return core.set_role(self.state, role)

    def _handle_input(self, action):
        movement, space_held, shift_held = action[0], action[1] == 1, action[2] == 1

        if space_held and not self.last_space_held:
            self.start()

        if shift_held and not self.last_shift_held:
            self.select_role(core.next_role(self.state.role))

        self.last_space_held = space_held
        self.last_shift_held = shift_held

        if self.move_cooldown > 0:
            self.move_cooldown -= 1
        if self.move_cooldown > 0 or movement == 0:
            return

        # 1=up, 2=down, 3=left, 4=right
        dx, dy = core.DIRECTIONS[movement - 1]
        core.move_player(self.state, dx, dy, self.config)
        self.move_cooldown = self.MOVE_COOLDOWN_FRAMES

    def _update_timers(self):
        if not self.state.running:
            return
        for _ in range(self.tick_timer.advance()):
            core.tick(self.state, self.config)
        if not self.state.running:
            return
        for _ in range(self.snow_timer.advance()):
            core.fall_snow(self.state, self.np_random)

    def _cancel_timers(self):
        for timer in (self.tick_timer, self.snow_timer):
            if timer is not None:
                timer.cancel()
        self.tick_timer = None
        self.snow_timer = None

    def _get_observation(self):
        self.screen.fill(self.COLOR_BG)
        self._render_game()
        self._render_ui()

        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def render(self):
        return self._get_observation()

    def _get_info(self):
        state = self.state
        return {
            "score": state.score,
            "steps": self.steps,
            "time_left": state.time_left,
            "role": state.role,
            "player_pos": tuple(state.player_pos),
            "phase": state.phase,
            "rescued_climbers": state.rescued_climbers,
            "total_climbers": state.total_climbers,
            "live_climbers": core.live_climbers(state.grid),
            "snow_plowed": state.snow_plowed,
            "summary": core.summary(state),
        }

    # --- Rendering Methods ---

    def _render_game(self):
        for y, row in enumerate(self.state.grid):
            for x, cell in enumerate(row):
                self._draw_cell(x, y, cell)
        self._draw_player()

    def _cell_rect(self, x, y, padding=1):
        return pygame.Rect(
            self.GRID_ORIGIN[0] + x * self.cell_size + padding,
            self.GRID_ORIGIN[1] + y * self.cell_size + padding,
            self.cell_size - 2 * padding,
            self.cell_size - 2 * padding,
        )

    def _draw_cell(self, x, y, cell):
        rect = self._cell_rect(x, y)
        content = cell["content"]

        if content == SNOW:
            pygame.draw.rect(self.screen, self.COLOR_SNOW, rect, border_radius=4)
        elif content == ROCK:
            pygame.draw.rect(self.screen, self.COLOR_ROCK, rect, border_radius=4)
        elif content == CLIMBER:
            pygame.draw.rect(self.screen, self.COLOR_CLIMBER, rect, border_radius=4)
            if cell["health"] > 0:
                self._draw_climber(rect, cell["health"])
            else:
                self._draw_defeated(rect)
        elif content in self.ROLE_COLORS:
            pygame.draw.rect(self.screen, self.ROLE_COLORS[content], rect, border_radius=4)
        else:
            pygame.draw.rect(self.screen, self.COLOR_EMPTY, rect, border_radius=4)

    def _draw_climber(self, rect, health):
        cx, cy = rect.centerx, rect.centery - 2
        pygame.gfxdraw.filled_circle(self.screen, cx, cy - 4, 4, (250, 220, 180))
        pygame.draw.line(self.screen, (40, 40, 40), (cx, cy), (cx, cy + 8), 2)

        bar = pygame.Rect(rect.left, rect.bottom - 4, rect.width, 4)
        pygame.draw.rect(self.screen, self.COLOR_HEALTH_BG, bar)
        bar.width = int(rect.width * health / self.config.max_health)
        pygame.draw.rect(self.screen, self.COLOR_HEALTH, bar)

    def _draw_defeated(self, rect):
        inset = rect.inflate(-rect.width // 3, -rect.height // 3)
        pygame.draw.line(self.screen, self.COLOR_DEFEATED, inset.topleft, inset.bottomright, 3)
        pygame.draw.line(self.screen, self.COLOR_DEFEATED, inset.topright, inset.bottomleft, 3)

    def _draw_player(self):
        x, y = self.state.player_pos
        rect = self._cell_rect(x, y)
        color = self.ROLE_COLORS[self.state.role]
        radius = int(self.cell_size / 2 * 0.7)

        pygame.gfxdraw.filled_circle(self.screen, rect.centerx, rect.centery, radius, color)
        pygame.gfxdraw.aacircle(self.screen, rect.centerx, rect.centery, radius, self.COLOR_HIGHLIGHT)

    def _render_ui(self):
        state = self.state

        self._draw_text("ROLES", (self.PANEL_X, 30), self.font_medium)
        for i, role in enumerate(ROLES):
            rect = pygame.Rect(self.PANEL_X, 50 + i * 34, 200, 28)
            color = self.ROLE_COLORS[role]
            if role == state.role:
                pygame.draw.rect(self.screen, color, rect, border_radius=6)
                pygame.draw.rect(self.screen, self.COLOR_HIGHLIGHT, rect, 2, border_radius=6)
            else:
                pygame.draw.rect(self.screen, color, rect, 2, border_radius=6)
            self._draw_text(role.capitalize(), (rect.left + 10, rect.centery), self.font_small)

        self._draw_text(f"Score: {state.score}", (self.PANEL_X, 175), self.font_medium)
        self._draw_text(f"Time: {core.format_time(state.time_left)}", (self.PANEL_X, 205), self.font_medium)
        self._draw_text(
            f"Rescued: {state.rescued_climbers}/{state.total_climbers}", (self.PANEL_X, 235), self.font_small
        )

        if state.phase == core.PHASE_NOT_STARTED:
            self._draw_text("Press SPACE to start", (self.PANEL_X, 275), self.font_small)
        elif state.phase == core.PHASE_ENDED:
            self._render_game_over()

    def _render_game_over(self):
        overlay = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 180))
        self.screen.blit(overlay, (0, 0))

        result = core.summary(self.state)
        lines = [
            f"Your final score: {result['score']}",
            f"Climbers rescued: {result['rescued_climbers']}/{result['total_climbers']}",
            f"Average health of rescued climbers: {result['average_rescued_health']}%",
            f"Snow plowed: {result['snow_plowed']}/{result['total_snow']}",
            f"Time remaining: {result['time_remaining']}",
        ]

        center_x = self.SCREEN_WIDTH / 2
        self._draw_text("GAME OVER", (center_x, 100), self.font_large, center=True)
        for i, line in enumerate(lines):
            self._draw_text(line, (center_x, 160 + i * 30), self.font_medium, center=True)

    def _draw_text(self, text, pos, font, color=None, center=False):
        text_surface = font.render(text, True, color or self.COLOR_TEXT)
        text_rect = text_surface.get_rect()
        if center:
            text_rect.center = pos
        else:
            text_rect.midleft = pos
        self.screen.blit(text_surface, text_rect)

    def close(self):
        pygame.quit()

    def validate_implementation(self):
        # Test action space
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [5, 2, 2]

        # Test observation space
        test_obs = self._get_observation()
        assert test_obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert test_obs.dtype == np.uint8

        # Test reset
        obs, info = self.reset()
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(info, dict)

        # Test step
        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert trunc == False
        assert isinstance(info, dict)

        print("✓ Implementation validated successfully")
