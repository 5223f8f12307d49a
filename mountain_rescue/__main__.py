import argparse
import os

import numpy as np
import pygame

from mountain_rescue.config import CARRIER, MEDIC, SNOWPLOW
from mountain_rescue.env import GameEnv
from mountain_rescue.logger_config import configure_logging


ROLE_KEYS = {pygame.K_1: SNOWPLOW, pygame.K_2: MEDIC, pygame.K_3: CARRIER}


def main(argv=None):
    parser = argparse.ArgumentParser(prog="mountain_rescue", description=GameEnv.game_description)
    parser.add_argument("--seed", type=int, default=None, help="seed for the board and snow-fall")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    configure_logging(args.log_level.upper())

    env = GameEnv(render_mode="rgb_array")
    obs, info = env.reset(seed=args.seed)

    # The env renders off-screen; bring up a real display for manual play.
    if os.environ.get("SDL_VIDEODRIVER") == "dummy":
        del os.environ["SDL_VIDEODRIVER"]
        pygame.display.quit()
        pygame.display.init()

    pygame.display.set_caption("Mountain Rescue")
    screen = pygame.display.set_mode((env.SCREEN_WIDTH, env.SCREEN_HEIGHT))

    print("\n" + "=" * 30)
    print("      MANUAL PLAY MODE")
    print("=" * 30)
    print(env.user_guide)
    print("1/2/3 pick a role, R restarts, Esc quits.")
    print("=" * 30 + "\n")

    running = True
    reported = False
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_r:
                    obs, info = env.reset(seed=args.seed)
                    reported = False
                elif event.key in ROLE_KEYS:
                    env.select_role(ROLE_KEYS[event.key])

        action = [0, 0, 0]
        keys = pygame.key.get_pressed()
        if keys[pygame.K_UP]:
            action[0] = 1
        elif keys[pygame.K_DOWN]:
            action[0] = 2
        elif keys[pygame.K_LEFT]:
            action[0] = 3
        elif keys[pygame.K_RIGHT]:
            action[0] = 4
        if keys[pygame.K_SPACE]:
            action[1] = 1
        if keys[pygame.K_LSHIFT] or keys[pygame.K_RSHIFT]:
            action[2] = 1

        obs, reward, terminated, truncated, info = env.step(action)

        if terminated and not reported:
            result = info["summary"]
            print("\n--- GAME OVER ---")
            print(f"Final Score: {result['score']}")
            print(f"Climbers rescued: {result['rescued_climbers']}/{result['total_climbers']}")
            print(f"Average health of rescued climbers: {result['average_rescued_health']}%")
            print(f"Snow plowed: {result['snow_plowed']}/{result['total_snow']}")
            print("Press 'R' to restart.")
            reported = True

        surf = pygame.surfarray.make_surface(np.transpose(obs, (1, 0, 2)))
        screen.blit(surf, (0, 0))
        pygame.display.flip()

        env.clock.tick(env.FPS)

    env.close()


if __name__ == "__main__":
    main()
