from mountain_rescue import core
from mountain_rescue.config import CARRIER, MEDIC
from mountain_rescue.env import GameEnv
from mountain_rescue.policy import policy


def test_policy_presses_start(make_state):
    env = GameEnv()
    env.state = make_state({(11, 11): ("climber", 100)}, started=False)
    assert policy(env) == [0, 1, 0]
    env.close()


def test_policy_switches_to_carrier_and_walks_to_climber(make_state):
    env = GameEnv()
    env.state = make_state(
        {(1, 0): ".", (2, 0): ("climber", 90), (11, 11): ("climber", 100)}, started=False
    )
    env.start()

    assert policy(env) == [0, 0, 1]
    env.step(policy(env))
    assert env.state.role == MEDIC
    env.step(policy(env))
    env.step(policy(env))
    assert env.state.role == CARRIER

    env.step(policy(env))
    assert env.state.player_pos == [1, 0]
    env.close()


def test_policy_plows_when_climbers_are_snowed_in(make_state):
    env = GameEnv()
    env.state = make_state({(5, 5): ("climber", 100)})
    action = policy(env)
    assert action[0] in (2, 4)
    assert action[1:] == [0, 0]
    env.close()


def test_policy_plays_full_game():
    env = GameEnv()
    env.reset(seed=4)
    terminated = False
    info = None
    for _ in range(4000):
        _, _, terminated, _, info = env.step(policy(env))
        if terminated:
            break

    assert terminated
    assert info["phase"] == core.PHASE_ENDED
    assert info["summary"]["score"] == info["score"] >= 0
    env.close()
