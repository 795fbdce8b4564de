import numpy as np
import pytest

from gridmatch.game.env import MatchEnv
from gridmatch.game.rounds import Round

from conftest import DeferredAIFactory


def test_spaces_follow_round_geometry():
    env = MatchEnv(Round(index=3, ai_name="Small", rows=4, columns=5, min_win_length=3))
    assert env.action_space.n == 5
    assert env.observation_space.shape == (4, 5)
    assert env.round.index == 0


def test_reset_leaves_agent_to_move():
    env = MatchEnv()
    observation, info = env.reset(seed=5)

    assert observation.shape == (6, 7)
    assert env.observation_space.contains(observation)
    assert env.agent.awaiting_move
    assert info['turn'] in (1, 2)
    assert observation.sum() == (2 if info['turn'] == 2 else 0)


def test_invalid_action_is_penalised_without_state_change():
    env = MatchEnv()
    observation, info = env.reset(seed=1)

    new_observation, reward, terminated, truncated, info = env.step(env.round.columns)

    assert reward == env.reward_invalid_move
    assert not terminated
    assert truncated
    assert info['invalid_move']
    assert np.array_equal(new_observation, observation)


def test_random_episode_terminates():
    env = MatchEnv(render_mode="ascii")
    rng = np.random.default_rng(0)
    observation, info = env.reset(seed=0)

    terminated = False
    steps = 0
    while not terminated:
        action = int(rng.choice(info['available_columns']))
        observation, reward, terminated, truncated, info = env.step(action)
        assert env.observation_space.contains(observation)
        steps += 1

    assert reward in (env.reward_win, env.reward_lose, env.reward_draw)
    if reward != env.reward_draw:
        assert len(info['winning_line']) == env.round.min_win_length
    assert steps <= env.round.rows * env.round.columns
    assert isinstance(env.render(), str)

    with pytest.raises(RuntimeError):
        env.step(0)


def test_opponent_must_answer_synchronously():
    env = MatchEnv(ai_factory=DeferredAIFactory())
    # Whichever side starts, the agent is left waiting on a deferred opponent
    # at reset or after its first move.
    with pytest.raises(RuntimeError):
        env.reset(seed=2)
        env.step(env.match.board.available_columns()[0])
