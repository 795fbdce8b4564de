"""
env.py - Gymnasium environment over a single-round match

The agent plays the human side of one Round; the opponent comes from the AI
factory and must answer its move requests synchronously, so that every step
returns with the agent to move again or the round resolved.
"""

from dataclasses import replace
from typing import Any, Callable, Dict, Optional, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from gridmatch.ai.random_agent import RandomAIFactory
from gridmatch.debug import debug
from gridmatch.game.match import Match
from gridmatch.game.players import Player, create_human_player
from gridmatch.game.rounds import Round, DEFAULT_ROUNDS


class MatchEnv(gym.Env):
    """
    One round of gridmatch with the Gymnasium interface.

    Observations are the board ownership grid (0 empty, 1 agent, 2 opponent),
    actions are column indices.
    """

    metadata = {'render_modes': ['ascii', 'human'], 'render_fps': 4}

    def __init__(self, round_: Optional[Round] = None,
                 ai_factory: Optional[Callable[[Round], Player]] = None,
                 render_mode: Optional[str] = None):
        """
        Args:
            round_: Geometry and opponent of the round (second built-in level by default)
            ai_factory: Opponent factory; a random opponent seeded from the env by default
            render_mode: "ascii", "human" or None
        """
        self.round = replace(round_ if round_ is not None else DEFAULT_ROUNDS[1], index=0)
        self._ai_factory = ai_factory
        self.render_mode = render_mode

        self.action_space = spaces.Discrete(self.round.columns)
        self.observation_space = spaces.Box(
            low=0, high=2, shape=(self.round.rows, self.round.columns), dtype=np.int8
        )

        self.agent: Player = create_human_player("Agent")
        self.match: Optional[Match] = None

        self.reward_win = 1.0
        self.reward_lose = -1.0
        self.reward_draw = 0.1
        self.reward_invalid_move = -0.5
        self.reward_step = -0.01

    def reset(self, seed: Optional[int] = None,
              options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        super().reset(seed=seed)
        debug.debug("Resetting MatchEnv", "env")

        self.agent.cancel_request()
        factory = self._ai_factory or RandomAIFactory(self.np_random)
        self.match = Match(self.agent, rounds=[self.round], ai_factory=factory,
                           rng=self.np_random)
        self.match.prepare_next_round()
        self.match.start_round()
        self._check_agent_to_move()

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Drop the agent's coin into column ``action``.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        if self.match is None:
            raise RuntimeError("Call reset() before step()")
        if self.match.round_over:
            raise RuntimeError("Round is over; call reset()")

        action = int(action)
        if not self.match.board.is_available(action):
            debug.warning(f"Invalid action: {action}", "env")
            info = self._get_info()
            info['invalid_move'] = True
            return self._get_observation(), self.reward_invalid_move, False, True, info

        self.agent.submit_column(action)

        reward = self.reward_step
        terminated = False
        if self.match.winning_player is self.agent:
            reward, terminated = self.reward_win, True
        elif self.match.winning_player is not None:
            reward, terminated = self.reward_lose, True
        elif self.match.draw:
            reward, terminated = self.reward_draw, True
        else:
            self._check_agent_to_move()

        if terminated:
            debug.info(f"Episode over after turn {self.match.turn}, reward {reward}", "env")

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), reward, terminated, False, self._get_info()

    def render(self) -> Optional[str]:
        if self.render_mode is None or self.match is None:
            return None

        if self.render_mode == "ascii":
            return self.match.board.render()

        print(self.match.board.render())
        return None

    def _check_agent_to_move(self) -> None:
        if not self.match.round_over and not self.agent.awaiting_move:
            raise RuntimeError("Opponent did not answer synchronously")

    def _get_observation(self) -> np.ndarray:
        return self.match.board.get_state()

    def _get_info(self) -> Dict[str, Any]:
        line = self.match.winning_line
        return {
            'available_columns': self.match.board.available_columns(),
            'turn': self.match.turn,
            'winning_line': line.coordinates() if line is not None else [],
            'draw': self.match.draw,
        }

    def close(self):
        if self.match is not None:
            self.agent.cancel_request()
