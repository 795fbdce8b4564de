"""
random_agent.py - Reference AI opponent that plays random available columns

Real opponents are plugged into a Match through its AI factory; this one
is the default and answers every request immediately.
"""

from typing import Optional

import numpy as np

from gridmatch.debug import debug
from gridmatch.game.board import Board
from gridmatch.game.players import Player, Respond, create_ai_player
from gridmatch.game.rounds import Round


def create_random_ai(round_: Round, rng: Optional[np.random.Generator] = None) -> Player:
    """
    Build the AI player for a round.

    Args:
        round_: The round the opponent plays in (name and image come from it)
        rng: Source of randomness; a fresh generator when omitted

    Returns:
        An AI Player that answers synchronously
    """
    rng = rng if rng is not None else np.random.default_rng()

    def choose(board: Board, respond: Respond) -> None:
        columns = board.available_columns()
        column = int(rng.choice(columns))
        debug.trace(f"{round_.ai_name} picks column {column} from {columns}", "player")
        respond(column)

    return create_ai_player(round_.ai_name, choose, round_.image_ref)


class RandomAIFactory:
    """Callable ``createAIPlayer(round)`` sharing one random generator."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def __call__(self, round_: Round) -> Player:
        return create_random_ai(round_, self.rng)
