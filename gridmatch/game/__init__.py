"""
gridmatch.game - Board, rounds, players and the match state machine

The Gymnasium environment lives in gridmatch.game.env and is imported
on demand.
"""

from gridmatch.game.board import Board, Cell, Line
from gridmatch.game.rounds import Round, DEFAULT_ROUNDS, load_rounds
from gridmatch.game.players import (Player, MoveRequest, create_human_player,
                                    create_ai_player)
from gridmatch.game.match import Match

__all__ = ['Board', 'Cell', 'Line', 'Round', 'DEFAULT_ROUNDS', 'load_rounds',
           'Player', 'MoveRequest', 'create_human_player', 'create_ai_player',
           'Match']
