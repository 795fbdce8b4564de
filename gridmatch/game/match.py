"""
match.py - Round and turn state machine of a human-versus-AI match

The Match owns the active Round, its Board and both Players. A turn asks the
current player for a column through a MoveRequest; the answer places a coin,
checks for a win and either ends the round or hands the turn to the other
player. There is no polling: the turn loop only moves forward when a player
answers.

States: awaiting round start -> round in progress -> round resolved (win or
draw) -> awaiting round start again, or finished after the last round.
"""

from typing import Callable, List, Optional, Sequence

import numpy as np

from gridmatch.debug import debug
from gridmatch.game.board import Board, Line
from gridmatch.game.players import MoveRequest, Player
from gridmatch.game.rounds import Round, check_round_sequence, load_rounds
from gridmatch.utils import MoveContractError, RoundsExhaustedError

SpeakSink = Callable[[Player, str], None]
MessageSink = Callable[[str], None]
AIFactory = Callable[[Round], Player]

# Unavailable columns an AI may answer within one turn before the match gives up
MAX_AI_REJECTIONS = 3


def _ignore_speech(player: Player, message: str) -> None:
    pass


def _ignore_message(message: str) -> None:
    pass


class Match:
    """
    A sequence of rounds between one human and the AI of each round.

    Only one move request is ever outstanding. All state changes happen
    inside prepare_next_round, the turn loop or a player's answer.
    """

    def __init__(self, human_player: Player,
                 rounds: Optional[Sequence[Round]] = None,
                 ai_factory: Optional[AIFactory] = None,
                 rng: Optional[np.random.Generator] = None,
                 on_speak: Optional[SpeakSink] = None,
                 on_message: Optional[MessageSink] = None):
        """
        Set up a match; no round is prepared yet.

        Args:
            human_player: The externally driven player
            rounds: Ordered rounds, indexed 0..n-1 (built-in levels when omitted)
            ai_factory: Called once per round to create that round's AI player
            rng: Seedable generator used to pick the starting player
            on_speak: Sink for player commentary, called as on_speak(player, text)
            on_message: Sink for game state announcements
        """
        if not human_player.is_human:
            raise ValueError(f"{human_player.name} is not a human player")

        self.rng = rng if rng is not None else np.random.default_rng()
        self.rounds: List[Round] = check_round_sequence(
            list(rounds) if rounds is not None else load_rounds())
        if ai_factory is None:
            from gridmatch.ai.random_agent import RandomAIFactory
            ai_factory = RandomAIFactory(self.rng)
        self.ai_factory = ai_factory
        self.on_speak = on_speak or _ignore_speech
        self.on_message = on_message or _ignore_message

        self.human_player = human_player
        self.ai_player: Optional[Player] = None
        self.current_player: Optional[Player] = None
        self.winning_player: Optional[Player] = None
        self.winning_line: Optional[Line] = None
        self.draw = False
        self.finished = False
        self.current_round: Optional[Round] = None
        self.board: Optional[Board] = None
        self.turn = 0
        self.pending_request: Optional[MoveRequest] = None
        self._needs_new_round = True
        self._rejections = 0

        debug.debug(f"Match created for {human_player.name} with {len(self.rounds)} rounds",
                    "match")

    @property
    def round_over(self) -> bool:
        """True once the current round has been won or drawn."""
        return self.winning_player is not None or self.draw

    def other_player(self, player: Player) -> Player:
        return self.ai_player if player is self.human_player else self.human_player

    def prepare_next_round(self) -> Round:
        """
        Move to the next round and build its board.

        Returns:
            The round that is now current

        Raises:
            RoundsExhaustedError: if the last round has already been played
        """
        index = 0 if self.current_round is None else self.current_round.index + 1
        if index >= len(self.rounds):
            debug.error(f"No round {index}: only {len(self.rounds)} configured", "match")
            raise RoundsExhaustedError(f"Round {index} does not exist")

        self._drop_pending_request()

        round_ = self.rounds[index]
        self.current_round = round_
        self.board = Board(round_.rows, round_.columns, round_.min_win_length)
        self.ai_player = self.ai_factory(round_)
        self.winning_player = None
        self.winning_line = None
        self.draw = False
        self.turn = 0
        self._needs_new_round = False
        self._rejections = 0

        human_starts = self.rng.random() < 0.5
        self.current_player = self.human_player if human_starts else self.ai_player

        debug.info(f"Round {index} prepared: {round_.rows}x{round_.columns}, "
                   f"win length {round_.min_win_length}, opponent {self.ai_player.name}, "
                   f"{self.current_player.name} starts", "match")
        self.on_message(f"Round {index + 1}: {self.human_player.name} vs {self.ai_player.name}")
        self.on_speak(self.ai_player, "Let's play!")
        self.on_message(f"{self.current_player.name} starts")
        return round_

    def start_round(self) -> None:
        """Issue the first move request of the round, if not done yet."""
        if self.turn == 0:
            self.advance_turn()

    def advance_turn(self) -> None:
        """
        Run one step of the turn loop.

        Prepares a new round first when the previous one is resolved, then
        either asks the current player for a column or declares a draw when
        the board is full.
        """
        if self.pending_request is not None:
            raise MoveContractError(
                f"Turn {self.turn} is still waiting for {self.pending_request.player.name}")

        if self._needs_new_round:
            self.prepare_next_round()

        self.turn += 1
        self._rejections = 0
        if self.board.available_columns():
            self._request_move()
        else:
            self.draw = True
            debug.info(f"Round {self.current_round.index} drawn after {self.turn - 1} moves",
                       "match")
            self.on_message(f"Round {self.current_round.index + 1} ends in a draw")
            self.on_speak(self.ai_player, "Nobody wins this one.")
            self._end_round()

    def _request_move(self) -> None:
        request = MoveRequest(self.current_player, self.turn, self._resolve_move)
        self.pending_request = request
        debug.debug(f"Turn {self.turn}: asking {self.current_player.name}", "match")
        self.current_player.request_move(self.board, request.respond)

    def _resolve_move(self, request: MoveRequest, column: int) -> None:
        if request is not self.pending_request:
            raise MoveContractError(
                f"Stale answer from {request.player.name} for turn {request.turn}")
        self.pending_request = None
        player = request.player

        if not self.board.place_coin(column, player):
            # Rejected: the same player is asked again within the same turn
            self._rejections += 1
            if not player.is_human and self._rejections > MAX_AI_REJECTIONS:
                debug.error(f"{player.name} kept choosing unavailable columns on turn "
                            f"{self.turn}", "match")
                raise MoveContractError(
                    f"{player.name} chose an unavailable column {self._rejections} times")
            debug.info(f"{player.name} chose unavailable column {column}", "match")
            self.on_message(f"Column {column} is not available")
            self._request_move()
            return

        line = self.board.find_winning_line(player.type)
        if line is not None:
            self.board.mark_winning(line)
            self.winning_line = line
            self.winning_player = line.cells[0].owner
            debug.info(f"{self.winning_player.name} wins round {self.current_round.index} "
                       f"on turn {self.turn}", "match")
            self.on_message(f"{self.winning_player.name} wins round "
                            f"{self.current_round.index + 1}")
            if self.winning_player is self.ai_player:
                self.on_speak(self.ai_player, "I win this time.")
            else:
                self.on_speak(self.ai_player, "Well played!")
            self._end_round()
            return

        self.current_player = self.other_player(player)
        self.advance_turn()

    def _end_round(self) -> None:
        self._needs_new_round = True
        if self.current_round.index + 1 >= len(self.rounds):
            self.finished = True
            debug.info("Last round resolved, match finished", "match")
            self.on_message("Match finished")

    def _drop_pending_request(self) -> None:
        if self.pending_request is None:
            return
        debug.warning(f"Abandoning pending request of {self.pending_request.player.name}",
                      "match")
        self.pending_request.player.cancel_request()
        self.pending_request = None
