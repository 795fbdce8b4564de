"""
players.py - Player capability and single-resolution move requests

A Player is one record tagged HUMAN or AI. Both variants share the same
capability: ``request_move(board, respond)`` must lead to exactly one call of
``respond(column)``. The human variant parks the callback until the outside
world calls ``submit_column``; the AI variant runs the chooser supplied by the
AI factory.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

from gridmatch.debug import debug
from gridmatch.utils import PlayerType, MoveContractError

if TYPE_CHECKING:
    from gridmatch.game.board import Board

Respond = Callable[[int], None]
Chooser = Callable[["Board", Respond], None]


@dataclass(eq=False)
class Player:
    type: PlayerType
    name: str
    image_ref: str = ""
    chooser: Optional[Chooser] = field(default=None, repr=False)
    _pending: Optional[Respond] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if self.type == PlayerType.EMPTY:
            raise ValueError("A player must be HUMAN or AI")
        if self.chooser is None:
            if self.type != PlayerType.HUMAN:
                raise ValueError(f"AI player {self.name} needs a chooser")
            self.chooser = self._hold_request

    @property
    def is_human(self) -> bool:
        return self.type == PlayerType.HUMAN

    @property
    def awaiting_move(self) -> bool:
        return self._pending is not None

    def request_move(self, board: "Board", respond: Respond) -> None:
        """Ask this player for a column; ``respond`` must be called exactly once."""
        debug.trace(f"Move requested from {self.name}", "player")
        self.chooser(board, respond)

    def _hold_request(self, board: "Board", respond: Respond) -> None:
        if self._pending is not None:
            raise MoveContractError(f"{self.name} already has a pending move request")
        self._pending = respond

    def submit_column(self, column: int) -> None:
        """
        Answer the pending move request with ``column``.

        This is the entry point for external input (keyboard, UI, agents).

        Raises:
            MoveContractError: if no move was requested from this player
        """
        if self._pending is None:
            raise MoveContractError(f"No move pending for {self.name}")
        respond, self._pending = self._pending, None
        debug.debug(f"{self.name} submits column {column}", "player")
        respond(column)

    def cancel_request(self) -> None:
        self._pending = None

    def __str__(self):
        return f"{self.name} ({self.type.name})"


def create_human_player(name: str, image_ref: str = "") -> Player:
    return Player(PlayerType.HUMAN, name, image_ref)


def create_ai_player(name: str, chooser: Chooser, image_ref: str = "") -> Player:
    return Player(PlayerType.AI, name, image_ref, chooser)


class MoveRequest:
    """
    One outstanding request for a column.

    The request forwards the first answer to ``on_column`` and rejects every
    later one, so a player cannot move twice for the same request.
    """

    def __init__(self, player: Player, turn: int,
                 on_column: Callable[["MoveRequest", int], None]):
        self.player = player
        self.turn = turn
        self._on_column = on_column
        self._column: Optional[int] = None
        self._resolved = False

    @property
    def resolved(self) -> bool:
        return self._resolved

    @property
    def column(self) -> Optional[int]:
        return self._column

    def respond(self, column: int) -> None:
        if self._resolved:
            raise MoveContractError(
                f"{self.player.name} answered turn {self.turn} more than once")
        column = int(column)
        self._resolved = True
        self._column = column
        self._on_column(self, column)

    def __repr__(self):
        state = f"column={self._column}" if self._resolved else "pending"
        return f"MoveRequest({self.player.name}, turn={self.turn}, {state})"
