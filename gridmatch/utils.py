"""
utils.py - Constants, enumerations and helpers shared across gridmatch

This module holds the default board geometry, the player type tag used in
line patterns, the package exceptions and the ASCII board renderer.
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gridmatch.game.board import Board

# Default geometry (classic Connect Four)
DEFAULT_ROWS = 6
DEFAULT_COLUMNS = 7
DEFAULT_MIN_WIN_LENGTH = 4

_MARKERS = {0: ".", 1: "H", 2: "A"}


class PlayerType(Enum):
    """Variant tag of a player, also used as the cell value in state arrays."""
    EMPTY = 0
    HUMAN = 1
    AI = 2

    @property
    def marker(self) -> str:
        """Single character written into line pattern strings."""
        return _MARKERS[self.value]

    def __str__(self):
        return self.marker


BLANK_MARKER = PlayerType.EMPTY.marker


class BoardInvariantError(AssertionError):
    """A validated placement selected a cell that already has an owner."""


class RoundsExhaustedError(IndexError):
    """No configured round follows the current one."""


class MoveContractError(RuntimeError):
    """A player answered a move request zero, two or more times, or out of turn."""


def render_board_ascii(board: "Board") -> str:
    """
    Render a board as ASCII art.

    Row 0 is drawn at the top. Owned cells show their owner's marker,
    winning cells show ``*`` and a highlighted landing cell shows ``+``.

    Args:
        board: The board to draw

    Returns:
        Multi-line string representation
    """
    width = board.columns * 2 - 1
    result = ["|" + "-" * width + "|"]

    for row in range(board.rows):
        symbols = []
        for column in range(board.columns):
            cell = board.cell(column, row)
            if cell.winning:
                symbols.append("*")
            elif cell.owner is not None:
                symbols.append(cell.owner.type.marker)
            elif cell.highlighted:
                symbols.append("+")
            else:
                symbols.append(" ")
        result.append("|" + " ".join(symbols) + "|")

    result.append("|" + "-" * width + "|")
    # Column numbers wrap past 9 so wide boards stay aligned
    result.append("|" + " ".join(str(c % 10) for c in range(board.columns)) + "|")

    return "\n".join(result)
