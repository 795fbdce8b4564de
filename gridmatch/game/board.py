"""
board.py - Cells, lines and the line-indexed game board

The Board owns every Cell of a round and every Line (row, column or diagonal)
long enough to hold a win. Each line exposes a pattern string with one marker
per cell, so win detection is a substring search over those patterns.
"""

from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

import numpy as np

from gridmatch.debug import debug, DebugLevel
from gridmatch.utils import (DEFAULT_ROWS, DEFAULT_COLUMNS, DEFAULT_MIN_WIN_LENGTH,
                             BLANK_MARKER, PlayerType, BoardInvariantError,
                             render_board_ascii)

if TYPE_CHECKING:
    from gridmatch.game.players import Player


class Cell:
    """One board position. Coordinates are fixed, the owner is set at most once."""

    __slots__ = ("_column", "_row", "_owner", "winning", "highlighted", "_lines")

    def __init__(self, column: int, row: int):
        self._column = column
        self._row = row
        self._owner: Optional["Player"] = None
        self.winning = False
        self.highlighted = False
        self._lines: List["Line"] = []

    @property
    def column(self) -> int:
        return self._column

    @property
    def row(self) -> int:
        return self._row

    @property
    def owner(self) -> Optional["Player"]:
        return self._owner

    @property
    def is_empty(self) -> bool:
        return self._owner is None

    @property
    def marker(self) -> str:
        return BLANK_MARKER if self._owner is None else self._owner.type.marker

    def claim(self, player: "Player") -> None:
        """
        Give this cell to a player.

        Raises:
            BoardInvariantError: if the cell already has an owner
        """
        if self._owner is not None:
            raise BoardInvariantError(
                f"Cell ({self._column}, {self._row}) already owned by {self._owner.name}")
        self._owner = player
        for line in self._lines:
            line.invalidate()

    def _attach(self, line: "Line") -> None:
        self._lines.append(line)

    def __repr__(self):
        return f"Cell(column={self._column}, row={self._row}, marker={self.marker!r})"


def canonical_order(cell: Cell) -> Tuple[int, int]:
    """Sort key: ascending column, then descending row."""
    return (cell.column, -cell.row)


class Line:
    """
    An ordered run of cells on one row, column or diagonal.

    Tracked lines belong to a board: their cells notify them on ownership
    changes and the pattern is rebuilt on the next read. Untracked lines are
    search results and rebuild the pattern on every read.
    """

    def __init__(self, cells: Sequence[Cell], tracked: bool = False):
        self._cells: Tuple[Cell, ...] = tuple(cells)
        self._tracked = tracked
        self._pattern: Optional[str] = None
        if tracked:
            for cell in self._cells:
                cell._attach(self)

    @property
    def cells(self) -> Tuple[Cell, ...]:
        return self._cells

    @property
    def pattern(self) -> str:
        if self._pattern is None or not self._tracked:
            self._pattern = "".join(cell.marker for cell in self._cells)
        return self._pattern

    def invalidate(self) -> None:
        self._pattern = None

    def coordinates(self) -> List[Tuple[int, int]]:
        return [(cell.column, cell.row) for cell in self._cells]

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self):
        return iter(self._cells)

    def __repr__(self):
        return f"Line({self.coordinates()}, pattern={self.pattern!r})"


class Board:
    """
    The grid of one round.

    Row 0 is the top edge and row ``rows - 1`` the bottom edge, so coins fall
    towards higher row numbers.
    """

    def __init__(self, rows: int = DEFAULT_ROWS, columns: int = DEFAULT_COLUMNS,
                 min_win_length: int = DEFAULT_MIN_WIN_LENGTH):
        """
        Build all cells and all lines that can host a win.

        Args:
            rows: Number of rows
            columns: Number of columns
            min_win_length: Coins in a row needed to win
        """
        if rows < 1 or columns < 1:
            raise ValueError(f"Board needs at least one row and column, got {rows}x{columns}")
        if min_win_length < 1:
            raise ValueError(f"min_win_length must be positive, got {min_win_length}")

        self.rows = rows
        self.columns = columns
        self.min_win_length = min_win_length

        debug.debug(f"Building {rows}x{columns} board (win length {min_win_length})", "board")
        self._cells: Dict[Tuple[int, int], Cell] = {
            (column, row): Cell(column, row)
            for column in range(columns)
            for row in range(rows)
        }
        self.lines: List[Line] = self._build_lines()
        debug.trace(f"Board has {len(self.lines)} lines", "board")

    def _build_lines(self) -> List[Line]:
        candidates: List[List[Cell]] = []

        for row in range(self.rows):
            candidates.append([self._cells[(column, row)] for column in range(self.columns)])
        for column in range(self.columns):
            candidates.append([self._cells[(column, row)] for row in range(self.rows)])

        for d in range(-(self.rows - 1), self.columns):
            descending = [self.cell(d + row, row) for row in range(self.rows)]
            ascending = [self.cell(d + row, self.rows - 1 - row) for row in range(self.rows)]
            candidates.append([c for c in descending if c is not None])
            candidates.append([c for c in ascending if c is not None])

        # On one-row or one-column boards a single-cell diagonal can repeat a
        # row or column line; each cell set is kept once
        seen = set()
        lines = []
        for cells in candidates:
            if len(cells) < self.min_win_length:
                continue
            key = frozenset((cell.column, cell.row) for cell in cells)
            if key in seen:
                continue
            seen.add(key)
            lines.append(Line(sorted(cells, key=canonical_order), tracked=True))
        return lines

    @property
    def cells(self) -> List[Cell]:
        return list(self._cells.values())

    def cell(self, column: int, row: int) -> Optional[Cell]:
        """Return the cell at (column, row), or None outside the board."""
        return self._cells.get((column, row))

    def column_cells(self, column: int) -> List[Cell]:
        """Cells of a column from the bottom edge upward."""
        return [self._cells[(column, row)] for row in range(self.rows - 1, -1, -1)]

    def is_available(self, column: int) -> bool:
        """A column is available while its top cell is empty."""
        if not (0 <= column < self.columns):
            return False
        return self._cells[(column, 0)].is_empty

    def available_columns(self) -> List[int]:
        return [column for column in range(self.columns) if self.is_available(column)]

    def landing_cell(self, column: int) -> Optional[Cell]:
        """The lowest empty cell of an available column."""
        if not self.is_available(column):
            return None
        for cell in self.column_cells(column):
            if cell.is_empty:
                return cell
        return None

    def place_coin(self, column: int, player: "Player") -> bool:
        """
        Drop a coin for ``player`` into ``column``.

        Args:
            column: Column index (0-indexed)
            player: The player that owns the coin

        Returns:
            True if the coin was placed, False if the column is not available

        Raises:
            BoardInvariantError: if the chosen cell turns out to be owned
        """
        if not self.is_available(column):
            debug.debug(f"Column {column} not available for {player.name}", "board")
            return False

        target = self.landing_cell(column)
        if target is None:
            debug.error(f"Availability mismatch at column {column}", "board")
            raise BoardInvariantError(f"Column {column} reported available but is full")

        target.claim(player)
        debug.trace(f"{player.name} placed at ({target.column}, {target.row})", "board")
        return True

    def find_pattern(self, pattern: str) -> List[Line]:
        """
        Search every line for ``pattern``.

        The search is forward and non-overlapping: after a hit at offset p it
        continues at p + len(pattern). Each hit becomes a new line holding
        exactly the matched cells.

        Args:
            pattern: Marker string to look for

        Returns:
            Matching lines, in board line order
        """
        if not pattern:
            raise ValueError("Cannot search for an empty pattern")

        size = len(pattern)
        matches = []
        for line in self.lines:
            text = line.pattern
            position = text.find(pattern)
            while position != -1:
                matches.append(Line(line.cells[position:position + size]))
                position = text.find(pattern, position + size)

        return matches

    def find_winning_line(self, player_type: PlayerType) -> Optional[Line]:
        """First line of ``min_win_length`` coins owned by ``player_type``, if any."""
        matches = self.find_pattern(player_type.marker * self.min_win_length)
        return matches[0] if matches else None

    def mark_winning(self, line: Line) -> None:
        for cell in line:
            cell.winning = True

    def winning_cells(self) -> List[Cell]:
        return [cell for cell in self._cells.values() if cell.winning]

    def highlight(self, column: int) -> Optional[Cell]:
        """Highlight the cell a coin dropped in ``column`` would land on."""
        self.clear_highlights()
        target = self.landing_cell(column)
        if target is not None:
            target.highlighted = True
        return target

    def clear_highlights(self) -> None:
        for cell in self._cells.values():
            cell.highlighted = False

    def get_state(self) -> np.ndarray:
        """
        Board ownership as a (rows, columns) array of PlayerType values.

        Returns:
            int8 numpy array, 0 for empty cells
        """
        state = np.zeros((self.rows, self.columns), dtype=np.int8)
        for (column, row), cell in self._cells.items():
            if cell.owner is not None:
                state[row, column] = cell.owner.type.value
        return state

    def render(self) -> str:
        return render_board_ascii(self)

    def __str__(self) -> str:
        return self.render()


if __name__ == "__main__":
    from gridmatch.game.players import create_human_player

    debug.configure(level=DebugLevel.DEBUG)

    board = Board()
    human = create_human_player("Tester")
    for column in [0, 1, 1, 2, 2, 2, 3, 3, 3, 3]:
        board.place_coin(column, human)
    print(board)
    print(f"Lines: {len(board.lines)}")
    print(f"Winning line: {board.find_winning_line(PlayerType.HUMAN)}")
