"""Board representation for the playfield.

The cells live in a single contiguous row-major ``uint8`` buffer.  Every read
and write goes through :meth:`Board.index` after an explicit bounds check, so
no caller ever touches the buffer with raw offsets.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from .tetromino import WINDOW, Tetromino, TetrominoType, is_occupied


# Default dimensions: 20 visible rows plus a two-row spawn buffer.
ROWS = 22
COLS = 10

EMPTY = int(TetrominoType.EMPTY)
MAX_TAG = max(int(t) for t in TetrominoType)

Buffer = NDArray[np.uint8]


def create_empty_buffer(rows: int, cols: int) -> Buffer:
    """Return a new flat buffer of ``rows * cols`` empty cells."""

    return np.zeros(rows * cols, dtype=np.uint8)


class Board:
    """Fixed-size grid of cell tags."""

    def __init__(self, rows: int = ROWS, cols: int = COLS) -> None:
        self.rows = rows
        self.cols = cols
        self._cells: Buffer = create_empty_buffer(rows, cols)

    @property
    def grid(self) -> Buffer:
        """Read-only ``(rows, cols)`` view of the buffer."""

        view = self._cells.reshape(self.rows, self.cols)
        view.flags.writeable = False
        return view

    def index(self, row: int, col: int) -> int:
        return row * self.cols + col

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get_cell(self, row: int, col: int) -> int:
        """Safely return the tag at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if self.in_bounds(row, col):
            return int(self._cells[self.index(row, col)])
        raise IndexError("Cell out of bounds")

    def set_cell(self, row: int, col: int, value: int) -> None:
        """Safely set the tag at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
            ValueError: If ``value`` is not a valid cell tag.
        """
        if not EMPTY <= value <= MAX_TAG:
            raise ValueError(f"Invalid cell tag: {value}")
        if self.in_bounds(row, col):
            self._cells[self.index(row, col)] = np.uint8(value)
        else:
            raise IndexError("Cell out of bounds")

    def is_empty(self, row: int, col: int) -> bool:
        """Return ``True`` if the cell at ``(row, col)`` is empty.

        Any coordinates outside the board are treated as occupied so off-board
        positions are automatically rejected by the fit test.
        """

        if self.in_bounds(row, col):
            return bool(self._cells[self.index(row, col)] == EMPTY)
        return False

    # ------------------------------------------------------------------
    # Piece primitives
    # ------------------------------------------------------------------
    def fits(self, piece: Tetromino) -> bool:
        """Return ``True`` if every cell of ``piece`` is in bounds and empty.

        The piece must not be stamped while this is evaluated, otherwise it
        collides with itself.
        """

        row, col = piece.position
        for x in range(WINDOW):
            for y in range(WINDOW):
                if is_occupied(piece.shape, piece.rotation, x, y) and not self.is_empty(
                    row + x, col + y
                ):
                    return False
        return True

    def stamp(self, piece: Tetromino) -> None:
        """Write ``piece``'s cells into the grid with its shape tag."""

        self._paint(piece, int(piece.shape))

    def erase(self, piece: Tetromino) -> None:
        """Reset ``piece``'s cells to empty."""

        self._paint(piece, EMPTY)

    def _paint(self, piece: Tetromino, value: int) -> None:
        row, col = piece.position
        for x in range(WINDOW):
            for y in range(WINDOW):
                if not is_occupied(piece.shape, piece.rotation, x, y):
                    continue
                if self.in_bounds(row + x, col + y):
                    self._cells[self.index(row + x, col + y)] = np.uint8(value)

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------
    def row_filled(self, row: int) -> bool:
        start = self.index(row, 0)
        return bool(np.all(self._cells[start : start + self.cols] != EMPTY))

    def shift_down(self, row: int) -> None:
        """Drop every row above ``row`` by one, overwriting ``row``.

        The top row is left empty.
        """

        grid = self._cells.reshape(self.rows, self.cols)
        grid[1 : row + 1] = grid[0:row].copy()
        grid[0] = EMPTY

    def clear_full_rows(self) -> int:
        """Remove filled rows bottom-up and return how many were cleared.

        After a clear the same row index is examined again because the row
        above has moved into it.
        """

        cleared = 0
        row = self.rows - 1
        while row >= 0:
            if self.row_filled(row):
                self.shift_down(row)
                cleared += 1
            else:
                row -= 1
        return cleared

    def occupied_in_rows(self, count: int) -> bool:
        """Return ``True`` if any of the top ``count`` rows holds a block."""

        return bool(np.any(self._cells[: count * self.cols] != EMPTY))

    def load(self, grid: Sequence[Sequence[int]]) -> None:
        """Replace the whole board with ``grid``.

        Raises:
            ValueError: If the grid shape or any tag is invalid.
        """

        cells = np.asarray(grid, dtype=np.int64)
        if cells.shape != (self.rows, self.cols):
            raise ValueError(
                f"Grid shape {cells.shape} does not match board {(self.rows, self.cols)}"
            )
        if np.any((cells < EMPTY) | (cells > MAX_TAG)):
            raise ValueError("Grid contains invalid cell tags")
        self._cells[:] = cells.reshape(-1).astype(np.uint8)
