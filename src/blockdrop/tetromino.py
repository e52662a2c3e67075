"""Tetromino definitions and the rotation lookup.

Every piece geometry is stored exactly once, as a 16-bit mask over a 4x4
window.  Rotations are not stored: :func:`cell_index` maps a local ``(x, y)``
coordinate to a bit position through one of four fixed permutations of the
window, so reading the same mask with ``rotation + 1`` yields the shape turned
by a quarter.

Local coordinates follow the board: ``x`` is the row offset from the piece's
anchor and ``y`` the column offset.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np
from numpy.typing import NDArray

WINDOW = 4
ROTATIONS = 4


class TetrominoType(IntEnum):
    """Shape catalog index, also used as the cell tag stored in the grid."""

    EMPTY = 0
    I = 1
    S = 2
    Z = 3
    O = 4
    T = 5
    J = 6
    L = 7


PLAYABLE_TYPES: Tuple[TetrominoType, ...] = tuple(
    t for t in TetrominoType if t is not TetrominoType.EMPTY
)


SHAPE_MASKS: Dict[TetrominoType, int] = {
    TetrominoType.EMPTY: 0b0000000000000000,
    TetrominoType.I: 0b0010001000100010,
    TetrominoType.S: 0b0010011001000000,
    TetrominoType.Z: 0b0100011000100000,
    TetrominoType.O: 0b0000011001100000,
    TetrominoType.T: 0b0010011000100000,
    TetrominoType.J: 0b0000011000100010,
    TetrominoType.L: 0b0000011001000100,
}


def cell_index(x: int, y: int, rotation: int) -> int:
    """Return the mask bit for local cell ``(x, y)`` under ``rotation``.

    Parameters
    ----------
    x, y:
        Row and column offsets inside the 4x4 window, each in ``0..3``.
    rotation:
        Rotation state.  Any integer is accepted and reduced modulo 4, so
        ``-1`` is the same state as ``3``.
    """

    r = rotation % ROTATIONS
    if r == 0:
        return y * 4 + x
    if r == 1:
        return 12 + y - x * 4
    if r == 2:
        return 15 - y * 4 - x
    return 3 - y + x * 4


def is_occupied(shape: TetrominoType, rotation: int, x: int, y: int) -> bool:
    """Return ``True`` if ``shape`` covers local cell ``(x, y)`` at ``rotation``."""

    return bool(SHAPE_MASKS[shape] >> cell_index(x, y, rotation) & 1)


def shape_cells(shape: TetrominoType, rotation: int) -> List[Tuple[int, int]]:
    """Return the occupied local ``(x, y)`` offsets in row-major order."""

    return [
        (x, y)
        for x in range(WINDOW)
        for y in range(WINDOW)
        if is_occupied(shape, rotation, x, y)
    ]


def shape_grid(shape: TetrominoType, rotation: int) -> NDArray[np.uint8]:
    """Return the 4x4 occupancy of ``shape`` as a 0/1 array.

    Renderers use this for the preview piece, which is never stamped into the
    board.
    """

    grid = np.zeros((WINDOW, WINDOW), dtype=np.uint8)
    for x, y in shape_cells(shape, rotation):
        grid[x, y] = 1
    return grid


@dataclass
class Tetromino:
    """A piece anchored on the board."""

    shape: TetrominoType = TetrominoType.EMPTY
    rotation: int = 0
    position: Tuple[int, int] = (0, 0)  # (row, col)

    @property
    def row(self) -> int:
        return self.position[0]

    @property
    def col(self) -> int:
        return self.position[1]

    def rotate(self, direction: int = 1) -> None:
        """Turn the piece by ``direction`` quarter turns, wrapping modulo 4."""

        self.rotation = (self.rotation + direction) % ROTATIONS

    def move(self, dcol: int, drow: int) -> None:
        """Shift the anchor by ``dcol`` columns and ``drow`` rows (down is positive)."""

        self.position = (self.row + drow, self.col + dcol)

    def blocks(self) -> List[Tuple[int, int]]:
        """Return the absolute ``(row, col)`` cells covered by this piece."""

        row, col = self.position
        return [(row + x, col + y) for x, y in shape_cells(self.shape, self.rotation)]
