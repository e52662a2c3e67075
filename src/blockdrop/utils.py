"""Text rendering helpers shared by the front-ends."""

from __future__ import annotations

from typing import List

from .engine import BoardEngine
from .tetromino import Tetromino, TetrominoType, shape_grid

FILLED = "#"
BLANK = "."


def grid_lines(engine: BoardEngine) -> List[str]:
    """Return one string per board row, ``#`` for blocks and ``.`` for empty."""

    return [
        "".join(FILLED if cell else BLANK for cell in row) for row in engine.grid
    ]


def preview_lines(piece: Tetromino) -> List[str]:
    """Return the 4x4 window of ``piece`` as text.

    The preview piece is never stamped into the board, so it is drawn straight
    from the shape table.
    """

    if piece.shape is TetrominoType.EMPTY:
        return [BLANK * 4] * 4
    grid = shape_grid(piece.shape, piece.rotation)
    return ["".join(FILLED if cell else BLANK for cell in row) for row in grid]


def render_text(engine: BoardEngine) -> str:
    """Return a printable frame: board on the left, next piece and score beside it."""

    side = ["Next:", *preview_lines(engine.preview), "", f"Score: {engine.score}"]
    if engine.game_over:
        side.append("GAME OVER")
    lines = []
    for i, row in enumerate(grid_lines(engine)):
        extra = side[i] if i < len(side) else ""
        lines.append(f"|{row}|  {extra}".rstrip())
    lines.append("+" + "-" * engine.cols + "+")
    return "\n".join(lines)
