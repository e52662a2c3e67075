"""Tick-driven falling-block puzzle engine."""

from .board import Board
from .tetromino import Tetromino, TetrominoType, cell_index, shape_grid
from .engine import BoardEngine, Command, KickPolicy
from .utils import render_text

__all__ = [
    "Board",
    "BoardEngine",
    "Command",
    "KickPolicy",
    "Tetromino",
    "TetrominoType",
    "cell_index",
    "render_text",
    "shape_grid",
]
