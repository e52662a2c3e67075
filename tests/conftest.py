from __future__ import annotations

import pytest

from blockdrop.engine import BoardEngine
from blockdrop.tetromino import TetrominoType


class ScriptedRandom:
    """Random source that hands out a fixed sequence of shapes, then ``I``."""

    def __init__(self, *shapes: TetrominoType) -> None:
        self._shapes = [int(s) for s in shapes]

    def randrange(self, start: int, stop: int) -> int:
        if self._shapes:
            return self._shapes.pop(0)
        return start


@pytest.fixture
def make_engine():
    def factory(*shapes: TetrominoType, **kwargs) -> BoardEngine:
        kwargs.setdefault("drop_interval", 1000)
        return BoardEngine(rng=ScriptedRandom(*shapes), **kwargs)

    return factory


def empty_grid(rows: int = 22, cols: int = 10) -> list[list[int]]:
    return [[0] * cols for _ in range(rows)]


@pytest.fixture
def grid():
    return empty_grid()
