from __future__ import annotations

import random

import numpy as np
import pytest

from blockdrop.engine import BoardEngine, Command, KickPolicy
from blockdrop.tetromino import TetrominoType


def test_first_piece_is_active_before_any_tick(make_engine) -> None:
    engine = make_engine(TetrominoType.O, TetrominoType.T)
    assert engine.active.shape is TetrominoType.O
    assert engine.active.position == (0, 3)
    assert engine.preview.shape is TetrominoType.T
    # Only the active piece is stamped; the preview never is.
    assert int((engine.grid != 0).sum()) == 4
    assert engine.cell_at(1, 4) == TetrominoType.O
    assert engine.score == 0


def test_invalid_arguments_raise() -> None:
    with pytest.raises(ValueError):
        BoardEngine(3, 10)
    with pytest.raises(ValueError):
        BoardEngine(22, 10, drop_interval=0)
    with pytest.raises(ValueError):
        BoardEngine(kick_policy="sideways")


def test_unknown_command_raises(make_engine) -> None:
    engine = make_engine()
    with pytest.raises(ValueError):
        engine.advance(9)


def test_cell_at_out_of_range_raises(make_engine) -> None:
    engine = make_engine()
    with pytest.raises(IndexError):
        engine.cell_at(engine.rows, 0)


def test_integer_commands_are_accepted(make_engine) -> None:
    engine = make_engine(TetrominoType.O, TetrominoType.O)
    assert engine.advance(int(Command.LEFT))
    assert engine.active.col == 2


def test_seeded_engines_deal_the_same_pieces() -> None:
    first = BoardEngine(rng=random.Random(7))
    second = BoardEngine(rng=random.Random(7))
    for _ in range(50):
        first.advance(Command.DROP)
        second.advance(Command.DROP)
        assert first.preview.shape is second.preview.shape
    assert np.array_equal(first.grid, second.grid)


@pytest.mark.parametrize("policy", list(KickPolicy))
def test_random_play_keeps_invariants(policy: KickPolicy) -> None:
    rng = random.Random(1234)
    engine = BoardEngine(drop_interval=3, kick_policy=policy, rng=random.Random(99))
    commands = list(Command)
    last_score = 0
    for _ in range(5000):
        running = engine.advance(rng.choice(commands))
        assert engine.score >= last_score
        last_score = engine.score
        assert engine.grid.min() >= 0 and engine.grid.max() <= 7
        if engine.active.shape is not TetrominoType.EMPTY:
            # The stamped active piece is exactly where the engine says it is.
            for row, col in engine.active.blocks():
                assert engine.cell_at(row, col) == engine.active.shape
        if not running:
            break
    assert engine.game_over or engine.score >= 0
