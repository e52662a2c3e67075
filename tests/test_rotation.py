from __future__ import annotations

import pytest

from blockdrop.engine import Command, KickPolicy
from blockdrop.tetromino import TetrominoType


def test_rotation_in_open_space_does_not_move_the_piece(make_engine) -> None:
    engine = make_engine(TetrominoType.T, TetrominoType.T)
    engine.set_active(TetrominoType.T, position=(10, 3))

    engine.advance(Command.ROTATE_CW)
    assert engine.active.rotation == 1
    assert engine.active.position == (10, 3)

    engine.advance(Command.ROTATE_CCW)
    engine.advance(Command.ROTATE_CCW)
    assert engine.active.rotation == 3
    assert engine.active.position == (10, 3)


def test_rotation_kicks_left_off_the_right_wall(make_engine) -> None:
    engine = make_engine(TetrominoType.I, TetrominoType.I)
    # Vertical I hugging the right wall: cells in column 9.
    engine.set_active(TetrominoType.I, rotation=3, position=(10, 7))

    engine.advance(Command.ROTATE_CW)
    assert engine.active.rotation == 0
    assert engine.active.col == 6
    assert sorted(col for _, col in engine.active.blocks()) == [6, 7, 8, 9]


def test_rotation_kicks_right_off_the_left_wall(make_engine) -> None:
    engine = make_engine(TetrominoType.I, TetrominoType.I)
    # Vertical I hugging the left wall: cells in column 0.
    engine.set_active(TetrominoType.I, rotation=1, position=(10, -1))

    engine.advance(Command.ROTATE_CW)
    assert engine.active.rotation == 2
    assert engine.active.col == 0
    assert sorted(col for _, col in engine.active.blocks()) == [0, 1, 2, 3]


def test_revert_policy_keeps_piece_when_no_nudge_fits(make_engine) -> None:
    engine = make_engine(TetrominoType.I, TetrominoType.I, kick_policy=KickPolicy.REVERT)
    # Vertical I in column 9; the horizontal state needs columns 8..11 and no
    # single-column nudge brings it on board.
    engine.set_active(TetrominoType.I, rotation=1, position=(10, 8))

    engine.advance(Command.ROTATE_CW)
    assert engine.active.rotation == 1
    assert engine.active.col == 8
    assert [engine.cell_at(row, 9) for row in range(10, 14)] == [TetrominoType.I] * 4


def test_cycle_policy_keeps_turning_until_a_state_fits(make_engine) -> None:
    engine = make_engine(TetrominoType.I, TetrominoType.I, kick_policy=KickPolicy.CYCLE)
    engine.set_active(TetrominoType.I, rotation=1, position=(10, 8))

    engine.advance(Command.ROTATE_CW)
    # Rotation 2 cannot fit anywhere; rotation 3 fits one column left.
    assert engine.active.rotation == 3
    assert engine.active.col == 7
    assert [engine.cell_at(row, 9) for row in range(10, 14)] == [TetrominoType.I] * 4


@pytest.mark.parametrize("policy", list(KickPolicy))
def test_boxed_in_piece_never_overlaps_locked_cells(make_engine, grid, policy) -> None:
    engine = make_engine(TetrominoType.T, TetrominoType.T, kick_policy=policy)
    # A one-cell-wide shaft around a vertical I leaves no room to turn.
    for row in range(8, 16):
        for col in range(10):
            if col != 5:
                grid[row][col] = int(TetrominoType.Z)
    engine.set_active(TetrominoType.I, rotation=1, position=(10, 4))
    engine.load_grid(grid)
    locked = int((engine.grid == TetrominoType.Z).sum())

    engine.advance(Command.ROTATE_CW)
    assert sorted(engine.active.blocks()) == [(row, 5) for row in range(10, 14)]
    assert int((engine.grid == TetrominoType.Z).sum()) == locked
    if policy is KickPolicy.REVERT:
        assert engine.active.rotation == 1
    else:
        # Rotation 3 reaches the same column from one step further left.
        assert engine.active.rotation == 3
        assert engine.active.col == 3
