from __future__ import annotations

import numpy as np
import pytest

from blockdrop.tetromino import (
    PLAYABLE_TYPES,
    SHAPE_MASKS,
    Tetromino,
    TetrominoType,
    cell_index,
    shape_cells,
    shape_grid,
)


@pytest.mark.parametrize("rotation", range(4))
def test_cell_index_is_a_permutation_of_the_window(rotation: int) -> None:
    indices = sorted(cell_index(x, y, rotation) for x in range(4) for y in range(4))
    assert indices == list(range(16))


def test_rotation_wraps_modulo_four() -> None:
    for x in range(4):
        for y in range(4):
            assert cell_index(x, y, -1) == cell_index(x, y, 3)
            assert cell_index(x, y, 5) == cell_index(x, y, 1)


@pytest.mark.parametrize("shape", PLAYABLE_TYPES)
def test_next_rotation_is_a_quarter_turn_of_the_same_mask(shape: TetrominoType) -> None:
    for rotation in range(4):
        assert np.array_equal(
            shape_grid(shape, rotation + 1), np.rot90(shape_grid(shape, rotation))
        )


@pytest.mark.parametrize("shape", PLAYABLE_TYPES)
def test_every_rotation_has_four_cells(shape: TetrominoType) -> None:
    for rotation in range(4):
        assert len(shape_cells(shape, rotation)) == 4


def test_empty_sentinel_has_no_cells() -> None:
    assert SHAPE_MASKS[TetrominoType.EMPTY] == 0
    for rotation in range(4):
        assert shape_grid(TetrominoType.EMPTY, rotation).sum() == 0


def test_o_piece_is_a_square_in_the_middle_of_the_window() -> None:
    expected = np.array(
        [[0, 0, 0, 0], [0, 1, 1, 0], [0, 1, 1, 0], [0, 0, 0, 0]], dtype=np.uint8
    )
    for rotation in range(4):
        assert np.array_equal(shape_grid(TetrominoType.O, rotation), expected)


def test_i_piece_alternates_between_row_and_column() -> None:
    assert shape_cells(TetrominoType.I, 0) == [(1, 0), (1, 1), (1, 2), (1, 3)]
    assert shape_cells(TetrominoType.I, 1) == [(0, 1), (1, 1), (2, 1), (3, 1)]


def test_blocks_are_offset_by_position() -> None:
    piece = Tetromino(TetrominoType.O, position=(0, 3))
    assert piece.blocks() == [(1, 4), (1, 5), (2, 4), (2, 5)]
    piece.move(-1, 2)
    assert piece.position == (2, 2)
    piece.rotate(-1)
    assert piece.rotation == 3
