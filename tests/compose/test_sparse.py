"""Tests for the sparse cell assembler."""

import numpy as np
import pytest

from matcompose.compose.sparse import assemble_cell, sparse_partition_state
from matcompose.core.errors import IndexOutOfRangeError, ShapeMismatchError


def test_first_cell_initializes_with_declared_shape():
    state = assemble_cell(None, 2, 3, 1, 2, 7.5)
    assert state.shape == (2, 3)
    expected = np.zeros((2, 3))
    expected[1, 2] = 7.5
    np.testing.assert_array_equal(state.matrix, expected)


def test_unwritten_cells_stay_zero():
    state = None
    for (i, j), v in {(0, 0): 4.0, (1, 1): 4.0}.items():
        state = assemble_cell(state, 2, 2, i, j, v)
    np.testing.assert_array_equal(state.matrix, [[4, 0], [0, 4]])


@pytest.mark.parametrize("dims", [(3, 2), (2, 3)])
def test_declared_shape_change_raises(dims):
    state = assemble_cell(None, 2, 2, 0, 0, 1.0)
    with pytest.raises(ShapeMismatchError):
        assemble_cell(state, *dims, 0, 1, 1.0)


@pytest.mark.parametrize("col_id", [-1, 2, 5])
def test_col_id_out_of_range(col_id):
    with pytest.raises(IndexOutOfRangeError, match="Invalid col id"):
        assemble_cell(None, 2, 2, 0, col_id, 1.0)


@pytest.mark.parametrize("row_id", [-1, 2])
def test_row_id_out_of_range(row_id):
    with pytest.raises(IndexOutOfRangeError, match="Invalid row id"):
        assemble_cell(None, 2, 2, row_id, 0, 1.0)


def test_partition_state_matches_dense_scatter(rng):
    n_rows, n_cols = 4, 5
    rows = np.array([0, 3, 1, 2])
    cols = np.array([4, 0, 1, 2])
    values = rng.standard_normal(4)
    state = sparse_partition_state(rows, cols, values, n_rows, n_cols)

    expected = np.zeros((n_rows, n_cols))
    expected[rows, cols] = values
    np.testing.assert_array_equal(state.matrix, expected)


def test_partition_state_continues_given_state():
    state = sparse_partition_state([0], [0], [1.0], 2, 2)
    state = sparse_partition_state([1], [1], [2.0], 2, 2, state=state)
    np.testing.assert_array_equal(state.matrix, [[1, 0], [0, 2]])
