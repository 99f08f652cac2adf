"""Tests for the dense row assembler."""

import numpy as np
import pytest

from matcompose.compose.dense import assemble_row, dense_partition_state
from matcompose.core.errors import IndexOutOfRangeError, ShapeMismatchError
from matcompose.core.state import MatrixComposeState


def test_first_row_initializes_absent_state():
    state = assemble_row(None, 3, 1, [1.0, 2.0])
    assert state.shape == (3, 2)
    np.testing.assert_array_equal(state.matrix, [[0, 0], [1, 2], [0, 0]])


def test_first_row_initializes_uninitialized_state():
    state = MatrixComposeState()
    out = assemble_row(state, 2, 0, [5.0, 6.0])
    assert out is state
    assert state.shape == (2, 2)


def test_rows_overwrite_their_slot():
    state = assemble_row(None, 2, 0, [1.0, 2.0])
    state = assemble_row(state, 2, 1, [3.0, 4.0])
    np.testing.assert_array_equal(state.matrix, [[1, 2], [3, 4]])


def test_row_length_is_checked_against_column_count():
    state = assemble_row(None, 2, 0, [1.0, 2.0, 3.0])
    state = assemble_row(state, 2, 1, [4.0, 5.0, 6.0])
    np.testing.assert_array_equal(state.matrix, [[1, 2, 3], [4, 5, 6]])

    with pytest.raises(ShapeMismatchError, match="not consistent"):
        assemble_row(state, 2, 0, [1.0, 2.0])


def test_declared_row_count_change_raises():
    state = assemble_row(None, 2, 0, [1.0, 2.0])
    with pytest.raises(ShapeMismatchError):
        assemble_row(state, 3, 2, [1.0, 2.0])


@pytest.mark.parametrize("row_id", [2, -1, 100])
def test_row_id_out_of_range(row_id):
    with pytest.raises(IndexOutOfRangeError, match="Invalid row id"):
        assemble_row(None, 2, row_id, [1.0, 2.0])


def test_row_id_equal_to_declared_rows_rejected_on_initialized_state():
    state = assemble_row(None, 2, 0, [1.0, 2.0])
    with pytest.raises(IndexOutOfRangeError):
        assemble_row(state, 2, 2, [3.0, 4.0])
    np.testing.assert_array_equal(state.matrix, [[1, 2], [0, 0]])


def test_non_integer_row_id_raises():
    with pytest.raises(TypeError):
        assemble_row(None, 2, 1.0, [1.0, 2.0])


def test_two_dimensional_row_raises():
    with pytest.raises(ValueError, match="one-dimensional"):
        assemble_row(None, 2, 0, [[1.0, 2.0]])


def test_empty_row_cannot_initialize():
    with pytest.raises(ValueError, match="num_cols"):
        assemble_row(None, 2, 0, [])


def test_partition_state_fills_its_rows(well_conditioned_matrix):
    A = well_conditioned_matrix
    n = A.shape[0]
    ids = np.array([4, 0, 2])
    state = dense_partition_state(ids, [A[i] for i in ids], n)
    expected = np.zeros_like(A)
    expected[ids] = A[ids]
    np.testing.assert_array_equal(state.matrix, expected)


def test_empty_partition_returns_none():
    assert dense_partition_state([], [], 3) is None
