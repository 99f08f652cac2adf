"""Sparse assembly: one (row, col, value) cell per call."""

from __future__ import annotations

from matcompose.core.state import MatrixComposeState

from ._checks import check_declared_shape, check_index


def assemble_cell(state, num_rows, num_cols, row_id, col_id, value):
    """Write a single cell of a matrix into a partial state.

    Cells that are never written keep the zero fill, so the matrix is
    stored densely whatever the sparsity of the input.

    Parameters
    ----------
    state : MatrixComposeState or None
        Partial state owned by the caller. None or an uninitialized state
        is initialized with ``(num_rows, num_cols)``.
    num_rows, num_cols : int
        Declared dimensions of the full matrix.
    row_id, col_id : int
        0-based cell position.
    value : float
        Cell value.

    Returns
    -------
    MatrixComposeState
        The updated state.
    """
    if state is None:
        state = MatrixComposeState()
    if state.num_cols == 0:
        state.initialize(num_rows, num_cols)
    else:
        check_declared_shape(state, num_rows, num_cols)

    row_id = check_index(row_id, num_rows, "row")
    col_id = check_index(col_id, num_cols, "col")
    state.matrix[row_id, col_id] = value
    return state


def sparse_partition_state(row_ids, col_ids, values, num_rows, num_cols, state=None):
    """Assemble the cells of one partition into a private state.

    Returns None when the partition is empty and no ``state`` was given.
    """
    for row_id, col_id, value in zip(row_ids, col_ids, values, strict=True):
        state = assemble_cell(state, num_rows, num_cols, row_id, col_id, value)
    return state
