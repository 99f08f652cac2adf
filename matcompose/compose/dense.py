"""Dense assembly: one whole row per call."""

from __future__ import annotations

import numpy as np

from matcompose.core.state import MatrixComposeState

from ._checks import check_declared_shape, check_index


def assemble_row(state, num_rows, row_id, row):
    """Write one row of a matrix into a partial state.

    The first accepted row fixes the shape at ``(num_rows, len(row))``.
    Every later row must agree with it.

    Parameters
    ----------
    state : MatrixComposeState or None
        Partial state owned by the caller. None or an uninitialized state
        is initialized on this call.
    num_rows : int
        Total number of rows of the matrix being assembled.
    row_id : int
        0-based position of ``row``.
    row : array_like of shape (n_cols,)
        Row values.

    Returns
    -------
    MatrixComposeState
        The updated (possibly newly initialized) state.

    Raises
    ------
    ShapeMismatchError
        If ``num_rows`` or ``len(row)`` disagree with the fixed shape.
    IndexOutOfRangeError
        If ``row_id`` is outside ``[0, num_rows)``.
    """
    row = np.asarray(row, dtype=np.float64)
    if row.ndim != 1:
        raise ValueError(f"row must be one-dimensional, got shape {row.shape}.")

    if state is None:
        state = MatrixComposeState()
    if state.num_cols == 0:
        state.initialize(num_rows, row.size)
    else:
        check_declared_shape(state, num_rows, row.size)

    row_id = check_index(row_id, num_rows, "row")
    state.matrix[row_id] = row
    return state


def dense_partition_state(row_ids, rows, num_rows, state=None):
    """Assemble every row of one partition into a private state.

    Parameters
    ----------
    row_ids : array_like of int
        Row positions for this partition.
    rows : sequence of array_like
        Row values, aligned with ``row_ids``.
    num_rows : int
        Total number of rows of the full matrix.
    state : MatrixComposeState or None, default None
        State to continue filling, e.g. across batches of one partition.

    Returns
    -------
    MatrixComposeState or None
        The partition state, or None when the partition is empty.
    """
    for row_id, row in zip(row_ids, rows, strict=True):
        state = assemble_row(state, num_rows, row_id, row)
    return state
