"""Per-partition assembly from pandas frames."""

from __future__ import annotations

from matcompose.compose._checks import as_index_array
from matcompose.compose.dense import dense_partition_state
from matcompose.compose.sparse import sparse_partition_state


def dense_state_from_pandas(pdf, row_id, row_vec, num_rows, state=None):
    """Assemble the rows of one pandas partition.

    Parameters
    ----------
    pdf : pandas.DataFrame
        Partition with a row position column and a row vector column.
    row_id, row_vec : str
        Column names.
    num_rows : int
        Declared row count of the full matrix.
    state : MatrixComposeState or None, default None
        State carried over from an earlier batch of the same partition.

    Returns
    -------
    MatrixComposeState or None
        Partition state, or ``state`` unchanged for an empty partition.
    """
    if len(pdf) == 0:
        return state
    row_ids = as_index_array(pdf[row_id].to_numpy(), "row")
    return dense_partition_state(row_ids, list(pdf[row_vec]), num_rows, state=state)


def sparse_state_from_pandas(pdf, row_id, col_id, value, num_rows, num_cols, state=None):
    """Assemble the cells of one pandas partition."""
    if len(pdf) == 0:
        return state
    return sparse_partition_state(
        as_index_array(pdf[row_id].to_numpy(), "row"),
        as_index_array(pdf[col_id].to_numpy(), "col"),
        pdf[value].to_numpy(),
        num_rows,
        num_cols,
        state=state,
    )


def partition_state_from_pandas(pdf, config, num_rows, num_cols, state=None):
    """Dispatch to the dense or sparse partition assembler for ``config``."""
    if config.sparse:
        return sparse_state_from_pandas(pdf, config.row_id, config.col_id, config.value, num_rows, num_cols, state)
    return dense_state_from_pandas(pdf, config.row_id, config.row_vec, num_rows, state)
