"""Tests for distributed composition requiring a Dask client."""

import logging

import numpy as np
import pandas as pd
import pytest

pytest.importorskip("distributed")
dd = pytest.importorskip("dask.dataframe")

import dask

from matcompose.compose.dense import dense_partition_state
from matcompose.compose.driver import matrix_inverse
from matcompose.compose.merge import combine_states
from matcompose.core.errors import IncompatibleStatesError
from matcompose.dask._compose import (
    dask_matrix_inverse,
    distributed_compose_dense,
    distributed_compose_sparse,
    tree_reduce,
)
from matcompose.dask._utils import get_default_partitions, is_dask_collection, validate_dask_input


def _row_partitions(A, n_parts):
    chunks = np.array_split(np.arange(A.shape[0]), n_parts)
    return [(idx, [A[i] for i in idx]) for idx in chunks]


def _cells_frame(A):
    rows, cols = np.nonzero(A)
    return pd.DataFrame({"row_id": rows, "col_id": cols, "value": A[rows, cols]})


def test_tree_reduce_single_future(dask_client):
    f = dask_client.submit(lambda: 10)
    assert tree_reduce(dask_client, [f], lambda a, b: a + b) == 10


def test_tree_reduce_empty_returns_none(dask_client):
    assert tree_reduce(dask_client, [], lambda a, b: a + b) is None


@pytest.mark.parametrize("split_every", [2, 4, 8])
def test_tree_reduce_split_every(dask_client, split_every):
    futures = [dask_client.submit(lambda i=i: i, pure=False) for i in range(1, 17)]
    assert tree_reduce(dask_client, futures, lambda a, b: a + b, split_every=split_every) == sum(range(1, 17))


@pytest.mark.parametrize("n_parts", [1, 3, 8])
def test_distributed_compose_dense_matches_input(dask_client, square_matrix, n_parts):
    A = square_matrix
    state = distributed_compose_dense(dask_client, _row_partitions(A, n_parts), A.shape[0], split_every=2)
    np.testing.assert_array_equal(state.matrix, A)


def test_distributed_compose_sparse_matches_input(dask_client, square_matrix):
    A = square_matrix
    rows, cols = np.nonzero(A)
    parts = [(r, c, A[r, c]) for r, c in zip(np.array_split(rows, 4), np.array_split(cols, 4), strict=True)]
    state = distributed_compose_sparse(dask_client, parts, *A.shape)
    np.testing.assert_array_equal(state.matrix, A)


def test_distributed_compose_mismatched_partitions_raise(dask_client):
    parts = [(np.array([0]), [np.array([1.0, 2.0])]), (np.array([1]), [np.array([1.0, 2.0, 3.0])])]
    with pytest.raises(IncompatibleStatesError):
        distributed_compose_dense(dask_client, parts, 2)


def test_dask_matrix_inverse_sparse(dask_client, square_matrix):
    A = square_matrix
    ddf = dd.from_pandas(_cells_frame(A), npartitions=3)
    inv = dask_matrix_inverse(ddf, sparse=True, client=dask_client, n_partitions=3)
    np.testing.assert_allclose(inv, np.linalg.inv(A), atol=1e-10)


def test_matrix_inverse_dispatches_to_dask(dask_client):
    pdf = pd.DataFrame({"row_id": [0, 1], "col_id": [0, 1], "value": [4.0, 4.0]})
    ddf = dd.from_pandas(pdf, npartitions=2)
    assert is_dask_collection(ddf)
    logging.getLogger("distributed.shuffle").setLevel(logging.NOTSET)
    inv = matrix_inverse(ddf, sparse=True, client=dask_client, n_partitions=2)
    np.testing.assert_allclose(inv, [[0.25, 0.0], [0.0, 0.25]])
    assert logging.getLogger("distributed.shuffle").level == logging.ERROR


def test_validate_dask_input_missing_column():
    ddf = dd.from_pandas(pd.DataFrame({"row_id": [0]}), npartitions=1)
    with pytest.raises(ValueError, match="Columns not found"):
        validate_dask_input(ddf, ["row_id", "value"])


def test_get_default_partitions(dask_client):
    assert get_default_partitions(dask_client) == 2


def test_combine_states_tree_reduce_rebuilds_matrix(dask_client, square_matrix):
    A = square_matrix
    futures = [
        dask_client.submit(dense_partition_state, idx, rows, A.shape[0])
        for idx, rows in _row_partitions(A, 4)
    ]
    state = tree_reduce(dask_client, futures, combine_states, split_every=3)
    np.testing.assert_array_equal(state.matrix, A)

def test_tree_reduce_leaves_cached_futures_untouched(dask_client):
    a = dask_client.submit(dense_partition_state, np.array([0]), [np.array([1.0, 2.0])], 2)
    b = dask_client.submit(dense_partition_state, np.array([1]), [np.array([3.0, 4.0])], 2)

    first = tree_reduce(dask_client, [a, b], combine_states, split_every=2)
    second = tree_reduce(dask_client, [a, b], combine_states, split_every=2)

    np.testing.assert_array_equal(first.matrix, [[1.0, 2.0], [3.0, 4.0]])
    np.testing.assert_array_equal(second.matrix, [[1.0, 2.0], [3.0, 4.0]])
    np.testing.assert_array_equal(a.result().matrix, [[1.0, 2.0], [0.0, 0.0]])


def test_dask_matrix_inverse_rerun_is_stable(dask_client, square_matrix):
    A = square_matrix
    ddf = dd.from_pandas(_cells_frame(A), npartitions=4).persist()
    first = dask_matrix_inverse(ddf, sparse=True, client=dask_client, n_partitions=4, split_every=2)
    second = dask_matrix_inverse(ddf, sparse=True, client=dask_client, n_partitions=4, split_every=2)
    np.testing.assert_array_equal(first, second)
    np.testing.assert_allclose(second, np.linalg.inv(A), atol=1e-10)


def test_dask_matrix_inverse_dense_row_vectors(dask_client):
    pdf = pd.DataFrame({"row_id": [0, 1], "row_vec": [[1.0, 2.0], [3.0, 4.0]]})
    # keep the list column as objects instead of pyarrow strings
    with dask.config.set({"dataframe.convert-string": False}):
        ddf = dd.from_pandas(pdf, npartitions=2)
        inv = dask_matrix_inverse(ddf, client=dask_client, n_partitions=2)
    np.testing.assert_allclose(inv, [[-2.0, 1.0], [1.5, -0.5]])


def test_dask_matrix_inverse_skips_null_ids(dask_client):
    pdf = pd.DataFrame({"row_id": [0, 1, None], "col_id": [0, 1, 0], "value": [4.0, 4.0, 9.0]})
    ddf = dd.from_pandas(pdf, npartitions=2)
    inv = dask_matrix_inverse(ddf, sparse=True, num_rows=2, num_cols=2, client=dask_client, n_partitions=2)
    np.testing.assert_allclose(inv, [[0.25, 0.0], [0.0, 0.25]])
