"""Distributed matrix composition via per-partition states and tree-reduce."""

from __future__ import annotations

import logging

from matcompose.compose.dense import dense_partition_state
from matcompose.compose.inverse import invert_state
from matcompose.compose.merge import _reduce_group, combine_states
from matcompose.compose.sparse import sparse_partition_state
from matcompose.core.config import ComposeConfig
from matcompose.core.constants import (
    COL_ID_COLUMN,
    DEFAULT_SPLIT_EVERY,
    ROW_ID_COLUMN,
    ROW_VEC_COLUMN,
    VALUE_COLUMN,
    Layout,
)
from matcompose.distributed._partition import partition_state_from_pandas

from ._utils import get_default_partitions, get_or_create_client, validate_dask_input

log = logging.getLogger("matcompose.dask.compose")


def tree_reduce(client, futures, combine_fn, split_every=DEFAULT_SPLIT_EVERY):
    """Tree-reduce a list of futures with configurable fan-in.

    Groups ``split_every`` futures per reduction step and reduces each
    group in a single task on one worker. With 64 futures and
    ``split_every=8`` this produces 9 tasks (8 + 1) instead of the 63
    tasks created by pairwise reduction.

    Parameters
    ----------
    client : distributed.Client
        Dask distributed client.
    futures : list of Future
        Futures to reduce.
    combine_fn : callable
        Pairwise combiner ``(a, b) -> c``.
    split_every : int, default 8
        Number of futures to combine per reduction step.

    Returns
    -------
    result
        The fully reduced result, materialized on the driver, or None when
        ``futures`` is empty.
    """
    if not futures:
        return None
    if split_every < 2:
        raise ValueError(f"split_every must be at least 2, got {split_every}.")
    while len(futures) > 1:
        new_futures = []
        for i in range(0, len(futures), split_every):
            group = futures[i : i + split_every]
            if len(group) == 1:
                new_futures.append(group[0])
            else:
                new_futures.append(client.submit(_reduce_group, combine_fn, *group))
        futures = new_futures
    return futures[0].result()


def distributed_compose_dense(client, partitions, num_rows, split_every=DEFAULT_SPLIT_EVERY):
    """Compose a matrix from row partitions spread over Dask workers.

    Parameters
    ----------
    client : distributed.Client
        Dask distributed client.
    partitions : list of (row_ids, rows) tuples
        Per-partition row positions and row vectors.
    num_rows : int
        Declared row count of the full matrix.
    split_every : int, default 8
        Fan-in of the reduction tree.

    Returns
    -------
    MatrixComposeState or None
        The merged state.
    """
    log.info("distributed_compose_dense: %d partitions → tree-reduce", len(partitions))
    futures = [client.submit(dense_partition_state, row_ids, rows, num_rows) for row_ids, rows in partitions]
    return tree_reduce(client, futures, combine_states, split_every)


def distributed_compose_sparse(client, partitions, num_rows, num_cols, split_every=DEFAULT_SPLIT_EVERY):
    """Compose a matrix from cell partitions spread over Dask workers.

    ``partitions`` is a list of ``(row_ids, col_ids, values)`` tuples. See
    :func:`distributed_compose_dense` for the remaining parameters.
    """
    log.info("distributed_compose_sparse: %d partitions → tree-reduce", len(partitions))
    futures = [
        client.submit(sparse_partition_state, row_ids, col_ids, values, num_rows, num_cols)
        for row_ids, col_ids, values in partitions
    ]
    return tree_reduce(client, futures, combine_states, split_every)


def dask_compose(client, ddf, config):
    """Assemble one state per Dask partition and tree-reduce them.

    Parameters
    ----------
    client : distributed.Client
        Dask distributed client.
    ddf : dask.dataframe.DataFrame
        Input frame with the columns named by ``config``.
    config : ComposeConfig
        Column names, declared dimensions and reduction settings.

    Returns
    -------
    MatrixComposeState or None
        The merged state, or None when the frame holds no entries.
    """
    validate_dask_input(ddf, config.required_columns)
    ddf = ddf[config.required_columns].dropna()
    n_partitions = config.n_partitions or get_default_partitions(client)
    ddf = ddf.repartition(npartitions=n_partitions)

    num_rows, num_cols = _declared_dims(client, ddf, config)
    if num_rows == 0:
        log.info("dask_compose: no entries, nothing to compose")
        return None

    part_futures = client.compute(ddf.to_delayed())
    futures = [
        client.submit(partition_state_from_pandas, part, config, num_rows, num_cols) for part in part_futures
    ]
    log.info("dask_compose: %d partitions → tree-reduce", len(futures))
    return tree_reduce(client, futures, combine_states, config.split_every or DEFAULT_SPLIT_EVERY)


def dask_matrix_inverse(
    data,
    sparse=False,
    row_id=ROW_ID_COLUMN,
    row_vec=ROW_VEC_COLUMN,
    col_id=COL_ID_COLUMN,
    value=VALUE_COLUMN,
    num_rows=None,
    num_cols=None,
    layout=Layout.ROW_MAJOR,
    client=None,
    n_partitions=None,
    split_every=DEFAULT_SPLIT_EVERY,
):
    """Compose a matrix from a Dask DataFrame and invert it on the driver.

    Users do not need to call this function directly. Passing a Dask
    DataFrame to :func:`~matcompose.matrix_inverse` dispatches here.

    Parameters
    ----------
    data : dask.dataframe.DataFrame
        Row vectors (``sparse=False``) or cells (``sparse=True``).
    client : distributed.Client or None
        Dask client. The current client, or a new local one, when None.
    n_partitions : int or None
        Number of partition states. Defaults to the cluster thread count.

    Returns
    -------
    ndarray or None
        The inverse in the requested layout.
    """
    client = get_or_create_client(client)
    logging.getLogger("distributed.shuffle").setLevel(logging.ERROR)

    config = ComposeConfig(
        sparse=sparse,
        row_id=row_id,
        row_vec=row_vec,
        col_id=col_id,
        value=value,
        num_rows=num_rows,
        num_cols=num_cols,
        layout=layout,
        n_partitions=n_partitions,
        split_every=split_every,
    )
    state = dask_compose(client, data, config)
    return invert_state(state, config.layout)


def _declared_dims(client, ddf, config):
    """Resolve declared dimensions, computing defaults from the data."""
    if not config.sparse:
        if config.num_rows is not None:
            return config.num_rows, None
        return int(client.compute(ddf[config.row_id].count()).result()), None

    if config.num_rows is not None and config.num_cols is not None:
        return config.num_rows, config.num_cols
    n_fut = client.compute(ddf[config.row_id].count())
    r_fut = client.compute(ddf[config.row_id].max())
    c_fut = client.compute(ddf[config.col_id].max())
    n_entries, max_row, max_col = client.gather([n_fut, r_fut, c_fut])
    if n_entries == 0:
        return 0, 0
    num_rows = config.num_rows or int(max_row) + 1
    num_cols = config.num_cols or int(max_col) + 1
    return num_rows, num_cols
