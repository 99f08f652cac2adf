"""Local entry points: compose a matrix from a DataFrame and invert it."""

from __future__ import annotations

import logging
import os

import numpy as np

from matcompose.core.config import ComposeConfig
from matcompose.core.constants import (
    COL_ID_COLUMN,
    DEFAULT_SPLIT_EVERY,
    ROW_ID_COLUMN,
    ROW_VEC_COLUMN,
    VALUE_COLUMN,
    Layout,
)
from matcompose.core.dataframe import to_polars, validate_columns
from matcompose.core.parallel import parallel_map

from ._checks import as_index_array
from .dense import dense_partition_state
from .inverse import invert_state
from .merge import reduce_states
from .sparse import sparse_partition_state

log = logging.getLogger(__name__)


def compose_dense(
    data,
    row_id=ROW_ID_COLUMN,
    row_vec=ROW_VEC_COLUMN,
    num_rows=None,
    n_partitions=None,
    n_jobs=1,
    split_every=DEFAULT_SPLIT_EVERY,
):
    """Compose a matrix from a frame holding one row vector per record.

    Parameters
    ----------
    data : DataFrame
        Any Arrow-compatible frame (polars, pandas, pyarrow).
    row_id : str, default "row_id"
        Column with the 0-based row position.
    row_vec : str, default "row_vec"
        List column with the row values.
    num_rows : int or None, default None
        Declared row count. Defaults to the number of records.
    n_partitions : int or None, default None
        Number of partitions assembled independently before merging.
        Defaults to the number of workers.
    n_jobs : int, default 1
        1 = sequential, -1 = all cores, >1 = that many threads.
    split_every : int or None, default 8
        Fan-in of the reduction tree; None folds sequentially.

    Returns
    -------
    MatrixComposeState or None
        The merged state, or None for an empty frame.
    """
    config = ComposeConfig(
        sparse=False,
        row_id=row_id,
        row_vec=row_vec,
        num_rows=num_rows,
        n_partitions=n_partitions,
        n_jobs=n_jobs,
        split_every=split_every,
    )
    return compose_local(data, config)


def compose_sparse(
    data,
    row_id=ROW_ID_COLUMN,
    col_id=COL_ID_COLUMN,
    value=VALUE_COLUMN,
    num_rows=None,
    num_cols=None,
    n_partitions=None,
    n_jobs=1,
    split_every=DEFAULT_SPLIT_EVERY,
):
    """Compose a matrix from a frame of ``(row, col, value)`` triples.

    Cells absent from the frame are zero. ``num_rows`` / ``num_cols``
    default to the largest row / column index plus one. See
    :func:`compose_dense` for the remaining parameters.
    """
    config = ComposeConfig(
        sparse=True,
        row_id=row_id,
        col_id=col_id,
        value=value,
        num_rows=num_rows,
        num_cols=num_cols,
        n_partitions=n_partitions,
        n_jobs=n_jobs,
        split_every=split_every,
    )
    return compose_local(data, config)


def matrix_inverse(
    data,
    sparse=False,
    row_id=ROW_ID_COLUMN,
    row_vec=ROW_VEC_COLUMN,
    col_id=COL_ID_COLUMN,
    value=VALUE_COLUMN,
    num_rows=None,
    num_cols=None,
    layout=Layout.ROW_MAJOR,
    n_partitions=None,
    n_jobs=1,
    split_every=DEFAULT_SPLIT_EVERY,
    client=None,
    spark=None,
):
    """Compose a square matrix from a frame and return its inverse.

    Passing a Dask DataFrame dispatches to
    :func:`~matcompose.dask.dask_matrix_inverse` and a Spark DataFrame to
    :func:`~matcompose.spark.spark_matrix_inverse`.

    Parameters
    ----------
    data : DataFrame
        Polars, pandas, pyarrow, Dask or Spark frame.
    sparse : bool, default False
        False reads one row vector per record (``row_id``, ``row_vec``);
        True reads cells (``row_id``, ``col_id``, ``value``).
    layout : {"row", "column"}, default "row"
        Memory layout of the returned inverse.
    client : distributed.Client or None
        Dask client, used only for Dask input.
    spark : pyspark.sql.SparkSession or None
        Spark session, used only for Spark input.

    Returns
    -------
    ndarray or None
        The inverse, or None when the input holds no entries.

    Raises
    ------
    numpy.linalg.LinAlgError
        If the composed matrix is singular or not square.
    """
    options = {
        "sparse": sparse,
        "row_id": row_id,
        "row_vec": row_vec,
        "col_id": col_id,
        "value": value,
        "num_rows": num_rows,
        "num_cols": num_cols,
        "layout": layout,
        "n_partitions": n_partitions,
        "split_every": split_every,
    }

    from matcompose.dask._utils import is_dask_collection

    if is_dask_collection(data):
        from matcompose.dask._compose import dask_matrix_inverse

        return dask_matrix_inverse(data, client=client, **options)

    from matcompose.spark._utils import is_spark_dataframe

    if is_spark_dataframe(data):
        from matcompose.spark._compose import spark_matrix_inverse

        return spark_matrix_inverse(data, spark=spark, **options)

    config = ComposeConfig(n_jobs=n_jobs, **options)
    return invert_state(compose_local(data, config), config.layout)


def compose_local(data, config):
    """Partition a frame, assemble each partition, and reduce the states."""
    df = to_polars(data)
    validate_columns(df, config.required_columns)
    df = df.select(config.required_columns).drop_nulls()
    if df.height == 0:
        log.info("compose_local: no entries, nothing to compose")
        return None

    n_partitions = min(_default_partitions(config), df.height)
    chunks = np.array_split(np.arange(df.height), n_partitions)

    if config.sparse:
        row_ids = as_index_array(df[config.row_id].to_numpy(), "row")
        col_ids = as_index_array(df[config.col_id].to_numpy(), "col")
        values = df[config.value].to_numpy()
        num_rows = config.num_rows or int(row_ids.max()) + 1
        num_cols = config.num_cols or int(col_ids.max()) + 1
        worker = sparse_partition_state
        args_list = [(row_ids[idx], col_ids[idx], values[idx], num_rows, num_cols) for idx in chunks]
    else:
        row_ids = as_index_array(df[config.row_id].to_numpy(), "row")
        rows = df[config.row_vec].to_list()
        num_rows = config.num_rows or df.height
        worker = dense_partition_state
        args_list = [(row_ids[idx], [rows[i] for i in idx], num_rows) for idx in chunks]

    log.info(
        "compose_local: %d entries in %d partitions (n_jobs=%d) → reduce",
        df.height,
        n_partitions,
        config.n_jobs,
    )
    states = parallel_map(worker, args_list, n_jobs=config.n_jobs)
    return reduce_states(states, split_every=config.split_every)


def _default_partitions(config):
    if config.n_partitions is not None:
        return config.n_partitions
    if config.n_jobs == -1:
        return os.cpu_count() or 1
    return config.n_jobs
