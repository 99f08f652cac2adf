"""Distributed matrix composition via Spark ``mapInPandas`` and driver-side reduce."""

from __future__ import annotations

import logging

import pandas as pd

from matcompose.compose.inverse import invert_state
from matcompose.compose.merge import reduce_states
from matcompose.core.config import ComposeConfig
from matcompose.core.constants import (
    COL_ID_COLUMN,
    DEFAULT_SPLIT_EVERY,
    ROW_ID_COLUMN,
    ROW_VEC_COLUMN,
    VALUE_COLUMN,
    Layout,
)
from matcompose.core.state import MatrixComposeState
from matcompose.distributed._partition import partition_state_from_pandas

from ._utils import get_default_partitions, get_or_create_spark, validate_spark_input

log = logging.getLogger("matcompose.spark.compose")


def spark_compose(spark, sdf, config):
    r"""Assemble one state per Spark partition and reduce them on the driver.

    Each partition folds its Arrow batches into a single private state and
    emits it as the persisted float64 buffer. The driver collects the
    small :math:`2 + n \times k` payloads and merges them.

    Parameters
    ----------
    spark : pyspark.sql.SparkSession
        Active Spark session.
    sdf : pyspark.sql.DataFrame
        Input frame with the columns named by ``config``.
    config : ComposeConfig
        Column names, declared dimensions and reduction settings.

    Returns
    -------
    MatrixComposeState or None
        The merged state, or None when the frame holds no entries.
    """
    from pyspark.sql.types import BinaryType, StructField, StructType

    validate_spark_input(sdf, config.required_columns)
    sdf = sdf.select(*config.required_columns).dropna()
    n_partitions = config.n_partitions or get_default_partitions(spark)
    sdf = sdf.repartition(n_partitions)

    num_rows, num_cols = _declared_dims(sdf, config)
    if num_rows == 0:
        log.info("spark_compose: no entries, nothing to compose")
        return None

    out_schema = StructType([StructField("state_bytes", BinaryType(), False)])

    def _compose_udf(iterator):
        state = None
        for pdf in iterator:
            state = partition_state_from_pandas(pdf, config, num_rows, num_cols, state=state)
        if state is not None:
            yield pd.DataFrame({"state_bytes": [state.to_bytes()]})

    rows = sdf.mapInPandas(_compose_udf, schema=out_schema).collect()
    states = [MatrixComposeState.from_bytes(bytes(row["state_bytes"])) for row in rows]
    log.info("spark_compose: %d partition states from %d partitions → reduce", len(states), n_partitions)
    return reduce_states(states, split_every=config.split_every)


def spark_matrix_inverse(
    data,
    sparse=False,
    row_id=ROW_ID_COLUMN,
    row_vec=ROW_VEC_COLUMN,
    col_id=COL_ID_COLUMN,
    value=VALUE_COLUMN,
    num_rows=None,
    num_cols=None,
    layout=Layout.ROW_MAJOR,
    spark=None,
    n_partitions=None,
    split_every=DEFAULT_SPLIT_EVERY,
):
    """Compose a matrix from a Spark DataFrame and invert it on the driver.

    Users do not need to call this function directly. Passing a Spark
    DataFrame to :func:`~matcompose.matrix_inverse` dispatches here.

    Parameters
    ----------
    data : pyspark.sql.DataFrame
        Row vectors (``sparse=False``, an array<double> column) or cells
        (``sparse=True``).
    spark : pyspark.sql.SparkSession or None
        Spark session. The active session, or a new local one, when None.

    Returns
    -------
    ndarray or None
        The inverse in the requested layout.
    """
    spark = get_or_create_spark(spark)
    logging.getLogger("py4j").setLevel(logging.ERROR)

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
    state = spark_compose(spark, data, config)
    return invert_state(state, config.layout)


def _declared_dims(sdf, config):
    """Resolve declared dimensions, computing defaults from the data."""
    from pyspark.sql import functions as F

    if not config.sparse:
        if config.num_rows is not None:
            return config.num_rows, None
        return sdf.count(), None

    if config.num_rows is not None and config.num_cols is not None:
        return config.num_rows, config.num_cols
    stats = sdf.agg(
        F.count(F.col(config.row_id)).alias("n"),
        F.max(F.col(config.row_id)).alias("max_row"),
        F.max(F.col(config.col_id)).alias("max_col"),
    ).first()
    if stats["n"] == 0:
        return 0, 0
    num_rows = config.num_rows or int(stats["max_row"]) + 1
    num_cols = config.num_cols or int(stats["max_col"]) + 1
    return num_rows, num_cols
