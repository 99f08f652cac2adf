"""Shared Spark utilities."""

from __future__ import annotations


def is_spark_dataframe(data) -> bool:
    """Check if data is a PySpark DataFrame.

    Parameters
    ----------
    data : object
        Input data to check.

    Returns
    -------
    bool
        True if data is a ``pyspark.sql.DataFrame``.
    """
    try:
        from pyspark.sql import DataFrame as SparkDataFrame

        return isinstance(data, SparkDataFrame)
    except ImportError:
        _type_name = type(data).__module__ + "." + type(data).__qualname__
        if "pyspark" in _type_name.lower():
            raise ImportError(
                f"Input data appears to be a PySpark object ({_type_name}) but "
                "the spark extra is not installed. Install with: "
                "uv pip install 'matcompose[spark]'"
            ) from None
        return False


def validate_spark_input(sdf, required_cols):
    """Validate that a Spark DataFrame has the required columns.

    Raises
    ------
    ValueError
        If any required columns are missing.
    """
    missing = [c for c in required_cols if c not in sdf.columns]
    if missing:
        raise ValueError(f"Columns not found in Spark DataFrame: {missing}")


def get_default_partitions(spark):
    """Compute default partition count from Spark default parallelism."""
    return max(spark.sparkContext.defaultParallelism, 1)


def get_or_create_spark(spark=None):
    """Get an existing SparkSession or create a local one.

    Parameters
    ----------
    spark : pyspark.sql.SparkSession or None
        An existing Spark session. If None, attempts to get the active
        session or creates a new local session.

    Returns
    -------
    pyspark.sql.SparkSession
        A Spark session.
    """
    from pyspark.sql import SparkSession

    if spark is not None:
        return spark
    active = SparkSession.getActiveSession()
    if active is not None:
        return active
    return SparkSession.builder.master("local[*]").appName("matcompose").getOrCreate()
