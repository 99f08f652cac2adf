"""PySpark distributed backend for matrix composition."""

from ._compose import spark_compose, spark_matrix_inverse
from ._utils import get_default_partitions, get_or_create_spark, is_spark_dataframe, validate_spark_input

__all__ = [
    "get_default_partitions",
    "get_or_create_spark",
    "is_spark_dataframe",
    "spark_compose",
    "spark_matrix_inverse",
    "validate_spark_input",
]
