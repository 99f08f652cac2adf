"""Dask distributed backend for matrix composition."""

from ._compose import (
    dask_compose,
    dask_matrix_inverse,
    distributed_compose_dense,
    distributed_compose_sparse,
    tree_reduce,
)
from ._utils import get_default_partitions, get_or_create_client, is_dask_collection, validate_dask_input

__all__ = [
    "dask_compose",
    "dask_matrix_inverse",
    "distributed_compose_dense",
    "distributed_compose_sparse",
    "get_default_partitions",
    "get_or_create_client",
    "is_dask_collection",
    "tree_reduce",
    "validate_dask_input",
]
