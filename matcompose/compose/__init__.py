"""Assemble, merge and invert partial matrix states."""

from .dense import assemble_row, dense_partition_state
from .driver import compose_dense, compose_local, compose_sparse, matrix_inverse
from .inverse import invert_state, to_external_buffer, to_layout
from .merge import combine_states, merge_states, reduce_states
from .sparse import assemble_cell, sparse_partition_state

__all__ = [
    "assemble_cell",
    "assemble_row",
    "combine_states",
    "compose_dense",
    "compose_local",
    "compose_sparse",
    "dense_partition_state",
    "invert_state",
    "matrix_inverse",
    "merge_states",
    "reduce_states",
    "sparse_partition_state",
    "to_external_buffer",
    "to_layout",
]
