"""Distributed composition of dense matrices from partial contributions, and inversion."""

from matcompose.compose import (
    assemble_cell,
    assemble_row,
    compose_dense,
    compose_sparse,
    invert_state,
    matrix_inverse,
    merge_states,
    reduce_states,
    to_external_buffer,
    to_layout,
)
from matcompose.core import (
    ComposeConfig,
    CorruptStateError,
    IncompatibleStatesError,
    IndexOutOfRangeError,
    Layout,
    MatComposeError,
    MatrixComposeState,
    ShapeMismatchError,
    format_compose_state,
    get_backend,
    set_backend,
    use_backend,
)

__version__ = "0.1.0"

__all__ = [
    "ComposeConfig",
    "CorruptStateError",
    "IncompatibleStatesError",
    "IndexOutOfRangeError",
    "Layout",
    "MatComposeError",
    "MatrixComposeState",
    "ShapeMismatchError",
    "assemble_cell",
    "assemble_row",
    "compose_dense",
    "compose_sparse",
    "format_compose_state",
    "get_backend",
    "invert_state",
    "matrix_inverse",
    "merge_states",
    "reduce_states",
    "set_backend",
    "to_external_buffer",
    "to_layout",
    "use_backend",
]
