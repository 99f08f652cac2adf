"""Core data structures and shared utilities."""

from .backend import HAS_CUPY, get_backend, set_backend, to_device, to_numpy, use_backend
from .config import ComposeConfig
from .constants import DEFAULT_SPLIT_EVERY, STATE_HEADER_SIZE, Layout
from .dataframe import to_polars
from .errors import (
    CorruptStateError,
    IncompatibleStatesError,
    IndexOutOfRangeError,
    MatComposeError,
    ShapeMismatchError,
)
from .format import format_compose_state
from .parallel import parallel_map
from .state import MatrixComposeState, state_size

__all__ = [
    "DEFAULT_SPLIT_EVERY",
    "HAS_CUPY",
    "STATE_HEADER_SIZE",
    "ComposeConfig",
    "CorruptStateError",
    "IncompatibleStatesError",
    "IndexOutOfRangeError",
    "Layout",
    "MatComposeError",
    "MatrixComposeState",
    "ShapeMismatchError",
    "format_compose_state",
    "get_backend",
    "parallel_map",
    "set_backend",
    "state_size",
    "to_device",
    "to_numpy",
    "to_polars",
    "use_backend",
]
