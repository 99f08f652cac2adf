"""Argument checks shared by the assemblers."""

from __future__ import annotations

import operator

import numpy as np

from matcompose.core.errors import IndexOutOfRangeError, ShapeMismatchError


def check_index(index, bound, axis):
    """Return ``index`` as an ``int`` after checking ``0 <= index < bound``."""
    index = operator.index(index)
    if index < 0 or index >= bound:
        raise IndexOutOfRangeError(f"Invalid {axis} id {index}: expected 0 <= {axis} id < {bound}.")
    return index


def check_declared_shape(state, num_rows, num_cols):
    """Raise ``ShapeMismatchError`` when declared dimensions differ from the fixed shape."""
    if (num_rows, num_cols) != state.shape:
        raise ShapeMismatchError(
            "Invalid arguments: Dimensions of vectors not consistent. "
            f"State is {state.num_rows} x {state.num_cols}, call declares {num_rows} x {num_cols}."
        )


def as_index_array(values, axis):
    """Return ``values`` as an int64 array of ids.

    Float columns (what pandas makes of an integer column that held nulls)
    are accepted when every entry is integral.
    """
    values = np.asarray(values)
    if values.dtype.kind == "f":
        if not np.all(np.isfinite(values)) or np.any(values != np.floor(values)):
            raise TypeError(f"{axis} ids must be integers, got non-integral values.")
        return values.astype(np.int64)
    if values.dtype.kind not in "iu":
        raise TypeError(f"{axis} ids must be integers, got dtype {values.dtype}.")
    return values.astype(np.int64, copy=False)
