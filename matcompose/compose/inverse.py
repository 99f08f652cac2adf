"""Inversion of a fully merged compose state."""

from __future__ import annotations

import numpy as np

from matcompose.core.backend import get_backend, to_device, to_numpy
from matcompose.core.constants import Layout


def invert_state(state, layout=Layout.ROW_MAJOR):
    r"""Invert the matrix held by a merged state.

    The state stores its matrix row-major. The returned values are always
    the true inverse :math:`A^{-1}`, truncated to ``num_cols`` leading
    columns; ``layout`` only chooses the memory order of the result so a
    column-major consumer can read its buffer directly (see
    :func:`to_external_buffer`).

    Parameters
    ----------
    state : MatrixComposeState or None
        Fully merged state. It is not modified.
    layout : Layout or {"row", "column"}, default "row"
        Memory layout of the returned array.

    Returns
    -------
    ndarray of shape (num_rows, num_cols) or None
        The inverse, or None when ``state`` is absent or uninitialized.

    Raises
    ------
    numpy.linalg.LinAlgError
        If the matrix is singular or not square.
    """
    layout = Layout.parse(layout)
    if state is None or not state.is_initialized:
        return None

    xp = get_backend()
    inverse = to_numpy(xp.linalg.inv(to_device(state.matrix)))
    return to_layout(inverse[:, : state.num_cols], layout)


def to_layout(matrix, layout=Layout.ROW_MAJOR):
    """Return ``matrix`` with the same values in the requested memory order."""
    if Layout.parse(layout) is Layout.COLUMN_MAJOR:
        return np.asfortranarray(matrix)
    return np.ascontiguousarray(matrix)


def to_external_buffer(matrix, layout=Layout.ROW_MAJOR):
    """Flatten ``matrix`` into the 1-D buffer a consumer with ``layout`` expects.

    For ``"column"`` this is the row-major buffer of the transpose.
    """
    order = "F" if Layout.parse(layout) is Layout.COLUMN_MAJOR else "C"
    return np.asarray(matrix).ravel(order=order)
