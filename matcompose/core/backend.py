"""Array backend dispatch for matrix inversion."""

from __future__ import annotations

import contextlib
from contextvars import ContextVar

import numpy as np

try:
    import cupy as cp

    HAS_CUPY = True
except ImportError:
    HAS_CUPY = False
    cp = None

__all__ = [
    "HAS_CUPY",
    "get_backend",
    "set_backend",
    "to_device",
    "to_numpy",
    "use_backend",
]

_active_backend: ContextVar[str] = ContextVar("matcompose_backend", default="numpy")


def set_backend(name):
    """Set the active array backend.

    Parameters
    ----------
    name : {"numpy", "cupy"}
        Backend to activate. Setting "cupy" requires CuPy to be installed.
    """
    _active_backend.set(_validate_backend_name(name))


def get_backend():
    """Return the active array module (``numpy`` or ``cupy``)."""
    if _active_backend.get() == "cupy":
        return cp
    return np


@contextlib.contextmanager
def use_backend(name):
    """Context manager that temporarily activates a backend.

    The previous backend is restored when the context exits, even if an
    exception is raised. Each ``copy_context()`` snapshot inherits the
    value set here, so ``use_backend`` composes with
    :func:`~matcompose.core.parallel.parallel_map`.

    Parameters
    ----------
    name : {"numpy", "cupy"}
        Backend to activate for the duration of the block.
    """
    token = _active_backend.set(_validate_backend_name(name))
    try:
        yield
    finally:
        _active_backend.reset(token)


def to_device(arr):
    """Move an array to the active device.

    Parameters
    ----------
    arr : array_like
        Input array (NumPy or CuPy).

    Returns
    -------
    ndarray
        Array on the active device.
    """
    xp = get_backend()
    if xp is cp:
        if isinstance(arr, np.ndarray):
            return cp.asarray(arr)
        return arr
    return to_numpy(arr)


def to_numpy(arr):
    """Ensure the array is a CPU NumPy array."""
    if HAS_CUPY and hasattr(cp, "ndarray") and isinstance(arr, cp.ndarray):
        return cp.asnumpy(arr)
    return np.asarray(arr)


def _validate_backend_name(name):
    """Validate and normalise a backend name."""
    name = name.lower()
    if name not in ("numpy", "cupy"):
        raise ValueError(f"Unknown backend {name!r}. Choose 'numpy' or 'cupy'.")
    if name == "cupy" and not HAS_CUPY:
        raise ImportError("CuPy is not installed. Install with: uv pip install 'matcompose[gpu]'")
    if name == "cupy" and hasattr(cp, "is_available") and not cp.is_available():
        raise RuntimeError(
            "CuPy is installed but no CUDA GPU is available. Check your CUDA installation or use backend='numpy'."
        )
    return name
