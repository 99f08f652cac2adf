"""Partial matrix state backed by one flat float64 buffer."""

from __future__ import annotations

import logging
import operator

import numpy as np

from .constants import STATE_HEADER_SIZE
from .errors import CorruptStateError, ShapeMismatchError

log = logging.getLogger(__name__)


def state_size(num_rows, num_cols):
    """Number of float64 slots needed to hold a ``num_rows x num_cols`` state."""
    return STATE_HEADER_SIZE + num_rows * num_cols


class MatrixComposeState:
    """Matrix under construction plus its declared shape.

    The state owns a single flat ``float64`` buffer laid out as

    - 0: ``num_rows`` (0 while uninitialized)
    - 1: ``num_cols`` (0 while uninitialized)
    - 2..: row-major matrix with ``num_rows * num_cols`` entries

    :attr:`matrix` is a 2-D view into that buffer, so writes through the
    view land in the persisted representation directly. The shape is fixed
    by :meth:`initialize` and never changes afterwards.

    Parameters
    ----------
    storage : array_like or None, default None
        Flat buffer to wrap. The buffer is wrapped, not copied, unless it
        is read-only and ``writeable`` is True. When None, a minimal zeroed
        header (an uninitialized state) is allocated.
    writeable : bool, default True
        When False the state is a read-only handle: the buffer view is
        flagged non-writeable and every write raises ``ValueError``.

    Raises
    ------
    CorruptStateError
        If the buffer is shorter than the header, carries a malformed
        header, or is shorter than ``2 + num_rows * num_cols``.
    """

    __slots__ = ("_storage",)

    def __init__(self, storage=None, writeable=True):
        if storage is None:
            storage = np.zeros(STATE_HEADER_SIZE, dtype=np.float64)
        storage = np.ascontiguousarray(storage, dtype=np.float64).reshape(-1)

        if writeable and not storage.flags.writeable:
            storage = storage.copy()
        elif not writeable:
            storage = storage.view()
            storage.flags.writeable = False

        self._storage = storage
        self._rebind()

    @classmethod
    def from_array(cls, values, writeable=True):
        """Rebuild a state from its persisted flat representation (copied)."""
        return cls(np.array(values, dtype=np.float64, copy=True), writeable=writeable)

    @classmethod
    def from_bytes(cls, raw, writeable=True):
        """Rebuild a state from the little-endian float64 bytes of :meth:`to_bytes`."""
        if len(raw) % 8:
            raise CorruptStateError(f"State payload of {len(raw)} bytes is not a whole number of float64 slots.")
        return cls(np.frombuffer(raw, dtype="<f8"), writeable=writeable)

    def to_array(self):
        """Return a copy of the flat ``[num_rows, num_cols, data...]`` buffer."""
        return self._storage.copy()

    def to_bytes(self):
        """Return the flat buffer as little-endian float64 bytes."""
        return self._storage.astype("<f8", copy=False).tobytes()

    def copy(self):
        """Return a writeable deep copy."""
        return type(self)(self._storage.copy())

    def initialize(self, num_rows, num_cols):
        """Allocate a zero-filled matrix and fix the shape.

        Parameters
        ----------
        num_rows, num_cols : int
            Declared dimensions. Both must be positive.

        Returns
        -------
        MatrixComposeState
            ``self``, for chaining.
        """
        if self.is_initialized:
            raise ShapeMismatchError(
                f"State is already initialized with shape {self.shape}; the shape cannot change."
            )
        if not self.writeable:
            raise ValueError("Cannot initialize a read-only state.")

        num_rows = _positive_dim(num_rows, "num_rows")
        num_cols = _positive_dim(num_cols, "num_cols")

        storage = np.zeros(state_size(num_rows, num_cols), dtype=np.float64)
        storage[0] = num_rows
        storage[1] = num_cols
        self._storage = storage
        log.debug("initialized %d x %d compose state", num_rows, num_cols)
        return self._rebind()

    @property
    def num_rows(self):
        return int(self._storage[0])

    @property
    def num_cols(self):
        return int(self._storage[1])

    @property
    def shape(self):
        return self.num_rows, self.num_cols

    @property
    def size(self):
        """Total number of slots in the backing buffer, header included."""
        return self._storage.size

    @property
    def is_initialized(self):
        return self.num_cols != 0

    @property
    def writeable(self):
        return bool(self._storage.flags.writeable)

    @property
    def matrix(self):
        """Row-major ``(num_rows, num_cols)`` view into the backing buffer."""
        num_rows, num_cols = self.shape
        start = STATE_HEADER_SIZE
        return self._storage[start : start + num_rows * num_cols].reshape(num_rows, num_cols)

    def _rebind(self):
        """Validate the header against the buffer length."""
        storage = self._storage
        if storage.size < STATE_HEADER_SIZE:
            raise CorruptStateError("Out-of-bounds array access detected: state buffer has no shape header.")

        header = storage[:STATE_HEADER_SIZE]
        if not np.all(np.isfinite(header)) or np.any(header < 0) or np.any(header != np.floor(header)):
            raise CorruptStateError(f"Malformed state header {header.tolist()}.")

        num_rows, num_cols = int(header[0]), int(header[1])
        if (num_rows == 0) != (num_cols == 0):
            raise CorruptStateError(f"Malformed state header: shape ({num_rows}, {num_cols}) is half initialized.")
        if storage.size < state_size(num_rows, num_cols):
            raise CorruptStateError(
                f"Out-of-bounds array access detected: a {num_rows} x {num_cols} state needs "
                f"{state_size(num_rows, num_cols)} slots, buffer has {storage.size}."
            )
        return self


def _positive_dim(value, name):
    """Coerce a declared dimension to a positive ``int``."""
    value = operator.index(value)
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value}.")
    return value
