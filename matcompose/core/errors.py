"""Exceptions raised while composing, merging and inverting matrices."""


class MatComposeError(Exception):
    """Base class for all matcompose errors."""


class ShapeMismatchError(MatComposeError, ValueError):
    """A write disagrees with the shape fixed when the state was initialized."""


class IndexOutOfRangeError(MatComposeError, IndexError):
    """A row or column index lies outside the declared dimensions."""


class IncompatibleStatesError(MatComposeError, RuntimeError):
    """Two states with different shapes or buffer lengths were merged."""


class CorruptStateError(MatComposeError, RuntimeError):
    """A state buffer is too small or carries a malformed header."""
