"""Constants shared across the compose pipeline."""

from enum import Enum

STATE_HEADER_SIZE = 2
DEFAULT_SPLIT_EVERY = 8

ROW_ID_COLUMN = "row_id"
ROW_VEC_COLUMN = "row_vec"
COL_ID_COLUMN = "col_id"
VALUE_COLUMN = "value"


class Layout(str, Enum):
    """Memory layout expected by the consumer of an inverted matrix."""

    ROW_MAJOR = "row"
    COLUMN_MAJOR = "column"

    @classmethod
    def parse(cls, value):
        """Accept a ``Layout`` or one of its string values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown layout {value!r}. Choose 'row' or 'column'.") from None
