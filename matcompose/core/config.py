"""Configuration for matrix composition runs."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .constants import (
    COL_ID_COLUMN,
    DEFAULT_SPLIT_EVERY,
    ROW_ID_COLUMN,
    ROW_VEC_COLUMN,
    VALUE_COLUMN,
    Layout,
)


@dataclass
class ComposeConfig:
    """Compose config.

    ``num_rows`` / ``num_cols`` left as None are inferred from the data:
    the frame height (dense) or the largest index plus one (sparse).
    """

    sparse: bool = False
    row_id: str = ROW_ID_COLUMN
    row_vec: str = ROW_VEC_COLUMN
    col_id: str = COL_ID_COLUMN
    value: str = VALUE_COLUMN
    num_rows: int | None = None
    num_cols: int | None = None
    layout: Layout = Layout.ROW_MAJOR
    split_every: int | None = DEFAULT_SPLIT_EVERY
    n_partitions: int | None = None
    n_jobs: int = 1

    def __post_init__(self):
        self.layout = Layout.parse(self.layout)
        for name in ("num_rows", "num_cols", "n_partitions"):
            val = getattr(self, name)
            if val is not None and val <= 0:
                raise ValueError(f"{name} must be a positive integer, got {val}.")
        if self.split_every is not None and self.split_every < 2:
            raise ValueError(f"split_every must be at least 2, got {self.split_every}.")
        if self.n_jobs == 0 or self.n_jobs < -1:
            raise ValueError(f"n_jobs must be -1 or a positive integer, got {self.n_jobs}.")

    @property
    def required_columns(self) -> list[str]:
        if self.sparse:
            return [self.row_id, self.col_id, self.value]
        return [self.row_id, self.row_vec]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {k: v.value if isinstance(v, Enum) else v for k, v in self.__dict__.items()}
