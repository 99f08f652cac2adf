"""Text summaries of compose states."""

import numpy as np
from prettytable import PrettyTable, TableStyle

from .state import MatrixComposeState

WIDTH = 60
THICK_SEP = "=" * WIDTH


def _make_table(headers, rows, align_map):
    """Create a PrettyTable with SINGLE_BORDER style and per-column alignment."""
    t = PrettyTable()
    t.set_style(TableStyle.SINGLE_BORDER)
    t.field_names = headers
    for row in rows:
        t.add_row(row)
    for h in headers:
        t.align[h] = align_map.get(h, "r")
    return str(t)


def format_compose_state(state: MatrixComposeState) -> str:
    """Summarize the shape and fill of a compose state."""
    lines = [THICK_SEP, " Matrix Compose State", THICK_SEP]
    if not state.is_initialized:
        lines.append(" Uninitialized (no entries written)")
        lines.append(THICK_SEP)
        return "\n".join(lines)

    num_rows, num_cols = state.shape
    filled = int(np.count_nonzero(state.matrix))
    rows = [
        ["Rows", num_rows],
        ["Columns", num_cols],
        ["Non-zero cells", f"{filled} / {num_rows * num_cols}"],
        ["Buffer slots", state.size],
        ["Writeable", "yes" if state.writeable else "no"],
    ]
    lines.append(_make_table(["Field", "Value"], rows, {"Field": "l"}))
    lines.append(THICK_SEP)
    return "\n".join(lines)


def attach_format(state_class, format_func):
    """Monkey-patch ``__repr__`` and ``__str__`` on a class."""

    def _repr(self):
        return format_func(self)

    def _str(self):
        return format_func(self)

    state_class.__repr__ = _repr
    state_class.__str__ = _str


attach_format(MatrixComposeState, format_compose_state)
