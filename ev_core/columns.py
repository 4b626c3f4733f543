from __future__ import annotations

from typing import List, Sequence

import pandas as pd

from ev_core.data import (
    ELECTRIC_RANGE,
    EV_TYPE,
    MAKE,
    MODEL,
    MODEL_YEAR,
    RowCollection,
    column_text,
    rows_to_frame,
)
from ev_core.filters import ALL


PREFERRED_COLUMNS: List[str] = [
    MAKE,
    MODEL,
    MODEL_YEAR,
    EV_TYPE,
    ELECTRIC_RANGE,
    "City",
    "State",
    "VIN (1-10)",
]
MAX_COLUMNS = 10


def first_row_keys(rows: RowCollection) -> List[str]:
    # A frame is homogeneous, so its columns are the first row's keys.
    if isinstance(rows, pd.DataFrame):
        return [str(c) for c in rows.columns] if len(rows) else []
    for row in rows or []:
        return [str(k) for k in row.keys()]
    return []


def resolve_columns(
    rows: RowCollection,
    preferred: Sequence[str] = PREFERRED_COLUMNS,
    cap: int = MAX_COLUMNS,
) -> List[str]:
    """Columns to display/export.

    Preferred names present in the first row come first, in preferred order
    (never truncated); remaining first-row keys follow in their own order until
    ``cap`` columns are reached.
    """
    keys = first_row_keys(rows)
    if not keys:
        return []
    cols = [c for c in dict.fromkeys(preferred) if c in keys]
    for key in keys:
        if len(cols) >= cap:
            break
        if key not in cols:
            cols.append(key)
    return cols


def column_options(rows: RowCollection, column: str) -> List[str]:
    """Dropdown choices for an equality filter: "All" then distinct non-empty values in encounter order."""
    df = rows_to_frame(rows)
    if column not in df.columns:
        return [ALL]
    values = column_text(df, column).tolist()
    return [ALL] + [v for v in dict.fromkeys(values) if v]
