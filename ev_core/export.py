from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence

from ev_core.data import RowCollection, column_text, rows_to_frame


EXPORT_BASENAME = "ev_data_filtered"

Grid = List[List[str]]


class ExportError(ValueError):
    """Raised when a projection cannot be exported."""


class EmptyExportError(ExportError):
    def __init__(self, message: str = "No rows to export"):
        super().__init__(message)


def project(rows: RowCollection, columns: Sequence[str]) -> Grid:
    """Header row plus one row of strings per input row, limited to ``columns``.

    Absent values become "". Refuses an empty input instead of producing a
    header-only grid. No quoting or escaping happens here.
    """
    df = rows_to_frame(rows)
    if len(df) == 0:
        raise EmptyExportError()
    header = [str(c) for c in columns]
    values = [column_text(df, c).tolist() for c in header]
    body = [[col[i] for col in values] for i in range(len(df))]
    return [header] + body


def export_filename(base: str, ext: str, today: Optional[date] = None) -> str:
    day = (today or date.today()).isoformat()
    return f"{base}_{day}.{ext.lstrip('.')}"
