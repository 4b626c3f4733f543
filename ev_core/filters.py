from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Tuple

import pandas as pd

from ev_core.data import EV_TYPE, MAKE, MODEL, RowCollection, column_text, rows_to_frame


ALL = "All"

# The dashboard-wide search only looks at these; the table searches its displayed columns.
DASHBOARD_SEARCH_COLUMNS: Tuple[str, ...] = (MAKE, MODEL)
EQUALITY_COLUMNS: Tuple[str, ...] = (MAKE, EV_TYPE)


def default_equality_filters() -> Dict[str, str]:
    return {col: ALL for col in EQUALITY_COLUMNS}


@dataclass(frozen=True)
class FilterCriteria:
    search_text: str = ""
    equality_filters: Dict[str, str] = field(default_factory=default_equality_filters)

    def active_filters(self) -> Dict[str, str]:
        return {col: value for col, value in self.equality_filters.items() if value != ALL}

    def reset(self) -> "FilterCriteria":
        return FilterCriteria(equality_filters={col: ALL for col in self.equality_filters})

    @property
    def is_default(self) -> bool:
        return not self.search_text and not self.active_filters()


def normalize_criteria(raw: Optional[Mapping[str, object]]) -> FilterCriteria:
    raw = raw or {}
    search_text = str(raw.get("search_text") or "").strip()

    equality = default_equality_filters()
    for col, value in dict(raw.get("equality_filters") or {}).items():
        if col is None:
            continue
        equality[str(col)] = ALL if value is None or str(value) == "" else str(value)
    return FilterCriteria(search_text=search_text, equality_filters=equality)


class FilterEngine:
    """Order-preserving row filter parameterized by the columns free-text search covers.

    A row is kept when the (lowercased) search text is a substring of at least
    one searchable value, and every non-"All" equality filter matches the row's
    value exactly. Missing values search as "" and never satisfy an equality
    filter.
    """

    def __init__(self, searchable_columns: Iterable[str]):
        self.searchable_columns = tuple(searchable_columns)

    def __repr__(self) -> str:
        return f"FilterEngine(searchable_columns={list(self.searchable_columns)!r})"

    def mask(self, df: pd.DataFrame, criteria: FilterCriteria) -> pd.Series:
        keep = pd.Series(True, index=df.index, dtype=bool)

        query = criteria.search_text.lower()
        if query:
            hits = pd.Series(False, index=df.index, dtype=bool)
            for col in self.searchable_columns:
                hits |= column_text(df, col).str.lower().str.contains(query, regex=False).astype(bool)
            keep &= hits

        for col, value in criteria.active_filters().items():
            if col not in df.columns:
                return pd.Series(False, index=df.index, dtype=bool)
            keep &= df[col].eq(value).astype(bool)
        return keep

    def apply(self, rows: RowCollection, criteria: FilterCriteria) -> pd.DataFrame:
        df = rows_to_frame(rows)
        if len(df) == 0:
            return df
        return df[self.mask(df, criteria)]


def filter_rows(rows: RowCollection, criteria: FilterCriteria, searchable_columns: Iterable[str]) -> pd.DataFrame:
    return FilterEngine(searchable_columns).apply(rows, criteria)


DASHBOARD_FILTER = FilterEngine(DASHBOARD_SEARCH_COLUMNS)
