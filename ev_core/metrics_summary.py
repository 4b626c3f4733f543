from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from ev_core.data import ELECTRIC_RANGE, EV_TYPE, MAKE, MODEL_YEAR, RowCollection, column_text, rows_to_frame


UNKNOWN = "Unknown"
TOP_N = 5

Distribution = List[Tuple[str, int]]


@dataclass(frozen=True)
class SummaryFields:
    numeric: str = ELECTRIC_RANGE
    category: str = MAKE
    kind: str = EV_TYPE
    period: str = MODEL_YEAR


@dataclass(frozen=True)
class SummaryResult:
    total_count: int = 0
    average_range: float = 0.0
    range_count: int = 0
    top_makes: Distribution = field(default_factory=list)
    make_distribution: Distribution = field(default_factory=list)
    ev_type_distribution: Distribution = field(default_factory=list)
    yearly_distribution: Distribution = field(default_factory=list)

    @property
    def top_make(self) -> Optional[str]:
        return self.top_makes[0][0] if self.top_makes else None

    @property
    def ev_type_count(self) -> int:
        return len(self.ev_type_distribution)


# Leading decimal number of a value, so "42 mi" reads as 42; infinities never match.
LEADING_NUMBER = r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"


def parse_numbers(values: pd.Series) -> pd.Series:
    """Finite floats read from each value's leading number; values without one are dropped, not zeroed."""
    leading = values.astype(str).str.extract(LEADING_NUMBER, expand=False)
    parsed = pd.to_numeric(leading, errors="coerce").astype(float)
    return parsed[np.isfinite(parsed)]


def category_counts(df: pd.DataFrame, column: str) -> pd.Series:
    """Counts per value in first-encountered order; missing/empty values go to "Unknown"."""
    keys = column_text(df, column).replace("", UNKNOWN)
    if keys.empty:
        return pd.Series(dtype="int64")
    return keys.groupby(keys, sort=False).size()


def top_n(counts: pd.Series, n: int = TOP_N) -> pd.Series:
    # Stable sort keeps encounter order among tied counts.
    return counts.sort_values(ascending=False, kind="stable").head(n)


def _as_period(key: str) -> Optional[int]:
    try:
        out = int(key)
    except (TypeError, ValueError):
        return None
    return out if str(out) == key and out >= 0 else None


def chronological(counts: pd.Series) -> pd.Series:
    """Integer periods ascending, then non-numeric periods (e.g. "Unknown") in encounter order."""
    keys = [str(k) for k in counts.index]
    numeric = sorted((k for k in keys if _as_period(k) is not None), key=_as_period)
    other = [k for k in keys if _as_period(k) is None]
    return counts.reindex(numeric + other)


def _pairs(counts: pd.Series) -> Distribution:
    return [(str(k), int(v)) for k, v in counts.items()]


def compute_summary(rows: RowCollection, fields: SummaryFields = SummaryFields(), *, n: int = TOP_N) -> SummaryResult:
    df = rows_to_frame(rows)

    ranges = parse_numbers(column_text(df, fields.numeric))
    range_count = int(len(ranges))
    average_range = float(ranges.sum() / range_count) if range_count else 0.0

    makes = category_counts(df, fields.category)
    ev_types = category_counts(df, fields.kind)
    years = category_counts(df, fields.period)

    return SummaryResult(
        total_count=int(len(df)),
        average_range=average_range,
        range_count=range_count,
        top_makes=_pairs(top_n(makes, n)),
        make_distribution=_pairs(makes),
        ev_type_distribution=_pairs(ev_types),
        yearly_distribution=_pairs(chronological(years)),
    )


def distribution_records(pairs: Distribution, key_name: str) -> List[Dict[str, Any]]:
    return [{key_name: key, "count": count} for key, count in pairs]
