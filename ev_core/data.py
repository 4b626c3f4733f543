from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1]
DATA_FILENAME = "Electric_Vehicle_Population_Data.csv"

MAKE = "Make"
MODEL = "Model"
MODEL_YEAR = "Model Year"
EV_TYPE = "Electric Vehicle Type"
ELECTRIC_RANGE = "Electric Range"

RowCollection = Union[pd.DataFrame, Sequence[Mapping[str, object]]]


def get_source_file() -> Optional[Path]:
    path = DATA_DIR / DATA_FILENAME
    return path if path.exists() else None


def file_signature(path: Path) -> Tuple[str, float]:
    return (str(path.resolve()), path.stat().st_mtime)


def is_missing(value: object) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell_text(value: object) -> str:
    """String form of a cell; absent values (None/NaN/NA) become ""."""
    if is_missing(value):
        return ""
    return str(value)


def rows_to_frame(rows: Optional[RowCollection]) -> pd.DataFrame:
    """Accept a DataFrame or a sequence of mappings and return a DataFrame.

    Frames are returned as-is (never copied or mutated). Mappings keep their
    key order: the first row's keys come first, keys first seen on later rows
    are appended. Absent keys become NaN.
    """
    if isinstance(rows, pd.DataFrame):
        return rows
    records = list(rows or [])
    if not records:
        return pd.DataFrame()
    return pd.DataFrame([dict(r) for r in records], dtype=object)


def column_text(df: pd.DataFrame, col: str) -> pd.Series:
    """Column values as strings aligned to ``df.index``; a missing column is all ""."""
    if col not in df.columns:
        return pd.Series([""] * len(df), index=df.index, dtype=object)
    val = df[col]
    if isinstance(val, pd.DataFrame):
        val = val.iloc[:, 0]
    return pd.Series([cell_text(v) for v in val], index=df.index, dtype=object)


def read_rows(path: Path) -> pd.DataFrame:
    # Every cell is kept as text; empty cells stay "" instead of becoming NaN.
    df = pd.read_csv(path, dtype=str, keep_default_na=False, na_filter=False)
    df.columns = [str(c).strip() for c in df.columns]
    return df.loc[:, ~df.columns.duplicated()]


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(file_sig: Tuple[str, float]) -> Dict[str, object]:
    path = Path(file_sig[0])
    rows = read_rows(path)
    logger.info("Loaded %d rows x %d columns from %s", len(rows), len(rows.columns), path.name)
    return {"files": [path.name], "rows": rows}


def load_dashboard_data(path: Optional[Path] = None) -> Dict[str, object]:
    source = Path(path) if path is not None else get_source_file()
    if source is None or not source.exists():
        logger.warning("No dataset found (looked for %s)", source or DATA_DIR / DATA_FILENAME)
        return {"files": [], "rows": pd.DataFrame()}
    return _load_dashboard_data_cached(file_signature(source))


def clear_cache() -> None:
    _load_dashboard_data_cached.cache_clear()
