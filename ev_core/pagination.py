from __future__ import annotations

import math
from dataclasses import dataclass

import pandas as pd

from ev_core.data import RowCollection, rows_to_frame


ROWS_PER_PAGE = 10


def _as_int(value: object, default: int) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except Exception:
        return default


@dataclass(frozen=True, eq=False)
class Page:
    items: pd.DataFrame
    page_number: int
    page_size: int
    total_pages: int
    total_items: int

    @property
    def first_item(self) -> int:
        return 0 if self.total_items == 0 else (self.page_number - 1) * self.page_size + 1

    @property
    def last_item(self) -> int:
        return min(self.page_number * self.page_size, self.total_items)

    @property
    def has_prev(self) -> bool:
        return self.page_number > 1

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages


def total_pages_for(count: int, page_size: int) -> int:
    return max(1, math.ceil(count / max(1, page_size)))


def clamp_page(requested: object, total_pages: int) -> int:
    return max(1, min(total_pages, _as_int(requested, 1)))


def paginate(rows: RowCollection, page_size: int = ROWS_PER_PAGE, requested_page: object = 1) -> Page:
    df = rows_to_frame(rows)
    page_size = max(1, _as_int(page_size, ROWS_PER_PAGE))
    total_pages = total_pages_for(len(df), page_size)
    page_number = clamp_page(requested_page, total_pages)
    start = (page_number - 1) * page_size
    return Page(
        items=df.iloc[start : start + page_size],
        page_number=page_number,
        page_size=page_size,
        total_pages=total_pages,
        total_items=int(len(df)),
    )


def step_page(page: Page, delta: int) -> int:
    """Prev/next navigation: the target page number, clamped like any request."""
    return clamp_page(page.page_number + delta, page.total_pages)
