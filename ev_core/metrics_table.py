from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

import pandas as pd

from ev_core.data import column_text
from ev_core.pagination import Page, paginate
from ev_core.session import ViewState


def page_records(items: pd.DataFrame, columns: List[str]) -> List[Dict[str, str]]:
    values = {c: column_text(items, c).tolist() for c in columns}
    return [{c: values[c][i] for c in columns} for i in range(len(items))]


def compute_table(state: ViewState, ctx: Dict[str, Any]) -> Dict[str, Any]:
    columns: List[str] = ctx.get("columns", [])
    rows: pd.DataFrame = ctx.get("rows", pd.DataFrame())
    filtered: pd.DataFrame = ctx.get("filtered_table", pd.DataFrame())
    page: Page = ctx.get("page") or paginate(filtered, requested_page=state.page)

    return {
        "filters": asdict(state.table),
        "columns": columns,
        "rows": page_records(page.items, columns),
        "page": {
            "page_number": page.page_number,
            "page_size": page.page_size,
            "total_pages": page.total_pages,
            "first_item": page.first_item,
            "last_item": page.last_item,
            "has_prev": page.has_prev,
            "has_next": page.has_next,
        },
        "options": ctx.get("options", {}),
        "counts": {"filtered": int(len(filtered)), "total": int(len(rows))},
    }
