"""Explicit view state and context preparation.

Every derived view is a pure function of the loaded rows and a ``ViewState``.
The dashboard criteria (search over Make/Model) and the table criteria (search
over the displayed columns) are independent and never synchronized.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict

import pandas as pd

from ev_core.columns import column_options, resolve_columns
from ev_core.data import EV_TYPE, MAKE, rows_to_frame
from ev_core.filters import DASHBOARD_FILTER, FilterCriteria, FilterEngine
from ev_core.metrics_summary import compute_summary
from ev_core.pagination import ROWS_PER_PAGE, paginate


@dataclass(frozen=True)
class ViewState:
    dashboard: FilterCriteria = field(default_factory=FilterCriteria)
    table: FilterCriteria = field(default_factory=FilterCriteria)
    page: int = 1
    dark: bool = False

    def with_dashboard_criteria(self, criteria: FilterCriteria) -> "ViewState":
        return replace(self, dashboard=criteria)

    def with_table_criteria(self, criteria: FilterCriteria) -> "ViewState":
        # Any table filter change starts again from the first page.
        if criteria == self.table:
            return self
        return replace(self, table=criteria, page=1)

    def with_page(self, page: int) -> "ViewState":
        return replace(self, page=page)

    def reset_table(self) -> "ViewState":
        return replace(self, table=self.table.reset(), page=1)

    def toggle_theme(self) -> "ViewState":
        return replace(self, dark=not self.dark)


def prepare_context(state: ViewState, data_ctx: Dict[str, object]) -> Dict[str, object]:
    raw_rows = data_ctx.get("rows")
    # Column discovery reads the first record itself, before any frame widening.
    columns = resolve_columns(raw_rows)  # type: ignore[arg-type]
    rows: pd.DataFrame = rows_to_frame(raw_rows)  # type: ignore[arg-type]

    filtered_dashboard = DASHBOARD_FILTER.apply(rows, state.dashboard)
    summary = compute_summary(filtered_dashboard)

    table_filter = FilterEngine(columns)
    filtered_table = table_filter.apply(rows, state.table)
    page = paginate(filtered_table, ROWS_PER_PAGE, state.page)

    return {
        "state": state,
        "rows": rows,
        "filtered_dashboard": filtered_dashboard,
        "summary": summary,
        "columns": columns,
        "filtered_table": filtered_table,
        "page": page,
        "options": {"makes": column_options(rows, MAKE), "types": column_options(rows, EV_TYPE)},
    }
