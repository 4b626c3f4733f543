from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from ev_core.charts import ev_type_chart, top_makes_chart, yearly_trend_chart
from ev_core.metrics_summary import SummaryResult, distribution_records
from ev_core.session import ViewState


def compute_overview(state: ViewState, ctx: Dict[str, Any], *, include_charts: bool = True) -> Dict[str, Any]:
    summary: SummaryResult = ctx.get("summary") or SummaryResult()

    charts: Dict[str, Any] = {}
    if include_charts:
        charts = {
            "ev_types": ev_type_chart(summary.ev_type_distribution, dark=state.dark),
            "top_makes": top_makes_chart(summary.top_makes, dark=state.dark),
            "yearly_trend": yearly_trend_chart(summary.yearly_distribution, dark=state.dark),
        }

    return {
        "filters": asdict(state.dashboard),
        "kpis": {
            "total_evs": summary.total_count,
            "average_range": round(summary.average_range, 1),
            "top_make": summary.top_make,
            "ev_types": summary.ev_type_count,
        },
        "distributions": {
            "top_makes": distribution_records(summary.top_makes, "make"),
            "make": distribution_records(summary.make_distribution, "make"),
            "ev_type": distribution_records(summary.ev_type_distribution, "ev_type"),
            "yearly": distribution_records(summary.yearly_distribution, "year"),
        },
        "charts": charts,
    }
