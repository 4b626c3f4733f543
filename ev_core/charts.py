from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

from ev_core.metrics_summary import Distribution

alt.data_transformers.disable_max_rows()

LIGHT_PALETTE = {
    "bar": "#3b82f6",
    "line": "#10b981",
    "pie": ["#3b82f6", "#f97316", "#10b981", "#ef4444"],
    "text": "#374151",
    "grid": "#cccccc",
    "background": "#ffffff",
}
DARK_PALETTE = {
    "bar": "#60a5fa",
    "line": "#34d399",
    "pie": ["#60a5fa", "#fb923c", "#34d399", "#f87171"],
    "text": "#cbd5e1",
    "grid": "#374151",
    "background": "#111827",
}


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def palette(dark: bool) -> Dict[str, Any]:
    return DARK_PALETTE if dark else LIGHT_PALETTE


def _frame(pairs: Distribution, key: str) -> pd.DataFrame:
    df = pd.DataFrame(list(pairs), columns=[key, "count"])
    df["position"] = range(len(df))
    return df


def _themed(chart: alt.Chart, dark: bool) -> alt.Chart:
    p = palette(dark)
    return (
        chart.configure(background=p["background"])
        .configure_axis(labelColor=p["text"], titleColor=p["text"], gridColor=p["grid"], gridDash=[3, 3])
        .configure_title(color=p["text"])
        .configure_legend(labelColor=p["text"], titleColor=p["text"])
        .configure_view(strokeWidth=0)
    )


def top_makes_chart(pairs: Distribution, *, dark: bool = False) -> Dict[str, Any]:
    df = _frame(pairs, "make")
    order: List[str] = df["make"].tolist()
    bar = (
        alt.Chart(df, title="Top Manufacturers")
        .mark_bar(color=palette(dark)["bar"])
        .encode(
            x=alt.X("make:N", title="Make", sort=order),
            y=alt.Y("count:Q", title="Registrations", axis=alt.Axis(format="~s")),
            tooltip=["make", alt.Tooltip("count:Q", format=",")],
        )
        .properties(height=300)
    )
    return to_vega_spec(_themed(bar, dark))


def ev_type_chart(pairs: Distribution, *, dark: bool = False) -> Dict[str, Any]:
    df = _frame(pairs, "ev_type")
    order: List[str] = df["ev_type"].tolist()
    colors = palette(dark)["pie"]
    pie = (
        alt.Chart(df, title="EV Types")
        .mark_arc(outerRadius=100)
        .encode(
            theta=alt.Theta("count:Q"),
            color=alt.Color(
                "ev_type:N",
                title="EV Type",
                sort=order,
                scale=alt.Scale(domain=order, range=colors),
            ),
            order=alt.Order("position:Q"),
            tooltip=["ev_type", alt.Tooltip("count:Q", format=",")],
        )
        .properties(height=300)
    )
    return to_vega_spec(_themed(pie, dark))


def yearly_trend_chart(pairs: Distribution, *, dark: bool = False) -> Dict[str, Any]:
    df = _frame(pairs, "year")
    order: List[str] = df["year"].tolist()
    line = (
        alt.Chart(df, title="EV Growth Over Years")
        .mark_line(point=True, color=palette(dark)["line"])
        .encode(
            x=alt.X("year:O", title="Model Year", sort=order),
            y=alt.Y("count:Q", title="Registrations", axis=alt.Axis(format="~s")),
            tooltip=["year", alt.Tooltip("count:Q", format=",")],
        )
        .properties(height=300)
    )
    return to_vega_spec(_themed(line, dark))
