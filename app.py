import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import Optional

from ev_core.columns import column_options
from ev_core.data import EV_TYPE, MAKE, load_dashboard_data
from ev_core.export import EmptyExportError, export_filename, project
from ev_core.filters import ALL, FilterCriteria
from ev_core.metrics_overview import compute_overview
from ev_core.metrics_table import compute_table
from ev_core.pagination import step_page
from ev_core.serializers import EXPORT_FORMATS, export_bytes
from ev_core.session import ViewState, prepare_context

EXPORT_LABELS = {"csv": "CSV", "xlsx": "Excel", "pdf": "PDF report"}


# ---------- UI / layout helpers ----------
def inject_base_styles(dark: bool):
    bg, fg, card_bg, border = ("#111827", "#e5e7eb", "#1f2937", "#374151") if dark else ("#f3f4f6", "#111827", "#ffffff", "#e5e7eb")
    st.markdown(
        f"""
        <style>
        .stApp {{background: {bg}; color: {fg};}}
        .card {{border: 1px solid {border};border-radius: 12px;padding: 16px;background: {card_bg};
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}}
        .card-title {{font-weight: 600;font-size: 1.0rem;color: {fg};}}
        .chip-row {{display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}}
        .chip {{background: {card_bg};border: 1px solid {border};border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;}}
        </style>
        """,
        unsafe_allow_html=True,
    )


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(criteria: FilterCriteria) -> str:
    chips = [f"Search: {criteria.search_text}" if criteria.search_text else "Search: None"]
    chips += [f"{col}: {value}" for col, value in criteria.equality_filters.items()]
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def select_index(options, value: Optional[str]) -> int:
    return options.index(value) if value in options else 0


def get_state() -> ViewState:
    if "view_state" not in st.session_state:
        st.session_state["view_state"] = ViewState()
    return st.session_state["view_state"]


def set_state(state: ViewState):
    st.session_state["view_state"] = state


# ---------- UI setup ----------
st.set_page_config(page_title="EV Dashboard", layout="wide")

data_ctx = load_dashboard_data()
rows: pd.DataFrame = data_ctx.get("rows", pd.DataFrame())
if rows.empty:
    st.error("No data loaded. Place Electric_Vehicle_Population_Data.csv next to app.py.")
    st.stop()

state = get_state()
make_options = column_options(rows, MAKE)
type_options = column_options(rows, EV_TYPE)

# ----- Sidebar: theme + dashboard filters -----
with st.sidebar:
    dark = st.toggle("Dark mode", value=state.dark, key="dark_mode")
    if dark != state.dark:
        state = state.toggle_theme()

    st.markdown("### Dashboard filters")
    search = st.text_input("Search Make / Model", state.dashboard.search_text, key="dash_search")
    make = st.selectbox(
        "Make", make_options, index=select_index(make_options, state.dashboard.equality_filters.get(MAKE)), key="dash_make"
    )
    ev_type = st.selectbox(
        "EV Type", type_options, index=select_index(type_options, state.dashboard.equality_filters.get(EV_TYPE)), key="dash_type"
    )
    state = state.with_dashboard_criteria(
        FilterCriteria(search_text=search.strip(), equality_filters={MAKE: make, EV_TYPE: ev_type})
    )

set_state(state)
inject_base_styles(state.dark)
st.title("EV Dashboard ⚡")
st.markdown(f"<div class='chip-row'>{format_filter_summary(state.dashboard)}</div>", unsafe_allow_html=True)

ctx = prepare_context(state, data_ctx)
overview = compute_overview(state, ctx)

# ----- Summary cards -----
kpis = overview["kpis"]
cols = st.columns(4)
cols[0].metric("Total EVs", f"{kpis['total_evs']:,}")
cols[1].metric("Average Range", f"{kpis['average_range']:.1f} mi")
cols[2].metric("Top Make", kpis["top_make"] or "N/A")
cols[3].metric("EV Types", kpis["ev_types"])

# ----- Charts -----
left, right = st.columns(2)
with left:
    st.vega_lite_chart(overview["charts"]["ev_types"], use_container_width=True)
with right:
    st.vega_lite_chart(overview["charts"]["top_makes"], use_container_width=True)
st.vega_lite_chart(overview["charts"]["yearly_trend"], use_container_width=True)

# ----- Table with its own filters -----
with card("Vehicles"):
    c1, c2, c3, c4 = st.columns([4, 2, 2, 1])
    table_search = c1.text_input("Search (Make / Model / City / ...)", state.table.search_text, key="table_search")
    table_make = c2.selectbox("Make", make_options, index=select_index(make_options, state.table.equality_filters.get(MAKE)), key="table_make")
    table_type = c3.selectbox("EV Type", type_options, index=select_index(type_options, state.table.equality_filters.get(EV_TYPE)), key="table_type")
    if c4.button("Reset"):
        state = state.reset_table()
        for key in ("table_search", "table_make", "table_type"):
            st.session_state.pop(key, None)
        set_state(state)
        st.rerun()

    state = state.with_table_criteria(
        FilterCriteria(search_text=table_search.strip(), equality_filters={MAKE: table_make or ALL, EV_TYPE: table_type or ALL})
    )
    set_state(state)
    ctx = prepare_context(state, data_ctx)
    table = compute_table(state, ctx)

    st.dataframe(pd.DataFrame(table["rows"], columns=table["columns"]), use_container_width=True, hide_index=True)

    page = ctx["page"]
    p1, p2, p3, p4 = st.columns([4, 1, 1, 1])
    counts = table["counts"]
    p1.caption(
        f"Showing {page.first_item}–{page.last_item} of {counts['filtered']:,} filtered (total {counts['total']:,})"
    )
    if p2.button("Prev", disabled=not page.has_prev):
        set_state(state.with_page(step_page(page, -1)))
        st.rerun()
    p3.markdown(f"Page {page.page_number} / {page.total_pages}")
    if p4.button("Next", disabled=not page.has_next):
        set_state(state.with_page(step_page(page, 1)))
        st.rerun()

    # Files are only built on request; a prepared file is offered while format and table filters are unchanged.
    e1, e2, e3 = st.columns([2, 1, 2])
    fmt = e1.selectbox("Export format", list(EXPORT_LABELS), format_func=EXPORT_LABELS.get, key="export_fmt")
    export_key = (fmt, repr(state.table))
    if e2.button("Prepare export", key="prepare_export"):
        try:
            grid = project(ctx["filtered_table"], ctx["columns"])
            st.session_state["prepared_export"] = (export_key, export_bytes(fmt, grid, state.table))
        except EmptyExportError as exc:
            st.session_state.pop("prepared_export", None)
            st.info(str(exc))

    prepared = st.session_state.get("prepared_export")
    if prepared and prepared[0] == export_key:
        mime, basename = EXPORT_FORMATS[fmt]
        e3.download_button(
            f"Download {EXPORT_LABELS[fmt]}", data=prepared[1], file_name=export_filename(basename, fmt), mime=mime
        )
