from __future__ import annotations

import pandas as pd
import pytest

from ev_core.columns import resolve_columns
from ev_core.filters import (
    ALL,
    DASHBOARD_FILTER,
    DASHBOARD_SEARCH_COLUMNS,
    FilterCriteria,
    FilterEngine,
    filter_rows,
    normalize_criteria,
)


def test_default_criteria_keeps_everything(ev_frame):
    out = DASHBOARD_FILTER.apply(ev_frame, FilterCriteria())
    assert len(out) == len(ev_frame)


def test_search_is_case_insensitive():
    out = filter_rows([{"Make": "TESLA"}], FilterCriteria(search_text="tesla"), ["Make"])
    assert len(out) == 1


def test_search_is_or_across_searchable_columns(ev_records):
    out = DASHBOARD_FILTER.apply(ev_records, FilterCriteria(search_text="leaf"))
    assert out["Make"].tolist() == ["NISSAN", "NISSAN"]

    # City is not searchable at dashboard level.
    assert DASHBOARD_FILTER.apply(ev_records, FilterCriteria(search_text="seattle")).empty


def test_table_search_covers_displayed_columns(ev_records):
    engine = FilterEngine(resolve_columns(ev_records))
    out = engine.apply(ev_records, FilterCriteria(search_text="seattle"))
    assert out["VIN (1-10)"].tolist() == ["5YJ3E1EB4L", "WBY8P6C58K"]


def test_search_is_literal_not_regex():
    rows = [{"Make": "A.B"}, {"Make": "AXB"}]
    out = filter_rows(rows, FilterCriteria(search_text="a.b"), ["Make"])
    assert out["Make"].tolist() == ["A.B"]


def test_missing_search_field_behaves_as_empty():
    rows = [{"Make": "TESLA"}, {"Model": "LEAF"}, {}]
    out = filter_rows(rows, FilterCriteria(search_text="leaf"), DASHBOARD_SEARCH_COLUMNS)
    assert out["Model"].tolist() == ["LEAF"]
    assert len(filter_rows(rows, FilterCriteria(), DASHBOARD_SEARCH_COLUMNS)) == 3


def test_equality_filter_exact_and_case_sensitive(ev_records):
    crit = FilterCriteria(equality_filters={"Make": "TESLA", "Electric Vehicle Type": ALL})
    assert len(DASHBOARD_FILTER.apply(ev_records, crit)) == 4

    crit = FilterCriteria(equality_filters={"Make": "Tesla"})
    assert DASHBOARD_FILTER.apply(ev_records, crit).empty


def test_equality_filter_never_matches_missing_values():
    rows = [{"Make": "TESLA", "Electric Vehicle Type": "BEV"}, {"Make": "TESLA"}]
    crit = FilterCriteria(equality_filters={"Electric Vehicle Type": "BEV"})
    out = DASHBOARD_FILTER.apply(rows, crit)
    assert len(out) == 1


def test_equality_filter_on_unknown_column_matches_nothing(ev_records):
    crit = FilterCriteria(equality_filters={"Color": "Red"})
    assert DASHBOARD_FILTER.apply(ev_records, crit).empty
    crit = FilterCriteria(equality_filters={"Color": ALL})
    assert len(DASHBOARD_FILTER.apply(ev_records, crit)) == len(ev_records)


def test_search_and_equality_are_anded(ev_records):
    crit = FilterCriteria(search_text="model", equality_filters={"Make": "TESLA"})
    out = DASHBOARD_FILTER.apply(ev_records, crit)
    assert out["Model"].tolist() == ["MODEL 3", "MODEL Y", "MODEL 3", "MODEL Y"]


@pytest.mark.parametrize(
    "criteria",
    [
        FilterCriteria(),
        FilterCriteria(search_text="tesla"),
        FilterCriteria(search_text="e", equality_filters={"Electric Vehicle Type": "Battery Electric Vehicle (BEV)"}),
        FilterCriteria(equality_filters={"Make": "NISSAN"}),
    ],
)
def test_filter_is_idempotent_and_order_preserving(ev_frame, criteria):
    once = DASHBOARD_FILTER.apply(ev_frame, criteria)
    twice = DASHBOARD_FILTER.apply(once, criteria)
    pd.testing.assert_frame_equal(once, twice)
    assert list(once.index) == sorted(once.index)


def test_filter_does_not_mutate_input(ev_frame):
    before = ev_frame.copy()
    DASHBOARD_FILTER.apply(ev_frame, FilterCriteria(search_text="tesla", equality_filters={"Make": "TESLA"}))
    pd.testing.assert_frame_equal(ev_frame, before)


def test_filter_empty_collection():
    assert filter_rows([], FilterCriteria(search_text="x"), ["Make"]).empty


def test_normalize_criteria_strips_and_defaults():
    crit = normalize_criteria({"search_text": "  tesla ", "equality_filters": {"Make": None, "Model": "", "State": "WA"}})
    assert crit.search_text == "tesla"
    assert crit.equality_filters["Make"] == ALL
    assert crit.equality_filters["Electric Vehicle Type"] == ALL
    assert crit.equality_filters["Model"] == ALL
    assert crit.active_filters() == {"State": "WA"}


def test_normalize_criteria_empty():
    crit = normalize_criteria(None)
    assert crit == FilterCriteria()
    assert crit.is_default


def test_reset_clears_search_and_filters():
    crit = FilterCriteria(search_text="x", equality_filters={"Make": "KIA", "Electric Vehicle Type": ALL})
    reset = crit.reset()
    assert reset.search_text == ""
    assert reset.equality_filters == {"Make": ALL, "Electric Vehicle Type": ALL}
