"""Streamlit UI runs through AppTest against the sample dataset."""
from __future__ import annotations

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

import ev_core.data

APP_PATH = str(Path(__file__).resolve().parents[2] / "app.py")


@pytest.fixture()
def app(monkeypatch, data_ctx) -> AppTest:
    monkeypatch.setattr(ev_core.data, "load_dashboard_data", lambda path=None: data_ctx)
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    assert not at.exception
    return at


def test_sidebar_widgets_keep_their_keys(app):
    app.text_input(key="dash_search").input("nissan").run()
    app.selectbox(key="dash_type").select("Battery Electric Vehicle (BEV)").run()
    app.toggle(key="dark_mode").set_value(True).run()
    assert not app.exception

    state = app.session_state["view_state"]
    assert state.dark is True
    assert state.dashboard.search_text == "nissan"
    assert state.dashboard.equality_filters["Electric Vehicle Type"] == "Battery Electric Vehicle (BEV)"
    assert app.selectbox(key="dash_make").value == "All"


def test_export_is_built_only_on_request(app):
    assert "prepared_export" not in app.session_state

    app.selectbox(key="export_fmt").select("pdf").run()
    assert "prepared_export" not in app.session_state

    app.button(key="prepare_export").click().run()
    assert not app.exception
    (fmt, _), content = app.session_state["prepared_export"]
    assert fmt == "pdf"
    assert content.startswith(b"%PDF")
