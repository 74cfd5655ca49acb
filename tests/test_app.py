from __future__ import annotations

from pathlib import Path

import pytest

from streamlit.testing.v1 import AppTest


APP_PATH = str(Path(__file__).resolve().parents[1] / "app.py")


@pytest.fixture
def app():
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    return at.run()


def test_app_renders_grid_by_default(app):
    assert not app.exception
    assert app.title[0].value == "Company Directory"
    assert app.radio(key="view_mode").value == "Grid"
    assert len(app.dataframe) == 0


def test_location_filter_and_table_view(app):
    app.selectbox(key="filter_location").select("Berlin, Germany").run()
    app.radio(key="view_mode").set_value("Table").run()
    assert not app.exception

    df = app.dataframe[0].value
    assert set(df["Location"]) == {"Berlin, Germany"}
    assert list(df["Name"]) == ["Kraken Security", "Lumen Edtech", "Nordlicht Robotics"]


def test_revenue_descending_in_table(app):
    app.radio(key="view_mode").set_value("Table").run()
    app.selectbox(key="sort_by").select("revenue").run()
    app.button(key="toggle_sort_dir").click().run()
    assert not app.exception

    df = app.dataframe[0].value
    assert df["Name"].iloc[0] == "Ferro Materials"
    assert df["Revenue"].iloc[0] == "$2.4B"
    # Zero and unparseable revenue tie; dataset order is kept.
    assert list(df["Name"].iloc[-2:]) == ["Zephyr Aero", "Stealth Startup"]


def test_no_results_message(app):
    app.text_input(key="filter_name").input("no-such-company").run()
    assert not app.exception
    assert any(info.value == "No companies found." for info in app.info)
