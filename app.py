import html
from dataclasses import asdict
import logging
from typing import List, Sequence

import pandas as pd
import streamlit as st

from directory_core.criteria_editor import CriteriaEditor
from directory_core.data import CompanyRecord, fetch_companies, filter_options
from directory_core.filters import SORT_KEYS, normalize_filters
from directory_core.formatting import format_count, format_currency, to_display_frame, to_export_frame
from directory_core.pipeline import derive

logger = logging.getLogger(__name__)

ALL_LOCATIONS = "All Locations"
ALL_INDUSTRIES = "All Industries"
SORT_LABELS = {"name": "Name (A–Z)", "employees": "Employees", "revenue": "Revenue", "founded": "Founded"}
GRID_COLUMNS = 3


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .company-card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
                       box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px; min-height: 260px;}
        .company-card .card-title {font-weight: 800;font-size: 1.1rem;color: #111827;}
        .company-card .card-meta {color: #4b5563;font-size: 0.9rem;margin-top: 2px;}
        .company-card .card-desc {color: #6b7280;font-size: 0.9rem;margin: 8px 0 12px;}
        .company-card .card-stats {display: flex;gap: 24px;border-top: 1px solid #e5e7eb;padding-top: 8px;}
        .company-card .stat-value {font-weight: 600;color: #111827;}
        .company-card .stat-label {font-size: 0.75rem;color: #6b7280;}
        .company-card .card-founded {font-size: 0.75rem;color: #9ca3af;margin-top: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


def _text(value: object) -> str:
    return html.escape("" if value is None else str(value))


def company_card(company: CompanyRecord) -> str:
    desc = f"<div class='card-desc'>{_text(company.description)}</div>" if company.description else ""
    return f"""
        <div class="company-card">
          <div class="card-title">{_text(company.name)}</div>
          <div class="card-meta">💼 {_text(company.industry)}</div>
          <div class="card-meta">📍 {_text(company.location)}</div>
          {desc}
          <div class="card-stats">
            <div><div class="stat-value">{_text(format_count(company.employees))}</div><div class="stat-label">Employees</div></div>
            <div><div class="stat-value">{_text(format_currency(company.revenue))}</div><div class="stat-label">Revenue</div></div>
          </div>
          <div class="card-founded">Founded {_text(company.founded)}</div>
        </div>
        """


def format_filter_summary(name: str, location: str, industry: str) -> str:
    chips = [
        f"Search: {name}" if name else "Search: All",
        f"Location: {location}" if location else "Location: All",
        f"Industry: {industry}" if industry else "Industry: All",
    ]
    return "".join([f"<span class='chip'>{html.escape(txt)}</span>" for txt in chips])


def render_page_header(title: str, caption: str, filter_summary_html: str, export_df: pd.DataFrame, export_name: str = "companies.csv"):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(f"<div class='app-top-bar'><div class='page-title'>🏢 {title}</div></div>", unsafe_allow_html=True)
        st.caption(caption)
    with c2:
        if not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )
    st.markdown(f"<div class='chip-row'>{filter_summary_html}</div>", unsafe_allow_html=True)


def render_grid(companies: Sequence[CompanyRecord]):
    for start in range(0, len(companies), GRID_COLUMNS):
        cols = st.columns(GRID_COLUMNS)
        for col, company in zip(cols, companies[start : start + GRID_COLUMNS]):
            col.markdown(company_card(company), unsafe_allow_html=True)


def render_table(companies: Sequence[CompanyRecord]):
    st.dataframe(to_display_frame(companies), width="stretch", hide_index=True)


# ---------- Criteria callbacks ----------
def _editor() -> CriteriaEditor:
    return st.session_state["criteria_editor"]


def _on_name_change():
    _editor().edit("name", st.session_state["filter_name"])
    # Streamlit only reports text input once typing settles (enter / blur).
    _editor().commit()


def _on_select_change(field_name: str, key: str, all_label: str):
    value = st.session_state[key]
    _editor().edit(field_name, "" if value == all_label else value)
    _editor().commit()


def _clear_field(field_name: str, key: str, reset_value: str):
    st.session_state[key] = reset_value
    _editor().clear_field(field_name)


def _clear_all():
    st.session_state["filter_name"] = ""
    st.session_state["filter_location"] = ALL_LOCATIONS
    st.session_state["filter_industry"] = ALL_INDUSTRIES
    _editor().clear_all()


def _toggle_sort_dir():
    st.session_state["sort_dir"] = "asc" if st.session_state.get("sort_dir", "asc") == "desc" else "desc"


# ---------- UI setup ----------
st.set_page_config(page_title="Company Directory", layout="wide")
inject_base_styles()
st.title("Company Directory")

if "companies" not in st.session_state:
    with st.spinner("Loading companies…"):
        try:
            st.session_state["companies"] = fetch_companies()
        except (OSError, ValueError) as exc:
            logger.exception("Loading the company dataset failed")
            st.error(f"Could not load companies: {exc}")
            st.stop()
companies_all: Sequence[CompanyRecord] = st.session_state["companies"]
if not companies_all:
    st.error("No companies found in the dataset. Check directory_core/fixtures/companies.json.")
    st.stop()

st.session_state.setdefault("criteria_editor", CriteriaEditor())
st.session_state.setdefault("sort_dir", "asc")
options = filter_options(companies_all)
location_options: List[str] = [ALL_LOCATIONS, *options.locations]
industry_options: List[str] = [ALL_INDUSTRIES, *options.industries]

# ----- Sidebar: filters -----
with st.sidebar:
    head_cols = st.columns([3, 2])
    head_cols[0].markdown("### Filter & Search")
    head_cols[1].button("Clear Filters", on_click=_clear_all, help="Clear all filters")

    st.text_input("Search by Company Name", key="filter_name", placeholder="Search by Company Name...", on_change=_on_name_change)
    if st.session_state.get("filter_name"):
        st.button("✕ Clear search", key="clear_name", on_click=_clear_field, args=("name", "filter_name", ""))

    st.selectbox(
        "Location",
        location_options,
        key="filter_location",
        on_change=_on_select_change,
        args=("location", "filter_location", ALL_LOCATIONS),
    )
    if st.session_state.get("filter_location", ALL_LOCATIONS) != ALL_LOCATIONS:
        st.button("✕ Clear location", key="clear_location", on_click=_clear_field, args=("location", "filter_location", ALL_LOCATIONS))

    st.selectbox(
        "Industry",
        industry_options,
        key="filter_industry",
        on_change=_on_select_change,
        args=("industry", "filter_industry", ALL_INDUSTRIES),
    )
    if st.session_state.get("filter_industry", ALL_INDUSTRIES) != ALL_INDUSTRIES:
        st.button("✕ Clear industry", key="clear_industry", on_click=_clear_field, args=("industry", "filter_industry", ALL_INDUSTRIES))

# ----- View toggle + sort controls -----
control_cols = st.columns([3, 3, 1])
with control_cols[0]:
    view_choice = st.radio("View", ["Grid", "Table"], key="view_mode", horizontal=True)
with control_cols[1]:
    sort_by = st.selectbox("Sort", list(SORT_KEYS), key="sort_by", format_func=lambda k: SORT_LABELS.get(k, k))
with control_cols[2]:
    sort_dir = st.session_state["sort_dir"]
    st.button(
        "▲" if sort_dir == "asc" else "▼",
        key="toggle_sort_dir",
        on_click=_toggle_sort_dir,
        help="Ascending" if sort_dir == "asc" else "Descending",
    )

filters = normalize_filters(
    {
        "criteria": asdict(_editor().poll()),
        "sort_by": sort_by,
        "sort_dir": st.session_state["sort_dir"],
        "view": view_choice.lower(),
    }
)
companies = derive(companies_all, filters.criteria, filters.sort)

criteria = filters.criteria
render_page_header(
    "Companies",
    "Discover innovative companies shaping the future",
    format_filter_summary(criteria.name, criteria.location, criteria.industry),
    export_df=to_export_frame(companies),
)

if not companies:
    st.info("No companies found.")
elif filters.view == "grid":
    render_grid(companies)
else:
    render_table(companies)
