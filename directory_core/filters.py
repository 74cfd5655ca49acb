from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal, Optional


SORT_KEYS = ("name", "employees", "revenue", "founded")
VIEW_MODES = ("grid", "table")
CRITERIA_FIELDS = ("name", "location", "industry")

SortDirection = Literal["asc", "desc"]
ViewMode = Literal["grid", "table"]

_DIRECTION_ALIASES = {
    "asc": "asc",
    "ascending": "asc",
    "desc": "desc",
    "descending": "desc",
}


@dataclass(frozen=True)
class FilterCriteria:
    name: str = ""
    location: str = ""
    industry: str = ""

    def with_field(self, field_name: str, value: str) -> "FilterCriteria":
        if field_name not in CRITERIA_FIELDS:
            raise ValueError(f"Unknown filter field: {field_name!r}")
        return replace(self, **{field_name: value})

    def is_empty(self) -> bool:
        return not (self.name or self.location or self.industry)


@dataclass(frozen=True)
class SortSpec:
    # Unknown keys are kept; the pipeline falls back to the name ordering for them.
    key: str = "name"
    direction: SortDirection = "asc"

    @property
    def descending(self) -> bool:
        return self.direction == "desc"

    def toggled(self) -> "SortSpec":
        return replace(self, direction="asc" if self.descending else "desc")


DEFAULT_SORT = SortSpec()


@dataclass(frozen=True)
class DashboardFilters:
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    sort: SortSpec = field(default_factory=SortSpec)
    view: ViewMode = "grid"


def _as_text(value: object) -> str:
    return value if isinstance(value, str) else ""


def normalize_direction(value: object) -> SortDirection:
    if not isinstance(value, str):
        return "asc"
    return _DIRECTION_ALIASES.get(value.strip().lower(), "asc")  # type: ignore[return-value]


def normalize_criteria(raw: Optional[dict]) -> FilterCriteria:
    raw = raw or {}
    return FilterCriteria(
        name=_as_text(raw.get("name")),
        location=_as_text(raw.get("location")),
        industry=_as_text(raw.get("industry")),
    )


def normalize_sort(raw: Optional[dict]) -> SortSpec:
    raw = raw or {}
    key = raw.get("key")
    if not isinstance(key, str) or not key:
        key = DEFAULT_SORT.key
    return SortSpec(key=key, direction=normalize_direction(raw.get("direction")))


def normalize_filters(raw: dict) -> DashboardFilters:
    """Build a `DashboardFilters` from loose UI values.

    Accepts either nested ``criteria``/``sort`` dicts or the flat keys
    ``name``, ``location``, ``industry``, ``sort_by``, ``sort_dir``.
    """
    criteria_raw = raw.get("criteria")
    if not isinstance(criteria_raw, dict):
        criteria_raw = {k: raw.get(k) for k in CRITERIA_FIELDS}

    sort_raw = raw.get("sort")
    if not isinstance(sort_raw, dict):
        sort_raw = {"key": raw.get("sort_by"), "direction": raw.get("sort_dir")}

    view = raw.get("view")
    if view not in VIEW_MODES:
        view = "grid"

    return DashboardFilters(
        criteria=normalize_criteria(criteria_raw),
        sort=normalize_sort(sort_raw),
        view=view,
    )
