from __future__ import annotations

import json
import logging

import pytest

from directory_core.data import (
    CompanyRecord,
    coerce_number,
    coerce_text,
    fetch_companies,
    filter_options,
    load_companies,
    parse_companies,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (7, 7.0),
        (2.5, 2.5),
        (" 42 ", 42.0),
        ("1e3", 1000.0),
        ("n/a", 0.0),
        ("", 0.0),
        ("1_000", 0.0),
        (None, 0.0),
        (True, 1.0),
        (False, 0.0),
        (float("nan"), 0.0),
        ([1], 0.0),
        (10**400, float("inf")),
        (-(10**400), float("-inf")),
        ("0x10", 16.0),
        ("0B11", 3.0),
        ("-0x10", 0.0),
        ("0x", 0.0),
        ("Infinity", float("inf")),
        (" -Infinity ", float("-inf")),
        ("inf", 0.0),
        ("infinity", 0.0),
        ("nan", 0.0),
        ("1e400", float("inf")),
    ],
)
def test_coerce_number(value, expected):
    assert coerce_number(value) == expected


def test_coerce_text():
    assert coerce_text("Acme") == "Acme"
    assert coerce_text(None) == ""
    assert coerce_text(12) == ""


def test_from_raw_ignores_unknown_keys():
    record = CompanyRecord.from_raw({"id": 1, "name": "Acme", "ceo": "Wile E."})
    assert record.name == "Acme"
    assert record.revenue is None
    assert "ceo" not in record.to_dict()


def test_parse_companies_rejects_non_list():
    with pytest.raises(ValueError):
        parse_companies({"id": 1})


def test_parse_companies_skips_bad_entries(caplog):
    with caplog.at_level(logging.WARNING, logger="directory_core.data"):
        records = parse_companies([{"id": 1, "name": "A"}, "oops", {"id": 1, "name": "dup"}, {"name": "no id"}])
    assert [r.name for r in records] == ["A", "no id"]
    assert "expected an object" in caplog.text
    assert "duplicate id" in caplog.text


def test_load_companies_missing_file(tmp_path):
    assert load_companies(tmp_path / "missing.json") == ()


def test_load_companies_reads_and_caches(tmp_path):
    path = tmp_path / "companies.json"
    path.write_text(json.dumps([{"id": "a", "name": "Acme", "employees": 5}]), encoding="utf-8")
    first = load_companies(path)
    assert first == (CompanyRecord(id="a", name="Acme", employees=5),)
    assert load_companies(path) is first


def test_load_companies_malformed_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        load_companies(path)


def test_bundled_dataset_has_unique_ids():
    records = load_companies()
    assert records
    ids = [r.id for r in records]
    assert len(ids) == len(set(ids))


def test_fetch_companies_waits_before_loading(tmp_path):
    path = tmp_path / "companies.json"
    path.write_text(json.dumps([{"id": 1, "name": "Acme"}]), encoding="utf-8")
    waits = []
    records = fetch_companies(path, delay=0.8, sleep=waits.append)
    assert waits == [0.8]
    assert [r.name for r in records] == ["Acme"]


def test_filter_options_are_distinct_and_sorted():
    records = [
        CompanyRecord(id=1, location="Paris", industry="Energy"),
        CompanyRecord(id=2, location="Berlin", industry="Energy"),
        CompanyRecord(id=3, location="", industry=None),
        CompanyRecord(id=4, location=3, industry="Aerospace"),
    ]
    options = filter_options(records)
    assert options.locations == ("Berlin", "Paris")
    assert options.industries == ("Aerospace", "Energy")
