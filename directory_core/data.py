from __future__ import annotations

import json
import logging
import math
import numbers
import time
from dataclasses import dataclass, fields
from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "fixtures"
DATASET_PATH = DATA_DIR / "companies.json"

# Artificial latency standing in for a real network fetch.
LOAD_DELAY_SECONDS = 0.8


@dataclass(frozen=True)
class CompanyRecord:
    """One company as loaded from the dataset.

    Any field may be missing or of the wrong type; readers go through
    `coerce_text` / `coerce_number`.
    """

    id: object = None
    name: object = None
    industry: object = None
    location: object = None
    description: object = None
    employees: object = None
    revenue: object = None
    founded: object = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, object]) -> "CompanyRecord":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in raw.items() if k in known})

    def to_dict(self) -> Dict[str, object]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class FilterOptions:
    locations: Tuple[str, ...] = ()
    industries: Tuple[str, ...] = ()


def coerce_text(value: object) -> str:
    return value if isinstance(value, str) else ""


_RADIX_PREFIXES = ("0x", "0o", "0b")
_SIGNED_INFINITY = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


def to_float(value: numbers.Real) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _parse_number(text: str) -> float:
    s = text.strip()
    if not s:
        return 0.0
    if s in _SIGNED_INFINITY:
        return _SIGNED_INFINITY[s]
    lowered = s.lower()
    # Python-only spellings: digit separators, non-ASCII digits, inf/nan words.
    if "_" in s or not s.isascii() or "inf" in lowered or "nan" in lowered:
        return 0.0
    try:
        if lowered[:2] in _RADIX_PREFIXES:
            return to_float(int(s, 0))
        return float(s)
    except ValueError:
        return 0.0


def coerce_number(value: object) -> float:
    """Numeric view of a loosely typed value; anything unusable becomes 0.

    Strings follow the number grammar of JSON/JavaScript sources: decimal and
    exponent forms, unsigned ``0x``/``0o``/``0b`` literals and the exact
    spelling ``Infinity``. Integers past the float range become +/-inf.
    0, NaN and unparseable input are indistinguishable afterwards.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, numbers.Real):
        out = to_float(value)
    elif isinstance(value, str):
        out = _parse_number(value)
    else:
        return 0.0
    if math.isnan(out):
        return 0.0
    return out


def is_number(value: object) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _distinct_sorted(values: Iterable[object]) -> Tuple[str, ...]:
    return tuple(sorted({v for v in values if isinstance(v, str) and v}))


def filter_options(records: Iterable[CompanyRecord]) -> FilterOptions:
    records = list(records)
    return FilterOptions(
        locations=_distinct_sorted(r.location for r in records),
        industries=_distinct_sorted(r.industry for r in records),
    )


def _hashable_id(value: object) -> Optional[object]:
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return value
    return None


def parse_companies(payload: object) -> Tuple[CompanyRecord, ...]:
    if not isinstance(payload, list):
        raise ValueError(f"Company dataset must be a JSON array, got {type(payload).__name__}")

    records: List[CompanyRecord] = []
    seen_ids = set()
    for idx, raw in enumerate(payload):
        if not isinstance(raw, dict):
            logger.warning("Skipping dataset entry %d: expected an object, got %s", idx, type(raw).__name__)
            continue
        record = CompanyRecord.from_raw(raw)
        key = _hashable_id(record.id)
        if key is not None:
            if key in seen_ids:
                logger.warning("Skipping dataset entry %d: duplicate id %r", idx, key)
                continue
            seen_ids.add(key)
        records.append(record)
    return tuple(records)


def file_signature(path: Path) -> Tuple[str, float]:
    return str(path), path.stat().st_mtime


@lru_cache(maxsize=4)
def _load_companies_cached(signature: Tuple[str, float]) -> Tuple[CompanyRecord, ...]:
    path = Path(signature[0])
    with path.open(encoding="utf-8") as fh:
        payload = json.load(fh)
    records = parse_companies(payload)
    logger.info("Loaded %d companies from %s", len(records), path.name)
    return records


def load_companies(path: Optional[Path] = None) -> Tuple[CompanyRecord, ...]:
    path = Path(path) if path is not None else DATASET_PATH
    if not path.exists():
        logger.warning("Company dataset not found at %s", path)
        return ()
    return _load_companies_cached(file_signature(path))


def fetch_companies(
    path: Optional[Path] = None,
    *,
    delay: float = LOAD_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> Tuple[CompanyRecord, ...]:
    """Simulated remote fetch: wait `delay` seconds, then load the dataset."""
    if delay > 0:
        sleep(delay)
    return load_companies(path)
