from __future__ import annotations

import math
import numbers
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable, List, Optional

import pandas as pd

from directory_core.data import CompanyRecord, is_number, to_float


_CURRENCY_SCALES = (
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "K"),
)

DISPLAY_COLUMNS = ["Name", "Description", "Industry", "Location", "Employees", "Revenue", "Founded"]
EXPORT_COLUMNS = ["id", "name", "industry", "location", "description", "employees", "revenue", "founded"]


def _as_decimal(value: numbers.Real) -> Decimal:
    if isinstance(value, numbers.Integral):
        return Decimal(int(value))
    return Decimal(str(value))


def _quantize_half_up(amount: Decimal, ndigits: int) -> Decimal:
    # Enough digits for the integer part, so large values never trap.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + ndigits + 2)
        return amount.quantize(Decimal(10) ** -ndigits, rounding=ROUND_HALF_UP)


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(_quantize_half_up(Decimal(str(value)), ndigits))


def _plain_number(value: object) -> str:
    if isinstance(value, numbers.Integral):
        return str(int(value))
    out = float(value)  # type: ignore[arg-type]
    if math.isnan(out):
        return "NaN"
    if math.isinf(out):
        return "Infinity" if out > 0 else "-Infinity"
    if out.is_integer():
        return str(int(out))
    return repr(out)


def format_count(value: object) -> object:
    """Thousands-grouped count; non-numeric values pass through unchanged."""
    if not is_number(value):
        return value
    out = to_float(value)  # type: ignore[arg-type]
    if math.isnan(out):
        return "NaN"
    if math.isinf(out):
        return "∞" if out > 0 else "-∞"
    if isinstance(value, numbers.Integral):
        return f"{int(value):,}"
    text = f"{_quantize_half_up(_as_decimal(out), 3):,.3f}".rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


def format_currency(value: object) -> object:
    """Compact dollar amount ($1.2K / $3.4M / $5.6B); non-numeric passes through."""
    if not is_number(value):
        return value
    out = to_float(value)  # type: ignore[arg-type]
    if math.isinf(out) and out > 0:
        return "$InfinityB"
    if not math.isfinite(out):
        return f"${_plain_number(out)}"
    amount = _as_decimal(value)  # type: ignore[arg-type]
    for threshold, suffix in _CURRENCY_SCALES:
        if amount >= threshold:
            with localcontext() as ctx:
                ctx.prec = max(ctx.prec, amount.adjusted() + 3)
                scaled = amount / threshold
            return f"${_quantize_half_up(scaled, 1):.1f}{suffix}"
    return f"${_plain_number(value)}"


def _cell(value: object) -> object:
    return "" if value is None else value


def to_display_frame(records: Iterable[CompanyRecord]) -> pd.DataFrame:
    rows: List[dict] = []
    for r in records:
        rows.append(
            {
                "Name": _cell(r.name),
                "Description": _cell(r.description),
                "Industry": _cell(r.industry),
                "Location": _cell(r.location),
                "Employees": _cell(format_count(r.employees)),
                "Revenue": _cell(format_currency(r.revenue)),
                "Founded": _cell(r.founded),
            }
        )
    # Arrow serialization in st.dataframe needs one type per column.
    return pd.DataFrame(rows, columns=DISPLAY_COLUMNS).astype(str)


def to_export_frame(records: Iterable[CompanyRecord]) -> pd.DataFrame:
    return pd.DataFrame([r.to_dict() for r in records], columns=EXPORT_COLUMNS)
