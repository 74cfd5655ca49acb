from __future__ import annotations

from functools import lru_cache
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

import pandas as pd
from pyuca import Collator

from directory_core.data import CompanyRecord, coerce_number, coerce_text
from directory_core.filters import FilterCriteria, SortSpec


NUMERIC_SORT_KEYS = ("employees", "revenue", "founded")

CollationKey = Tuple[Tuple[int, ...], str]


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Loads the default Unicode collation element table once per process.
    return Collator()


def collation_key(value: object) -> CollationKey:
    """Unicode collation key of the casefolded text; the text itself breaks ties."""
    folded = coerce_text(value).casefold()
    return tuple(_collator().sort_key(folded)), folded


def _text_column(rows: Sequence[CompanyRecord], attr: str) -> pd.Series:
    return pd.Series([coerce_text(getattr(r, attr)).casefold() for r in rows], dtype=object)


def filter_mask(rows: Sequence[CompanyRecord], criteria: FilterCriteria) -> pd.Series:
    mask = pd.Series(True, index=range(len(rows)))
    for attr in ("name", "location", "industry"):
        needle = getattr(criteria, attr).casefold()
        if not needle:
            continue
        mask &= _text_column(rows, attr).str.contains(needle, regex=False, na=False)
    return mask


def _name_rank(rows: Sequence[CompanyRecord]) -> pd.Series:
    keys = [collation_key(r.name) for r in rows]
    order: Dict[CollationKey, int] = {k: i for i, k in enumerate(sorted(set(keys)))}
    return pd.Series([order[k] for k in keys], dtype="int64")


def _numeric_rank(attr: str) -> Callable[[Sequence[CompanyRecord]], pd.Series]:
    def rank(rows: Sequence[CompanyRecord]) -> pd.Series:
        values = pd.Series([coerce_number(getattr(r, attr)) for r in rows], dtype="float64")
        return values.rank(method="dense").astype("int64")

    return rank


_RANKERS: Dict[str, Callable[[Sequence[CompanyRecord]], pd.Series]] = {
    "name": _name_rank,
    **{key: _numeric_rank(key) for key in NUMERIC_SORT_KEYS},
}


def sort_rank(rows: Sequence[CompanyRecord], sort: SortSpec) -> pd.Series:
    """Dense rank of each row under the comparator for `sort.key`.

    Negated for descending order so a stable ascending sort on the rank keeps
    ties in input order for both directions.
    """
    ranker = _RANKERS.get(sort.key, _name_rank)
    rank = ranker(rows)
    return -rank if sort.descending else rank


def derive(
    records: Iterable[CompanyRecord],
    criteria: FilterCriteria,
    sort: SortSpec,
) -> List[CompanyRecord]:
    rows = list(records)
    if not rows:
        return []

    filtered = [r for r, keep in zip(rows, filter_mask(rows, criteria)) if keep]
    if not filtered:
        return []

    frame = pd.DataFrame({"_pos": range(len(filtered)), "_rank": sort_rank(filtered, sort)})
    frame = frame.sort_values("_rank", kind="stable")
    return [filtered[pos] for pos in frame["_pos"]]
