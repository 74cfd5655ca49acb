"""Debounced editing of filter criteria.

`CriteriaEditor` keeps two values: `local` (what the user has typed so far)
and `applied` (what the pipeline should see). Text edits reach `applied` only
after a quiet period; clearing a field or all fields applies at once.
Time comes from an injectable clock so the policy can be driven without
real timers.
"""

from __future__ import annotations

import time
from typing import Callable, Generic, Optional, TypeVar

from directory_core.filters import CRITERIA_FIELDS, FilterCriteria


FILTER_DEBOUNCE_SECONDS = 0.3

T = TypeVar("T")
Clock = Callable[[], float]


class Debouncer(Generic[T]):
    """Trailing-edge debounce: only the last value submitted in a burst is emitted."""

    def __init__(self, delay: float = FILTER_DEBOUNCE_SECONDS, clock: Clock = time.monotonic):
        self.delay = delay
        self._clock = clock
        self._pending: Optional[T] = None
        self._has_pending = False
        self._submitted_at = 0.0

    @property
    def pending(self) -> bool:
        return self._has_pending

    def submit(self, value: T) -> None:
        self._pending = value
        self._has_pending = True
        self._submitted_at = self._clock()

    def poll(self) -> Optional[T]:
        if not self._has_pending:
            return None
        if self._clock() - self._submitted_at < self.delay:
            return None
        return self.flush()

    def flush(self) -> Optional[T]:
        value = self._pending
        self.cancel()
        return value

    def cancel(self) -> None:
        self._pending = None
        self._has_pending = False


class CriteriaEditor:
    """Local criteria as typed, applied criteria once the debounce settles.

    Timer-driven callers `edit()` on each keystroke and `poll()` to pick up
    the settled value. The Streamlit view calls `commit()` right after every
    `edit()`, since its widgets only report a value once input is finished;
    there `poll()` just returns the applied criteria.
    """

    def __init__(
        self,
        initial: Optional[FilterCriteria] = None,
        *,
        delay: float = FILTER_DEBOUNCE_SECONDS,
        clock: Clock = time.monotonic,
    ):
        self.local = initial or FilterCriteria()
        self.applied = self.local
        self._debouncer: Debouncer[FilterCriteria] = Debouncer(delay, clock)

    @property
    def dirty(self) -> bool:
        return self._debouncer.pending

    def edit(self, field_name: str, value: str) -> FilterCriteria:
        self.local = self.local.with_field(field_name, value)
        self._debouncer.submit(self.local)
        return self.local

    def poll(self) -> FilterCriteria:
        settled = self._debouncer.poll()
        if settled is not None:
            self.applied = settled
        return self.applied

    def commit(self) -> FilterCriteria:
        """Apply any pending edit immediately."""
        settled = self._debouncer.flush()
        if settled is not None:
            self.applied = settled
        return self.applied

    def clear_field(self, field_name: str) -> FilterCriteria:
        if field_name not in CRITERIA_FIELDS:
            raise ValueError(f"Unknown filter field: {field_name!r}")
        self.local = self.local.with_field(field_name, "")
        self.applied = self.applied.with_field(field_name, "")
        # Unsettled edits to other fields are re-armed, as any local change is.
        if self.local != self.applied:
            self._debouncer.submit(self.local)
        else:
            self._debouncer.cancel()
        return self.applied

    def clear_all(self) -> FilterCriteria:
        self._debouncer.cancel()
        self.local = FilterCriteria()
        self.applied = self.local
        return self.applied
