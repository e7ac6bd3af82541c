"""
Type-aware sorting.

SortEngine orders the filtered dataset view by one column. Each pair of cells
is compared as numbers if both are numbers, as dates if both are dates, and
as text otherwise. Values are parsed once per sort, not once per comparison.

RecordSorter is the variant used by the reference tables (inbox, source data):
three-state toggling and domain orders for status columns.
"""
from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, Iterable, Optional

import pandas as pd

from studio.data.normalize import parse_date, parse_number
from studio.data.schemas import SortDirection, SortState


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def text_key(value: str) -> tuple[str, str]:
    """Case-insensitive first, then case as tie-break (lowercase first)."""
    return value.casefold(), value.swapcase()


# strict numbers: "12abc" sorts as text, unlike the parseFloat prefix used for totals
class _CellKey:
    __slots__ = ("number", "date", "text")

    def __init__(self, raw) -> None:
        raw = "" if raw is None else str(raw)
        self.number = parse_number(raw)
        self.date = parse_date(raw)
        self.text = text_key(raw)


def compare_cells(a: _CellKey, b: _CellKey) -> int:
    if a.number is not None and b.number is not None:
        return _cmp(a.number, b.number)
    if a.date is not None and b.date is not None:
        return _cmp(a.date, b.date)
    return _cmp(a.text, b.text)


def sorted_positions(values: list, direction: SortDirection) -> list[int]:
    """Stable ordering of `values` (positions) under the cell comparator."""
    keys = [_CellKey(v) for v in values]
    sign = -1 if direction == SortDirection.DESC else 1
    return sorted(
        range(len(keys)),
        key=cmp_to_key(lambda i, j: sign * compare_cells(keys[i], keys[j])),
    )


class SortEngine:
    """Single active sort key over a DataFrame view."""

    def __init__(self, on_change: Optional[Callable[[], None]] = None) -> None:
        self.state: Optional[SortState] = None
        self.version = 0
        self._on_change = on_change

    def _changed(self) -> None:
        self.version += 1
        if self._on_change is not None:
            self._on_change()

    def sort(self, column: str, direction: SortDirection | str | None = None) -> SortState:
        """Set the sort explicitly, or toggle asc -> desc when no direction is given."""
        if direction is None:
            return self.toggle(column)
        self.state = SortState(column, SortDirection(direction))
        self._changed()
        return self.state

    def toggle(self, column: str) -> SortState:
        if self.state and self.state.key == column and self.state.direction == SortDirection.ASC:
            direction = SortDirection.DESC
        else:
            direction = SortDirection.ASC
        self.state = SortState(column, direction)
        self._changed()
        return self.state

    def clear(self) -> None:
        self.state = None
        self._changed()

    def reset(self) -> None:
        """Forget the sort without notifying (new dataset)."""
        self.state = None
        self.version += 1

    def apply(self, df: pd.DataFrame) -> pd.DataFrame:
        """Re-ordered view of `df`; the input frame is left untouched."""
        if self.state is None or df.empty or self.state.key not in df.columns:
            return df
        order = sorted_positions(df[self.state.key].tolist(), self.state.direction)
        return df.iloc[order]


# ---------------------------------------------------------------------------
# Reference-table variant
# ---------------------------------------------------------------------------

class RecordSorter:
    """Sort flat records (dicts) with per-column rules.

    Clicking the same column cycles asc -> desc -> none. Missing (None)
    values go last when ascending and first when descending.
    """

    def __init__(
        self,
        status_column: str = "status",
        status_order: Iterable[str] = (),
        numeric_columns: Iterable[str] = (),
        date_columns: Iterable[str] = (),
        blank_as_empty_columns: Iterable[str] = (),
    ) -> None:
        self.status_column = status_column
        self.status_rank = {s: i for i, s in enumerate(status_order, 1)}
        self.numeric_columns = set(numeric_columns)
        self.date_columns = set(date_columns)
        self.blank_as_empty_columns = set(blank_as_empty_columns)
        self.column = ""
        self.direction: Optional[SortDirection] = None

    def toggle(self, column: str) -> Optional[SortDirection]:
        if self.column == column:
            if self.direction == SortDirection.ASC:
                self.direction = SortDirection.DESC
            elif self.direction == SortDirection.DESC:
                self.direction = None
            else:
                self.direction = SortDirection.ASC
        else:
            self.direction = SortDirection.ASC
        self.column = column
        return self.direction

    def _value(self, column: str, value: Any):
        if column in self.numeric_columns:
            return parse_number(value)
        if column in self.date_columns:
            parsed = pd.to_datetime(str(value).replace("\n", " "), errors="coerce")
            return None if pd.isna(parsed) else parsed.to_pydatetime()
        if column == self.status_column:
            return self.status_rank.get(value, 0)
        if column in self.blank_as_empty_columns:
            value = value or ""
        if isinstance(value, str):
            return value.lower()
        return value

    def _compare(self, a: dict, b: dict) -> int:
        column = self.column
        desc = self.direction == SortDirection.DESC
        av, bv = a.get(column), b.get(column)
        if av is None and bv is None:
            return 0
        if av is None:
            return -1 if desc else 1
        if bv is None:
            return 1 if desc else -1

        ak, bk = self._value(column, av), self._value(column, bv)
        if ak is None or bk is None or type(ak) is not type(bk):
            # unparseable version/date: compare as text
            ak, bk = str(av).lower(), str(bv).lower()
        result = _cmp(ak, bk)
        return -result if desc else result

    def apply(self, records: list[dict]) -> list[dict]:
        if not self.direction or not self.column:
            return list(records)
        return sorted(records, key=cmp_to_key(self._compare))

    def state(self) -> dict:
        return {"column": self.column, "direction": self.direction.value if self.direction else None}
