"""
ColumnFilterEngine: per-column discrete and date-range filters.

Filter candidates always come from the full dataset; the search term only
narrows the list offered for selection and never changes the predicate.
Active filters on different columns combine with AND.
"""
from __future__ import annotations

from typing import Callable, Iterable, Optional

from loguru import logger
import pandas as pd

from studio.data.normalize import parse_date
from studio.data.schemas import ColumnFilter, ColumnKind
from studio.data.store import RowStore


class ColumnFilterEngine:

    def __init__(self, store: RowStore, on_change: Optional[Callable[[], None]] = None) -> None:
        self.store = store
        self.filters: dict[str, ColumnFilter] = {}
        self.version = 0
        self._on_change = on_change

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    def _get(self, column: str) -> Optional[ColumnFilter]:
        """Existing filter, or a fresh one for a known column (None otherwise)."""
        if not self.store.has_column(column):
            logger.debug("Filter on unknown column ignored: {}", column)
            return None
        if column not in self.filters:
            self.filters[column] = ColumnFilter()
        return self.filters[column]

    def _changed(self, reset_page: bool = True) -> None:
        self.version += 1
        if reset_page and self._on_change is not None:
            self._on_change()

    def reset(self) -> None:
        """Drop all filters without notifying (new dataset)."""
        self.filters = {}
        self.version += 1

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_selected(self, column: str, values: Iterable[str]) -> bool:
        f = self._get(column)
        if f is None:
            return False
        f.selected_values = list(dict.fromkeys(str(v) for v in values))
        self._changed()
        return True

    def toggle_value(self, column: str, value: str) -> bool:
        f = self._get(column)
        if f is None:
            return False
        if value in f.selected_values:
            f.selected_values = [v for v in f.selected_values if v != value]
        else:
            f.selected_values = f.selected_values + [value]
        self._changed()
        return True

    def toggle_select_all(self, column: str) -> bool:
        """Select every unique value, or clear the selection if all are already selected."""
        f = self._get(column)
        if f is None:
            return False
        unique = self.unique_values(column)
        all_selected = all(v in f.selected_values for v in unique)
        f.selected_values = [] if all_selected else unique
        self._changed()
        return True

    def toggle_blanks(self, column: str) -> bool:
        f = self._get(column)
        if f is None:
            return False
        f.include_blanks = not f.include_blanks
        self._changed()
        return True

    def set_date_range(self, column: str, date_from: Optional[str] = None,
                       date_to: Optional[str] = None) -> bool:
        f = self._get(column)
        if f is None:
            return False
        f.date_from = date_from or None
        f.date_to = date_to or None
        self._changed()
        return True

    def set_search(self, column: str, search_term: str) -> bool:
        f = self._get(column)
        if f is None:
            return False
        f.search_term = search_term or ""
        self._changed(reset_page=False)
        return True

    def toggle_open(self, column: str) -> bool:
        f = self._get(column)
        if f is None:
            return False
        f.is_open = not f.is_open
        self._changed(reset_page=False)
        return True

    def clear(self, column: str) -> bool:
        self.filters.pop(column, None)
        self._changed()
        return True

    def clear_all(self) -> None:
        self.filters = {}
        self._changed()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def unique_values(self, column: str) -> list[str]:
        if not self.store.has_column(column):
            return []
        return self.store.unique_values(column)

    def candidate_values(self, column: str) -> list[str]:
        """Unique values narrowed by the column's search term (case-insensitive)."""
        values = self.unique_values(column)
        f = self.filters.get(column)
        term = (f.search_term if f else "").lower()
        if not term:
            return values
        return [v for v in values if term in v.lower()]

    def blank_count(self, column: str) -> int:
        if not self.store.has_column(column):
            return 0
        return self.store.blank_count(column)

    def has_active_filter(self, column: str) -> bool:
        f = self.filters.get(column)
        return f is not None and f.is_active(self.store.column_kind(column))

    def active_filters(self) -> dict[str, ColumnFilter]:
        return {c: f for c, f in self.filters.items() if self.has_active_filter(c)}

    # ------------------------------------------------------------------
    # Predicate
    # ------------------------------------------------------------------

    def _date_mask(self, df: pd.DataFrame, column: str, f: ColumnFilter) -> pd.Series:
        dates = self.store.parsed_dates(column).reindex(df.index)
        mask = dates.notna()
        start = parse_date(f.date_from) if f.date_from else None
        end = parse_date(f.date_to) if f.date_to else None
        # A bound that does not parse never excludes anything
        if start is not None:
            mask &= dates >= pd.Timestamp(start)
        if end is not None:
            mask &= dates <= pd.Timestamp(end)
        return mask

    def _discrete_mask(self, df: pd.DataFrame, column: str, f: ColumnFilter) -> pd.Series:
        col = df[column]
        blank = col.str.strip() == ""
        selected = col.isin(f.selected_values) & ~blank
        if f.include_blanks:
            return selected | blank
        return selected

    def mask(self, df: pd.DataFrame) -> pd.Series:
        """Boolean mask over `df` (a frame from the store) for all active filters."""
        result = pd.Series(True, index=df.index)
        for column, f in self.filters.items():
            if column not in df.columns:
                continue
            kind = self.store.column_kind(column)
            if not f.is_active(kind):
                continue
            if kind == ColumnKind.DATE:
                result &= self._date_mask(df, column, f)
            else:
                result &= self._discrete_mask(df, column, f)
        return result

    def apply(self, df: pd.DataFrame) -> pd.DataFrame:
        """Rows passing every active filter, in dataset order."""
        if df.empty or not self.filters:
            return df
        return df[self.mask(df)]

    def state(self) -> dict:
        return {c: f.to_dict() for c, f in self.filters.items()}
