"""
RowStore: the imported dataset, held as a pandas DataFrame of strings.

Rows keep their import order; the RangeIndex labels are the stable row
positions used for cell edits. Filtering and sorting never touch this frame;
they produce derived views from it.
"""
from __future__ import annotations

from typing import Callable, Optional, Sequence

from loguru import logger
import pandas as pd

from studio.data.normalize import classify_column, parse_date_series
from studio.data.schemas import ColumnKind


class RowStore:
    """In-memory dataset with per-column kind and parsed-date caches."""

    def __init__(self) -> None:
        self.df: pd.DataFrame = pd.DataFrame()
        self.columns: list[str] = []
        self.version = 0
        self._kinds: dict[str, ColumnKind] = {}
        self._dates: dict[str, pd.Series] = {}
        self._reset_listeners: list[Callable[[], None]] = []
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def on_reset(self, callback: Callable[[], None]) -> None:
        """Register state that must be cleared whenever a new dataset arrives."""
        self._reset_listeners.append(callback)

    def load(self, rows: Sequence[Sequence[str]], columns: Sequence[str]) -> "RowStore":
        """Replace the whole dataset. Short rows are padded with empty strings."""
        columns = [str(c) for c in columns]
        width = len(columns)
        records = []
        for row in rows:
            values = ["" if v is None else str(v) for v in list(row)[:width]]
            values.extend([""] * (width - len(values)))
            records.append(values)
        df = pd.DataFrame(records, columns=columns, dtype=str)
        return self.load_frame(df)

    def load_frame(self, df: pd.DataFrame) -> "RowStore":
        """Swap in a fully built frame, then reset everything derived from the old one."""
        df = df.fillna("").astype(str).reset_index(drop=True)
        kinds = {c: classify_column(df[c].tolist()) for c in df.columns}

        self.df = df
        self.columns = list(df.columns)
        self._kinds = kinds
        self._dates = {}
        self._loaded = True
        self.version += 1

        logger.info(
            "Loaded dataset: {} rows, {} columns ({})",
            len(df), len(self.columns),
            ", ".join(f"{c}={k.value}" for c, k in kinds.items() if k != ColumnKind.TEXT) or "all text",
        )
        for callback in self._reset_listeners:
            callback()
        return self

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def row_count(self) -> int:
        return len(self.df)

    # ------------------------------------------------------------------
    # Column access
    # ------------------------------------------------------------------

    def has_column(self, name: str) -> bool:
        return name in self._kinds

    def get_column(self, name: str) -> list[str]:
        """Raw values of one column in row order. KeyError for unknown columns."""
        if name not in self._kinds:
            raise KeyError(name)
        return self.df[name].tolist()

    def column_kind(self, name: str) -> ColumnKind:
        return self._kinds.get(name, ColumnKind.TEXT)

    def column_kinds(self) -> dict[str, ColumnKind]:
        return dict(self._kinds)

    def parsed_dates(self, name: str) -> pd.Series:
        """Dates of a column as datetime64 aligned to the store index (cached)."""
        if name not in self._dates:
            self._dates[name] = parse_date_series(self.df[name])
        return self._dates[name]

    def unique_values(self, name: str) -> list[str]:
        """Sorted distinct non-blank values of the full (unfiltered) dataset."""
        col = self.df[name]
        values = col[col.str.strip() != ""].unique().tolist()
        return sorted(values)

    def blank_count(self, name: str) -> int:
        return int((self.df[name].str.strip() == "").sum())

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def get_cell(self, row_index: int, column: str) -> Optional[str]:
        if column not in self._kinds or not 0 <= row_index < len(self.df):
            return None
        return self.df.at[row_index, column]

    def set_cell(self, row_index: int, column: str, value: str) -> bool:
        """Change exactly one field; the column keeps the kind it got at load.

        Returns False when the cell does not exist.
        """
        if column not in self._kinds or not 0 <= row_index < len(self.df):
            logger.debug("set_cell ignored: row={} column={}", row_index, column)
            return False
        self.df.at[row_index, column] = "" if value is None else str(value)
        self._dates.pop(column, None)
        self.version += 1
        return True

    def records(self, df: pd.DataFrame | None = None) -> list[dict]:
        """Rows as dicts with their stable row position under `_row`."""
        frame = self.df if df is None else df
        out = []
        for idx, rec in zip(frame.index, frame.to_dict("records")):
            rec["_row"] = int(idx)
            out.append(rec)
        return out
