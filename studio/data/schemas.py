"""
Value types shared by the table engines: column kinds, filter and sort state,
aggregated series entries and the transient cell edit.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ColumnKind(str, Enum):
    NUMERIC = "numeric"
    DATE = "date"
    TEXT = "text"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class ColumnFilter:
    """Filter state for one column.

    A column is either filtered by discrete values (selected_values /
    include_blanks) or, when it holds dates, by a date range.
    """
    selected_values: list[str] = field(default_factory=list)
    search_term: str = ""
    is_open: bool = False
    include_blanks: bool = False
    date_from: Optional[str] = None   # YYYY-MM-DD (any accepted date pattern)
    date_to: Optional[str] = None

    def is_active(self, kind: ColumnKind) -> bool:
        """False when the filter is equivalent to no filter at all."""
        if kind == ColumnKind.DATE:
            return bool(self.date_from or self.date_to)
        return bool(self.selected_values) or self.include_blanks

    def to_dict(self) -> dict:
        return {
            "selected_values": list(self.selected_values),
            "search_term": self.search_term,
            "is_open": self.is_open,
            "include_blanks": self.include_blanks,
            "date_from": self.date_from,
            "date_to": self.date_to,
        }


@dataclass(frozen=True)
class SortState:
    key: str
    direction: SortDirection = SortDirection.ASC

    def to_dict(self) -> dict:
        return {"key": self.key, "direction": self.direction.value}


@dataclass(frozen=True)
class AggregatedEntry:
    label: str
    value: float
    percentage: str          # one decimal, e.g. "28.9"
    formatted_value: str     # e.g. "1,010.95"

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "value": self.value,
            "percentage": self.percentage,
            "formatted_value": self.formatted_value,
        }


@dataclass
class CellEdit:
    """A cell being edited in the table; not part of the dataset until committed."""
    row_index: int
    column: str
    value: str

    def to_dict(self) -> dict:
        return {"row_index": self.row_index, "column": self.column, "value": self.value}
