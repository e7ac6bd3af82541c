"""
Page slicing over the filtered + sorted view.
"""
from __future__ import annotations

import math
from typing import Sequence, TypeVar

import pandas as pd

from studio.config import DEFAULT_ROWS_PER_PAGE

T = TypeVar("T", Sequence, pd.DataFrame)


def total_pages(count: int, page_size: int) -> int:
    """ceil(count / page_size), never less than 1."""
    if page_size <= 0:
        return 1
    return max(1, math.ceil(count / page_size))


def paginate(rows: T, page_size: int, page: int) -> T:
    """Slice out one page. Out-of-range pages give an empty slice; no clamping here."""
    start = max(0, (page - 1) * page_size)
    end = max(start, start + page_size)
    if isinstance(rows, pd.DataFrame):
        return rows.iloc[start:end]
    return rows[start:end]


class Paginator:
    """Current page and page size for the table view."""

    def __init__(self, page_size: int = DEFAULT_ROWS_PER_PAGE) -> None:
        self.page = 1
        self.page_size = page_size

    def reset(self) -> None:
        self.page = 1

    def set_page(self, page: int) -> None:
        self.page = page

    def set_page_size(self, page_size: int) -> None:
        if page_size > 0:
            self.page_size = page_size
            self.page = 1

    def total_pages(self, count: int) -> int:
        return total_pages(count, self.page_size)

    def clamp(self, page: int, count: int) -> int:
        """The page callers should navigate to for a requested page number."""
        return min(max(1, page), self.total_pages(count))

    def slice(self, rows: T) -> T:
        return paginate(rows, self.page_size, self.page)

    def state(self, count: int) -> dict:
        return {
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages(count),
            "total_rows": count,
        }
