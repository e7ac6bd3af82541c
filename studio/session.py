"""
DashboardSession: everything one open dashboard holds.

The session owns the dataset and every engine derived from it. A new dataset
resets filters, sort, pagination, the card grid and any cell edit. Filter and
sort changes send the table back to page 1. The filtered and sorted view is
memoised on the versions of its three inputs.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from loguru import logger
import pandas as pd

from studio.analytics.aggregation import aggregate, series_total
from studio.analytics.common import format_value, sanitize_for_json
from studio.analytics.filters import ColumnFilterEngine
from studio.analytics.pagination import Paginator
from studio.analytics.presentation import table_row_limit, x_axis_props
from studio.analytics.sorting import SortEngine
from studio.config import (
    DEFAULT_ROWS_PER_PAGE,
    MAX_CARDS,
    MAX_HISTORY_SIZE,
    MEASURE_COLUMNS,
    ROWS_PER_PAGE_OPTIONS,
    SAMPLE_DATASET,
    SUMMARY_DIMENSIONS,
)
from studio.data.loader import ParsedTable, parse_csv_bytes, parse_csv_file
from studio.data.schemas import AggregatedEntry, CellEdit
from studio.data.store import RowStore
from studio.layout.cards import CardLayoutEngine
from studio.layout.history import HistoryManager


class DashboardSession:

    def __init__(
        self,
        max_cards: int = MAX_CARDS,
        history_cap: int = MAX_HISTORY_SIZE,
        page_size: int = DEFAULT_ROWS_PER_PAGE,
    ) -> None:
        self.store = RowStore()
        self.paginator = Paginator(page_size)
        self.filters = ColumnFilterEngine(self.store, on_change=self.paginator.reset)
        self.sort = SortEngine(on_change=self.paginator.reset)
        self.cards = CardLayoutEngine(HistoryManager(history_cap), max_cards)
        self.edit: Optional[CellEdit] = None
        self.filename: Optional[str] = None

        self._cache_key: Optional[tuple[int, int, int]] = None
        self._cache: pd.DataFrame = pd.DataFrame()

        self.store.on_reset(self._dataset_replaced)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _dataset_replaced(self) -> None:
        self.filters.reset()
        self.sort.reset()
        self.paginator.reset()
        self.cards.reset()
        self.cards.set_columns(self.store.columns, self.store.column_kinds())
        self.edit = None
        self._cache_key = None

    def _load(self, parsed: ParsedTable, filename: str) -> ParsedTable:
        self.store.load(parsed.rows, parsed.columns)
        self.filename = filename
        return parsed

    def import_csv(self, content: bytes, filename: str) -> ParsedTable:
        """Parse then swap in an uploaded CSV.

        Raises DatasetImportError before anything changes, so a bad file
        leaves the previous dataset and all its derived state in place.
        """
        parsed = parse_csv_bytes(content, filename)
        return self._load(parsed, filename)

    def load_csv(self, path: Path) -> ParsedTable:
        path = Path(path)
        return self._load(parse_csv_file(path), path.name)

    def load_sample(self) -> ParsedTable:
        parsed = self.load_csv(SAMPLE_DATASET)
        self.paginator.set_page_size(DEFAULT_ROWS_PER_PAGE)
        return parsed

    @property
    def is_loaded(self) -> bool:
        return self.store.is_loaded

    # ------------------------------------------------------------------
    # Derived view
    # ------------------------------------------------------------------

    def processed(self) -> pd.DataFrame:
        """Filtered then sorted rows; recomputed only when an input changed.

        Always a frame of its own, never the live store frame.
        """
        key = (self.store.version, self.filters.version, self.sort.version)
        if key != self._cache_key:
            view = self.sort.apply(self.filters.apply(self.store.df))
            self._cache = view.copy() if view is self.store.df else view
            self._cache_key = key
        return self._cache

    def filtered_count(self) -> int:
        return len(self.processed())

    def page_rows(self) -> list[dict]:
        return self.store.records(self.paginator.slice(self.processed()))

    def total_pages(self) -> int:
        return self.paginator.total_pages(self.filtered_count())

    def go_to_page(self, page: int) -> int:
        self.paginator.set_page(self.paginator.clamp(page, self.filtered_count()))
        return self.paginator.page

    def set_rows_per_page(self, page_size: int) -> bool:
        if page_size not in ROWS_PER_PAGE_OPTIONS:
            logger.debug("Unsupported page size ignored: {}", page_size)
            return False
        self.paginator.set_page_size(page_size)
        return True

    # ------------------------------------------------------------------
    # Cell editing
    # ------------------------------------------------------------------

    def begin_edit(self, row_index: int, column: str) -> Optional[CellEdit]:
        current = self.store.get_cell(row_index, column)
        if current is None:
            return None
        self.edit = CellEdit(row_index, column, current)
        return self.edit

    def update_edit(self, value: str) -> Optional[CellEdit]:
        if self.edit is not None:
            self.edit.value = value
        return self.edit

    def commit_edit(self) -> bool:
        """Enter / blur: write the pending value into the dataset."""
        if self.edit is None:
            return False
        edit, self.edit = self.edit, None
        return self.store.set_cell(edit.row_index, edit.column, edit.value)

    def cancel_edit(self) -> None:
        self.edit = None

    # ------------------------------------------------------------------
    # Aggregations
    # ------------------------------------------------------------------

    def default_measure(self) -> Optional[str]:
        measures = self.cards.measures or [c for c in MEASURE_COLUMNS if self.store.has_column(c)]
        return measures[0] if measures else None

    def series(self, dimension: str, measure: str) -> list[AggregatedEntry]:
        return aggregate(self.processed(), dimension, measure)

    def card_series(self, card_id: str) -> Optional[list[AggregatedEntry]]:
        card = self.cards.get(card_id)
        if card is None:
            return None
        return self.series(card.dimension, card.measure)

    def summary_series(self) -> dict[str, list[AggregatedEntry]]:
        """The fixed charts beside the table, one per summary dimension present."""
        measure = self.default_measure()
        if measure is None:
            return {}
        return {
            dim: self.series(dim, measure)
            for dim in SUMMARY_DIMENSIONS
            if self.store.has_column(dim)
        }

    # ------------------------------------------------------------------
    # Payloads
    # ------------------------------------------------------------------

    def card_payload(self, card_id: str) -> Optional[dict]:
        card = self.cards.get(card_id)
        if card is None:
            return None
        entries = self.card_series(card_id) or []
        total = series_total(entries)
        return {
            "card": card.to_dict(),
            "series": [e.to_dict() for e in entries],
            "total": total,
            "formatted_total": format_value(total),
            "row_limit": table_row_limit(len(self.cards), len(entries)),
            "x_axis": x_axis_props(len(entries)),
        }

    def table_payload(self) -> dict:
        count = self.filtered_count()
        return sanitize_for_json({
            "filename": self.filename,
            "columns": list(self.store.columns),
            "kinds": {c: k.value for c, k in self.store.column_kinds().items()},
            "rows": self.page_rows(),
            "pagination": self.paginator.state(count),
            "total_rows": self.store.row_count(),
            "sort": self.sort.state.to_dict() if self.sort.state else None,
            "filters": self.filters.state(),
            "active_filters": sorted(self.filters.active_filters()),
            "edit": self.edit.to_dict() if self.edit else None,
        })

    def state_payload(self) -> dict:
        return sanitize_for_json({
            "loaded": self.is_loaded,
            "filename": self.filename,
            "row_count": self.store.row_count(),
            "filtered_count": self.filtered_count(),
            "cards": self.cards.state(),
            "summary": {
                dim: [e.to_dict() for e in entries]
                for dim, entries in self.summary_series().items()
            },
        })
