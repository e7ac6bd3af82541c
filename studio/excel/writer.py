"""
ExcelWriter: fluent helpers for building styled workbooks.
"""
from __future__ import annotations

from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from studio.excel.formatters import (
    add_kpi_card,
    auto_column_width,
    format_data_cell,
    format_header_row,
)
from studio.excel.styles import NOTE_FONT, SECTION_FONT, SUBTITLE_FONT, TITLE_FONT, WRAP

ColSpec = tuple[str, str, str]  # (key, col_type, label)

# Excel forbids these in sheet titles
_BAD_TITLE_CHARS = str.maketrans({c: "_" for c in '[]:*?/\\'})


def sheet_title(text: str, used: set[str]) -> str:
    """A valid, unique worksheet title (31 chars max)."""
    base = (text.translate(_BAD_TITLE_CHARS).strip() or "Sheet")[:31]
    title, n = base, 2
    while title.lower() in used:
        suffix = f" ({n})"
        title = base[:31 - len(suffix)] + suffix
        n += 1
    used.add(title.lower())
    return title


class ExcelWriter:
    """Fluent builder for styled Excel workbooks."""

    def __init__(self) -> None:
        self.wb = Workbook()
        self._first_sheet = True
        self._titles: set[str] = set()

    # ------------------------------------------------------------------
    # Sheet management
    # ------------------------------------------------------------------

    def add_sheet(self, title: str) -> Worksheet:
        """Create a new worksheet (re-uses the default sheet for the first call)."""
        title = sheet_title(title, self._titles)
        if self._first_sheet:
            ws = self.wb.active
            ws.title = title
            self._first_sheet = False
        else:
            ws = self.wb.create_sheet(title=title)
        return ws

    # ------------------------------------------------------------------
    # Title block
    # ------------------------------------------------------------------

    def write_title(self, ws: Worksheet, title: str, subtitle: str, merge_cols: int = 6) -> int:
        """Write title + subtitle rows. Returns next available row."""
        ws.cell(row=1, column=1).value = title
        ws.cell(row=1, column=1).font = TITLE_FONT
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=merge_cols)

        ws.cell(row=2, column=1).value = subtitle
        ws.cell(row=2, column=1).font = SUBTITLE_FONT
        ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=merge_cols)

        for col in range(1, merge_cols + 1):
            ws.column_dimensions[get_column_letter(col)].width = 18
        return 4

    def write_section(self, ws: Worksheet, row: int, title: str) -> int:
        ws.cell(row=row, column=1).value = title
        ws.cell(row=row, column=1).font = SECTION_FONT
        return row + 2

    def write_note(self, ws: Worksheet, row: int, text: str, merge_cols: int = 6) -> int:
        cell = ws.cell(row=row, column=1)
        cell.value = text
        cell.font = NOTE_FONT
        cell.alignment = WRAP
        ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=merge_cols)
        return row + 1

    # ------------------------------------------------------------------
    # KPI cards
    # ------------------------------------------------------------------

    def write_kpi_row(
        self,
        ws: Worksheet,
        row: int,
        kpis: list[tuple],  # [(value, label, format_type), ...]
        start_col: int = 1,
        col_spacing: int = 2,
    ) -> int:
        col = start_col
        for value, label, fmt in kpis:
            add_kpi_card(ws, row, col, value, label, fmt)
            col += col_spacing
        return row + 3

    # ------------------------------------------------------------------
    # Data tables
    # ------------------------------------------------------------------

    def write_table(
        self,
        ws: Worksheet,
        start_row: int,
        columns: list[ColSpec],
        rows: list[dict],
        highlight_fn=None,
        freeze: bool = True,
        totals: dict | None = None,
        total_label: str = "TOTAL",
    ) -> int:
        """Write headers, data rows and an optional total row.

        highlight_fn(row_idx, row_data) -> str|None  e.g. 'gold'
        totals maps column keys to the values shown in the total row.

        Returns the row number after the last written row.
        """
        for col_num, (_, _, label) in enumerate(columns, 1):
            ws.cell(row=start_row, column=col_num).value = label
        format_header_row(ws, start_row, len(columns))

        row = start_row + 1
        for idx, row_data in enumerate(rows):
            hl = highlight_fn(idx, row_data) if highlight_fn else None
            for col_num, (key, col_type, _) in enumerate(columns, 1):
                format_data_cell(ws, row, col_num, row_data.get(key, ""), col_type, highlight=hl)
            row += 1

        if totals is not None and rows:
            format_data_cell(ws, row, 1, total_label, "text", is_total=True)
            for col_num, (key, col_type, _) in enumerate(columns[1:], 2):
                format_data_cell(ws, row, col_num, totals.get(key, ""), col_type, is_total=True)
            row += 1

        auto_column_width(ws)
        if freeze:
            ws.freeze_panes = f"A{start_row + 1}"
        return row

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path
