"""
CSV import: raw bytes or a file path -> header row + string data rows.

Nothing here touches session state. A failed parse raises DatasetImportError
and the caller keeps its previous dataset.
"""
from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path

from loguru import logger
import pandas as pd

from studio.config import ACCEPTED_EXTENSIONS


class DatasetImportError(Exception):
    """User-facing import failure (wrong extension, empty or malformed file)."""


@dataclass
class ParsedTable:
    columns: list[str]
    rows: list[list[str]]

    @property
    def row_count(self) -> int:
        return len(self.rows)


def check_extension(filename: str) -> None:
    if not filename or not filename.lower().endswith(ACCEPTED_EXTENSIONS):
        raise DatasetImportError(f"Please select a CSV file (got '{filename}').")


def _clean_cell(value) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).replace('"', "").strip()


def parse_csv_bytes(content: bytes, filename: str = "upload.csv") -> ParsedTable:
    """Parse an uploaded CSV. Every cell comes back as a stripped string."""
    check_extension(filename)
    if not content or not content.strip():
        raise DatasetImportError("The CSV file appears to be empty or invalid.")

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise DatasetImportError(f"Error reading the file: {exc}") from exc

    try:
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as exc:
        raise DatasetImportError(
            "Error parsing the CSV file. Please check the file format."
        ) from exc

    columns = [_clean_cell(c) for c in df.columns]
    if not any(columns):
        raise DatasetImportError("The CSV file has no header row.")

    rows = [[_clean_cell(v) for v in record] for record in df.itertuples(index=False, name=None)]
    if not rows:
        raise DatasetImportError("The CSV file appears to be empty or invalid.")

    logger.info("Parsed {}: {} rows, {} columns", filename, len(rows), len(columns))
    return ParsedTable(columns=columns, rows=rows)


def parse_csv_file(path: Path) -> ParsedTable:
    """Parse a CSV on disk (CLI and bundled sample)."""
    path = Path(path)
    check_extension(path.name)
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise DatasetImportError(f"Error reading the file: {exc}") from exc
    return parse_csv_bytes(content, path.name)
