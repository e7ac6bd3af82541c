"""Dataset import, value coercion, and the in-memory row store."""
from .loader import DatasetImportError, ParsedTable, parse_csv_bytes, parse_csv_file
from .store import RowStore
from .schemas import AggregatedEntry, CellEdit, ColumnFilter, ColumnKind, SortDirection, SortState
from .normalize import classify_column, parse_date, parse_float_prefix, parse_number
