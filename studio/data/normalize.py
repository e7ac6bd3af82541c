"""
Value coercion and column classification.

Cells are stored as raw strings; everything numeric or date-like is sniffed
from them here, so the engines never re-implement parsing.
"""
from __future__ import annotations

import datetime as dt
import re
from typing import Iterable, Optional

import pandas as pd

from studio.config import DATE_SAMPLE_SIZE
from studio.data.schemas import ColumnKind


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(r'[",]')
_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_NUMBER_PREFIX_PATTERN = r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)"
_NUMBER_PREFIX_RE = re.compile(_NUMBER_PREFIX_PATTERN)


def parse_number(value) -> Optional[float]:
    """Strict numeric parse: the whole cell (quotes/commas removed) must be a number."""
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    text = _STRIP_RE.sub("", str(value)).strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    return float(text)


def parse_float_prefix(value) -> Optional[float]:
    """Lenient parse of a leading number ("12.5 USD" -> 12.5), quotes/commas removed."""
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    m = _NUMBER_PREFIX_RE.match(_STRIP_RE.sub("", str(value)))
    return float(m.group(1)) if m else None


def coerce_measure(series: pd.Series) -> pd.Series:
    """Vectorised parse_float_prefix with 0 for anything unparseable."""
    cleaned = series.astype(str).str.replace(r'[",]', "", regex=True)
    extracted = cleaned.str.extract(_NUMBER_PREFIX_PATTERN, expand=False)
    return pd.to_numeric(extracted, errors="coerce").fillna(0.0).astype(float)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

# (pattern, group order), month-first for the slash/dash US forms
_DATE_PATTERNS = [
    (re.compile(r"^(\d{4})-(\d{2})-(\d{2})$"), ("y", "m", "d")),   # YYYY-MM-DD
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), ("m", "d", "y")),  # M/D/YYYY
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$"), ("m", "d", "y")),  # M-D-YYYY
]


def parse_date(value) -> Optional[dt.date]:
    """Parse one of the accepted date patterns; None if no match or not a real date."""
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = str(value).strip()
    for pattern, order in _DATE_PATTERNS:
        m = pattern.match(text)
        if not m:
            continue
        parts = dict(zip(order, (int(g) for g in m.groups())))
        try:
            return dt.date(parts["y"], parts["m"], parts["d"])
        except ValueError:
            return None
    return None


def parse_date_series(series: pd.Series) -> pd.Series:
    """Element-wise parse_date as datetime64 (NaT where unparseable)."""
    return pd.to_datetime(series.map(parse_date), errors="coerce")


# ---------------------------------------------------------------------------
# Column classification
# ---------------------------------------------------------------------------

def is_blank(value) -> bool:
    return value is None or str(value).strip() == ""


def classify_column(values: Iterable, sample_size: int = DATE_SAMPLE_SIZE) -> ColumnKind:
    """Decide once per load how a column should be filtered and offered.

    DATE when the first `sample_size` non-blank values all parse as dates,
    NUMERIC when every non-blank value is a number, TEXT otherwise.
    """
    non_blank = [v for v in values if not is_blank(v)]
    if not non_blank:
        return ColumnKind.TEXT
    if all(parse_date(v) is not None for v in non_blank[:sample_size]):
        return ColumnKind.DATE
    if all(parse_number(v) is not None for v in non_blank):
        return ColumnKind.NUMERIC
    return ColumnKind.TEXT
