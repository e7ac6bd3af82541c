"""
Safe math and formatting helpers shared by the analytics modules.
"""
from __future__ import annotations

import math

import numpy as np
import pandas as pd


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning default if denominator is zero or NaN."""
    if denominator == 0 or pd.isna(denominator):
        return default
    result = numerator / denominator
    return default if pd.isna(result) else result


def pct_of_total(part: float, total: float) -> float:
    """Percentage of total."""
    return safe_divide(part, total) * 100


def format_percentage(part: float, total: float) -> str:
    """One-decimal percentage text; "0.0" when the total is not positive."""
    if not total > 0:
        return "0.0"
    return f"{pct_of_total(part, total):.1f}"


def format_value(value: float, max_decimals: int = 3) -> str:
    """Thousands separators and at most `max_decimals` decimals: 1010.95 -> "1,010.95"."""
    if value is None or (isinstance(value, float) and (math.isnan(value) or math.isinf(value))):
        return "0"
    text = f"{value:,.{max_decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def sanitize_for_json(obj):
    """Recursively convert numpy/pandas types to native Python for JSON serialization."""
    if isinstance(obj, dict):
        clean = {}
        for k, v in obj.items():
            # Sanitize keys: skip NaN/None keys, convert non-string keys to str
            if k is None:
                continue
            if isinstance(k, float) and (math.isnan(k) or math.isinf(k)):
                continue
            clean[str(k) if not isinstance(k, str) else k] = sanitize_for_json(v)
        return clean
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        v = float(obj)
        return 0.0 if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    if isinstance(obj, pd.Timestamp):
        return obj.isoformat()
    if pd.api.types.is_scalar(obj) and pd.isna(obj):
        return None
    return obj
