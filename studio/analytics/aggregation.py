"""
Group-by aggregation for charts and cards.

aggregate() sums a measure column per raw dimension value and ranks the
groups by total, largest first. Groups with equal totals keep the order in
which they first appear. The input is whatever (already filtered) view the
caller passes in.
"""
from __future__ import annotations

import pandas as pd

from studio.analytics.common import format_percentage, format_value, pct_of_total
from studio.config import UNKNOWN_LABEL
from studio.data.normalize import coerce_measure
from studio.data.schemas import AggregatedEntry


def _dimension_labels(df: pd.DataFrame, dimension: str) -> pd.Series:
    labels = df[dimension].astype(str)
    return labels.where(labels.str.strip() != "", UNKNOWN_LABEL)


def grouped_sums(df: pd.DataFrame, dimension: str, measure: str) -> pd.Series:
    """Sum of `measure` per dimension label, ranked descending (stable)."""
    if df.empty or dimension not in df.columns or measure not in df.columns:
        return pd.Series(dtype=float)
    values = coerce_measure(df[measure])
    sums = values.groupby(_dimension_labels(df, dimension), sort=False).sum()
    return sums.sort_values(ascending=False, kind="stable")


def aggregate(df: pd.DataFrame, dimension: str, measure: str) -> list[AggregatedEntry]:
    """Ranked, percentage-annotated series for one dimension/measure pair."""
    sums = grouped_sums(df, dimension, measure)
    total = float(sums.sum()) if len(sums) else 0.0
    return [
        AggregatedEntry(
            label=str(label),
            value=float(value),
            percentage=format_percentage(float(value), total),
            formatted_value=format_value(float(value)),
        )
        for label, value in sums.items()
    ]


def series_total(entries: list[AggregatedEntry]) -> float:
    return float(sum(e.value for e in entries))


def aggregate_stacked(
    df: pd.DataFrame,
    dimension: str,
    segment: str,
    measure: str,
    percentage_scale: bool = False,
) -> dict:
    """Stacked-bar data: one item per dimension label with a value per segment.

    Labels whose total is not positive are dropped. With `percentage_scale`, each
    segment also gets `<segment>_percentage` (share of that label's total).
    """
    if df.empty or any(c not in df.columns for c in (dimension, segment, measure)):
        return {"data": [], "segments": []}

    frame = pd.DataFrame({
        "label": _dimension_labels(df, dimension),
        "segment": _dimension_labels(df, segment),
        "value": coerce_measure(df[measure]),
    })
    segments = frame["segment"].drop_duplicates().tolist()
    pivot = frame.pivot_table(
        index="label", columns="segment", values="value",
        aggfunc="sum", fill_value=0.0, sort=False,
    ).reindex(columns=segments, fill_value=0.0)

    data = []
    for label, row in pivot.iterrows():
        total = float(row.sum())
        if total <= 0:
            continue
        item = {"name": str(label), "_total": total}
        for seg in segments:
            value = float(row[seg])
            item[seg] = value
            item[f"{seg}_raw"] = value
            if percentage_scale:
                item[f"{seg}_percentage"] = pct_of_total(value, total)
        data.append(item)
    return {"data": data, "segments": segments}
