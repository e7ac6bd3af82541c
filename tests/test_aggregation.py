"""
Unit tests for group-by aggregation
"""
import pandas as pd
import pytest

from studio.analytics.aggregation import aggregate, aggregate_stacked, series_total
from studio.analytics.common import format_percentage, format_value
from studio.analytics.presentation import table_row_limit, x_axis_props
from studio.data.normalize import coerce_measure
from studio.data.store import RowStore


def _frame(**cols):
    return pd.DataFrame({k: list(v) for k, v in cols.items()}, dtype=str)


class TestAggregate:

    def test_sample_region_totals(self, sample_session):
        df = sample_session.processed()
        entries = aggregate(df, "ADV_MARKETING_REGION", "AMOUNT")
        blank_rows = df[df["ADV_MARKETING_REGION"] == ""]

        assert len(blank_rows) == 11
        assert entries[0].label == "Unknown"
        assert entries[0].value == pytest.approx(coerce_measure(blank_rows["AMOUNT"]).sum())
        assert entries[0].value == pytest.approx(1010.954)
        assert entries[0].formatted_value == "1,010.954"
        assert [e.label for e in entries[1:3]] == ["EU/MERT", "LATAM"]

    def test_sum_of_groups_equals_sum_of_measure(self, sample_session):
        df = sample_session.processed()
        entries = aggregate(df, "ADV_PILLAR", "AMOUNT")
        assert series_total(entries) == pytest.approx(coerce_measure(df["AMOUNT"]).sum())
        assert sum(float(e.percentage) for e in entries) == pytest.approx(100.0, abs=0.1)

    def test_ranked_descending(self, sample_session):
        entries = aggregate(sample_session.processed(), "ADV_MARKETING_REGION", "AMOUNT")
        values = [e.value for e in entries]
        assert values == sorted(values, reverse=True)

    def test_ties_keep_first_seen_order(self):
        df = _frame(DIM=["B", "A", "B", "A"], AMT=["1", "2", "1", "0"])
        assert [e.label for e in aggregate(df, "DIM", "AMT")] == ["B", "A"]

    def test_whitespace_only_labels_group_as_unknown(self):
        store = RowStore().load([["  ", "5"], ["", "3"], ["EU", "1"]], ["R", "AMT"])
        entries = aggregate(store.df, "R", "AMT")
        assert [(e.label, e.value) for e in entries] == [("Unknown", 8.0), ("EU", 1.0)]
        assert store.blank_count("R") == 2

    def test_unparseable_measure_counts_as_zero(self):
        df = _frame(DIM=["x", "x", "y"], AMT=['"1,500"', "n/a", "2.5 USD"])
        entries = {e.label: e.value for e in aggregate(df, "DIM", "AMT")}
        assert entries == {"x": 1500.0, "y": 2.5}

    def test_zero_total_gives_zero_percentages(self):
        df = _frame(DIM=["x", "y"], AMT=["0", "abc"])
        assert [e.percentage for e in aggregate(df, "DIM", "AMT")] == ["0.0", "0.0"]

    def test_empty_input(self):
        assert aggregate(pd.DataFrame(), "DIM", "AMT") == []
        assert aggregate(_frame(DIM=["x"], AMT=["1"]), "NOPE", "AMT") == []


class TestStacked:

    def test_segments_per_label(self):
        df = _frame(DIM=["A", "A", "B", "C"], SEG=["x", "y", "x", "x"], AMT=["1", "3", "2", "0"])
        result = aggregate_stacked(df, "DIM", "SEG", "AMT", percentage_scale=True)

        assert result["segments"] == ["x", "y"]
        assert [item["name"] for item in result["data"]] == ["A", "B"]
        a = result["data"][0]
        assert (a["x"], a["y"], a["_total"]) == (1.0, 3.0, 4.0)
        assert a["x_percentage"] == pytest.approx(25.0)
        assert result["data"][1]["y"] == 0.0


class TestFormatting:

    @pytest.mark.parametrize("value, expected", [
        (1010.954, "1,010.954"),
        (1234567.0, "1,234,567"),
        (2.5, "2.5"),
        (0.0, "0"),
        (0.12345, "0.123"),
    ])
    def test_format_value(self, value, expected):
        assert format_value(value) == expected

    def test_format_percentage(self):
        assert format_percentage(1, 3) == "33.3"
        assert format_percentage(1, 0) == "0.0"


class TestPresentationHints:

    def test_straight_labels_when_they_fit(self):
        assert x_axis_props(4, 400)["angle"] == 0

    def test_rotated_when_crowded(self):
        assert x_axis_props(5, 400)["angle"] == -45
        assert x_axis_props(9, 2000)["angle"] == -45

    def test_table_row_limit(self):
        assert table_row_limit(1, 20) == 12
        assert table_row_limit(2, 3) == 3
        assert table_row_limit(4, 20) == 6
        assert table_row_limit(6, 2) == 5
