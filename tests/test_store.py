"""
Unit tests for RowStore
"""
import pandas as pd
import pytest

from studio.analytics.filters import ColumnFilterEngine
from studio.data.schemas import ColumnKind
from studio.data.store import RowStore


class TestLoad:

    def test_every_row_has_every_column(self):
        store = RowStore().load([["1"], ["2", "b", "extra"]], ["A", "B"])
        assert store.columns == ["A", "B"]
        assert store.get_column("A") == ["1", "2"]
        assert store.get_column("B") == ["", "b"]

    def test_kinds_are_classified_once_per_load(self, status_store):
        assert status_store.column_kind("DATE") == ColumnKind.DATE
        assert status_store.column_kind("AMOUNT") == ColumnKind.NUMERIC
        assert status_store.column_kind("STATUS") == ColumnKind.TEXT

    def test_load_bumps_version_and_notifies(self):
        store = RowStore()
        calls = []
        store.on_reset(lambda: calls.append(store.row_count()))
        store.load([["1"]], ["A"])
        store.load([["1"], ["2"]], ["A"])
        assert store.version == 2
        assert calls == [1, 2]

    def test_load_frame_blanks_missing_values(self):
        store = RowStore().load_frame(pd.DataFrame({"A": ["x", None], "B": ["1", "2"]}))
        assert store.get_column("A") == ["x", ""]
        assert store.column_kind("B") == ColumnKind.NUMERIC

    def test_unknown_column(self, status_store):
        with pytest.raises(KeyError):
            status_store.get_column("NOPE")
        assert not status_store.has_column("NOPE")

    def test_unique_values_are_sorted_and_skip_blanks(self, status_store):
        assert status_store.unique_values("STATUS") == ["APPROVED", "REJECTED"]
        assert status_store.blank_count("STATUS") == 1


class TestSetCell:

    def test_changes_one_field(self, status_store):
        before = status_store.version
        assert status_store.set_cell(3, "STATUS", "REJECTED")
        assert status_store.get_cell(3, "STATUS") == "REJECTED"
        assert status_store.get_column("ID") == ["1", "2", "3", "4", "5", "6"]
        assert status_store.version == before + 1

    def test_column_kind_is_fixed_at_load(self, status_store):
        status_store.set_cell(0, "AMOUNT", "lots")
        assert status_store.column_kind("AMOUNT") == ColumnKind.NUMERIC

    def test_edit_keeps_date_range_filter_applied(self, status_store):
        engine = ColumnFilterEngine(status_store)
        engine.set_date_range("DATE", "2024-02-01", "2024-03-31")
        assert engine.apply(status_store.df)["ID"].tolist() == ["2", "3"]

        status_store.set_cell(0, "DATE", "soon")
        assert status_store.column_kind("DATE") == ColumnKind.DATE
        assert engine.apply(status_store.df)["ID"].tolist() == ["2", "3"]

    def test_out_of_range_is_a_noop(self, status_store):
        before = status_store.version
        assert not status_store.set_cell(99, "STATUS", "x")
        assert not status_store.set_cell(0, "NOPE", "x")
        assert status_store.version == before

    def test_records_carry_row_position(self, status_store):
        records = status_store.records()
        assert records[4]["_row"] == 4
        assert records[4]["ID"] == "5"
