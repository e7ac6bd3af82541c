"""
Unit tests for HistoryManager
"""
import pytest

from studio.layout.history import HistoryManager


class TestHistoryManager:

    def test_empty(self):
        h = HistoryManager(cap=3)
        assert h.current() is None
        assert h.undo() is None
        assert h.redo() is None
        assert (len(h), h.cursor) == (0, -1)

    def test_undo_redo(self):
        h = HistoryManager(cap=5)
        for s in ("a", "b", "c"):
            h.record(s)
        assert h.undo() == "b"
        assert h.undo() == "a"
        assert h.undo() is None
        assert h.redo() == "b"
        assert h.current() == "b"

    def test_record_after_undo_discards_redo_branch(self):
        h = HistoryManager(cap=5)
        for s in ("a", "b", "c"):
            h.record(s)
        h.undo()
        h.record("d")
        assert not h.can_redo
        assert h.redo() is None
        assert h.undo() == "b"

    def test_cap_evicts_oldest(self):
        h = HistoryManager(cap=3)
        for s in range(1, 6):
            h.record(s)
            assert len(h) <= 3
            assert 0 <= h.cursor < len(h)
        assert h.current() == 5
        assert h.undo() == 4
        assert h.undo() == 3
        assert h.undo() is None

    def test_invalid_cap(self):
        with pytest.raises(ValueError):
            HistoryManager(cap=0)
