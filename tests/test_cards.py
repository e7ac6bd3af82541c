"""
Unit tests for CardLayoutEngine
"""
import pytest

from studio.data.schemas import ColumnKind
from studio.layout.cards import CardLayoutEngine, ChartKind
from studio.layout.history import HistoryManager


@pytest.fixture
def engine():
    e = CardLayoutEngine()
    e.set_columns(["REGION", "PILLAR", "AMOUNT", "ADVERT_AMOUNT_INCL_AGENCY_FEE"])
    return e


def _ids(engine):
    return [c.id for c in engine.cards]


def _add(engine, n):
    return [engine.add().id for _ in range(n)]


class TestEligibleColumns:

    def test_configured_measures(self, engine):
        assert engine.measures == ["AMOUNT", "ADVERT_AMOUNT_INCL_AGENCY_FEE"]
        assert engine.dimensions == ["REGION", "PILLAR"]

    def test_numeric_fallback(self):
        e = CardLayoutEngine()
        e.set_columns(["NAME", "COST"], {"NAME": ColumnKind.TEXT, "COST": ColumnKind.NUMERIC})
        assert e.measures == ["COST"]
        assert e.dimensions == ["NAME"]

    def test_no_measure_means_no_cards(self):
        e = CardLayoutEngine()
        e.set_columns(["NAME"])
        assert e.add() is None
        assert len(e.history) == 0


class TestAddRemove:

    def test_add_uses_first_dimension_and_measure(self, engine):
        card = engine.add()
        assert (card.dimension, card.measure, card.chart_kind) == ("REGION", "AMOUNT", ChartKind.PIE)
        assert not card.expanded and card.colspan is None

    def test_first_add_seeds_empty_state(self, engine):
        engine.add()
        assert (len(engine.history), engine.history.cursor) == (2, 1)
        assert engine.undo()
        assert engine.cards == ()

    def test_capacity(self, engine):
        _add(engine, 6)
        history_len = len(engine.history)
        assert engine.add() is None
        assert len(engine) == 6
        assert len(engine.history) == history_len

    def test_remove(self, engine):
        a, b = _add(engine, 2)
        assert engine.remove(a)
        assert _ids(engine) == [b]
        assert not engine.remove("missing")


class TestUpdate:

    def test_partial_fields(self, engine):
        (a,) = _add(engine, 1)
        assert engine.update(a, dimension="PILLAR", chart_kind="bar")
        card = engine.get(a)
        assert (card.dimension, card.measure, card.chart_kind) == ("PILLAR", "AMOUNT", ChartKind.BAR)

    def test_expanded_implies_colspan(self, engine):
        (a,) = _add(engine, 1)
        engine.update(a, expanded=True)
        assert engine.get(a).colspan == 2
        engine.update(a, expanded=False)
        assert engine.get(a).colspan is None

    def test_noops(self, engine):
        (a,) = _add(engine, 1)
        history_len = len(engine.history)
        assert not engine.update(a, dimension="REGION")
        assert not engine.update(a, dimension="NOPE")
        assert not engine.update(a, chart_kind="donut")
        assert not engine.update("missing", dimension="PILLAR")
        assert not engine.update(a, id="hijack")
        assert len(engine.history) == history_len


class TestReorderAndMerge:

    def test_reorder_swaps_and_collapses(self, engine):
        a, b, c = _add(engine, 3)
        engine.update(b, expanded=True)
        assert engine.reorder(a, c)
        assert _ids(engine) == [c, b, a]
        assert not any(card.expanded for card in engine.cards)

    def test_reorder_noops(self, engine):
        a, b = _add(engine, 2)
        history_len = len(engine.history)
        assert not engine.reorder(a, a)
        assert not engine.reorder(a, "missing")
        assert len(engine.history) == history_len

    def test_merge_removes_target_and_widens_source(self, engine):
        a, b, c = _add(engine, 3)
        engine.reorder(a, c)
        assert engine.merge_expand(b, c)
        assert _ids(engine) == [b, a]
        merged = engine.get(b)
        assert merged.expanded and merged.colspan == 2
        assert not engine.get(a).expanded

    def test_merge_noops(self, engine):
        a, b = _add(engine, 2)
        assert not engine.merge_expand(a, a)
        assert not engine.merge_expand(a, "missing")
        assert len(engine) == 2

    def test_ids_survive_moves_and_history(self, engine):
        ids = _add(engine, 3)
        engine.reorder(ids[0], ids[2])
        engine.undo()
        assert _ids(engine) == ids


class TestExpandAlone:

    @pytest.mark.parametrize("count", [3, 5])
    def test_last_card_alone_in_row(self, engine, count):
        ids = _add(engine, count)
        assert engine.expand_alone(ids[-1])
        assert engine.get(ids[-1]).colspan == 2
        assert len(engine) == count

    def test_other_positions_refused(self, engine):
        ids = _add(engine, 4)
        assert not engine.expand_alone(ids[-1])
        assert not engine.expand_alone(ids[0])

    def test_collapse(self, engine):
        ids = _add(engine, 3)
        engine.expand_alone(ids[2])
        assert engine.collapse(ids[2])
        assert not engine.get(ids[2]).expanded
        assert not engine.collapse(ids[2])


class TestGeometry:

    def test_single_card_uses_one_column(self, engine):
        _add(engine, 1)
        layout = engine.grid_layout()
        assert (layout.columns, layout.rows) == (1, 1)

    def test_rows_and_spans(self, engine):
        a, b, c = _add(engine, 3)
        engine.expand_alone(c)
        layout = engine.grid_layout()
        assert (layout.columns, layout.rows) == (2, 2)
        assert [p["span"] for p in layout.placements] == [1, 1, 2]
        assert isinstance(layout.placements, tuple)


class TestHistory:

    def test_undo_n_then_redo_n_restores(self, engine):
        a, b, c = _add(engine, 3)
        engine.update(a, chart_kind="bar")
        engine.reorder(b, c)
        engine.merge_expand(a, b)
        before = engine.cards
        for _ in range(6):
            engine.undo()
        assert engine.cards == ()
        for _ in range(6):
            engine.redo()
        assert engine.cards == before

    def test_new_action_after_undo_drops_redo(self, engine):
        a, b = _add(engine, 2)
        engine.undo()
        engine.add()
        assert not engine.history.can_redo
        assert not engine.redo()

    def test_history_is_capped(self):
        e = CardLayoutEngine(HistoryManager(cap=4))
        e.set_columns(["REGION", "PILLAR", "AMOUNT"])
        a = e.add().id
        for i in range(10):
            e.update(a, chart_kind="bar" if i % 2 == 0 else "pie")
            assert len(e.history) <= 4
            assert 0 <= e.history.cursor < len(e.history)
        for _ in range(10):
            e.undo()
        assert len(e.cards) == 1

    def test_reset(self, engine):
        _add(engine, 2)
        engine.reset()
        assert engine.cards == ()
        assert len(engine.history) == 0
