"""
CardLayoutEngine: the executive view's grid of aggregation cards.

Cards are frozen dataclasses and the collection is a tuple, so every state
the engine has ever been in can be kept in history as-is. Each operation is
either applied completely (and recorded) or is a no-op returning False.
"""
from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional

from loguru import logger

from studio.config import MAX_CARDS, MEASURE_COLUMNS
from studio.data.schemas import ColumnKind
from studio.layout.history import HistoryManager


class ChartKind(str, Enum):
    PIE = "pie"
    BAR = "bar"


@dataclass(frozen=True)
class ViewCard:
    id: str
    dimension: str
    measure: str
    chart_kind: ChartKind = ChartKind.PIE
    expanded: bool = False
    colspan: Optional[int] = None   # 2 while expanded

    def collapsed(self) -> "ViewCard":
        return replace(self, expanded=False, colspan=None)

    def widened(self) -> "ViewCard":
        return replace(self, expanded=True, colspan=2)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "dimension": self.dimension,
            "measure": self.measure,
            "chart_kind": self.chart_kind.value,
            "expanded": self.expanded,
            "colspan": self.colspan,
        }


@dataclass(frozen=True)
class GridLayout:
    columns: int
    rows: int
    placements: tuple[dict, ...] = ()

    def to_dict(self) -> dict:
        return {"columns": self.columns, "rows": self.rows, "placements": list(self.placements)}


Snapshot = tuple[ViewCard, ...]

UPDATABLE_FIELDS = {"dimension", "measure", "chart_kind", "expanded", "colspan"}


def new_card_id() -> str:
    return f"card-{uuid.uuid4().hex[:12]}"


class CardLayoutEngine:

    def __init__(
        self,
        history: Optional[HistoryManager[Snapshot]] = None,
        max_cards: int = MAX_CARDS,
    ) -> None:
        self.history: HistoryManager[Snapshot] = history if history is not None else HistoryManager()
        self.max_cards = max_cards
        self.cards: Snapshot = ()
        self.columns: list[str] = []
        self.dimensions: list[str] = []
        self.measures: list[str] = []

    # ------------------------------------------------------------------
    # Dataset wiring
    # ------------------------------------------------------------------

    def set_columns(self, columns: Iterable[str], kinds: Optional[dict[str, ColumnKind]] = None) -> None:
        """Work out which columns cards may group by and sum."""
        self.columns = list(columns)
        measures = [c for c in MEASURE_COLUMNS if c in self.columns]
        if not measures and kinds:
            measures = [c for c in self.columns if kinds.get(c) == ColumnKind.NUMERIC]
        self.measures = measures
        self.dimensions = [c for c in self.columns if c not in measures]

    def reset(self) -> None:
        """Drop all cards and history (the dataset they described is gone)."""
        self.cards = ()
        self.history.clear()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.cards)

    def index_of(self, card_id: str) -> int:
        for i, card in enumerate(self.cards):
            if card.id == card_id:
                return i
        return -1

    def get(self, card_id: str) -> Optional[ViewCard]:
        i = self.index_of(card_id)
        return self.cards[i] if i >= 0 else None

    # ------------------------------------------------------------------
    # Commit / history
    # ------------------------------------------------------------------

    def _commit(self, cards: Snapshot) -> bool:
        if self.history.is_empty:
            # first action: keep the state before it so it can be undone
            self.history.record(self.cards)
        self.cards = cards
        self.history.record(cards)
        return True

    def _noop(self, operation: str, reason: str) -> bool:
        logger.debug("{} ignored: {}", operation, reason)
        return False

    def undo(self) -> bool:
        snapshot = self.history.undo()
        if snapshot is None:
            return self._noop("undo", "nothing to undo")
        self.cards = snapshot
        return True

    def redo(self) -> bool:
        snapshot = self.history.redo()
        if snapshot is None:
            return self._noop("redo", "nothing to redo")
        self.cards = snapshot
        return True

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def add(self) -> Optional[ViewCard]:
        """Append a card on the first eligible dimension/measure."""
        if len(self.cards) >= self.max_cards:
            self._noop("add", f"at capacity ({self.max_cards})")
            return None
        if not self.dimensions or not self.measures:
            self._noop("add", "no eligible dimension/measure columns")
            return None
        card = ViewCard(id=new_card_id(), dimension=self.dimensions[0], measure=self.measures[0])
        self._commit(self.cards + (card,))
        return card

    def remove(self, card_id: str) -> bool:
        if self.index_of(card_id) < 0:
            return self._noop("remove", f"unknown card {card_id}")
        return self._commit(tuple(c for c in self.cards if c.id != card_id))

    def update(self, card_id: str, **changes) -> bool:
        """Merge field changes into one card. Unknown fields are ignored."""
        i = self.index_of(card_id)
        if i < 0:
            return self._noop("update", f"unknown card {card_id}")
        changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS and v is not None}
        try:
            if "chart_kind" in changes:
                changes["chart_kind"] = ChartKind(changes["chart_kind"])
        except ValueError:
            return self._noop("update", f"bad chart kind {changes['chart_kind']!r}")
        for key in ("dimension", "measure"):
            if key in changes and self.columns and changes[key] not in self.columns:
                return self._noop("update", f"unknown column {changes[key]!r}")
        if "expanded" in changes and "colspan" not in changes:
            changes["colspan"] = 2 if changes["expanded"] else None

        card = replace(self.cards[i], **changes)
        if card == self.cards[i]:
            return self._noop("update", "nothing changed")
        cards = list(self.cards)
        cards[i] = card
        return self._commit(tuple(cards))

    def reorder(self, dragged_id: str, target_id: str) -> bool:
        """Swap two cards' positions; every card is collapsed first."""
        if dragged_id == target_id:
            return self._noop("reorder", "card dropped on itself")
        src, dst = self.index_of(dragged_id), self.index_of(target_id)
        if src < 0 or dst < 0:
            return self._noop("reorder", f"unknown card {dragged_id if src < 0 else target_id}")
        cards = [c.collapsed() for c in self.cards]
        cards[src], cards[dst] = cards[dst], cards[src]
        return self._commit(tuple(cards))

    def merge_expand(self, source_id: str, target_id: str) -> bool:
        """Border-merge: the target card disappears and the source spans both cells."""
        if source_id == target_id:
            return self._noop("merge_expand", "card merged into itself")
        if self.index_of(source_id) < 0 or self.index_of(target_id) < 0:
            return self._noop("merge_expand", "unknown card")
        cards = tuple(
            c.widened() if c.id == source_id else c
            for c in self.cards if c.id != target_id
        )
        return self._commit(cards)

    def expand_alone(self, card_id: str) -> bool:
        """Widen the single card sitting alone in the last grid row."""
        i = self.index_of(card_id)
        if i < 0:
            return self._noop("expand_alone", f"unknown card {card_id}")
        if not self.is_alone_in_last_row(i) or self.cards[i].expanded:
            return self._noop("expand_alone", f"{card_id} is not alone in the last row")
        cards = list(self.cards)
        cards[i] = cards[i].widened()
        return self._commit(tuple(cards))

    def collapse(self, card_id: str) -> bool:
        i = self.index_of(card_id)
        if i < 0 or not self.cards[i].expanded:
            return self._noop("collapse", f"{card_id} is not expanded")
        cards = list(self.cards)
        cards[i] = cards[i].collapsed()
        return self._commit(tuple(cards))

    # ------------------------------------------------------------------
    # Geometry (derived, never stored)
    # ------------------------------------------------------------------

    def is_alone_in_last_row(self, index: int) -> bool:
        n = len(self.cards)
        return n in (3, 5) and index == n - 1

    def grid_layout(self) -> GridLayout:
        n = len(self.cards)
        columns = 1 if n <= 1 else 2
        placements = tuple(
            {
                "id": card.id,
                "index": i,
                "span": 2 if card.expanded and columns == 2 else 1,
                "can_expand_alone": self.is_alone_in_last_row(i) and not card.expanded,
            }
            for i, card in enumerate(self.cards)
        )
        return GridLayout(columns=columns, rows=math.ceil(n / 2), placements=placements)

    def state(self) -> dict:
        return {
            "cards": [c.to_dict() for c in self.cards],
            "layout": self.grid_layout().to_dict(),
            "history": self.history.state(),
            "max_cards": self.max_cards,
            "dimensions": list(self.dimensions),
            "measures": list(self.measures),
        }
