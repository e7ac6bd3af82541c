"""
HistoryManager: bounded linear undo/redo over immutable snapshots.
"""
from __future__ import annotations

from typing import Generic, Optional, TypeVar

from loguru import logger

from studio.config import MAX_HISTORY_SIZE

S = TypeVar("S")


class HistoryManager(Generic[S]):
    """A single line of snapshots with a cursor at the live one.

    Snapshots must be immutable values (tuples of frozen dataclasses); the
    manager stores them as given and hands the same objects back.
    """

    def __init__(self, cap: int = MAX_HISTORY_SIZE) -> None:
        if cap < 1:
            raise ValueError("history cap must be at least 1")
        self.cap = cap
        self._entries: list[S] = []
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def is_empty(self) -> bool:
        return not self._entries

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def current(self) -> Optional[S]:
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]

    def record(self, snapshot: S) -> None:
        """Append after the cursor, dropping any redo branch and the oldest overflow."""
        del self._entries[self._cursor + 1:]
        self._entries.append(snapshot)
        if len(self._entries) > self.cap:
            evicted = len(self._entries) - self.cap
            del self._entries[:evicted]
            logger.debug("History full, evicted {} oldest entr{}", evicted, "y" if evicted == 1 else "ies")
        self._cursor = len(self._entries) - 1

    def undo(self) -> Optional[S]:
        """Step back and return the snapshot to restore (None at the start)."""
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def redo(self) -> Optional[S]:
        if not self.can_redo:
            return None
        self._cursor += 1
        return self._entries[self._cursor]

    def clear(self) -> None:
        self._entries = []
        self._cursor = -1

    def state(self) -> dict:
        return {
            "length": len(self._entries),
            "cursor": self._cursor,
            "cap": self.cap,
            "can_undo": self.can_undo,
            "can_redo": self.can_redo,
        }
