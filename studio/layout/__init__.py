"""Executive view card grid and its undo/redo history."""
from .cards import CardLayoutEngine, ChartKind, ViewCard
from .history import HistoryManager
