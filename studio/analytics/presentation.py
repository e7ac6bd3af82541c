"""
Rendering hints handed to the chart/table front end alongside the data.
"""
from __future__ import annotations

MIN_STRAIGHT_LABEL_WIDTH = 80   # px per label before we rotate
MAX_STRAIGHT_LABELS = 8
AXIS_MARGIN = 60


def x_axis_props(item_count: int, container_width: float = 400) -> dict:
    """Straight labels only when each gets >= 80px and there are at most 8."""
    available = container_width - AXIS_MARGIN
    per_label = available / item_count if item_count else available
    straight = per_label >= MIN_STRAIGHT_LABEL_WIDTH and item_count <= MAX_STRAIGHT_LABELS
    return {
        "angle": 0 if straight else -45,
        "text_anchor": "middle" if straight else "end",
        "height": 40 if straight else 80,
        "interval": 0,
    }


def table_row_limit(card_count: int, data_length: int = 10) -> int:
    """How many table rows fit in a card for a given number of cards on screen."""
    if card_count == 1:
        max_rows = 12
    elif card_count == 2:
        max_rows = 8
    elif card_count <= 4:
        max_rows = 6
    else:
        # three rows of cards: always leave room for five
        return 5
    return min(max_rows, data_length)
