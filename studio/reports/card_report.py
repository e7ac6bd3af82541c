"""
Executive view export: the current card set rendered to a workbook.

JSON-first: generate_json() snapshots what the cards show, generate_excel()
renders it. Neither touches session state.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path

from loguru import logger

from studio.analytics.aggregation import series_total
from studio.analytics.common import format_value, pct_of_total, sanitize_for_json
from studio.excel.writer import ExcelWriter
from studio.session import DashboardSession

SERIES_COLUMNS = [
    ("label", "text", "Label"),
    ("value", "amount", "Value"),
    ("share", "percent", "% of Total"),
]


# =====================================================================
# JSON generation
# =====================================================================

def generate_json(session: DashboardSession) -> dict:
    """Everything the card grid currently shows, as plain data."""
    layout = session.cards.grid_layout()
    spans = {p["id"]: p["span"] for p in layout.placements}
    cards = []
    for position, card in enumerate(session.cards.cards, 1):
        entries = session.card_series(card.id) or []
        total = series_total(entries)
        cards.append({
            "position": position,
            "id": card.id,
            "dimension": card.dimension,
            "measure": card.measure,
            "chart_kind": card.chart_kind.value,
            "span": spans.get(card.id, 1),
            "total": total,
            "formatted_total": format_value(total),
            "series": [
                {**e.to_dict(), "share": round(pct_of_total(e.value, total), 1) if total > 0 else 0.0}
                for e in entries
            ],
        })

    return sanitize_for_json({
        "filename": session.filename,
        "generated": datetime.now().strftime("%Y-%m-%d %H:%M"),
        "row_count": session.store.row_count(),
        "filtered_count": session.filtered_count(),
        "active_filters": sorted(session.filters.active_filters()),
        "grid": {"columns": layout.columns, "rows": layout.rows},
        "cards": cards,
    })


# =====================================================================
# Excel rendering
# =====================================================================

def generate_excel(session: DashboardSession, output_path: str | Path) -> Path:
    data = generate_json(session)
    ew = ExcelWriter()

    ws = ew.add_sheet("Layout")
    source = data["filename"] or "no dataset"
    ew.write_title(ws, "EXECUTIVE VIEW", f"{source}  |  generated {data['generated']}")
    row = ew.write_kpi_row(ws, 4, [
        (len(data["cards"]), "Cards", "number"),
        (data["filtered_count"], "Rows in view", "number"),
        (data["row_count"], "Rows loaded", "number"),
    ])
    if data["active_filters"]:
        row = ew.write_note(ws, row, "Filtered on: " + ", ".join(data["active_filters"]))
        row += 1

    row = ew.write_section(ws, row, f"GRID  ({data['grid']['columns']} columns x {data['grid']['rows']} rows)")
    ew.write_table(ws, row, [
        ("position", "number", "#"),
        ("dimension", "text", "Dimension"),
        ("measure", "text", "Measure"),
        ("chart_kind", "text", "Chart"),
        ("span", "number", "Span"),
        ("total", "amount", "Total"),
    ], data["cards"], highlight_fn=lambda i, r: "expanded" if r["span"] == 2 else None, freeze=False)

    for card in data["cards"]:
        ws_c = ew.add_sheet(f"{card['position']} {card['dimension']}")
        ew.write_title(
            ws_c,
            f"{card['dimension']} by {card['measure']}",
            f"{card['chart_kind'].title()} chart  |  total {card['formatted_total']}",
            merge_cols=3,
        )
        ew.write_table(
            ws_c, 4, SERIES_COLUMNS, card["series"],
            highlight_fn=lambda i, r: "gold" if i == 0 else None,
            totals={"value": card["total"], "share": 100.0 if card["total"] > 0 else 0.0},
        )

    path = ew.save(output_path)
    logger.info("Exported {} cards to {}", len(data["cards"]), path)
    return path
