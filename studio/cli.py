#!/usr/bin/env python3
"""
Budget Studio CLI: API server, console summaries and workbook exports.

USAGE:
  budget-studio serve                                       # Start API server
  budget-studio serve --port 8000 --reload

  budget-studio summary data.csv                            # Region totals of AMOUNT
  budget-studio summary data.csv --dimension ADV_PILLAR --top 5

  budget-studio export data.csv --card ADV_MARKETING_REGION:AMOUNT --card ADV_PILLAR:AMOUNT
  budget-studio export data.csv --card CAMPAIGN_TYPE:AMOUNT:bar --output cards.xlsx
"""
from __future__ import annotations

import argparse
import os
import sys
from datetime import datetime
from pathlib import Path

from studio.config import EXPORTS_FOLDER, SAMPLE_DATASET, SUMMARY_DIMENSIONS, configure_logging
from studio.data.loader import DatasetImportError
from studio.session import DashboardSession


def _load(path: str | None) -> DashboardSession:
    session = DashboardSession()
    try:
        session.load_csv(Path(path) if path else SAMPLE_DATASET)
    except DatasetImportError as exc:
        print(f"  Could not load {path or SAMPLE_DATASET}: {exc}")
        sys.exit(1)
    return session


def cmd_summary(args):
    """Print one aggregated series."""
    session = _load(args.csv)
    measure = args.measure or session.default_measure()
    if not measure or not session.store.has_column(measure):
        print(f"  Measure column not found: '{measure}'")
        sys.exit(1)
    if not session.store.has_column(args.dimension):
        print(f"  Dimension column not found: '{args.dimension}'")
        sys.exit(1)

    entries = session.series(args.dimension, measure)
    total = sum(e.value for e in entries)

    print("\n" + "=" * 70)
    print(f"  {args.dimension} by {measure}  |  {session.store.row_count():,} rows  |  {session.filename}")
    print("=" * 70 + "\n")
    shown = entries[:args.top] if args.top else entries
    for i, e in enumerate(shown, 1):
        print(f"{i:<4}{e.label[:40]:<42}{e.formatted_value:>14}  {e.percentage:>5}%")
    if len(shown) < len(entries):
        print(f"    ... {len(entries) - len(shown)} more")
    print(f"\n    {'TOTAL':<42}{total:>14,.2f}\n")


def _parse_card(text: str) -> tuple[str, str | None, str | None]:
    parts = text.split(":")
    dimension = parts[0]
    measure = parts[1] if len(parts) > 1 and parts[1] else None
    chart = parts[2] if len(parts) > 2 and parts[2] else None
    return dimension, measure, chart


def cmd_export(args):
    """Build a card layout from --card specs and write it to a workbook."""
    from studio.reports.card_report import generate_excel

    session = _load(args.csv)
    card_specs = args.card or [f"{d}:" for d in SUMMARY_DIMENSIONS if session.store.has_column(d)]
    for card_spec in card_specs:
        dimension, measure, chart = _parse_card(card_spec)
        card = session.cards.add()
        if card is None:
            print(f"  Skipped '{card_spec}': card limit reached or no eligible columns")
            continue
        changes = {"dimension": dimension, "measure": measure, "chart_kind": chart}
        session.cards.update(card.id, **{k: v for k, v in changes.items() if v})
        card = session.cards.get(card.id)
        if card.dimension != dimension:
            print(f"  '{dimension}' is not a column; card shows {card.dimension}")

    output = Path(args.output) if args.output else (
        EXPORTS_FOLDER / f"Executive_View_{datetime.now():%Y%m%d_%H%M%S}.xlsx"
    )
    path = generate_excel(session, output)
    print(f"\n  {len(session.cards)} card(s) written to {path}\n")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Budget Studio API on port {args.port}...")
    uvicorn.run("studio.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)


def main():
    parser = argparse.ArgumentParser(
        description="Budget Studio: budget allocation dashboard engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    # summary subcommand
    summary_parser = subparsers.add_parser("summary", help="Print an aggregated series")
    summary_parser.add_argument("csv", nargs="?", help="CSV file (default: bundled sample)")
    summary_parser.add_argument("--dimension", default=SUMMARY_DIMENSIONS[0], help="Column to group by")
    summary_parser.add_argument("--measure", help="Column to sum (default: first measure column)")
    summary_parser.add_argument("--top", type=int, help="Show only the top N groups")
    summary_parser.set_defaults(func=cmd_summary)

    # export subcommand
    export_parser = subparsers.add_parser("export", help="Export a card layout to Excel")
    export_parser.add_argument("csv", nargs="?", help="CSV file (default: bundled sample)")
    export_parser.add_argument("--card", action="append",
                               help="DIMENSION[:MEASURE[:pie|bar]], repeatable (default: summary charts)")
    export_parser.add_argument("--output", help="Output .xlsx path")
    export_parser.set_defaults(func=cmd_export)

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        return

    configure_logging()
    args.func(args)


if __name__ == "__main__":
    main()
