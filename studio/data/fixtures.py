"""
Read-only reference tables shipped as JSON (orders, approvals, activity, versions).
"""
from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from studio.config import FIXTURES_FOLDER


def load_fixture(name: str, folder: Path = FIXTURES_FOLDER) -> list[dict]:
    """Decode `<folder>/<name>.json` into a list of flat records.

    A missing or unreadable fixture yields an empty table; the caller never
    goes back to the file after this returns.
    """
    path = Path(folder) / f"{name}.json"
    if not path.exists():
        logger.warning("Fixture not found: {}", path)
        return []
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Error loading fixture {}: {}", path, exc)
        return []
    if not isinstance(payload, list):
        logger.error("Fixture {} is not a list of records", path)
        return []
    return [dict(record) for record in payload if isinstance(record, dict)]
