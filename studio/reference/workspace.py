"""
Fixture-backed reference tables: the approvals inbox and source-data history.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger

from studio.analytics.sorting import RecordSorter
from studio.config import (
    FIXTURES_FOLDER,
    REFERENCE_DATE_COLUMNS,
    REFERENCE_NUMERIC_COLUMNS,
    REFERENCE_PERSON_COLUMNS,
    STATUS_ORDERS,
)
from studio.data.fixtures import load_fixture


def _sorter(status_order: list[str]) -> RecordSorter:
    return RecordSorter(
        status_column="status",
        status_order=status_order,
        numeric_columns=REFERENCE_NUMERIC_COLUMNS,
        date_columns=REFERENCE_DATE_COLUMNS,
        blank_as_empty_columns=REFERENCE_PERSON_COLUMNS,
    )


class ReferenceTable:
    """A list of records plus its own sort state."""

    def __init__(self, records: list[dict], sorter: RecordSorter) -> None:
        self.records = list(records)
        self.sorter = sorter

    def __len__(self) -> int:
        return len(self.records)

    def toggle_sort(self, column: str) -> dict:
        self.sorter.toggle(column)
        return self.sorter.state()

    def rows(self) -> list[dict]:
        return self.sorter.apply(self.records)

    def payload(self) -> dict:
        return {"rows": self.rows(), "count": len(self.records), "sort": self.sorter.state()}


class InboxWorkspace:
    """My orders / pending actions / past actions."""

    TABS = ("orders", "pending", "past")

    def __init__(self, folder: Path = FIXTURES_FOLDER) -> None:
        order = STATUS_ORDERS["inbox"]
        self.tables = {
            "orders": ReferenceTable(load_fixture("my-orders", folder), _sorter(order)),
            "pending": ReferenceTable(load_fixture("pending-actions", folder), _sorter(order)),
            "past": ReferenceTable(load_fixture("past-actions", folder), _sorter(order)),
        }

    def table(self, tab: str) -> Optional[ReferenceTable]:
        return self.tables.get(tab)

    def counts(self) -> dict[str, int]:
        return {tab: len(t) for tab, t in self.tables.items()}

    def resolve(self, index: int, action: str, now: Optional[datetime] = None) -> Optional[dict]:
        """Approve or reject the pending record at `index` (in displayed order).

        The record leaves the pending tab and is put at the top of past
        actions with its new status and action date. Returns the moved record,
        or None when the index or action is invalid.
        """
        status = {"approve": "APPROVED", "reject": "REJECTED"}.get(action)
        pending = self.tables["pending"]
        shown = pending.rows()
        if status is None or not 0 <= index < len(shown):
            logger.debug("resolve ignored: index={} action={}", index, action)
            return None

        record = shown[index]
        pending.records = [r for r in pending.records if r is not record]
        stamp = (now or datetime.now()).strftime("%b %d, %Y\n%I:%M %p")
        moved = {**record, "status": status, "actionDate": stamp}
        past = self.tables["past"]
        past.records = [moved] + past.records
        logger.info("{} {} (v{})", status.title(), record.get("process"), record.get("version"))
        return moved


class SourceDataWorkspace:
    """Recent activity and version history of a source mapping file."""

    TABS = ("activity", "versions")
    FILE_TYPES = ["Cost Center Mapping", "Organization Map", "Pillar Group Mapping"]

    def __init__(self, folder: Path = FIXTURES_FOLDER) -> None:
        order = STATUS_ORDERS["source_data"]
        self.file_type = self.FILE_TYPES[0]
        self.tables = {
            "activity": ReferenceTable(load_fixture("recent-activity", folder), _sorter(order)),
            "versions": ReferenceTable(load_fixture("version-history", folder), _sorter(order)),
        }

    def table(self, tab: str) -> Optional[ReferenceTable]:
        return self.tables.get(tab)
