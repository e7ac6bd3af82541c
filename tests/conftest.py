"""
Pytest configuration and fixtures for Budget Studio tests.
"""
import pytest

from studio.data.store import RowStore
from studio.session import DashboardSession


STATUS_COLUMNS = ["ID", "STATUS", "DATE", "AMOUNT"]
STATUS_ROWS = [
    ["1", "APPROVED", "2024-01-05", "100"],
    ["2", "REJECTED", "2024-02-10", "50"],
    ["3", "", "2024-03-15", "25"],
    ["4", "APPROVED", "", "10"],
    ["5", "REJECTED", "2024-05-01", "5"],
    ["6", "REJECTED", "2024-06-30", "1"],
]


@pytest.fixture
def status_store():
    """Six rows: 2 approved, 3 rejected, 1 blank status; one blank date."""
    return RowStore().load(STATUS_ROWS, STATUS_COLUMNS)


@pytest.fixture
def sample_session():
    """Session over the bundled 39-row allocation sample."""
    session = DashboardSession()
    session.load_sample()
    return session


@pytest.fixture
def status_csv():
    lines = [",".join(STATUS_COLUMNS)] + [",".join(r) for r in STATUS_ROWS]
    return ("\n".join(lines) + "\n").encode("utf-8")
