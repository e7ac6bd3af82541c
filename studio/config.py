"""
Budget Studio configuration: paths, limits, column conventions, logging.
"""
import os
import sys
from pathlib import Path

from loguru import logger

_package_dir = Path(__file__).resolve().parent

# ---------------------------------------------------------------------------
# Paths: override with STUDIO_DATA_DIR env var for cloud deployment
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("STUDIO_DATA_DIR", str(Path.home() / "Budget Studio")))
BASE_FOLDER = _data_dir
EXPORTS_FOLDER = _data_dir / "exports"

# Read-only reference tables (orders, approvals, activity, versions)
FIXTURES_FOLDER = Path(os.environ.get("STUDIO_FIXTURES_DIR", str(_package_dir / "data" / "reference_tables")))
SAMPLE_DATASET = _package_dir / "data" / "sample" / "allocation_sample.csv"
LOAD_SAMPLE_ON_START = os.environ.get("STUDIO_LOAD_SAMPLE", "1") not in ("0", "false", "no")

# ---------------------------------------------------------------------------
# Import rules
# ---------------------------------------------------------------------------
ACCEPTED_EXTENSIONS = (".csv",)

# ---------------------------------------------------------------------------
# Table view
# ---------------------------------------------------------------------------
DEFAULT_ROWS_PER_PAGE = 50
ROWS_PER_PAGE_OPTIONS = [10, 25, 50, 100]

# Number of non-blank values sampled when deciding whether a column holds dates
DATE_SAMPLE_SIZE = 5

# ---------------------------------------------------------------------------
# Executive view (card grid)
# ---------------------------------------------------------------------------
MAX_CARDS = int(os.environ.get("STUDIO_MAX_CARDS", "6"))
MAX_HISTORY_SIZE = int(os.environ.get("STUDIO_MAX_HISTORY", "20"))

# Columns summed by cards. When none of these are present the numeric
# columns of the dataset are used instead.
MEASURE_COLUMNS = ["AMOUNT", "ADVERT_AMOUNT_INCL_AGENCY_FEE"]

# Fixed summary charts shown beside the table (left and right containers)
SUMMARY_DIMENSIONS = ["ADV_MARKETING_REGION", "ADV_PILLAR"]

UNKNOWN_LABEL = "Unknown"

# ---------------------------------------------------------------------------
# Reference tables: status ranks (first = lowest)
# ---------------------------------------------------------------------------
STATUS_ORDERS = {
    "inbox": ["PENDING APPROVAL", "APPROVED", "REJECTED"],
    "source_data": ["DRAFT", "CHECKED-IN", "APPROVED"],
}

REFERENCE_DATE_COLUMNS = ["submittedDate", "actionDate"]
REFERENCE_NUMERIC_COLUMNS = ["version"]
REFERENCE_PERSON_COLUMNS = ["submittedBy", "actionBy"]

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("STUDIO_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Replace loguru's default sink with one stderr sink at `level`."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
