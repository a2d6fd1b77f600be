"""
Loader for the daily machine summary export.

Source: data/daily_summary.csv

One row per calendar day. The date column is exported as "start_date" and
exposed here as "date"; every other column keeps its export name.
"""

import logging
from pathlib import Path

import pandas as pd

from ..config import DAILY_COLUMNS, DAILY_HEADER_ALIASES
from .csv_text import parse_csv
from .utils import rows_to_frame

logger = logging.getLogger(__name__)


def parse_daily_data(text: str) -> pd.DataFrame:
    """Map daily summary CSV text to DailyAggregate records.

    Returns
    -------
    DataFrame with columns:
        date, total_sessions, total_duration_minutes, avg_duration_minutes,
        completed_sessions, material_types, success_rate, utilization_hours,
        total_jobs
    """
    rows = parse_csv(text)
    df = rows_to_frame(rows, DAILY_COLUMNS, aliases=DAILY_HEADER_ALIASES)
    logger.info("Parsed %d daily summary rows", len(df))
    return df


def load_daily_summary(path: str | Path) -> pd.DataFrame:
    """Read and parse the daily summary file at `path`."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.exception("Failed to read daily summary file: %s", path)
        raise

    df = parse_daily_data(text)
    logger.info("Loaded %d daily summary rows from %s", len(df), path)
    return df
