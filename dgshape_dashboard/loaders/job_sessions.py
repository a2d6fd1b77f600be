"""
Loader for the per-job session export.

Source: data/job_sessions.csv

One row per manufacturing job. Status is expected to be one of
Completed / Incomplete / In Progress, but other values are kept verbatim.
"""

import logging
from pathlib import Path

import pandas as pd

from ..config import JOB_STATUSES, SESSION_COLUMNS
from .csv_text import parse_csv
from .utils import rows_to_frame

logger = logging.getLogger(__name__)


def parse_job_sessions(text: str) -> pd.DataFrame:
    """Map job session CSV text to JobSession records.

    Returns
    -------
    DataFrame with columns:
        session_id, session_start, start_date, start_hour, material_type,
        material_color, status, duration_minutes, job_count
    """
    rows = parse_csv(text)
    df = rows_to_frame(rows, SESSION_COLUMNS)

    # A blank status is missing data, not an unrecognised value
    unknown = sorted(set(df["status"]) - set(JOB_STATUSES) - {""})
    if unknown:
        logger.warning("Unrecognised job status values kept as-is: %s", unknown)

    logger.info("Parsed %d job session rows", len(df))
    return df


def load_job_sessions(path: str | Path) -> pd.DataFrame:
    """Read and parse the job sessions file at `path`."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.exception("Failed to read job sessions file: %s", path)
        raise

    df = parse_job_sessions(text)
    logger.info("Loaded %d job session rows from %s", len(df), path)
    return df
