"""Data ingestion loaders for the DGSHAPE machine exports."""

from .csv_text import parse_csv
from .daily_summary import parse_daily_data, load_daily_summary
from .job_sessions import parse_job_sessions, load_job_sessions

__all__ = [
    "parse_csv",
    "parse_daily_data",
    "load_daily_summary",
    "parse_job_sessions",
    "load_job_sessions",
]
