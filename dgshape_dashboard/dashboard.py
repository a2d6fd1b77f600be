"""
Dashboard-ready output functions.

These are the primary entry points for the Streamlit front end.
Each function returns plain dicts or DataFrames suitable for rendering
cards, charts, and tables.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from .config import (
    DAILY_SUMMARY_FILE,
    JOB_SESSIONS_FILE,
    JOBS_PAGE_SIZE,
    LOAD_ERROR_MESSAGE,
    RECENT_SESSIONS_LIMIT,
    SESSION_COLUMNS,
    TIME_RANGES,
)
from .kpis import effective_start, get_recent_sessions, get_session_summary, material_breakdown
from .loaders import load_daily_summary, load_job_sessions
from .loaders.utils import parse_date_column, parse_iso_date
from .simulator import generate_fallback_data
from .transforms import filter_to_window, get_time_window, group_daily_by_period, start_of_period

logger = logging.getLogger(__name__)


def aggregate(
    daily_data: pd.DataFrame,
    job_sessions: pd.DataFrame,
    time_range: str,
    now: pd.Timestamp | None = None,
) -> dict:
    """Single entry point the app calls to populate cards, charts and tables.

    Parameters
    ----------
    daily_data : DailyAggregate records from parse_daily_data().
    job_sessions : JobSession records from parse_job_sessions().
    time_range : "daily", "weekly", "monthly" or "yearly".
    now : End of the lookback window. Defaults to the current time.

    Returns
    -------
    Dict with structure:
    {
        "time_range": "daily",
        "total_jobs": 42,
        "success_rate": 97.6,          # session-level, unrounded
        "utilization_hours": 61.3,     # from daily aggregates
        "material_types": 3,
        "avg_duration": 8.4,
        "peak_hour": 10,
        "peak_hour_count": 7,
        "error_count": 1,
        "chart_data": DataFrame[date, period_start, jobs, success_rate, utilization],
        "material_breakdown": DataFrame[material, count, color],
        "recent_sessions": DataFrame (JobSession columns, newest first),
    }

    Inputs are never modified; every call builds a fresh result.
    """
    window = get_time_window(time_range, now)

    filtered_daily = filter_to_window(daily_data, "date", window)
    filtered_sessions = filter_to_window(job_sessions, "start_date", window).drop(columns="_ts")

    chart_data = group_daily_by_period(filtered_daily, window)
    summary = get_session_summary(filtered_sessions)

    utilization = float(filtered_daily["utilization_hours"].sum()) if not filtered_daily.empty else 0.0

    result = {
        "time_range": time_range,
        "total_jobs": summary["total_jobs"],
        "success_rate": summary["success_rate"],
        "utilization_hours": utilization,
        "material_types": summary["material_types"],
        "avg_duration": summary["avg_duration"],
        "peak_hour": summary["peak_hour"],
        "peak_hour_count": summary["peak_hour_count"],
        "error_count": summary["error_count"],
        "chart_data": chart_data,
        "material_breakdown": material_breakdown(filtered_sessions),
        "recent_sessions": get_recent_sessions(filtered_sessions, RECENT_SESSIONS_LIMIT),
    }

    logger.info(
        "Aggregated %s view: %d jobs, %d daily rows in window",
        time_range, result["total_jobs"], len(filtered_daily),
    )
    return result


def load_dashboard_data(
    daily_path: str | Path = DAILY_SUMMARY_FILE,
    sessions_path: str | Path = JOB_SESSIONS_FILE,
    today: pd.Timestamp | None = None,
) -> dict:
    """Load both CSV exports, substituting sample data if either is unreadable.

    Returns
    -------
    Dict with keys:
        daily_data, job_sessions : DataFrames ready for aggregate()
        error : None, or a message to show once when sample data is in use
    """
    try:
        daily_data = load_daily_summary(daily_path)
        job_sessions = load_job_sessions(sessions_path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not load CSV data, using sample data instead: %s", exc)
        daily_data, job_sessions = generate_fallback_data(today)
        return {"daily_data": daily_data, "job_sessions": job_sessions, "error": LOAD_ERROR_MESSAGE}

    return {"daily_data": daily_data, "job_sessions": job_sessions, "error": None}


def get_available_time_ranges() -> list[str]:
    """Return time range keys in selector order."""
    return list(TIME_RANGES)


# ---------------------------------------------------------------------------
# Jobs table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class JobQuery:
    """Search, filter, sort and page settings for the jobs table.

    `date` and `period` select the day, week, month or year containing
    `date`; `period` takes the time range keys ("daily", "weekly", ...).
    """

    search: str = ""
    status: str | None = None
    material: str = ""
    date: pd.Timestamp | str | None = None
    period: str = "daily"
    sort_by: str = "session_start"
    ascending: bool = False
    page: int = 1
    page_size: int = JOBS_PAGE_SIZE


@dataclass(frozen=True)
class JobPage:
    rows: pd.DataFrame
    total: int
    page: int
    page_count: int


_SEARCH_COLUMNS = ["material_type", "material_color", "status"]

EXPORT_COLUMNS = [
    "Session ID",
    "Date",
    "Time",
    "Material Type",
    "Material Color",
    "Status",
    "Duration (min)",
]


def _anchor_date(value: pd.Timestamp | str | None) -> pd.Timestamp | None:
    # Accepts anything whose str() is ISO, e.g. datetime.date from a date picker
    if value is None or not str(value).strip():
        return None
    anchor = parse_iso_date(value if isinstance(value, pd.Timestamp) else str(value))
    if anchor is None:
        raise ValueError(f"Cannot filter jobs by date '{value}'")
    return anchor


def filter_jobs(job_sessions: pd.DataFrame, query: JobQuery = JobQuery()) -> pd.DataFrame:
    """Apply the query's filters and sort order, ignoring paging.

    The date filter keeps sessions whose start_date falls in the same period
    as `query.date`; unparsable start dates never match. Material is a
    case-insensitive substring match on material_type. Search is a
    case-insensitive substring match on material, shade, status and session
    id. A status of None or "All" disables the status filter.

    Raises
    ------
    ValueError for an unknown sort column or period, or an unparsable date.
    """
    if query.sort_by not in SESSION_COLUMNS:
        raise ValueError(f"Cannot sort jobs by '{query.sort_by}'")
    if query.period not in TIME_RANGES:
        raise ValueError(f"Unknown jobs period '{query.period}'")

    df = job_sessions.copy()

    anchor = _anchor_date(query.date)
    if anchor is not None and not df.empty:
        target = start_of_period(query.period, anchor)
        dates = parse_date_column(df["start_date"])
        in_period = dates.map(lambda ts: pd.notna(ts) and start_of_period(query.period, ts) == target)
        df = df[in_period.astype(bool)]

    material = query.material.strip().lower()
    if material and not df.empty:
        df = df[df["material_type"].fillna("").astype(str).str.lower().str.contains(material, regex=False)]

    if query.status and query.status != "All":
        df = df[df["status"] == query.status]

    needle = query.search.strip().lower()
    if needle and not df.empty:
        haystack = df["session_id"].astype(str)
        for col in _SEARCH_COLUMNS:
            haystack = haystack + "\x1f" + df[col].fillna("").astype(str)
        df = df[haystack.str.lower().str.contains(needle, regex=False)]

    if not df.empty:
        if query.sort_by == "session_start":
            key = effective_start(df)
        else:
            key = df[query.sort_by]
        order = key.sort_values(ascending=query.ascending, kind="stable", na_position="last").index
        df = df.loc[order]

    return df.reset_index(drop=True)


def query_jobs(job_sessions: pd.DataFrame, query: JobQuery = JobQuery()) -> JobPage:
    """Filter, sort and slice job sessions for one table page.

    Filtering and sorting follow filter_jobs(). Out-of-range pages are
    clamped to the nearest valid page.

    Raises
    ------
    ValueError for a page size below 1, or anything filter_jobs() rejects.
    """
    if query.page_size < 1:
        raise ValueError("page_size must be at least 1")

    df = filter_jobs(job_sessions, query)

    total = len(df)
    page_count = max(1, math.ceil(total / query.page_size))
    page = min(max(query.page, 1), page_count)
    offset = (page - 1) * query.page_size

    rows = df.iloc[offset:offset + query.page_size].reset_index(drop=True)
    return JobPage(rows=rows, total=total, page=page, page_count=page_count)


def export_jobs_csv(job_sessions: pd.DataFrame, query: JobQuery = JobQuery()) -> str:
    """Render every row matching `query` as CSV text, in table order.

    Paging is ignored. Time is HH:MM of session_start, or of start_date when
    session_start is blank; it is empty when neither parses.
    """
    df = filter_jobs(job_sessions, query)
    if df.empty:
        return pd.DataFrame(columns=EXPORT_COLUMNS).to_csv(index=False)

    start = effective_start(df)
    export = pd.DataFrame({
        "Session ID": df["session_id"],
        "Date": df["start_date"],
        "Time": start.dt.strftime("%H:%M").fillna(""),
        "Material Type": df["material_type"].fillna(""),
        "Material Color": df["material_color"].fillna(""),
        "Status": df["status"],
        "Duration (min)": df["duration_minutes"].map(lambda v: "" if pd.isna(v) else f"{v:.1f}"),
    })
    return export.to_csv(index=False)


def export_filename(query: JobQuery = JobQuery()) -> str:
    """Download name for an export, e.g. jobs_weekly_2024-03-10.csv."""
    anchor = _anchor_date(query.date)
    if anchor is None:
        return "jobs_all.csv"
    return f"jobs_{query.period}_{anchor.strftime('%Y-%m-%d')}.csv"
