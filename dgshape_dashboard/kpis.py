"""
KPI computation functions — pure functions with no side effects.

Provides success rate, material breakdown, peak operating hour, average
duration and recent-session selection over job session records.
"""

import logging
from collections import Counter
from typing import Any

import pandas as pd

from .config import (
    DEFAULT_PEAK_HOUR,
    MATERIAL_COLORS,
    RECENT_SESSIONS_LIMIT,
    STATUS_COMPLETED,
    STATUS_INCOMPLETE,
)
from .loaders.utils import parse_date_column

logger = logging.getLogger(__name__)


def calc_success_rate(completed: int, total: int) -> float:
    """Return completed/total as a percentage, 0.0 when total is 0."""
    if total == 0:
        return 0.0
    return completed / total * 100


def count_status(sessions: pd.DataFrame, status: str) -> int:
    if sessions.empty:
        return 0
    return int((sessions["status"] == status).sum())


def count_completed(sessions: pd.DataFrame) -> int:
    return count_status(sessions, STATUS_COMPLETED)


def count_errors(sessions: pd.DataFrame) -> int:
    """Error incidents are sessions that ended Incomplete."""
    return count_status(sessions, STATUS_INCOMPLETE)


def get_material_color(material: str) -> str:
    return MATERIAL_COLORS.get(material, MATERIAL_COLORS["Unknown"])


def _is_blank(val: Any) -> bool:
    if val is None:
        return True
    if isinstance(val, float) and pd.isna(val):
        return True
    return isinstance(val, str) and not val.strip()


def material_breakdown(sessions: pd.DataFrame) -> pd.DataFrame:
    """Count sessions per material type.

    Sessions without a material are left out of the breakdown entirely
    (they still count towards total jobs elsewhere).

    Returns
    -------
    DataFrame with columns: material, count, color
    sorted by count descending; equal counts keep first-seen order.
    """
    counts: Counter = Counter()
    if not sessions.empty:
        for material in sessions["material_type"]:
            if _is_blank(material):
                continue
            counts[material] += 1

    # Counter keeps insertion order and sorted() is stable
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    rows = [
        {"material": material, "count": count, "color": get_material_color(material)}
        for material, count in ordered
    ]
    return pd.DataFrame(rows, columns=["material", "count", "color"])


def get_peak_hour(sessions: pd.DataFrame) -> tuple[int, int]:
    """Return (hour, count) for the most frequent start hour.

    Ties go to the lowest hour. With no sessions the default is
    (DEFAULT_PEAK_HOUR, 0).
    """
    if sessions.empty:
        return DEFAULT_PEAK_HOUR, 0

    hours = pd.to_numeric(sessions["start_hour"], errors="coerce").dropna().astype(int)
    if hours.empty:
        return DEFAULT_PEAK_HOUR, 0

    counts = hours.value_counts()
    top = counts.max()
    peak = int(counts[counts == top].index.min())
    return peak, int(top)


def average_duration(sessions: pd.DataFrame) -> float:
    """Mean duration in minutes, missing durations counted as 0."""
    if sessions.empty:
        return 0.0
    durations = pd.to_numeric(sessions["duration_minutes"], errors="coerce").fillna(0.0)
    return float(durations.sum()) / len(sessions)


def effective_start(sessions: pd.DataFrame) -> pd.Series:
    """Session start timestamp, falling back to start_date when blank."""
    start = parse_date_column(sessions["session_start"])
    fallback = parse_date_column(sessions["start_date"])
    return start.fillna(fallback)


def get_recent_sessions(
    sessions: pd.DataFrame,
    limit: int = RECENT_SESSIONS_LIMIT,
) -> pd.DataFrame:
    """Most recent sessions first, at most `limit` rows.

    Sessions whose timestamps cannot be parsed sort last.
    """
    if sessions.empty:
        return sessions.copy()

    df = sessions.copy()
    df["_started"] = effective_start(df)
    df = df.sort_values("_started", ascending=False, kind="stable", na_position="last")
    return df.drop(columns="_started").head(limit).reset_index(drop=True)


def get_session_summary(sessions: pd.DataFrame) -> dict:
    """Return session-level card metrics for the dashboard.

    Returns
    -------
    Dict with keys: total_jobs, completed_jobs, success_rate, error_count,
    avg_duration, material_types, peak_hour, peak_hour_count
    """
    total = len(sessions)
    completed = count_completed(sessions)
    breakdown = material_breakdown(sessions)
    peak_hour, peak_count = get_peak_hour(sessions)

    return {
        "total_jobs": total,
        "completed_jobs": completed,
        "success_rate": calc_success_rate(completed, total),
        "error_count": count_errors(sessions),
        "avg_duration": average_duration(sessions),
        "material_types": len(breakdown),
        "peak_hour": peak_hour,
        "peak_hour_count": peak_count,
    }


def format_duration(minutes: float | None) -> str:
    """Render a duration for tables: "N/A" for missing or zero."""
    if minutes is None or pd.isna(minutes) or minutes == 0:
        return "N/A"
    return f"{round(minutes)} min"


def format_peak_hour(hour: int) -> str:
    return f"{hour:02d}:00"
