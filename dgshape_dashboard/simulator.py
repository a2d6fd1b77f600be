"""
Sample data generator for the DGSHAPE dashboard.

Used when the CSV exports cannot be read, so the dashboard always has
something to render. All values are synthetic.
"""

import numpy as np
import pandas as pd

from .config import DAILY_COLUMNS, SESSION_COLUMNS, STATUS_COMPLETED, STATUS_INCOMPLETE

_MATERIALS = ["Pan Dental", "Denture Care", "hyperDENT"]
_SHADES = ["A1", "A2", "A3", "WhiteWax"]

# Typical milling job length in minutes
_AVG_JOB_MINUTES = 8.5


def generate_daily_data(
    today: pd.Timestamp | None = None,
    n_days: int = 31,
    rng: np.random.Generator | None = None,
) -> pd.DataFrame:
    """Generate one daily aggregate row per day, ending at `today`."""
    if today is None:
        today = pd.Timestamp.now()
    if rng is None:
        rng = np.random.default_rng(42)

    dates = pd.date_range(end=pd.Timestamp(today).normalize(), periods=n_days, freq="D")
    rows = []

    for date in dates:
        sessions = int(rng.integers(5, 20))
        completed = int(sessions * (0.95 + rng.uniform(0, 0.05)))

        rows.append({
            "date": date.strftime("%Y-%m-%d"),
            "total_sessions": sessions,
            "total_duration_minutes": sessions * _AVG_JOB_MINUTES,
            "avg_duration_minutes": _AVG_JOB_MINUTES,
            "completed_sessions": completed,
            "material_types": int(rng.integers(1, 4)),
            "success_rate": completed / sessions * 100,
            "utilization_hours": sessions * _AVG_JOB_MINUTES / 60,
            "total_jobs": sessions,
        })

    return pd.DataFrame(rows, columns=list(DAILY_COLUMNS))


def generate_job_sessions(
    today: pd.Timestamp | None = None,
    n_sessions: int = 50,
    rng: np.random.Generator | None = None,
) -> pd.DataFrame:
    """Generate individual job sessions spread over the last 30 days.

    Jobs start between 09:00 and 16:59 and roughly 95% complete.
    """
    if today is None:
        today = pd.Timestamp.now()
    if rng is None:
        rng = np.random.default_rng(42)

    day = pd.Timestamp(today).normalize()
    rows = []

    for i in range(n_sessions):
        started = (
            day
            - pd.Timedelta(days=int(rng.integers(0, 30)))
            + pd.Timedelta(hours=9 + int(rng.integers(0, 8)), minutes=int(rng.integers(0, 60)))
        )

        rows.append({
            "session_id": i + 1,
            "session_start": started.isoformat(),
            "start_date": started.strftime("%Y-%m-%d"),
            "start_hour": started.hour,
            "material_type": _MATERIALS[int(rng.integers(0, len(_MATERIALS)))],
            "material_color": _SHADES[int(rng.integers(0, len(_SHADES)))],
            "status": STATUS_COMPLETED if rng.uniform() > 0.05 else STATUS_INCOMPLETE,
            "duration_minutes": round(5 + rng.uniform(0, 10), 2),
            "job_count": 1,
        })

    return pd.DataFrame(rows, columns=list(SESSION_COLUMNS))


def generate_fallback_data(
    today: pd.Timestamp | None = None,
    seed: int | None = 42,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Generate (daily_data, job_sessions) sample tables."""
    rng = np.random.default_rng(seed)
    daily = generate_daily_data(today, rng=rng)
    sessions = generate_job_sessions(today, rng=rng)
    return daily, sessions
