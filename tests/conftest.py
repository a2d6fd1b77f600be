"""Shared fixtures and record builders for the pipeline tests."""

from __future__ import annotations

import pandas as pd
import pytest

from dgshape_dashboard.config import DAILY_COLUMNS, SESSION_COLUMNS

NOW = pd.Timestamp("2024-03-15 12:00:00")

_DEFAULTS = {"int": 0, "float": 0.0, "str": ""}


def _build(records: list[dict], columns: dict[str, str]) -> pd.DataFrame:
    rows = [
        {name: record.get(name, _DEFAULTS[kind]) for name, kind in columns.items()}
        for record in records
    ]
    return pd.DataFrame(rows, columns=list(columns))


def make_daily(records: list[dict]) -> pd.DataFrame:
    """DailyAggregate frame; unspecified columns take their zero default."""
    return _build(records, DAILY_COLUMNS)


def make_sessions(records: list[dict]) -> pd.DataFrame:
    """JobSession frame; unspecified columns take their zero default."""
    defaults = {"start_date": "2024-03-10", "status": "Completed", "job_count": 1}
    return _build([{**defaults, **r} for r in records], SESSION_COLUMNS)


@pytest.fixture()
def now() -> pd.Timestamp:
    return NOW


@pytest.fixture()
def daily_csv() -> str:
    return (
        "start_date,total_sessions,total_duration_minutes,avg_duration_minutes,"
        "completed_sessions,material_types,success_rate,utilization_hours,total_jobs\n"
        "2024-03-01,10,85.0,8.5,9,2,90.0,1.4,10\n"
        "2024-03-02,4,36.0,9.0,4,1,100.0,0.6,4\n"
        "2023-01-15,7,60.0,8.6,7,1,100.0,1.0,7\n"
    )


@pytest.fixture()
def sessions_csv() -> str:
    return (
        "session_id,session_start,start_date,start_hour,material_type,"
        "material_color,status,duration_minutes,job_count\n"
        "1,2024-03-01T09:15:00,2024-03-01,9,Pan Dental,A1,Completed,8.0,1\n"
        "2,2024-03-01T09:40:00,2024-03-01,9,hyperDENT,A2,Incomplete,3.5,1\n"
        "3,2024-03-02T10:05:00,2024-03-02,10,,,Completed,,1\n"
        '4,2024-03-02T11:00:00,2024-03-02,11,Pan Dental,"A3, light",In Progress,12.0,1\n'
    )
