"""Tests for the fallback sample-data generator."""

from __future__ import annotations

import pandas as pd

from conftest import NOW
from dgshape_dashboard.config import DAILY_COLUMNS, JOB_STATUSES, SESSION_COLUMNS
from dgshape_dashboard.dashboard import aggregate
from dgshape_dashboard.simulator import generate_fallback_data


class TestGenerateFallbackData:
    def test_schema_matches_parsed_records(self) -> None:
        daily, sessions = generate_fallback_data(NOW)

        assert list(daily.columns) == list(DAILY_COLUMNS)
        assert list(sessions.columns) == list(SESSION_COLUMNS)
        assert len(daily) == 31
        assert len(sessions) == 50

    def test_reproducible_with_seed(self) -> None:
        first = generate_fallback_data(NOW, seed=7)
        second = generate_fallback_data(NOW, seed=7)

        pd.testing.assert_frame_equal(first[0], second[0])
        pd.testing.assert_frame_equal(first[1], second[1])

    def test_values_are_plausible(self) -> None:
        daily, sessions = generate_fallback_data(NOW)

        assert (daily["completed_sessions"] <= daily["total_sessions"]).all()
        assert daily["date"].iloc[-1] == "2024-03-15"
        assert set(sessions["status"]) <= set(JOB_STATUSES)
        assert sessions["start_hour"].between(9, 16).all()
        assert sessions["session_id"].is_unique

    def test_feeds_the_daily_view(self) -> None:
        daily, sessions = generate_fallback_data(NOW)

        result = aggregate(daily, sessions, "daily", now=NOW)

        assert result["total_jobs"] == 50
        # 31 generated days, the first falls before the 12:00 window start
        assert len(result["chart_data"]) == 30
        assert len(result["recent_sessions"]) == 10
