"""Tests for session-level KPI functions."""

from __future__ import annotations

import pandas as pd
import pytest

from conftest import make_sessions
from dgshape_dashboard.kpis import (
    average_duration,
    calc_success_rate,
    count_errors,
    format_duration,
    format_peak_hour,
    get_material_color,
    get_peak_hour,
    get_recent_sessions,
    get_session_summary,
    material_breakdown,
)


class TestSuccessRate:
    def test_zero_total(self) -> None:
        assert calc_success_rate(0, 0) == 0.0

    def test_half(self) -> None:
        assert calc_success_rate(1, 2) == 50.0

    def test_not_rounded(self) -> None:
        assert calc_success_rate(2, 3) == pytest.approx(66.6666667)


class TestMaterialBreakdown:
    def test_blank_materials_are_excluded(self) -> None:
        sessions = make_sessions([
            {"material_type": "Pan Dental"},
            {"material_type": ""},
            {"material_type": None},
            {"material_type": "   "},
        ])

        breakdown = material_breakdown(sessions)

        assert breakdown.to_dict("records") == [
            {"material": "Pan Dental", "count": 1, "color": "#3b82f6"}
        ]

    def test_sorted_by_count_with_first_seen_tie_order(self) -> None:
        sessions = make_sessions([
            {"material_type": "hyperDENT"},
            {"material_type": "Pan Dental"},
            {"material_type": "Zirconia"},
            {"material_type": "Pan Dental"},
            {"material_type": "hyperDENT"},
            {"material_type": "Denture Care"},
            {"material_type": "Denture Care"},
            {"material_type": "Denture Care"},
        ])

        breakdown = material_breakdown(sessions)

        assert breakdown["material"].tolist() == ["Denture Care", "hyperDENT", "Pan Dental", "Zirconia"]
        assert breakdown["count"].tolist() == [3, 2, 2, 1]

    def test_empty(self) -> None:
        breakdown = material_breakdown(make_sessions([]))
        assert breakdown.empty
        assert list(breakdown.columns) == ["material", "count", "color"]

    def test_colors(self) -> None:
        assert get_material_color("Denture Care") == "#10b981"
        assert get_material_color("hyperDENT") == "#f59e0b"
        assert get_material_color("Zirconia") == "#6b7280"


class TestPeakHour:
    def test_most_frequent_hour(self) -> None:
        sessions = make_sessions([{"start_hour": 9}, {"start_hour": 9}, {"start_hour": 10}])
        assert get_peak_hour(sessions) == (9, 2)

    def test_ties_go_to_lowest_hour(self) -> None:
        sessions = make_sessions([{"start_hour": h} for h in (14, 10, 14, 10)])
        assert get_peak_hour(sessions) == (10, 2)

    def test_default_when_empty(self) -> None:
        assert get_peak_hour(make_sessions([])) == (9, 0)


class TestAverageDuration:
    def test_missing_counts_as_zero(self) -> None:
        sessions = make_sessions([
            {"duration_minutes": 10.0},
            {"duration_minutes": None},
            {"duration_minutes": 5.0},
        ])
        assert average_duration(sessions) == 5.0

    def test_empty(self) -> None:
        assert average_duration(make_sessions([])) == 0.0


class TestErrors:
    def test_only_incomplete_counts(self) -> None:
        sessions = make_sessions([
            {"status": "Completed"},
            {"status": "Incomplete"},
            {"status": "In Progress"},
            {"status": "Incomplete"},
        ])
        assert count_errors(sessions) == 2


class TestRecentSessions:
    def test_newest_first_with_start_date_fallback(self) -> None:
        sessions = make_sessions([
            {"session_id": 1, "session_start": "2024-03-01T09:00:00", "start_date": "2024-03-01"},
            {"session_id": 2, "session_start": "", "start_date": "2024-03-05"},
            {"session_id": 3, "session_start": "2024-03-03T16:00:00", "start_date": "2024-03-03"},
            {"session_id": 4, "session_start": "bad", "start_date": "bad"},
        ])

        recent = get_recent_sessions(sessions)

        assert recent["session_id"].tolist() == [2, 3, 1, 4]

    def test_capped_at_limit(self) -> None:
        sessions = make_sessions([
            {"session_id": i, "start_date": f"2024-03-{i:02d}"} for i in range(1, 13)
        ])

        recent = get_recent_sessions(sessions)

        assert len(recent) == 10
        assert recent["session_id"].tolist()[:3] == [12, 11, 10]

    def test_input_is_not_reordered(self) -> None:
        sessions = make_sessions([
            {"session_id": 1, "start_date": "2024-03-01"},
            {"session_id": 2, "start_date": "2024-03-02"},
        ])
        get_recent_sessions(sessions)
        assert sessions["session_id"].tolist() == [1, 2]


class TestSessionSummary:
    def test_summary_keys(self) -> None:
        sessions = make_sessions([
            {"status": "Completed", "material_type": "Pan Dental", "start_hour": 9, "duration_minutes": 6.0},
            {"status": "Incomplete", "material_type": "", "start_hour": 11, "duration_minutes": 2.0},
        ])

        summary = get_session_summary(sessions)

        assert summary == {
            "total_jobs": 2,
            "completed_jobs": 1,
            "success_rate": 50.0,
            "error_count": 1,
            "avg_duration": 4.0,
            "material_types": 1,
            "peak_hour": 9,
            "peak_hour_count": 1,
        }


class TestFormatting:
    @pytest.mark.parametrize("minutes, expected", [(None, "N/A"), (0, "N/A"), (float("nan"), "N/A"), (7.6, "8 min")])
    def test_format_duration(self, minutes, expected) -> None:
        assert format_duration(minutes) == expected

    def test_format_peak_hour(self) -> None:
        assert format_peak_hour(9) == "09:00"
        assert format_peak_hour(14) == "14:00"

    def test_empty_frame_helpers(self) -> None:
        assert get_recent_sessions(pd.DataFrame(columns=["session_start", "start_date"])).empty
