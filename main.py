"""
DGSHAPE Analytics — End-to-end analytics pipeline.

Runs the full data pipeline from the CSV exports to dashboard-ready outputs
and prints smoke-test summaries for every time range.

Usage:
    python main.py
"""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from dgshape_dashboard.config import DAILY_SUMMARY_FILE, JOB_SESSIONS_FILE
from dgshape_dashboard.dashboard import (
    JobQuery,
    aggregate,
    get_available_time_ranges,
    load_dashboard_data,
    query_jobs,
)
from dgshape_dashboard.kpis import format_duration, format_peak_hour

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the full analytics pipeline and print smoke-test outputs."""

    print("=" * 70)
    print("  DGSHAPE ANALYTICS — Executive Performance Dashboard")
    print("  Analytics Pipeline Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Load source data
    # ------------------------------------------------------------------
    print("[ 1 ] LOADING SOURCE DATA")
    print("-" * 40)

    data = load_dashboard_data(DAILY_SUMMARY_FILE, JOB_SESSIONS_FILE)
    daily_data = data["daily_data"]
    job_sessions = data["job_sessions"]

    if data["error"]:
        print(f"\n  NOTICE: {data['error']}. Showing sample data.")
        print(f"  Place daily_summary.csv and job_sessions.csv in {DAILY_SUMMARY_FILE.parent}")

    print(f"\nDaily summary: {len(daily_data)} rows loaded")
    if not daily_data.empty:
        print(daily_data.head().to_string(index=False))

    print(f"\nJob sessions: {len(job_sessions)} rows loaded")
    if not job_sessions.empty:
        print(job_sessions.head().to_string(index=False))

    # ------------------------------------------------------------------
    # 2. Dashboard outputs per time range
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] DASHBOARD OUTPUTS")
    print("-" * 40)

    for time_range in get_available_time_ranges():
        result = aggregate(daily_data, job_sessions, time_range)

        print(f"\n{time_range.upper()}")
        print(f"  Total jobs        : {result['total_jobs']}")
        print(f"  Success rate      : {result['success_rate']:.1f}%")
        print(f"  Utilization       : {result['utilization_hours']:.1f}h")
        print(f"  Material types    : {result['material_types']}")
        print(f"  Avg job duration  : {result['avg_duration']:.1f} min")
        print(f"  Peak hour         : {format_peak_hour(result['peak_hour'])}")
        print(f"  Error incidents   : {result['error_count']}")

        chart = result["chart_data"]
        if not chart.empty:
            print(chart[["date", "jobs", "success_rate", "utilization"]].to_string(index=False))

        breakdown = result["material_breakdown"]
        if not breakdown.empty:
            print(breakdown.to_string(index=False))

    # ------------------------------------------------------------------
    # 3. Jobs table
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] JOBS TABLE (page 1)")
    print("-" * 40)

    page = query_jobs(job_sessions, JobQuery(page_size=10))
    print(f"\n{page.total} jobs, page {page.page} of {page.page_count}")
    if not page.rows.empty:
        table = page.rows[["session_id", "start_date", "material_type", "status"]].copy()
        table["duration"] = page.rows["duration_minutes"].apply(format_duration)
        print(table.to_string(index=False))

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)


if __name__ == "__main__":
    main()
