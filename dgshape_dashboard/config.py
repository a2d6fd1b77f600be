"""
Configuration: file paths, column type tables, time-range table, constants.

DAILY_COLUMNS and SESSION_COLUMNS map each canonical column to its coercion
type ("int", "float" or "str"). Anything not listed is ignored on load.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths (override by passing paths to the loaders)
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent / "data"

DAILY_SUMMARY_FILE = DATA_DIR / "daily_summary.csv"
JOB_SESSIONS_FILE = DATA_DIR / "job_sessions.csv"

# ---------------------------------------------------------------------------
# Machine identity
# ---------------------------------------------------------------------------
DASHBOARD_TITLE = "DGSHAPE Analytics"

# ---------------------------------------------------------------------------
# Column type tables
# ---------------------------------------------------------------------------
DAILY_COLUMNS: dict[str, str] = {
    "date": "str",
    "total_sessions": "int",
    "total_duration_minutes": "float",
    "avg_duration_minutes": "float",
    "completed_sessions": "int",
    "material_types": "int",
    "success_rate": "float",
    "utilization_hours": "float",
    "total_jobs": "int",
}

# The machine export labels the daily date column "start_date"
DAILY_HEADER_ALIASES: dict[str, str] = {
    "start_date": "date",
}

SESSION_COLUMNS: dict[str, str] = {
    "session_id": "int",
    "session_start": "str",
    "start_date": "str",
    "start_hour": "int",
    "material_type": "str",
    "material_color": "str",
    "status": "str",
    "duration_minutes": "float",
    "job_count": "int",
}

# ---------------------------------------------------------------------------
# Job status values
# ---------------------------------------------------------------------------
STATUS_COMPLETED = "Completed"
STATUS_INCOMPLETE = "Incomplete"
STATUS_IN_PROGRESS = "In Progress"

JOB_STATUSES = (STATUS_COMPLETED, STATUS_INCOMPLETE, STATUS_IN_PROGRESS)

STATUS_COLORS: dict[str, str] = {
    STATUS_COMPLETED: "#16a34a",
    STATUS_INCOMPLETE: "#dc2626",
    STATUS_IN_PROGRESS: "#d97706",
}

# ---------------------------------------------------------------------------
# Time ranges
# ---------------------------------------------------------------------------
# lookback: keyword arguments for pd.DateOffset, measured back from "now"
# label_format: strftime pattern for the chart bucket label
TIME_RANGES: dict[str, dict] = {
    "daily": {"lookback": {"days": 30}, "label_format": "%b %d"},
    "weekly": {"lookback": {"weeks": 12}, "label_format": "%b %d"},
    "monthly": {"lookback": {"months": 12}, "label_format": "%b %Y"},
    "yearly": {"lookback": {"years": 5}, "label_format": "%Y"},
}

DEFAULT_TIME_RANGE = "daily"

# Jobs page date filter: time range key -> selector label
JOB_DATE_PERIODS: dict[str, str] = {
    "daily": "Specific date",
    "weekly": "Week",
    "monthly": "Month",
    "yearly": "Year",
}

# ---------------------------------------------------------------------------
# Material display colours
# ---------------------------------------------------------------------------
MATERIAL_COLORS: dict[str, str] = {
    "Pan Dental": "#3b82f6",
    "Denture Care": "#10b981",
    "hyperDENT": "#f59e0b",
    "Unknown": "#6b7280",
}

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_PEAK_HOUR = 9
RECENT_SESSIONS_LIMIT = 10
JOBS_PAGE_SIZE = 20
LOAD_ERROR_MESSAGE = "Failed to load data files"
