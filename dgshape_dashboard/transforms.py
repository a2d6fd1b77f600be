"""
Data transforms: time-window selection, window filtering, and grouping of
daily aggregates into chart-ready period buckets.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable

import pandas as pd

from .config import TIME_RANGES
from .loaders.utils import parse_date_column

logger = logging.getLogger(__name__)

CHART_COLUMNS = ["date", "period_start", "jobs", "success_rate", "utilization"]


@dataclass(frozen=True)
class TimeWindow:
    """Lookback window for one granularity.

    group_key maps a timestamp to (period_start, label). The label is what
    the chart shows; period_start is what the chart is ordered by.
    """

    granularity: str
    start: pd.Timestamp
    end: pd.Timestamp
    group_key: Callable[[pd.Timestamp], tuple[pd.Timestamp, str]]

    def contains(self, ts: pd.Timestamp) -> bool:
        return self.start <= ts <= self.end


def start_of_week(ts: pd.Timestamp) -> pd.Timestamp:
    """Return midnight of the Sunday on or before `ts`."""
    day = ts.normalize()
    return day - pd.Timedelta(days=(day.dayofweek + 1) % 7)


def start_of_month(ts: pd.Timestamp) -> pd.Timestamp:
    return ts.normalize().replace(day=1)


def start_of_year(ts: pd.Timestamp) -> pd.Timestamp:
    return ts.normalize().replace(month=1, day=1)


_PERIOD_START: dict[str, Callable[[pd.Timestamp], pd.Timestamp]] = {
    "daily": lambda ts: ts.normalize(),
    "weekly": start_of_week,
    "monthly": start_of_month,
    "yearly": start_of_year,
}


def start_of_period(granularity: str, ts: pd.Timestamp) -> pd.Timestamp:
    """Return the start of the day, week, month or year containing `ts`."""
    if granularity not in _PERIOD_START:
        raise ValueError(
            f"Unknown time range '{granularity}'; expected one of {sorted(_PERIOD_START)}"
        )
    return _PERIOD_START[granularity](ts)


def get_time_window(granularity: str, now: pd.Timestamp | None = None) -> TimeWindow:
    """Compute the lookback window and bucket key for a granularity.

    Parameters
    ----------
    granularity : One of "daily", "weekly", "monthly", "yearly".
    now : End of the window. Defaults to the current local time. Zone-aware
        values are converted to UTC and made naive, like parsed dates.

    Raises
    ------
    ValueError if the granularity is not in config.TIME_RANGES.
    """
    if granularity not in TIME_RANGES:
        raise ValueError(
            f"Unknown time range '{granularity}'; expected one of {sorted(TIME_RANGES)}"
        )

    if now is None:
        now = pd.Timestamp.now()
    now = pd.Timestamp(now)
    if now.tzinfo is not None:
        now = now.tz_convert(None)

    params = TIME_RANGES[granularity]
    start = now - pd.DateOffset(**params["lookback"])
    period_start = _PERIOD_START[granularity]
    label_format = params["label_format"]

    def group_key(ts: pd.Timestamp) -> tuple[pd.Timestamp, str]:
        begin = period_start(ts)
        return begin, begin.strftime(label_format)

    return TimeWindow(granularity=granularity, start=start, end=now, group_key=group_key)


def filter_to_window(df: pd.DataFrame, date_col: str, window: TimeWindow) -> pd.DataFrame:
    """Keep rows whose `date_col` parses and falls inside the window.

    The parsed timestamps are added as a "_ts" column on the returned copy.
    Rows with unparsable dates are dropped, not defaulted.
    """
    if df.empty:
        result = df.copy()
        result["_ts"] = pd.Series(dtype="datetime64[ns]")
        return result

    result = df.copy()
    result["_ts"] = parse_date_column(result[date_col])
    mask = result["_ts"].notna() & (result["_ts"] >= window.start) & (result["_ts"] <= window.end)
    dropped = int(result["_ts"].isna().sum())
    if dropped:
        logger.debug("Dropped %d rows with unparsable '%s'", dropped, date_col)
    return result[mask].reset_index(drop=True)


def round_half_up(value: float, digits: int = 1) -> float:
    """Round with .5 going up, as chart values have always been shown."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def group_daily_by_period(filtered_daily: pd.DataFrame, window: TimeWindow) -> pd.DataFrame:
    """Group window-filtered daily aggregates into chart buckets.

    Parameters
    ----------
    filtered_daily : Output of filter_to_window() on the daily records.
    window : The window used for filtering; supplies the bucket key.

    Returns
    -------
    DataFrame with columns:
        date (bucket label), period_start, jobs, success_rate, utilization
    sorted ascending by period_start. success_rate and utilization are
    rounded to one decimal.
    """
    if filtered_daily.empty:
        return pd.DataFrame({
            "date": pd.Series(dtype="object"),
            "period_start": pd.Series(dtype="datetime64[ns]"),
            "jobs": pd.Series(dtype="int64"),
            "success_rate": pd.Series(dtype="float64"),
            "utilization": pd.Series(dtype="float64"),
        })

    df = filtered_daily.copy()
    keys = [window.group_key(ts) for ts in df["_ts"]]
    df["period_start"] = [k[0] for k in keys]
    df["date"] = [k[1] for k in keys]

    grouped = (
        df.groupby("date", sort=False)
        .agg(
            period_start=("period_start", "min"),
            jobs=("total_sessions", "sum"),
            completed=("completed_sessions", "sum"),
            utilization=("utilization_hours", "sum"),
        )
        .reset_index()
    )

    grouped["success_rate"] = [
        round_half_up(completed / jobs * 100) if jobs > 0 else 0.0
        for jobs, completed in zip(grouped["jobs"], grouped["completed"])
    ]
    grouped["utilization"] = [round_half_up(u) for u in grouped["utilization"]]
    grouped["jobs"] = grouped["jobs"].astype("int64")

    result = (
        grouped.sort_values("period_start", kind="stable")
        .reset_index(drop=True)[CHART_COLUMNS]
    )
    logger.info("Grouped daily data into %d %s buckets", len(result), window.granularity)
    return result
