"""
Shared utilities for data ingestion: numeric coercion, ISO date parsing,
header-driven row mapping.
"""

import logging
import math
import re
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

_INT_PREFIX = re.compile(r"^[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}(?:-\d{2})?(?:[T ].*)?$")

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def safe_int(val: Any) -> int:
    """Coerce a value to int, returning 0 for missing or non-numeric values.

    Strings are read up to the first non-digit, so "12 jobs" gives 12 and
    "3.7" gives 3. Values that do not fit in an int64 column also give 0.
    """
    if val is None:
        return 0
    if isinstance(val, bool):
        return int(val)
    if isinstance(val, int):
        result = val
    elif isinstance(val, float):
        if pd.isna(val) or math.isinf(val):
            return 0
        result = int(val)
    else:
        match = _INT_PREFIX.match(str(val).strip())
        if match is None:
            return 0
        result = int(match.group())
    if result < _INT64_MIN or result > _INT64_MAX:
        return 0
    return result


def safe_float(val: Any) -> float:
    """Coerce a value to float, returning 0.0 for missing or non-numeric values.

    Handles trailing units such as "2.5h" or "78%" by reading the leading
    numeric part only.
    """
    if val is None:
        return 0.0
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        return 0.0 if pd.isna(val) else float(val)
    match = _FLOAT_PREFIX.match(str(val).strip())
    if match is None:
        return 0.0
    return float(match.group())


def parse_iso_date(val: Any) -> pd.Timestamp | None:
    """Parse an ISO-8601 date or timestamp string to a naive pd.Timestamp.

    Timezone-aware values are converted to UTC before the zone is dropped.
    Returns None for blanks, non-ISO strings and impossible dates.
    """
    if val is None:
        return None
    if isinstance(val, pd.Timestamp):
        ts = val
    else:
        text = str(val).strip()
        if not text or not _ISO_DATE.match(text):
            return None
        try:
            ts = pd.Timestamp(text)
        except (ValueError, TypeError, OverflowError):
            return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    # Outside the datetime64[ns] range
    if ts < pd.Timestamp.min or ts > pd.Timestamp.max:
        return None
    return ts


def parse_date_column(values: pd.Series) -> pd.Series:
    """Parse a column of ISO strings into datetime64, unparsable -> NaT."""
    parsed = [parse_iso_date(v) for v in values]
    return pd.Series(
        [pd.NaT if ts is None else ts for ts in parsed],
        index=values.index,
        dtype="datetime64[ns]",
    )


def rows_to_frame(
    rows: list[list[str]],
    columns: dict[str, str],
    aliases: dict[str, str] | None = None,
) -> pd.DataFrame:
    """Map parsed rows to a typed DataFrame using the first row as header.

    Parameters
    ----------
    rows : Output of parse_csv(); rows[0] is the header.
    columns : Canonical column name -> "int" | "float" | "str".
    aliases : Optional raw header name -> canonical column name.

    Returns
    -------
    DataFrame with exactly the columns in `columns`, in that order, one row
    per data row. Missing cells and missing columns fall back to 0, 0.0 or "".
    """
    aliases = aliases or {}
    if not rows:
        return _empty_frame(columns)

    header = [aliases.get(h.strip(), h.strip()) for h in rows[0]]
    positions: dict[str, int] = {}
    for idx, name in enumerate(header):
        # First occurrence wins if a header is repeated
        if name in columns and name not in positions:
            positions[name] = idx

    missing = [c for c in columns if c not in positions]
    if missing:
        logger.warning("Columns missing from header, using defaults: %s", missing)

    coercers = {"int": safe_int, "float": safe_float, "str": lambda v: v}

    records = []
    for row in rows[1:]:
        record = {}
        for name, kind in columns.items():
            idx = positions.get(name)
            raw = row[idx].strip() if idx is not None and idx < len(row) else ""
            record[name] = coercers[kind](raw)
        records.append(record)

    if not records:
        return _empty_frame(columns)

    df = pd.DataFrame(records, columns=list(columns))
    for name, kind in columns.items():
        if kind == "int":
            df[name] = df[name].astype("int64")
        elif kind == "float":
            df[name] = df[name].astype("float64")
    return df


def _empty_frame(columns: dict[str, str]) -> pd.DataFrame:
    dtypes = {"int": "int64", "float": "float64", "str": "object"}
    return pd.DataFrame(
        {name: pd.Series(dtype=dtypes[kind]) for name, kind in columns.items()}
    )
