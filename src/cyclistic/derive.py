"""
Derived fields: parsed timestamps, trip_duration (seconds) and calendar keys.

Legacy tables carry their own duration (tripduration, already in seconds) and
it is trusted as-is. Current tables get end minus start.
"""

import pandas as pd

from .config import LEGACY_DURATION_COLUMN, TIMESTAMP_FORMAT
from .normalize import CURRENT, LEGACY
from .errors import SchemaError

TIMESTAMP_COLUMNS = ("started_at", "ended_at")


def parse_timestamps(df: pd.DataFrame) -> pd.DataFrame:
    """Parse start/end timestamps; rows that don't match the format become NaT."""
    out = df.copy()
    for col in TIMESTAMP_COLUMNS:
        if col in out.columns:
            out[col] = pd.to_datetime(out[col], format=TIMESTAMP_FORMAT, errors="coerce")
    return out


def _to_seconds(values: pd.Series) -> pd.Series:
    if pd.api.types.is_numeric_dtype(values):
        return values.astype("float64")
    # Exported spreadsheets sometimes carry "1,234.0"
    cleaned = values.map(lambda v: v.replace(",", "").strip() if isinstance(v, str) else v)
    return pd.to_numeric(cleaned, errors="coerce").astype("float64")


def derive_duration(df: pd.DataFrame, schema: str) -> pd.DataFrame:
    out = df.copy()

    if schema == LEGACY:
        if LEGACY_DURATION_COLUMN not in out.columns:
            raise SchemaError(f"legacy table is missing column: {LEGACY_DURATION_COLUMN}")
        out["trip_duration"] = _to_seconds(out[LEGACY_DURATION_COLUMN])
        out = out.drop(columns=[LEGACY_DURATION_COLUMN])
    elif schema == CURRENT:
        out["trip_duration"] = (out["ended_at"] - out["started_at"]).dt.total_seconds()
    else:
        raise SchemaError(f"Unknown schema: {schema}")

    return out


def add_calendar_fields(df: pd.DataFrame) -> pd.DataFrame:
    """Month name, weekday name and hour of day from started_at."""
    out = df.copy()
    started = out["started_at"]
    out["ride_month"] = started.dt.month_name()
    out["ride_day_of_week"] = started.dt.day_name()
    out["ride_hour"] = started.dt.hour.astype("Int64")
    return out


def derive_fields(df: pd.DataFrame, schema: str) -> pd.DataFrame:
    out = parse_timestamps(df)
    out = derive_duration(out, schema)
    return add_calendar_fields(out)
