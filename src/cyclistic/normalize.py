"""
Schema normalization for the two trip file formats.

Legacy (2019): trip_id, start_time, end_time, bikeid, tripduration,
               from_station_*, to_station_*, usertype, gender, birthyear
Current (2020): ride_id, rideable_type, started_at, ended_at,
                start_station_*, end_station_*, start/end lat/lng, member_casual

The current format is the canonical one; legacy tables are renamed onto it and
usertype is recoded into member_casual.
"""

from typing import Optional

import pandas as pd

from .config import (
    CANONICAL_COLUMNS,
    CURRENT_MARKERS,
    LEGACY_COLUMN_MAP,
    LEGACY_MARKERS,
    LEGACY_RIDER_COLUMN,
    RIDER_TYPE_MAP,
)
from .errors import SchemaError

LEGACY = "legacy"
CURRENT = "current"


def clean_headers(df: pd.DataFrame) -> pd.DataFrame:
    """Strip and lowercase column names; returns a new frame."""
    return df.rename(columns=lambda c: str(c).strip().lower())


def detect_schema(df: pd.DataFrame) -> str:
    """Detect which schema a raw trip table uses."""
    columns = set(clean_headers(df).columns)

    if columns & CURRENT_MARKERS:
        return CURRENT
    elif columns & LEGACY_MARKERS:
        return LEGACY
    raise SchemaError(f"Unrecognized trip schema, columns: {sorted(columns)}")


def map_rider_type(value):
    """
    Recode a legacy usertype value.

    Subscriber -> member, Customer -> casual; anything else (including
    missing values) is returned unchanged.
    """
    if isinstance(value, str):
        return RIDER_TYPE_MAP.get(value, value)
    return value


def _require(df: pd.DataFrame, columns, schema: str):
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise SchemaError(f"{schema} table is missing columns: {missing}")


def normalize_legacy(df: pd.DataFrame) -> pd.DataFrame:
    """Rename legacy columns to canonical names and derive member_casual."""
    df = clean_headers(df)
    _require(df, list(LEGACY_COLUMN_MAP) + [LEGACY_RIDER_COLUMN], LEGACY)

    out = df.rename(columns=LEGACY_COLUMN_MAP)
    out["member_casual"] = out[LEGACY_RIDER_COLUMN].map(map_rider_type)
    return out.drop(columns=[LEGACY_RIDER_COLUMN])


def normalize_current(df: pd.DataFrame) -> pd.DataFrame:
    """Current tables already use canonical names; returns a copy with cleaned headers."""
    out = clean_headers(df)
    _require(out, CANONICAL_COLUMNS, CURRENT)
    return out


def normalize(df: pd.DataFrame, schema: Optional[str] = None) -> pd.DataFrame:
    if schema is None:
        schema = detect_schema(df)

    if schema == LEGACY:
        return normalize_legacy(df)
    elif schema == CURRENT:
        return normalize_current(df)
    raise SchemaError(f"Unknown schema: {schema}")
