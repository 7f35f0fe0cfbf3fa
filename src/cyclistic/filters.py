"""
Row retention filter.

A trip is kept iff trip_duration is present and > MIN_DURATION_SEC and both
station names are present. Nothing else is checked: no upper bound on
duration, no validation of rider type values.
"""

import pandas as pd

from .config import GEO_COLUMNS, MIN_DURATION_SEC


def retention_mask(df: pd.DataFrame) -> pd.Series:
    duration = df["trip_duration"]
    return (
        duration.notna()
        & (duration > MIN_DURATION_SEC)
        & df["start_station_name"].notna()
        & df["end_station_name"].notna()
    )


def filter_trips(df: pd.DataFrame) -> pd.DataFrame:
    """Keep retained rows and drop the lat/lng columns."""
    out = df.loc[retention_mask(df)]
    out = out.drop(columns=[c for c in GEO_COLUMNS if c in out.columns])
    return out.reset_index(drop=True)


def filter_stats(df: pd.DataFrame) -> dict:
    """Row counts in/out with a breakdown by reason. Reasons can overlap."""
    duration = df["trip_duration"]
    kept = int(retention_mask(df).sum())
    return {
        'rows_in': len(df),
        'rows_out': kept,
        'rows_filtered': {
            'missing_duration': int(duration.isna().sum()),
            'duration_too_short': int((duration <= MIN_DURATION_SEC).sum()),
            'missing_start_station': int(df["start_station_name"].isna().sum()),
            'missing_end_station': int(df["end_station_name"].isna().sum()),
        },
    }
