"""
Summary tables over the unified trip table.

Each function registers the table in a fresh in-memory DuckDB connection,
runs one GROUP BY query and returns a new DataFrame; the input is never
modified. Rows are ordered by member_casual (NULL last) and then by the
second key.

Top stations are ranked within each rider type, not globally. Equal ride
counts are broken by station name so the top-N cut is deterministic.
"""

from typing import Dict

import duckdb
import pandas as pd

from .config import CANONICAL_RIDER_TYPES, DAY_ORDER, MONTH_ORDER, TOP_N_STATIONS

# Text columns are handed to DuckDB as pandas "string" so an all-missing
# column (e.g. rideable_type in legacy rows) still registers as VARCHAR
TEXT_COLUMNS = [
    "member_casual",
    "rideable_type",
    "start_station_name",
    "end_station_name",
    "ride_month",
    "ride_day_of_week",
]


def _sql_list(values) -> str:
    return "[" + ", ".join("'" + v.replace("'", "''") + "'" for v in values) + "]"


def _column(df: pd.DataFrame, col: str, dtype: str) -> pd.Series:
    if col in df.columns:
        return df[col].astype(dtype)
    # All-missing column: NaN for float64, <NA> for the nullable dtypes
    return pd.Series(index=df.index, dtype=dtype)


def _prepare(df: pd.DataFrame) -> pd.DataFrame:
    """Only the columns the summaries read, with explicit dtypes."""
    columns = {col: _column(df, col, "string") for col in TEXT_COLUMNS}
    columns["ride_hour"] = _column(df, "ride_hour", "Int64")
    columns["trip_duration"] = _column(df, "trip_duration", "float64")
    return pd.DataFrame(columns, index=df.index).reset_index(drop=True)


def _query(df: pd.DataFrame, query: str) -> pd.DataFrame:
    con = duckdb.connect()
    try:
        con.register("trips", _prepare(df))
        return con.execute(query).fetchdf()
    finally:
        con.close()


def total_rides_by_rider_type(df: pd.DataFrame) -> pd.DataFrame:
    return _query(df, """
        SELECT member_casual, COUNT(*) AS total_rides
        FROM trips
        GROUP BY member_casual
        ORDER BY member_casual NULLS LAST
    """)


def rides_by_day_of_week(df: pd.DataFrame) -> pd.DataFrame:
    """Ride counts per (rider type, weekday), weekdays Sunday through Saturday."""
    return _query(df, f"""
        SELECT member_casual, ride_day_of_week, COUNT(*) AS "count"
        FROM trips
        GROUP BY member_casual, ride_day_of_week
        ORDER BY member_casual NULLS LAST,
                 list_position({_sql_list(DAY_ORDER)}, ride_day_of_week) NULLS LAST
    """)


def rides_by_hour(df: pd.DataFrame) -> pd.DataFrame:
    return _query(df, """
        SELECT member_casual, ride_hour, COUNT(*) AS "count"
        FROM trips
        GROUP BY member_casual, ride_hour
        ORDER BY member_casual NULLS LAST, ride_hour NULLS LAST
    """)


def rides_by_month(df: pd.DataFrame) -> pd.DataFrame:
    """Ride counts per (rider type, month), months in calendar order."""
    return _query(df, f"""
        SELECT member_casual, ride_month, COUNT(*) AS "count"
        FROM trips
        GROUP BY member_casual, ride_month
        ORDER BY member_casual NULLS LAST,
                 list_position({_sql_list(MONTH_ORDER)}, ride_month) NULLS LAST
    """)


def average_duration_by_rider_type(df: pd.DataFrame) -> pd.DataFrame:
    return _query(df, """
        SELECT member_casual, AVG(trip_duration) AS avg_duration_seconds
        FROM trips
        GROUP BY member_casual
        ORDER BY member_casual NULLS LAST
    """)


def _top_stations(df: pd.DataFrame, station_col: str, n: int) -> pd.DataFrame:
    return _query(df, f"""
        WITH counts AS (
            SELECT member_casual, {station_col}, COUNT(*) AS ride_count
            FROM trips
            GROUP BY member_casual, {station_col}
        ),
        ranked AS (
            SELECT *,
                ROW_NUMBER() OVER (
                    PARTITION BY member_casual
                    ORDER BY ride_count DESC, {station_col} ASC NULLS LAST
                ) AS "rank"
            FROM counts
        )
        SELECT member_casual, {station_col}, ride_count, "rank"
        FROM ranked
        WHERE "rank" <= {int(n)}
        ORDER BY member_casual NULLS LAST, "rank"
    """)


def top_start_stations(df: pd.DataFrame, n: int = TOP_N_STATIONS) -> pd.DataFrame:
    """Top n start stations per rider type by ride count."""
    return _top_stations(df, "start_station_name", n)


def top_end_stations(df: pd.DataFrame, n: int = TOP_N_STATIONS) -> pd.DataFrame:
    """Top n end stations per rider type by ride count."""
    return _top_stations(df, "end_station_name", n)


def bike_type_preference(df: pd.DataFrame) -> pd.DataFrame:
    """
    Bike type counts per rider type, plus each count as a percentage of the
    rider type's total. Legacy trips have no rideable_type and show up as a
    NULL bike type.
    """
    return _query(df, """
        WITH counts AS (
            SELECT member_casual, rideable_type, COUNT(*) AS "count"
            FROM trips
            GROUP BY member_casual, rideable_type
        )
        SELECT
            member_casual,
            rideable_type,
            "count",
            "count" * 100.0 / SUM("count") OVER (PARTITION BY member_casual) AS percentage
        FROM counts
        ORDER BY member_casual NULLS LAST, "count" DESC, rideable_type NULLS LAST
    """)


def noncanonical_rider_counts(df: pd.DataFrame) -> Dict[str, int]:
    """
    Rows whose member_casual is not one of the canonical rider types, keyed by
    value (None for missing). Empty when every row is member or casual.
    """
    con = duckdb.connect()
    try:
        con.register("trips", _prepare(df))
        rows = con.execute(f"""
            SELECT member_casual, COUNT(*)
            FROM trips
            WHERE member_casual IS NULL
               OR NOT list_contains({_sql_list(CANONICAL_RIDER_TYPES)}, member_casual)
            GROUP BY member_casual
            ORDER BY member_casual NULLS LAST
        """).fetchall()
    finally:
        con.close()
    return {value: int(count) for value, count in rows}


SUMMARIES = {
    'total_rides_by_rider_type': total_rides_by_rider_type,
    'rides_by_day_of_week': rides_by_day_of_week,
    'rides_by_hour': rides_by_hour,
    'rides_by_month': rides_by_month,
    'average_duration_by_rider_type': average_duration_by_rider_type,
    'top_start_stations': top_start_stations,
    'top_end_stations': top_end_stations,
    'bike_type_preference': bike_type_preference,
}


def build_summaries(df: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    return {name: func(df) for name, func in SUMMARIES.items()}
