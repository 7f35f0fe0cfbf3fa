import pandas as pd
import pytest


@pytest.fixture
def legacy_raw():
    """Five 2019-style trips. Rows 2 (45s) and 3 (no end station) get filtered."""
    return pd.DataFrame({
        'trip_id': [21742443, 21742444, 21742445, 21742446, 21742447],
        'start_time': [
            "2019-01-01 00:04:37",
            "2019-01-01 00:08:13",
            "2019-01-01 00:13:23",
            "2019-02-03 17:10:00",
            "2019-03-15 08:00:00",
        ],
        'end_time': [
            "2019-01-01 01:04:37",
            "2019-01-01 00:08:58",
            "2019-01-01 00:23:23",
            "2019-02-03 17:25:00",
            "2019-03-15 08:02:00",
        ],
        'bikeid': [2167, 4386, 1524, 252, 1170],
        'tripduration': ["3,600.0", "45.0", "600.0", "900.0", "120.0"],
        'from_station_id': [199, 199, 44, 15, 199],
        'from_station_name': ["A", "A", "B", "C", "A"],
        'to_station_id': [84, 15, None, 199, 84],
        'to_station_name': ["B", "C", None, "A", "B"],
        'usertype': ["Subscriber", "Customer", "Subscriber", "Customer", "Student"],
        'gender': ["Male", "Female", None, "Male", None],
        'birthyear': [1985, 1990, None, 1975, 2001],
    })


@pytest.fixture
def current_raw():
    """Five 2020-style trips. A2 (0s) and A4 (bad timestamp) get filtered."""
    return pd.DataFrame({
        'ride_id': ["A1", "A2", "A3", "A4", "A5"],
        'rideable_type': ["docked_bike", "docked_bike", "electric_bike", "docked_bike", "docked_bike"],
        'started_at': [
            "2020-01-05 10:00:00",
            "2020-01-06 09:00:00",
            "2020-02-10 07:15:00",
            "not a timestamp",
            "2020-03-02 18:00:00",
        ],
        'ended_at': [
            "2020-01-05 10:30:00",
            "2020-01-06 09:00:00",
            "2020-02-10 07:25:00",
            "2020-02-11 07:25:00",
            "2020-03-02 18:20:00",
        ],
        'start_station_name': ["A", "B", "B", "C", "C"],
        'start_station_id': [199, 44, 44, 15, 15],
        'end_station_name': ["B", "B", "A", "A", "B"],
        'end_station_id': [84, 44, 199, 199, 84],
        'start_lat': [41.87, 41.88, 41.88, 41.89, 41.89],
        'start_lng': [-87.62, -87.63, -87.63, -87.64, -87.64],
        'end_lat': [41.90, 41.88, 41.87, 41.87, 41.90],
        'end_lng': [-87.65, -87.63, -87.62, -87.62, -87.65],
        'member_casual': ["member", "member", "casual", "member", "member"],
    })


@pytest.fixture
def unified(legacy_raw, current_raw):
    from cyclistic.pipeline import build_unified

    trips, _ = build_unified(legacy_raw, current_raw)
    return trips


@pytest.fixture
def write_csv():
    """Write a frame to CSV the way the trip exports look and return the path."""
    def _write(df: pd.DataFrame, path):
        df.to_csv(path, index=False)
        return path
    return _write
