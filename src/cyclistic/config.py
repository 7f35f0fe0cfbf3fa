from pathlib import Path

ROOT_DIR = Path(__file__).parent.parent.parent
DATA_DIR = ROOT_DIR / "data"
OUTPUT_DIR = DATA_DIR / "processed"
LOGS_DIR = ROOT_DIR / "logs"

# One file per reporting period
DEFAULT_LEGACY_FILE = DATA_DIR / "Divvy_Trips_2019_Q1.xlsx"
DEFAULT_CURRENT_FILE = DATA_DIR / "Divvy_Trips_2020_Q1.xlsx"

# Legacy (2019) column -> canonical (2020) column
LEGACY_COLUMN_MAP = {
    "trip_id": "ride_id",
    "start_time": "started_at",
    "end_time": "ended_at",
    "from_station_name": "start_station_name",
    "from_station_id": "start_station_id",
    "to_station_name": "end_station_name",
    "to_station_id": "end_station_id",
}
LEGACY_RIDER_COLUMN = "usertype"
LEGACY_DURATION_COLUMN = "tripduration"

# Legacy usertype -> member_casual
RIDER_TYPE_MAP = {
    "Subscriber": "member",
    "Customer": "casual",
}
CANONICAL_RIDER_TYPES = ("member", "casual")

CANONICAL_COLUMNS = [
    "ride_id",
    "started_at",
    "ended_at",
    "start_station_name",
    "start_station_id",
    "end_station_name",
    "end_station_id",
    "member_casual",
]

# Header signatures for schema detection
LEGACY_MARKERS = {"trip_id", "usertype", "tripduration"}
CURRENT_MARKERS = {"ride_id", "member_casual"}

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Trips must last strictly longer than this
MIN_DURATION_SEC = 60

GEO_COLUMNS = ("start_lat", "start_lng", "end_lat", "end_lng")

TOP_N_STATIONS = 10

EXCEL_SUFFIXES = (".xlsx", ".xls")
CSV_SUFFIXES = (".csv",)

# Calendar ordering for the weekday/month summaries (weeks start on Sunday)
DAY_ORDER = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
MONTH_ORDER = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
