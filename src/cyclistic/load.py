"""
Load the raw trip files for both reporting periods.

CSV files go through DuckDB with every column read as text, so timestamp and
duration parsing happen later under our own rules. Excel workbooks are read
with pandas (openpyxl engine).
"""

from pathlib import Path
from typing import Tuple
import zipfile

import duckdb
import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from .config import CSV_SUFFIXES, EXCEL_SUFFIXES
from .errors import SourceFileError


def _read_csv(path: Path) -> pd.DataFrame:
    escaped = str(path).replace("'", "''")
    con = duckdb.connect()
    try:
        return con.execute(f"""
            SELECT * FROM read_csv_auto('{escaped}', header=true, all_varchar=true)
        """).fetchdf()
    finally:
        con.close()


def _read_excel(path: Path) -> pd.DataFrame:
    return pd.read_excel(path, engine="openpyxl")


def load_trips(path: Path) -> pd.DataFrame:
    """
    Read one period's trip file into a DataFrame.

    Raises SourceFileError if the file is missing, has an unsupported
    extension, or cannot be parsed.
    """
    path = Path(path)
    if not path.is_file():
        raise SourceFileError(f"Trip file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        reader = _read_csv
    elif suffix in EXCEL_SUFFIXES:
        reader = _read_excel
    else:
        raise SourceFileError(f"Unsupported file type '{path.suffix}': {path.name}")

    try:
        df = reader(path)
    except (duckdb.Error, ValueError, OSError, zipfile.BadZipFile, InvalidFileException) as e:
        raise SourceFileError(f"Could not read {path.name}: {e}") from e

    if df.columns.empty:
        raise SourceFileError(f"No columns found in {path.name}")
    return df


def load_sources(legacy_path: Path, current_path: Path) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Load both periods. Either failure aborts before any transformation."""
    legacy = load_trips(legacy_path)
    current = load_trips(current_path)
    return legacy, current
