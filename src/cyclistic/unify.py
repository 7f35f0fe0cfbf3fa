"""
Stack the two filtered periods into one canonical table.

ride_id is numeric in the legacy export and text in the current one. Left
alone, concat would silently produce an object column of mixed ints and
strings, so both sides are coerced to the pandas string dtype and checked
before stacking.
"""

import pandas as pd

from .errors import TypeMismatchError

KEY_COLUMN = "ride_id"


def _key_to_text(value):
    if isinstance(value, float) and value.is_integer():
        # Spreadsheet readers turn integer ids into floats when a cell is empty
        return str(int(value))
    return value


def coerce_ride_id(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    if KEY_COLUMN in out.columns:
        out[KEY_COLUMN] = out[KEY_COLUMN].map(_key_to_text, na_action="ignore").astype("string")
    return out


def check_key_types(left: pd.DataFrame, right: pd.DataFrame):
    """Raise TypeMismatchError unless ride_id has the same dtype on both sides."""
    for name, df in (("legacy", left), ("current", right)):
        if KEY_COLUMN not in df.columns:
            raise TypeMismatchError(f"{name} table has no {KEY_COLUMN} column")

    left_type, right_type = left[KEY_COLUMN].dtype, right[KEY_COLUMN].dtype
    if left_type != right_type:
        raise TypeMismatchError(
            f"{KEY_COLUMN} dtype differs between sources: {left_type} vs {right_type}"
        )


def unify(legacy: pd.DataFrame, current: pd.DataFrame) -> pd.DataFrame:
    """Legacy rows first, then current. Columns missing on one side are NA."""
    legacy = coerce_ride_id(legacy)
    current = coerce_ride_id(current)
    check_key_types(legacy, current)
    return pd.concat([legacy, current], ignore_index=True, sort=False)
