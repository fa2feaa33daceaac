from __future__ import annotations

import numbers
from datetime import datetime
from typing import Any

import numpy as np
import pandas as pd
from pandas.api.types import is_datetime64_any_dtype


def _to_timestamp(value: Any, timezone: str) -> pd.Timestamp:
    if value is None or (not isinstance(value, (str, datetime)) and pd.isna(value)):
        return pd.NaT
    try:
        if isinstance(value, numbers.Real) and not isinstance(value, bool):
            # Numeric timestamps are epoch milliseconds, as the app persists them.
            timestamp = pd.Timestamp(float(value), unit="ms", tz="UTC")
        else:
            timestamp = pd.Timestamp(value)
    except (TypeError, ValueError, OverflowError):
        return pd.NaT
    if timestamp is pd.NaT:
        return pd.NaT
    if timestamp.tzinfo is None:
        # The repeated fall-back hour resolves to its first (daylight) occurrence.
        return timestamp.tz_localize(timezone, nonexistent="shift_forward", ambiguous=True)
    return timestamp.tz_convert(timezone)


def localize_timestamps(values: pd.Series, timezone: str) -> pd.Series:
    """Parse timestamps and return them tz-aware in ``timezone``; bad values become NaT."""
    if is_datetime64_any_dtype(values):
        if getattr(values.dt, "tz", None) is None:
            return values.dt.tz_localize(
                timezone,
                nonexistent="shift_forward",
                ambiguous=np.ones(len(values), dtype=bool),
            )
        return values.dt.tz_convert(timezone)

    converted = [_to_timestamp(value, timezone) for value in values]
    return pd.Series(converted, index=values.index, dtype=pd.DatetimeTZDtype(tz=timezone))


def resolve_now(now: Any = None, timezone: str = "UTC") -> pd.Timestamp:
    """Capture the reference time once; every windowed computation reuses it."""
    if now is None:
        return pd.Timestamp.now(tz=timezone)
    resolved = _to_timestamp(now, timezone)
    if resolved is pd.NaT:
        raise ValueError(f"Invalid reference time: {now!r}")
    return resolved


def add_time_features(frame: pd.DataFrame, now: pd.Timestamp) -> pd.DataFrame:
    working = frame.copy()
    timestamps = working["timestamp"]
    working["age_seconds"] = (now - timestamps).dt.total_seconds()
    working["hour"] = timestamps.dt.hour
    working["date"] = timestamps.dt.date
    return working
