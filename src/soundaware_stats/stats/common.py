from __future__ import annotations

import math

import pandas as pd


def round_half_up(value: float) -> int:
    """Round half away from negative infinity, matching JavaScript's Math.round."""
    return int(math.floor(float(value) + 0.5))


def category_counts(frame: pd.DataFrame) -> pd.Series:
    """Counts per sound type, ordered by first appearance in the frame."""
    if frame.empty:
        return pd.Series(dtype="int64")
    sound_types = frame["sound_type"]
    return sound_types.value_counts().reindex(pd.unique(sound_types)).astype("int64")


def ranked_category_counts(frame: pd.DataFrame) -> pd.Series:
    """Counts per sound type, descending; ties keep first-appearance order."""
    counts = category_counts(frame)
    return counts.sort_values(ascending=False, kind="stable")


def windowed(frame: pd.DataFrame, window_seconds: float) -> pd.DataFrame:
    """Rows whose age lies in [0, window_seconds]; NaT and future rows are dropped."""
    age = frame["age_seconds"]
    mask = age.notna() & (age >= 0.0) & (age <= float(window_seconds))
    return frame.loc[mask]
