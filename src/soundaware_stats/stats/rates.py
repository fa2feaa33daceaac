from __future__ import annotations

from typing import Any

import numpy as np

from soundaware_stats.preprocess.time import add_time_features, resolve_now
from soundaware_stats.records import DetectionInput, detections_frame
from soundaware_stats.stats.common import round_half_up, windowed


def compute_rate_series(
    records: DetectionInput,
    window_minutes: int = 30,
    bucket_count: int | None = None,
    *,
    now: Any = None,
    timezone: str = "UTC",
) -> np.ndarray:
    """Per-bucket detection counts over a trailing window.

    Index 0 is the oldest bucket and the last index the most recent. ``bucket_count``
    defaults to one bucket per minute. Records outside ``[0, window]`` of age are
    ignored.
    """
    if bucket_count is None:
        bucket_count = int(window_minutes)
    bucket_count = int(bucket_count)
    if bucket_count <= 0:
        return np.zeros(0, dtype=int)

    window_seconds = float(window_minutes) * 60.0
    if window_seconds <= 0.0:
        return np.zeros(bucket_count, dtype=int)

    reference = resolve_now(now, timezone)
    frame = add_time_features(detections_frame(records, timezone), reference)
    in_window = windowed(frame, window_seconds)
    if in_window.empty:
        return np.zeros(bucket_count, dtype=int)

    bucket_width = window_seconds / bucket_count
    age = in_window["age_seconds"].to_numpy(dtype=float)
    index = np.floor((window_seconds - age) / bucket_width).astype(int)
    index = np.clip(index, 0, bucket_count - 1)
    return np.bincount(index, minlength=bucket_count).astype(int)


def estimated_hourly_rate(rate_series: np.ndarray, window_minutes: int) -> int:
    """Detections per hour extrapolated from a rate series covering ``window_minutes``."""
    if window_minutes <= 0:
        return 0
    total = float(np.sum(rate_series))
    return round_half_up(total / float(window_minutes) * 60.0)
