from __future__ import annotations

import numpy as np

from soundaware_stats.records import DetectionInput, detections_frame


def compute_confidence_buckets(
    records: DetectionInput,
    bucket_count: int = 5,
    sample_limit: int = 200,
) -> np.ndarray:
    """Histogram of confidence over equal-width ranges for the most recent records.

    Recency is by timestamp; records without a timestamp rank as oldest. Missing
    confidence counts as 0 and out-of-range values land in the edge buckets.
    """
    bucket_count = int(bucket_count)
    if bucket_count <= 0:
        return np.zeros(0, dtype=int)
    if sample_limit <= 0:
        return np.zeros(bucket_count, dtype=int)

    frame = detections_frame(records)
    if frame.empty:
        return np.zeros(bucket_count, dtype=int)

    recent = frame.sort_values("timestamp", kind="stable", na_position="first").tail(
        int(sample_limit)
    )
    confidence = recent["confidence"].fillna(0.0).to_numpy(dtype=float)
    index = np.floor(confidence * bucket_count)
    index = np.clip(np.nan_to_num(index, nan=0.0), 0, bucket_count - 1).astype(int)
    return np.bincount(index, minlength=bucket_count).astype(int)


def confidence_bucket_labels(bucket_count: int = 5) -> list[str]:
    if bucket_count <= 0:
        return []
    width = 100.0 / bucket_count
    return [
        f"{int(round(index * width))}-{int(round((index + 1) * width))}%"
        for index in range(bucket_count)
    ]
