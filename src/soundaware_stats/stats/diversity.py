from __future__ import annotations

from typing import Any

from scipy.stats import entropy

from soundaware_stats.preprocess.time import add_time_features, resolve_now
from soundaware_stats.records import DetectionInput, detections_frame
from soundaware_stats.stats.common import category_counts, windowed


def compute_entropy(
    records: DetectionInput,
    window_minutes: float = 30.0,
    *,
    now: Any = None,
    timezone: str = "UTC",
) -> float:
    """Shannon entropy (bits) of the sound-type mix within the trailing window.

    Zero for an empty window or a window holding a single category; ``log2(k)`` when
    ``k`` categories share the window evenly.
    """
    window_seconds = float(window_minutes) * 60.0
    if window_seconds < 0.0:
        return 0.0

    reference = resolve_now(now, timezone)
    frame = add_time_features(detections_frame(records, timezone), reference)
    counts = category_counts(windowed(frame, window_seconds))
    if counts.empty:
        return 0.0
    return max(0.0, float(entropy(counts.to_numpy(dtype=float), base=2)))
