from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from soundaware_stats.stats.common import round_half_up

UNBOUNDED_SURGE = math.inf


def compute_surge(
    rate_series: Sequence[int] | np.ndarray,
    recent_bucket_count: int = 5,
) -> int | float:
    """Signed percent change of the recent average rate against the preceding buckets.

    Returns ``UNBOUNDED_SURGE`` when the baseline is empty but recent activity is not.
    """
    series = np.asarray(rate_series, dtype=float)
    if series.size == 0 or recent_bucket_count <= 0:
        return 0

    recent_bucket_count = int(recent_bucket_count)
    recent = series[-recent_bucket_count:]
    previous = series[: max(0, series.size - recent_bucket_count)]
    recent_avg = float(np.sum(recent)) / max(1, recent_bucket_count)
    previous_avg = float(np.sum(previous)) / max(1, series.size - recent_bucket_count)

    if previous_avg == 0.0:
        return UNBOUNDED_SURGE if recent_avg > 0.0 else 0
    return round_half_up(((recent_avg - previous_avg) / previous_avg) * 100.0)


def is_unbounded_surge(surge: float) -> bool:
    return math.isinf(surge) and surge > 0


def is_surge_alert(surge: float, alert_percent: int = 50) -> bool:
    return surge > alert_percent


def format_surge(surge: float) -> str:
    if is_unbounded_surge(surge):
        return "New"
    return f"{int(surge)}%"
