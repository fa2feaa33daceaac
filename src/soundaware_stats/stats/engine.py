from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from soundaware_stats.config import AppConfig
from soundaware_stats.preprocess.time import resolve_now
from soundaware_stats.records import DetectionInput, detections_frame
from soundaware_stats.stats.confidence import compute_confidence_buckets
from soundaware_stats.stats.diversity import compute_entropy
from soundaware_stats.stats.rarity import compute_rarity
from soundaware_stats.stats.rates import compute_rate_series, estimated_hourly_rate
from soundaware_stats.stats.surge import (
    compute_surge,
    format_surge,
    is_surge_alert,
    is_unbounded_surge,
)


@dataclass(frozen=True)
class DerivedAggregate:
    computed_at: pd.Timestamp
    rate_series: np.ndarray
    entropy: float
    rare_count: int
    confidence_buckets: np.ndarray
    surge_percent: int | float
    window_count: int
    total_count: int
    estimated_hourly_rate: int
    surge_alert: bool = False

    def to_dict(self) -> dict[str, Any]:
        surge: int | str = (
            "unbounded" if is_unbounded_surge(self.surge_percent) else int(self.surge_percent)
        )
        return {
            "computed_at": self.computed_at.isoformat(),
            "rate_series": [int(value) for value in self.rate_series],
            "entropy": float(self.entropy),
            "rare_count": int(self.rare_count),
            "confidence_buckets": [int(value) for value in self.confidence_buckets],
            "surge_percent": surge,
            "surge_label": format_surge(self.surge_percent),
            "surge_alert": bool(self.surge_alert),
            "window_count": int(self.window_count),
            "total_count": int(self.total_count),
            "estimated_hourly_rate": int(self.estimated_hourly_rate),
        }


def compute_aggregates(
    records: DetectionInput,
    config: AppConfig | None = None,
    now: Any = None,
) -> DerivedAggregate:
    """Recompute every derived statistic from one snapshot and one reference time."""
    config = config or AppConfig()
    timezone = config.time.timezone
    reference = resolve_now(now, timezone)
    snapshot = detections_frame(records, timezone)
    windows = config.windows
    thresholds = config.thresholds

    rate_series = compute_rate_series(
        snapshot,
        window_minutes=windows.rate_window_minutes,
        bucket_count=windows.rate_bucket_count,
        now=reference,
        timezone=timezone,
    )
    surge = compute_surge(rate_series, windows.surge_recent_buckets)
    return DerivedAggregate(
        computed_at=reference,
        rate_series=rate_series,
        entropy=compute_entropy(
            snapshot,
            window_minutes=windows.entropy_window_minutes,
            now=reference,
            timezone=timezone,
        ),
        rare_count=compute_rarity(snapshot, threshold=thresholds.rarity_threshold),
        confidence_buckets=compute_confidence_buckets(
            snapshot,
            bucket_count=thresholds.confidence_bucket_count,
            sample_limit=thresholds.confidence_sample_limit,
        ),
        surge_percent=surge,
        window_count=int(rate_series.sum()),
        total_count=len(snapshot),
        estimated_hourly_rate=estimated_hourly_rate(rate_series, windows.rate_window_minutes),
        surge_alert=is_surge_alert(surge, thresholds.surge_alert_percent),
    )
