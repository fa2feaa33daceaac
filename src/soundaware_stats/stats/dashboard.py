from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal

import numpy as np
import pandas as pd

from soundaware_stats.config import AppConfig
from soundaware_stats.preprocess.time import add_time_features, resolve_now
from soundaware_stats.records import (
    DetectionInput,
    DetectionRecord,
    detections_frame,
    records_from_frame,
)
from soundaware_stats.simulation import SimulatedDetection, SimulatedDetectionSource
from soundaware_stats.stats.common import category_counts, ranked_category_counts, round_half_up

ConfidenceLevel = Literal["high", "medium", "low"]
NO_CATEGORY = "None"


@dataclass(frozen=True)
class HistoryStats:
    total: int
    avg_confidence: float
    most_common: str


@dataclass(frozen=True)
class DashboardStats:
    today: int
    weekly: int
    most_common: str
    accuracy_percent: int
    rate_per_minute: float
    sparkline: list[int]
    confidence_trend_percent: int
    confidence_trend_level: ConfidenceLevel
    top_sounds: list[tuple[str, int]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "today": self.today,
            "weekly": self.weekly,
            "most_common": self.most_common,
            "accuracy_percent": self.accuracy_percent,
            "rate_per_minute": self.rate_per_minute,
            "sparkline": list(self.sparkline),
            "confidence_trend_percent": self.confidence_trend_percent,
            "confidence_trend_level": self.confidence_trend_level,
            "top_sounds": [[name, count] for name, count in self.top_sounds],
        }


def _most_common(frame: pd.DataFrame) -> str:
    counts = category_counts(frame)
    if counts.empty:
        return NO_CATEGORY
    # idxmax keeps the first-seen category on ties.
    return str(counts.idxmax())


def _mean_confidence(frame: pd.DataFrame) -> float:
    if frame.empty:
        return 0.0
    return float(frame["confidence"].fillna(0.0).mean())


def most_common_category(records: DetectionInput) -> str:
    return _most_common(detections_frame(records))


def compute_history_stats(records: DetectionInput) -> HistoryStats:
    frame = detections_frame(records)
    return HistoryStats(
        total=len(frame),
        avg_confidence=_mean_confidence(frame),
        most_common=_most_common(frame),
    )


def filter_by_sound_type(records: DetectionInput, query: str = "all") -> pd.DataFrame:
    frame = detections_frame(records)
    needle = str(query or "").strip().lower()
    if not needle or needle == "all":
        return frame
    mask = frame["sound_type"].str.lower().str.contains(needle, regex=False)
    return frame.loc[mask].reset_index(drop=True)


def group_by_date(
    records: DetectionInput,
    timezone: str = "UTC",
) -> list[tuple[date, pd.DataFrame]]:
    """Group detections by calendar day, keeping input order within and across days."""
    frame = detections_frame(records, timezone)
    if frame.empty:
        return []
    days = frame["timestamp"].dt.date
    return [
        (day, group.reset_index(drop=True))
        for day, group in frame.groupby(days, sort=False, dropna=True)
    ]


def confidence_level(
    confidence: float,
    high: float = 0.8,
    medium: float = 0.6,
) -> ConfidenceLevel:
    if confidence >= high:
        return "high"
    if confidence >= medium:
        return "medium"
    return "low"


def _sparkline(
    frame: pd.DataFrame,
    span_minutes: int,
    buckets: int,
) -> list[int]:
    span_seconds = float(span_minutes) * 60.0
    width = span_seconds / buckets
    offset = span_seconds - frame["age_seconds"].dropna().to_numpy(dtype=float)
    index = np.floor(offset / width)
    index = index[(index >= 0) & (index < buckets)].astype(int)
    return [int(value) for value in np.bincount(index, minlength=buckets)]


def compute_dashboard_stats(
    records: DetectionInput,
    config: AppConfig | None = None,
    now: Any = None,
) -> DashboardStats:
    """Home screen figures; records are expected newest first."""
    config = config or AppConfig()
    windows = config.windows
    thresholds = config.thresholds
    reference = resolve_now(now, config.time.timezone)
    frame = add_time_features(detections_frame(records, config.time.timezone), reference)

    timestamps = frame["timestamp"]
    today = int((frame["date"] == reference.date()).sum())
    weekly = int((timestamps >= reference - pd.Timedelta(days=windows.weekly_days)).sum())
    recent = int(
        (timestamps >= reference - pd.Timedelta(minutes=windows.dashboard_rate_minutes)).sum()
    )
    rate_per_minute = round_half_up(recent / windows.dashboard_rate_minutes * 10) / 10

    accuracy_percent = round_half_up(_mean_confidence(frame) * 100)
    latest = frame.head(windows.confidence_trend_records)
    confidence_trend = (
        round_half_up(_mean_confidence(latest) * 100) if not latest.empty else accuracy_percent
    )
    top_sounds = [
        (str(name), int(count)) for name, count in ranked_category_counts(frame).head(3).items()
    ]
    return DashboardStats(
        today=today,
        weekly=weekly,
        most_common=_most_common(frame),
        accuracy_percent=accuracy_percent,
        rate_per_minute=rate_per_minute,
        sparkline=_sparkline(
            frame,
            span_minutes=windows.dashboard_rate_minutes,
            buckets=windows.sparkline_buckets,
        ),
        confidence_trend_percent=confidence_trend,
        confidence_trend_level=confidence_level(
            confidence_trend / 100,
            high=thresholds.high_confidence,
            medium=thresholds.medium_confidence,
        ),
        top_sounds=top_sounds,
    )


def format_time_ago(timestamp: Any, now: Any = None, timezone: str = "UTC") -> str:
    reference = resolve_now(now, timezone)
    moment = resolve_now(timestamp, timezone)
    minutes = int((reference - moment).total_seconds() // 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def live_preview(
    records: DetectionInput,
    source: SimulatedDetectionSource,
) -> DetectionRecord | SimulatedDetection:
    """Newest real detection, or a clearly simulated one when there is none."""
    frame = detections_frame(records)
    if not frame.empty:
        return records_from_frame(frame.head(1))[0]
    return source.next()
