from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from soundaware_stats.records import DetectionInput, detections_frame
from soundaware_stats.viz.geometry import Point, Viewport, fmt, polyline_path

DEFAULT_WIDTH = 600.0
DEFAULT_HEIGHT = 80.0


@dataclass(frozen=True)
class TimelineChart:
    viewport: Viewport
    counts: tuple[int, ...]
    max_count: int
    points: tuple[Point, ...]
    line_path: str
    area_path: str
    x_label: str = "Time (hours)"
    y_label: str = "Intensity"


def hourly_bins(records: DetectionInput, bins: int = 24, timezone: str = "UTC") -> np.ndarray:
    """Detections per hour-of-day bin; every calendar day folds onto the same 24 hours."""
    bins = max(1, int(bins))
    frame = detections_frame(records, timezone)
    hours = frame["timestamp"].dt.hour.dropna().to_numpy(dtype=float)
    index = (np.floor(hours / 24.0 * bins) % bins).astype(int)
    return np.bincount(index, minlength=bins).astype(int)


def build_timeline_chart(
    records: DetectionInput,
    bucket_count: int = 24,
    *,
    width: float = DEFAULT_WIDTH,
    height: float = DEFAULT_HEIGHT,
    headroom: float = 8.0,
    baseline_inset: float = 2.0,
    timezone: str = "UTC",
) -> TimelineChart:
    counts = hourly_bins(records, bins=bucket_count, timezone=timezone)
    max_count = max(1, int(counts.max()) if counts.size else 0)

    step = width / (len(counts) - 1 or 1)
    points = tuple(
        Point(
            x=index * step,
            y=height - (int(value) / max_count) * (height - headroom) - baseline_inset,
        )
        for index, value in enumerate(counts)
    )
    line_path = polyline_path(points)
    area_path = f"{line_path} L {fmt(width)},{fmt(height)} L 0,{fmt(height)} Z"
    return TimelineChart(
        viewport=Viewport(width=width, height=height),
        counts=tuple(int(value) for value in counts),
        max_count=max_count,
        points=points,
        line_path=line_path,
        area_path=area_path,
    )
