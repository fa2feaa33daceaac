from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from soundaware_stats.config import DEFAULT_PALETTE
from soundaware_stats.records import DetectionInput, detections_frame, display_label
from soundaware_stats.stats.common import ranked_category_counts
from soundaware_stats.viz.geometry import Viewport

OTHER_CATEGORY = "__other__"
OTHER_LABEL = "other"
HOURS = 24
LABEL_BAND = 20.0
BAR_GAP = 2.0


@dataclass(frozen=True)
class BarSegment:
    category: str
    count: int
    color: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class HourBar:
    hour: int
    label: str
    label_x: float
    label_y: float
    total: int
    segments: tuple[BarSegment, ...]


@dataclass(frozen=True)
class StackedBarChart:
    viewport: Viewport
    categories: tuple[str, ...]
    colors: tuple[str, ...]
    counts: np.ndarray
    max_stack: int
    bars: tuple[HourBar, ...]
    x_label: str = "Time (hours)"
    y_label: str = "Intensity"


def category_label(category: str) -> str:
    if category == OTHER_CATEGORY:
        return OTHER_LABEL
    return display_label(category)


def hourly_category_matrix(
    frame: pd.DataFrame,
    top_categories: Sequence[str],
) -> np.ndarray:
    """24 x (len(top_categories) + 1) counts; the last column collects everything else."""
    stack_order = list(top_categories) + [OTHER_CATEGORY]
    matrix = np.zeros((HOURS, len(stack_order)), dtype=int)
    dated = frame.loc[frame["timestamp"].notna()]
    if dated.empty:
        return matrix

    column_of = {category: index for index, category in enumerate(top_categories)}
    other_column = len(stack_order) - 1
    hours = dated["timestamp"].dt.hour.to_numpy(dtype=int)
    columns = dated["sound_type"].map(lambda value: column_of.get(value, other_column))
    np.add.at(matrix, (hours, columns.to_numpy(dtype=int)), 1)
    return matrix


def build_stacked_hourly_chart(
    records: DetectionInput,
    top_category_count: int = 4,
    *,
    width: float = 700.0,
    height: float = 120.0,
    palette: Sequence[str] = DEFAULT_PALETTE,
    palette_size: int = 5,
    timezone: str = "UTC",
) -> StackedBarChart:
    """Per-hour stacked bars for the most frequent categories plus an ``other`` band.

    Segment heights are scaled by the largest hourly total, so no stack exceeds
    ``height - LABEL_BAND``.
    """
    frame = detections_frame(records, timezone)
    ranked = ranked_category_counts(frame).drop(OTHER_CATEGORY, errors="ignore")
    top_categories = [str(name) for name in ranked.head(max(0, int(top_category_count))).index]
    stack_order = tuple(top_categories + [OTHER_CATEGORY])
    colors = list(palette)[: max(1, int(palette_size))] or list(DEFAULT_PALETTE)
    stack_colors = tuple(colors[index % len(colors)] for index in range(len(stack_order)))

    matrix = hourly_category_matrix(frame, top_categories)
    totals = matrix.sum(axis=1)
    max_stack = max(1, int(totals.max()))
    bar_width = width / HOURS
    drawable = height - LABEL_BAND

    bars: list[HourBar] = []
    for hour in range(HOURS):
        y_cursor = height
        segments: list[BarSegment] = []
        for position, category in enumerate(stack_order):
            value = int(matrix[hour, position])
            if value <= 0:
                continue
            segment_height = value / max_stack * drawable
            y_cursor -= segment_height
            segments.append(
                BarSegment(
                    category=category,
                    count=value,
                    color=stack_colors[position],
                    x=hour * bar_width + BAR_GAP,
                    y=y_cursor,
                    width=bar_width - 2 * BAR_GAP,
                    height=segment_height,
                )
            )
        bars.append(
            HourBar(
                hour=hour,
                label=str(hour),
                label_x=hour * bar_width + bar_width / 2.0,
                label_y=height - 2.0,
                total=int(totals[hour]),
                segments=tuple(segments),
            )
        )

    return StackedBarChart(
        viewport=Viewport(width=width, height=height),
        categories=stack_order,
        colors=stack_colors,
        counts=matrix,
        max_stack=max_stack,
        bars=tuple(bars),
    )
