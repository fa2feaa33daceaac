from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from soundaware_stats.config import DEFAULT_PALETTE
from soundaware_stats.records import DetectionInput, detections_frame, display_label
from soundaware_stats.stats.common import ranked_category_counts, round_half_up
from soundaware_stats.viz.geometry import Point, Viewport, fmt, polar

START_ANGLE = -90.0
INNER_RADIUS_RATIO = 0.6
NO_DATA_LABEL = "No data"


@dataclass(frozen=True)
class DonutSlice:
    category: str
    count: int
    share: float
    start_angle: float
    end_angle: float
    color: str
    path: str
    fill_rule: str = "nonzero"

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle


@dataclass(frozen=True)
class LegendEntry:
    category: str
    label: str
    color: str
    count: int
    percent: int


@dataclass(frozen=True)
class DonutChart:
    viewport: Viewport
    center: Point
    radius: float
    inner_radius: float
    total: int
    slices: tuple[DonutSlice, ...] = field(default_factory=tuple)
    legend: tuple[LegendEntry, ...] = field(default_factory=tuple)
    placeholder: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.slices


def _ring_path(center: Point, radius: float, inner_radius: float) -> str:
    # A single SVG arc cannot close on itself, so each circle is two half arcs.
    cx, cy = center.x, center.y
    return (
        f"M {fmt(cx)},{fmt(cy - radius)} "
        f"A {fmt(radius)} {fmt(radius)} 0 1 1 {fmt(cx)},{fmt(cy + radius)} "
        f"A {fmt(radius)} {fmt(radius)} 0 1 1 {fmt(cx)},{fmt(cy - radius)} Z "
        f"M {fmt(cx)},{fmt(cy - inner_radius)} "
        f"A {fmt(inner_radius)} {fmt(inner_radius)} 0 1 0 {fmt(cx)},{fmt(cy + inner_radius)} "
        f"A {fmt(inner_radius)} {fmt(inner_radius)} 0 1 0 {fmt(cx)},{fmt(cy - inner_radius)} Z"
    )


def _sector_path(
    center: Point,
    radius: float,
    inner_radius: float,
    start_angle: float,
    end_angle: float,
) -> str:
    large_arc = 1 if end_angle - start_angle > 180.0 else 0
    outer_start = polar(center.x, center.y, radius, start_angle)
    outer_end = polar(center.x, center.y, radius, end_angle)
    inner_end = polar(center.x, center.y, inner_radius, end_angle)
    inner_start = polar(center.x, center.y, inner_radius, start_angle)
    return (
        f"M {fmt(outer_start.x)},{fmt(outer_start.y)} "
        f"A {fmt(radius)} {fmt(radius)} 0 {large_arc} 1 {fmt(outer_end.x)},{fmt(outer_end.y)} "
        f"L {fmt(inner_end.x)},{fmt(inner_end.y)} "
        f"A {fmt(inner_radius)} {fmt(inner_radius)} 0 {large_arc} 0 "
        f"{fmt(inner_start.x)},{fmt(inner_start.y)} Z"
    )


def build_donut_chart(
    records: DetectionInput,
    palette_size: int = 6,
    *,
    size: float = 120.0,
    palette: Sequence[str] = DEFAULT_PALETTE,
    legend_limit: int = 5,
) -> DonutChart:
    """Category share ring, largest category first, starting at 12 o'clock."""
    colors = list(palette)[: max(1, int(palette_size))] or list(DEFAULT_PALETTE)
    center = Point(size / 2.0, size / 2.0)
    radius = size / 2.0 - 6.0
    inner_radius = radius * INNER_RADIUS_RATIO
    viewport = Viewport(width=size, height=size)

    counts = ranked_category_counts(detections_frame(records))
    total = int(counts.sum()) if not counts.empty else 0
    if total == 0:
        return DonutChart(
            viewport=viewport,
            center=center,
            radius=radius,
            inner_radius=inner_radius,
            total=0,
            placeholder=NO_DATA_LABEL,
        )

    slices: list[DonutSlice] = []
    start_angle = START_ANGLE
    for rank, (category, count) in enumerate(counts.items()):
        share = int(count) / total
        end_angle = start_angle + share * 360.0
        color = colors[rank % len(colors)]
        if share >= 1.0:
            path = _ring_path(center, radius, inner_radius)
            slices.append(
                DonutSlice(
                    category=str(category),
                    count=int(count),
                    share=share,
                    start_angle=START_ANGLE,
                    end_angle=START_ANGLE + 360.0,
                    color=color,
                    path=path,
                    fill_rule="evenodd",
                )
            )
            break
        slices.append(
            DonutSlice(
                category=str(category),
                count=int(count),
                share=share,
                start_angle=start_angle,
                end_angle=end_angle,
                color=color,
                path=_sector_path(center, radius, inner_radius, start_angle, end_angle),
            )
        )
        start_angle = end_angle

    legend = tuple(
        LegendEntry(
            category=item.category,
            label=f"{display_label(item.category)} ({round_half_up(item.share * 100)}%)",
            color=item.color,
            count=item.count,
            percent=round_half_up(item.share * 100),
        )
        for item in slices[: max(0, int(legend_limit))]
    )
    return DonutChart(
        viewport=viewport,
        center=center,
        radius=radius,
        inner_radius=inner_radius,
        total=total,
        slices=tuple(slices),
        legend=legend,
    )
