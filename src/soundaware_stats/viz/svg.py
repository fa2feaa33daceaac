from __future__ import annotations

from pathlib import Path
from xml.sax.saxutils import escape

from soundaware_stats.viz.donut import DonutChart
from soundaware_stats.viz.geometry import fmt
from soundaware_stats.viz.stacked_bars import StackedBarChart, category_label
from soundaware_stats.viz.timeline import TimelineChart

ACCENT = "#009E73"
TEXT_SECONDARY = "#475569"

Chart = TimelineChart | DonutChart | StackedBarChart

SWATCH = 10.0
LEGEND_ROW = 16.0
DONUT_LEGEND_WIDTH = 180.0
KEY_ITEM_WIDTH = 130.0


def _document(width: float, height: float, body: list[str]) -> str:
    header = (
        '<svg xmlns="http://www.w3.org/2000/svg" '
        f'viewBox="0 0 {fmt(width)} {fmt(height)}" '
        f'width="{fmt(width)}" height="{fmt(height)}" preserveAspectRatio="xMidYMid meet">'
    )
    return "\n".join([header, *body, "</svg>"]) + "\n"


def _swatch(x: float, y: float, color: str, label: str) -> list[str]:
    return [
        f'<rect class="legend-swatch" x="{fmt(x)}" y="{fmt(y)}" width="{fmt(SWATCH)}" '
        f'height="{fmt(SWATCH)}" fill="{color}"/>',
        f'<text x="{fmt(x + SWATCH + 4)}" y="{fmt(y + SWATCH - 1)}" font-size="10" '
        f'fill="{TEXT_SECONDARY}">{escape(label)}</text>',
    ]


def _timeline_svg(chart: TimelineChart) -> str:
    body = [
        f'<path d="{chart.area_path}" fill="{ACCENT}" opacity="0.12"/>',
        f'<path d="{chart.line_path}" fill="none" stroke="{ACCENT}" stroke-width="2"/>',
    ]
    body.extend(
        f'<circle cx="{fmt(point.x)}" cy="{fmt(point.y)}" r="2" fill="{ACCENT}"/>'
        for point in chart.points
    )
    return _document(chart.viewport.width, chart.viewport.height, body)


def _donut_svg(chart: DonutChart) -> str:
    cx, cy = fmt(chart.center.x), fmt(chart.center.y)
    if chart.is_empty:
        body = [
            f'<text x="{cx}" y="{cy}" font-size="12" fill="{TEXT_SECONDARY}" '
            f'text-anchor="middle">{escape(chart.placeholder or "")}</text>'
        ]
        return _document(chart.viewport.width, chart.viewport.height, body)

    body = [
        f'<path d="{item.path}" fill="{item.color}" fill-rule="{item.fill_rule}">'
        f"<title>{escape(item.category)}</title></path>"
        for item in chart.slices
    ]
    body.append(
        f'<text x="{cx}" y="{cy}" font-size="12" text-anchor="middle" '
        f'dominant-baseline="middle">{chart.total}</text>'
    )
    # Legend sits to the right of the ring, one row per entry.
    legend_x = chart.viewport.width + 8
    for row, entry in enumerate(chart.legend):
        body.extend(_swatch(legend_x, 8 + row * LEGEND_ROW, entry.color, entry.label))
    width = chart.viewport.width + (DONUT_LEGEND_WIDTH if chart.legend else 0.0)
    height = max(chart.viewport.height, 8 + len(chart.legend) * LEGEND_ROW)
    return _document(width, height, body)


def _stacked_svg(chart: StackedBarChart) -> str:
    body: list[str] = []
    for bar in chart.bars:
        body.append(f'<g data-hour="{bar.hour}">')
        body.extend(
            f'<rect x="{fmt(segment.x)}" y="{fmt(segment.y)}" width="{fmt(segment.width)}" '
            f'height="{fmt(segment.height)}" fill="{segment.color}"/>'
            for segment in bar.segments
        )
        body.append(
            f'<text x="{fmt(bar.label_x)}" y="{fmt(bar.label_y)}" font-size="8" '
            f'fill="{TEXT_SECONDARY}" text-anchor="middle">{bar.label}</text>'
        )
        body.append("</g>")
    # Category key runs along a band under the hour labels.
    key_y = chart.viewport.height + 6
    for position, (category, color) in enumerate(zip(chart.categories, chart.colors)):
        body.extend(_swatch(position * KEY_ITEM_WIDTH + 4, key_y, color, category_label(category)))
    width = max(chart.viewport.width, len(chart.categories) * KEY_ITEM_WIDTH + 4)
    return _document(width, chart.viewport.height + SWATCH + 12, body)


def render_svg(chart: Chart) -> str:
    if isinstance(chart, TimelineChart):
        return _timeline_svg(chart)
    if isinstance(chart, DonutChart):
        return _donut_svg(chart)
    if isinstance(chart, StackedBarChart):
        return _stacked_svg(chart)
    raise TypeError(f"Unsupported chart type: {type(chart).__name__}")


def write_svg(chart: Chart, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_svg(chart), encoding="utf-8")
    return path
