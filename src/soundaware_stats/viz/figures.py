from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.patches import Patch, Rectangle, Wedge

from soundaware_stats.viz.common import figure_size, save_figure
from soundaware_stats.viz.donut import DonutChart
from soundaware_stats.viz.stacked_bars import StackedBarChart, category_label
from soundaware_stats.viz.timeline import TimelineChart

ACCENT = "#009E73"
TEXT_SECONDARY = "#475569"


def plot_timeline(chart: TimelineChart, output_path: Path) -> Path:
    width, height = chart.viewport.width, chart.viewport.height
    fig, ax = plt.subplots(figsize=figure_size(width, height))
    xs = [point.x for point in chart.points]
    ys = [point.y for point in chart.points]
    ax.fill_between(xs, ys, height, color=ACCENT, alpha=0.12, linewidth=0)
    ax.plot(xs, ys, color=ACCENT, linewidth=2)
    ax.scatter(xs, ys, s=6, color=ACCENT)
    ax.set_xlim(0, width)
    # Geometry is in screen space: y grows downward.
    ax.set_ylim(height, 0)
    ax.set_xticks(xs)
    ax.set_xticklabels([str(index) for index in range(len(xs))], fontsize=6)
    ax.set_yticks([])
    ax.set_xlabel(chart.x_label)
    ax.set_ylabel(chart.y_label)
    ax.set_title("Sound activity over time")
    return save_figure(fig, output_path)


def plot_donut(chart: DonutChart, output_path: Path) -> Path:
    size = chart.viewport.width
    fig, ax = plt.subplots(figsize=(4.0, 4.0))
    ax.set_xlim(0, size)
    ax.set_ylim(size, 0)
    ax.set_aspect("equal")
    ax.axis("off")

    if chart.is_empty:
        ax.text(
            chart.center.x,
            chart.center.y,
            chart.placeholder or "",
            ha="center",
            va="center",
            color=TEXT_SECONDARY,
        )
        return save_figure(fig, output_path)

    ring_width = chart.radius - chart.inner_radius
    for item in chart.slices:
        ax.add_patch(
            Wedge(
                (chart.center.x, chart.center.y),
                chart.radius,
                item.start_angle,
                item.end_angle,
                width=ring_width,
                facecolor=item.color,
            )
        )
    ax.text(chart.center.x, chart.center.y, str(chart.total), ha="center", va="center")
    if chart.legend:
        ax.legend(
            handles=[Patch(facecolor=entry.color, label=entry.label) for entry in chart.legend],
            loc="upper center",
            bbox_to_anchor=(0.5, 0.0),
            fontsize=8,
            frameon=False,
        )
    ax.set_title("Sound categories")
    return save_figure(fig, output_path)


def plot_stacked_bars(chart: StackedBarChart, output_path: Path) -> Path:
    width, height = chart.viewport.width, chart.viewport.height
    fig, ax = plt.subplots(figsize=figure_size(width, height, min_height=2.5))
    for bar in chart.bars:
        for segment in bar.segments:
            ax.add_patch(
                Rectangle(
                    (segment.x, segment.y),
                    segment.width,
                    segment.height,
                    facecolor=segment.color,
                )
            )
        ax.text(bar.label_x, bar.label_y, bar.label, ha="center", fontsize=6, color=TEXT_SECONDARY)
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_xlabel(chart.x_label)
    ax.set_ylabel(chart.y_label)
    ax.legend(
        handles=[
            Patch(facecolor=color, label=category_label(category))
            for category, color in zip(chart.categories, chart.colors)
        ],
        loc="upper left",
        fontsize=7,
        ncol=len(chart.categories),
        frameon=False,
    )
    ax.set_title("Sound detection timeline")
    return save_figure(fig, output_path)
