from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from soundaware_stats.config import AppConfig
from soundaware_stats.export.csv_export import to_csv
from soundaware_stats.export.summary import export_file_name, to_summary_text
from soundaware_stats.io.read import load_detections
from soundaware_stats.io.write import write_summary, write_text
from soundaware_stats.paths import build_output_paths
from soundaware_stats.preprocess.time import resolve_now
from soundaware_stats.stats.dashboard import compute_dashboard_stats, compute_history_stats
from soundaware_stats.stats.engine import compute_aggregates
from soundaware_stats.viz.common import figure_path
from soundaware_stats.viz.donut import build_donut_chart
from soundaware_stats.viz.figures import plot_donut, plot_stacked_bars, plot_timeline
from soundaware_stats.viz.stacked_bars import build_stacked_hourly_chart
from soundaware_stats.viz.svg import Chart, write_svg
from soundaware_stats.viz.timeline import build_timeline_chart

LOGGER = logging.getLogger(__name__)


def build_charts(frame: pd.DataFrame, config: AppConfig) -> dict[str, Chart]:
    charts = config.charts
    timezone = config.time.timezone
    return {
        "timeline": build_timeline_chart(
            frame,
            bucket_count=charts.timeline_bins,
            width=charts.timeline_width,
            height=charts.timeline_height,
            timezone=timezone,
        ),
        "categories": build_donut_chart(
            frame,
            palette_size=len(charts.palette),
            size=charts.donut_size,
            palette=charts.palette,
            legend_limit=charts.donut_legend_limit,
        ),
        "hourly_stacked": build_stacked_hourly_chart(
            frame,
            top_category_count=charts.bar_top_categories,
            width=charts.bar_width,
            height=charts.bar_height,
            palette=charts.palette,
            palette_size=charts.bar_palette_size,
            timezone=timezone,
        ),
    }


def render_charts(
    charts: dict[str, Chart],
    figures_dir: Path,
    figures_format: str = "png",
) -> dict[str, Path]:
    written: dict[str, Path] = {}
    for name, chart in charts.items():
        written[f"{name}_svg"] = write_svg(chart, figure_path(figures_dir, name, "svg"))

    if figures_format == "svg":
        return written

    plotters = {
        "timeline": plot_timeline,
        "categories": plot_donut,
        "hourly_stacked": plot_stacked_bars,
    }
    try:
        for name, chart in charts.items():
            written[name] = plotters[name](chart, figure_path(figures_dir, name, figures_format))
    except Exception:  # pragma: no cover
        LOGGER.exception("Failed rendering one or more chart figures")
    return written


def write_exports(
    frame: pd.DataFrame,
    exports_dir: Path,
    config: AppConfig,
    now: pd.Timestamp,
) -> dict[str, Path]:
    export = config.export
    timezone = config.time.timezone
    csv_text = to_csv(
        frame,
        date_format=export.date_format,
        time_format=export.time_format,
        timezone=timezone,
    )
    summary_text = to_summary_text(
        frame,
        compute_history_stats(frame),
        now=now,
        app_name=export.app_name,
        tagline=export.tagline,
        date_format=export.date_format,
        timestamp_format=export.timestamp_format,
        recent_limit=export.summary_recent_limit,
        timezone=timezone,
    )
    csv_name = export_file_name("detections", now, app_name=export.app_name, timezone=timezone)
    summary_name = export_file_name("summary", now, app_name=export.app_name, timezone=timezone)
    return {
        "csv": write_text(csv_text, exports_dir / csv_name),
        "summary_text": write_text(summary_text, exports_dir / summary_name),
    }


def run_all(
    input_path: Path,
    out_dir: Path,
    config: AppConfig,
    *,
    now: Any = None,
) -> dict[str, Path]:
    """Load detections once and write statistics, exports and charts under ``out_dir``."""
    paths = build_output_paths(out_dir)
    reference = resolve_now(now, config.time.timezone)
    frame = load_detections(input_path, config)
    LOGGER.info("Loaded %d detections from %s", len(frame), input_path)

    aggregates = compute_aggregates(frame, config=config, now=reference)
    dashboard = compute_dashboard_stats(frame, config=config, now=reference)
    written: dict[str, Path] = {
        "aggregates": write_summary(aggregates.to_dict(), paths.summary / "aggregates.json"),
        "dashboard": write_summary(dashboard.to_dict(), paths.summary / "dashboard.json"),
    }
    written.update(write_exports(frame, paths.exports, config, reference))
    written.update(
        render_charts(
            build_charts(frame, config),
            paths.figures,
            figures_format=config.outputs.figures_format,
        )
    )
    LOGGER.info("Wrote %d outputs to %s", len(written), out_dir)
    return written
