from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

import pandas as pd
import typer

from soundaware_stats.config import AppConfig, load_config
from soundaware_stats.export.csv_export import to_csv
from soundaware_stats.export.summary import to_summary_text
from soundaware_stats.io.read import load_detections
from soundaware_stats.io.write import write_text
from soundaware_stats.logging import configure_logging
from soundaware_stats.paths import build_output_paths
from soundaware_stats.pipeline.run_all import build_charts, render_charts, run_all
from soundaware_stats.preprocess.time import resolve_now
from soundaware_stats.stats.dashboard import compute_dashboard_stats, compute_history_stats
from soundaware_stats.stats.engine import compute_aggregates

app = typer.Typer(no_args_is_help=True, add_completion=False)


class FigureFormat(str, Enum):
    png = "png"
    svg = "svg"
    pdf = "pdf"


INPUT_OPTION = typer.Option(
    ...,
    "--input",
    exists=True,
    readable=True,
    resolve_path=True,
    help="Detections file (.csv, .json or .parquet).",
)
CONFIG_OPTION = typer.Option(
    None,
    exists=True,
    readable=True,
    resolve_path=True,
    help="YAML config. Built-in defaults are used when omitted.",
)
NOW_OPTION = typer.Option(
    None,
    help="Reference time (ISO 8601) for windowed statistics. Defaults to the current time.",
)


def _load_app_config(config_path: Path | None) -> AppConfig:
    return load_config(config_path)


def _resolve_now_option(now: str | None, cfg: AppConfig) -> pd.Timestamp:
    try:
        return resolve_now(now, cfg.time.timezone)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--now") from exc


def _emit(text: str, out: Path | None) -> None:
    if out is None:
        typer.echo(text)
        return
    write_text(text, out)
    typer.echo(f"Written to: {out}")


@app.command()
def stats(
    input_path: Path = INPUT_OPTION,
    config: Path | None = CONFIG_OPTION,
    now: str | None = NOW_OPTION,
) -> None:
    """Print rate series, entropy, rarity, confidence buckets and surge as JSON."""
    configure_logging()
    cfg = _load_app_config(config)
    reference = _resolve_now_option(now, cfg)
    frame = load_detections(input_path, cfg)
    aggregates = compute_aggregates(frame, config=cfg, now=reference)
    typer.echo(json.dumps(aggregates.to_dict(), indent=2, sort_keys=True))


@app.command()
def dashboard(
    input_path: Path = INPUT_OPTION,
    config: Path | None = CONFIG_OPTION,
    now: str | None = NOW_OPTION,
) -> None:
    """Print home-screen statistics as JSON."""
    configure_logging()
    cfg = _load_app_config(config)
    reference = _resolve_now_option(now, cfg)
    frame = load_detections(input_path, cfg)
    result = compute_dashboard_stats(frame, config=cfg, now=reference)
    typer.echo(json.dumps(result.to_dict(), indent=2, sort_keys=True))


@app.command("export-csv")
def export_csv(
    input_path: Path = INPUT_OPTION,
    config: Path | None = CONFIG_OPTION,
    out: Path | None = typer.Option(None, resolve_path=True, help="Write here instead of stdout."),
) -> None:
    """Export detections as CSV in input order."""
    configure_logging()
    cfg = _load_app_config(config)
    frame = load_detections(input_path, cfg)
    _emit(
        to_csv(
            frame,
            date_format=cfg.export.date_format,
            time_format=cfg.export.time_format,
            timezone=cfg.time.timezone,
        ),
        out,
    )


@app.command()
def summary(
    input_path: Path = INPUT_OPTION,
    config: Path | None = CONFIG_OPTION,
    now: str | None = NOW_OPTION,
    out: Path | None = typer.Option(None, resolve_path=True, help="Write here instead of stdout."),
) -> None:
    """Render the shareable plain-text detection summary."""
    configure_logging()
    cfg = _load_app_config(config)
    reference = _resolve_now_option(now, cfg)
    frame = load_detections(input_path, cfg)
    _emit(
        to_summary_text(
            frame,
            compute_history_stats(frame),
            now=reference,
            app_name=cfg.export.app_name,
            tagline=cfg.export.tagline,
            date_format=cfg.export.date_format,
            timestamp_format=cfg.export.timestamp_format,
            recent_limit=cfg.export.summary_recent_limit,
            timezone=cfg.time.timezone,
        ),
        out,
    )


@app.command()
def charts(
    input_path: Path = INPUT_OPTION,
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = CONFIG_OPTION,
    figures_format: FigureFormat | None = typer.Option(
        None,
        "--format",
        help="Raster/vector format in addition to SVG. Falls back to outputs.figures_format.",
    ),
) -> None:
    """Render timeline, category donut and hourly stacked bar charts."""
    configure_logging()
    cfg = _load_app_config(config)
    frame = load_detections(input_path, cfg)
    paths = build_output_paths(out)
    written = render_charts(
        build_charts(frame, cfg),
        paths.figures,
        figures_format=figures_format.value if figures_format else cfg.outputs.figures_format,
    )
    typer.echo(f"Charts written: {', '.join(sorted(written.keys()))}")


@app.command("run-all")
def run_all_command(
    input_path: Path = INPUT_OPTION,
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = CONFIG_OPTION,
    now: str | None = NOW_OPTION,
) -> None:
    """Compute statistics and write exports and charts in one pass."""
    configure_logging()
    cfg = _load_app_config(config)
    reference = _resolve_now_option(now, cfg)
    written = run_all(input_path=input_path, out_dir=out, config=cfg, now=reference)
    typer.echo(f"Run complete. Outputs: {', '.join(sorted(written.keys()))}")


if __name__ == "__main__":
    app()
