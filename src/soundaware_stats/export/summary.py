from __future__ import annotations

from typing import Any, Literal

import pandas as pd

from soundaware_stats.preprocess.time import resolve_now
from soundaware_stats.records import DetectionInput, detections_frame
from soundaware_stats.stats.common import round_half_up
from soundaware_stats.stats.dashboard import HistoryStats

ExportKind = Literal["detections", "summary"]


def to_summary_text(
    records: DetectionInput,
    stats: HistoryStats,
    *,
    now: Any = None,
    app_name: str = "SoundAware",
    tagline: str = "AI-Powered Sound Detection App",
    date_format: str = "%Y-%m-%d",
    timestamp_format: str = "%Y-%m-%d %H:%M:%S",
    recent_limit: int = 5,
    timezone: str = "UTC",
) -> str:
    """Shareable plain-text report; the first ``recent_limit`` records are listed."""
    reference = resolve_now(now, timezone)
    frame = detections_frame(records, timezone)

    lines = [
        f"{app_name} Detection Summary - {reference.strftime(date_format)}",
        "",
        "Statistics:",
        f"- Total Detections: {stats.total}",
        f"- Average Confidence: {round_half_up(stats.avg_confidence * 100)}%",
        f"- Most Common Sound: {stats.most_common}",
        "",
        "Recent Detections:",
    ]
    for row in frame.head(max(0, int(recent_limit))).itertuples(index=False):
        confidence = 0.0 if pd.isna(row.confidence) else float(row.confidence)
        when = "" if pd.isna(row.timestamp) else row.timestamp.strftime(timestamp_format)
        lines.append(f"- {row.sound_type} ({round_half_up(confidence * 100)}%) - {when}")
    footer = f"Generated by {app_name} - {tagline}" if tagline else f"Generated by {app_name}"
    lines.extend(["", footer])
    return "\n".join(lines)


def export_file_name(
    kind: ExportKind,
    now: Any = None,
    *,
    app_name: str = "SoundAware",
    timezone: str = "UTC",
) -> str:
    stamp = resolve_now(now, timezone).strftime("%Y-%m-%d")
    if kind == "detections":
        return f"{app_name}_Detections_{stamp}.csv"
    if kind == "summary":
        return f"{app_name}_Summary_{stamp}.txt"
    raise ValueError(f"Unsupported export kind: {kind}")
