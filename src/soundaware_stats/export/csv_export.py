from __future__ import annotations

import csv
import io
import math

import pandas as pd

from soundaware_stats.records import DetectionInput, detections_frame
from soundaware_stats.stats.common import round_half_up

CSV_HEADER = "Date,Time,Sound Type,Confidence (%),Duration (seconds)"


def _confidence_percent(value: float) -> int:
    if value is None or not math.isfinite(value):
        return 0
    return round_half_up(value * 100)


def _duration_value(value: float) -> int | float:
    if value is None or not math.isfinite(value):
        return 0
    return int(value) if float(value).is_integer() else float(value)


def _format_timestamp(value: pd.Timestamp, fmt: str) -> str:
    if pd.isna(value):
        return ""
    return value.strftime(fmt)


def to_csv(
    records: DetectionInput,
    *,
    date_format: str = "%Y-%m-%d",
    time_format: str = "%H:%M:%S",
    timezone: str = "UTC",
) -> str:
    """CSV export of detections in input order.

    Date, time and sound type are always quoted; confidence is an integer percent.
    The body has no trailing newline; an empty input yields the header line only.
    """
    frame = detections_frame(records, timezone)
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for row in frame.itertuples(index=False):
        writer.writerow(
            [
                _format_timestamp(row.timestamp, date_format),
                _format_timestamp(row.timestamp, time_format),
                row.sound_type,
                _confidence_percent(row.confidence),
                _duration_value(row.duration),
            ]
        )
    body = buffer.getvalue()
    if body.endswith("\n"):
        body = body[:-1]
    return f"{CSV_HEADER}\n{body}"
