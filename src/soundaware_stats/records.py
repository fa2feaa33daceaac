from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Union

import pandas as pd

from soundaware_stats.preprocess.time import localize_timestamps

MODEL_CLASSES: tuple[str, ...] = (
    "applause_no_speech",
    "applause_speech",
    "cat_meowing_no_speech",
    "cat_meowing_speech",
    "cough_no_speech",
    "cough_speech",
    "crying_no_speech",
    "crying_speech",
    "dishes_pot_pan_no_speech",
    "dishes_pot_pan_speech",
    "dog_barking_no_speech",
    "dog_barking_speech",
    "doorbell_no_speech",
    "doorbell_speech",
    "drill_no_speech",
    "drill_speech",
    "glass_breaking_no_speech",
    "glass_breaking_speech",
    "gun_shot_no_speech",
    "gun_shot_speech",
    "slam_no_speech",
    "slam_speech",
    "toilet_flush_no_speech",
    "toilet_flush_speech",
)
CANONICAL_COLUMNS = ["id", "sound_type", "confidence", "duration", "timestamp"]


@dataclass(frozen=True)
class DetectionRecord:
    id: str
    sound_type: str
    confidence: float
    duration: float
    timestamp: datetime | pd.Timestamp | str


DetectionInput = Union[Iterable[DetectionRecord], pd.DataFrame]


def is_known_sound_type(sound_type: str) -> bool:
    return sound_type in MODEL_CLASSES


def display_label(sound_type: str) -> str:
    return str(sound_type).replace("_", " ")


def _rows_from_records(records: Iterable[DetectionRecord]) -> list[tuple]:
    rows: list[tuple] = []
    for record in records:
        if not isinstance(record, DetectionRecord):
            raise TypeError(f"Expected DetectionRecord, got {type(record).__name__}")
        rows.append(
            (record.id, record.sound_type, record.confidence, record.duration, record.timestamp)
        )
    return rows


def detections_frame(records: DetectionInput, timezone: str = "UTC") -> pd.DataFrame:
    """Return a private canonical snapshot of the given detections.

    Accepts either ``DetectionRecord`` objects or a frame that already carries the
    canonical columns. Timestamps are made tz-aware in ``timezone``; values that
    cannot be parsed become NaT, non-numeric confidence/duration become NaN.
    """
    if isinstance(records, pd.DataFrame):
        missing = [column for column in CANONICAL_COLUMNS if column not in records.columns]
        if missing:
            raise ValueError(f"Detection frame missing columns: {', '.join(missing)}")
        frame = records.loc[:, CANONICAL_COLUMNS].copy()
    else:
        frame = pd.DataFrame(_rows_from_records(records), columns=CANONICAL_COLUMNS)

    frame["id"] = frame["id"].astype(str)
    frame["sound_type"] = frame["sound_type"].fillna("").astype(str)
    frame["confidence"] = pd.to_numeric(frame["confidence"], errors="coerce").astype(float)
    frame["duration"] = pd.to_numeric(frame["duration"], errors="coerce").astype(float)
    frame["timestamp"] = localize_timestamps(frame["timestamp"], timezone)
    return frame.reset_index(drop=True)


def records_from_frame(frame: pd.DataFrame) -> list[DetectionRecord]:
    return [
        DetectionRecord(
            id=str(row.id),
            sound_type=str(row.sound_type),
            confidence=float(row.confidence),
            duration=float(row.duration),
            timestamp=row.timestamp,
        )
        for row in frame.loc[:, CANONICAL_COLUMNS].itertuples(index=False)
    ]
