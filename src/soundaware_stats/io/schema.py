from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from soundaware_stats.config import ColumnsConfig


@dataclass(frozen=True)
class CanonicalColumns:
    id: str = "id"
    sound_type: str = "sound_type"
    confidence: str = "confidence"
    duration: str = "duration"
    timestamp: str = "timestamp"


def normalize_columns(df: pd.DataFrame, columns: ColumnsConfig) -> pd.DataFrame:
    """Rename source columns to the canonical names used by stats and charts."""
    rename_map = {
        columns.id: CanonicalColumns.id,
        columns.sound_type: CanonicalColumns.sound_type,
        columns.confidence: CanonicalColumns.confidence,
        columns.duration: CanonicalColumns.duration,
        columns.timestamp: CanonicalColumns.timestamp,
    }
    missing = [source for source in rename_map if source not in df.columns]
    if missing:
        missing_str = ", ".join(missing)
        raise ValueError(f"Missing required detection columns: {missing_str}")
    return df.rename(columns=rename_map)
