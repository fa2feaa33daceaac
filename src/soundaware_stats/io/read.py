from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from soundaware_stats.config import AppConfig
from soundaware_stats.io.schema import normalize_columns
from soundaware_stats.records import detections_frame


def _read_raw(path: Path, id_column: str) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        # utf-8-sig strips BOM-prefixed headers written by spreadsheet tools.
        return pd.read_csv(path, encoding="utf-8-sig", dtype={id_column: str})
    if suffix == ".json":
        payload = json.loads(path.read_text(encoding="utf-8-sig") or "[]")
        if isinstance(payload, dict):
            payload = payload.get("detections", [])
        if not isinstance(payload, list):
            raise ValueError(f"Expected a list of detections in {path.name}")
        return pd.DataFrame.from_records(payload)
    if suffix == ".parquet":
        return pd.read_parquet(path)
    raise ValueError(f"Unsupported detection file type: {path.suffix}")


def load_detections(path: Path, config: AppConfig) -> pd.DataFrame:
    """Load detections from CSV, JSON or parquet and return a canonical snapshot."""
    raw = _read_raw(path, config.columns.id)
    if raw.empty and len(raw.columns) == 0:
        return detections_frame([], config.time.timezone)
    normalized = normalize_columns(df=raw, columns=config.columns)
    return detections_frame(normalized, config.time.timezone)
