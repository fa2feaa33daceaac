from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from soundaware_stats.config import AppConfig
from soundaware_stats.io.read import load_detections
from soundaware_stats.io.write import write_summary, write_text


def test_load_detections_from_csv(tmp_path: Path) -> None:
    path = tmp_path / "detections.csv"
    path.write_text(
        "\ufeffid,soundType,confidence,duration,timestamp\n"
        "007,doorbell_speech,0.91,2,2026-02-03T10:00:00Z\n"
        "008,slam_no_speech,,1.5,2026-02-03T09:00:00Z\n",
        encoding="utf-8",
    )

    frame = load_detections(path, AppConfig())

    assert frame["id"].tolist() == ["007", "008"]
    assert frame["sound_type"].tolist() == ["doorbell_speech", "slam_no_speech"]
    assert pd.isna(frame.loc[1, "confidence"])
    assert frame.loc[0, "timestamp"] == pd.Timestamp("2026-02-03T10:00:00Z")


def test_load_detections_from_json_payloads(tmp_path: Path) -> None:
    rows = [
        {
            "id": "a",
            "soundType": "crying_speech",
            "confidence": 0.5,
            "duration": 1,
            "timestamp": 1_770_112_800_000,
        }
    ]
    list_path = tmp_path / "list.json"
    list_path.write_text(json.dumps(rows), encoding="utf-8")
    wrapped_path = tmp_path / "wrapped.json"
    wrapped_path.write_text(json.dumps({"detections": rows}), encoding="utf-8")

    from_list = load_detections(list_path, AppConfig())
    from_wrapped = load_detections(wrapped_path, AppConfig())

    assert from_list.loc[0, "timestamp"] == pd.Timestamp(1_770_112_800_000, unit="ms", tz="UTC")
    pd.testing.assert_frame_equal(from_list, from_wrapped)


def test_load_detections_empty_json(tmp_path: Path) -> None:
    path = tmp_path / "empty.json"
    path.write_text("[]", encoding="utf-8")

    frame = load_detections(path, AppConfig())

    assert frame.empty
    assert list(frame.columns) == ["id", "sound_type", "confidence", "duration", "timestamp"]


def test_load_detections_from_parquet_with_custom_columns(tmp_path: Path) -> None:
    path = tmp_path / "detections.parquet"
    pd.DataFrame(
        {
            "uid": ["x1"],
            "label": ["drill_speech"],
            "score": [0.7],
            "seconds": [3.0],
            "detected_at": pd.to_datetime(["2026-02-03 08:00:00"]),
        }
    ).to_parquet(path, index=False)
    config = AppConfig.model_validate(
        {
            "columns": {
                "id": "uid",
                "sound_type": "label",
                "confidence": "score",
                "duration": "seconds",
                "timestamp": "detected_at",
            },
            "time": {"timezone": "Europe/Berlin"},
        }
    )

    frame = load_detections(path, config)

    assert frame.loc[0, "sound_type"] == "drill_speech"
    assert frame.loc[0, "timestamp"] == pd.Timestamp("2026-02-03T08:00:00+01:00")


def test_load_detections_reports_missing_columns(tmp_path: Path) -> None:
    path = tmp_path / "detections.csv"
    path.write_text("id,soundType,confidence\n1,slam_speech,0.4\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Missing required detection columns: duration, timestamp"):
        load_detections(path, AppConfig())


def test_load_detections_rejects_unknown_file_types(tmp_path: Path) -> None:
    path = tmp_path / "detections.xlsx"
    path.write_text("", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported detection file type"):
        load_detections(path, AppConfig())

    bad_json = tmp_path / "bad.json"
    bad_json.write_text('{"detections": 3}', encoding="utf-8")
    with pytest.raises(ValueError, match="Expected a list of detections"):
        load_detections(bad_json, AppConfig())


def test_write_helpers_create_parents(tmp_path: Path) -> None:
    text_path = write_text("hello", tmp_path / "a" / "b.txt")
    json_path = write_summary({"b": 1, "a": 2}, tmp_path / "c" / "d.json")

    assert text_path.read_text(encoding="utf-8") == "hello"
    assert json.loads(json_path.read_text(encoding="utf-8")) == {"a": 2, "b": 1}
