from __future__ import annotations

import json

import numpy as np
import pandas as pd
import pytest

from soundaware_stats.config import AppConfig
from soundaware_stats.records import DetectionRecord
from soundaware_stats.stats.engine import compute_aggregates

NOW = pd.Timestamp("2026-02-03T12:00:00Z")


def _record(index: int, sound_type: str, minutes_ago: float, confidence: float = 0.9):
    return DetectionRecord(
        id=str(index),
        sound_type=sound_type,
        confidence=confidence,
        duration=1.0,
        timestamp=NOW - pd.Timedelta(minutes=minutes_ago),
    )


def test_compute_aggregates_scenario() -> None:
    records = [
        _record(1, "dog_barking_speech", 1.5),
        _record(2, "dog_barking_speech", 2.5),
        _record(3, "doorbell_speech", 3.5, confidence=0.45),
    ]

    result = compute_aggregates(records, now=NOW)

    assert result.computed_at == NOW
    assert result.rate_series.shape == (30,)
    assert result.window_count == 3
    assert result.total_count == 3
    assert result.entropy == pytest.approx(0.918, abs=1e-3)
    assert result.rare_count == 2
    np.testing.assert_array_equal(result.confidence_buckets, np.array([0, 0, 1, 0, 2]))
    assert result.surge_percent == float("inf")
    assert result.estimated_hourly_rate == 6
    assert result.surge_alert


def test_compute_aggregates_empty_history() -> None:
    result = compute_aggregates([], now=NOW)

    assert result.rate_series.tolist() == [0] * 30
    assert result.entropy == 0.0
    assert result.rare_count == 0
    assert result.confidence_buckets.tolist() == [0, 0, 0, 0, 0]
    assert result.surge_percent == 0
    assert not result.surge_alert
    assert result.to_dict()["surge_label"] == "0%"


def test_compute_aggregates_honours_config_windows() -> None:
    config = AppConfig.model_validate(
        {
            "windows": {"rate_window_minutes": 10, "rate_bucket_count": 5},
            "thresholds": {"confidence_bucket_count": 2, "rarity_threshold": 0},
        }
    )
    records = [_record(1, "slam_speech", 1), _record(2, "slam_speech", 20)]

    result = compute_aggregates(records, config=config, now=NOW)

    assert result.rate_series.tolist() == [0, 0, 0, 0, 1]
    assert result.confidence_buckets.tolist() == [0, 2]
    assert result.rare_count == 0


def test_aggregate_dict_is_json_serializable() -> None:
    records = [_record(1, "crying_speech", 1)]
    payload = compute_aggregates(records, now=NOW).to_dict()

    encoded = json.loads(json.dumps(payload))
    assert encoded["surge_percent"] == "unbounded"
    assert encoded["surge_label"] == "New"
    assert encoded["surge_alert"] is True
    assert encoded["computed_at"] == "2026-02-03T12:00:00+00:00"
    assert len(encoded["rate_series"]) == 30
