from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from soundaware_stats.records import DetectionRecord
from soundaware_stats.simulation import SimulatedDetection, SimulatedDetectionSource
from soundaware_stats.stats.dashboard import (
    NO_CATEGORY,
    HistoryStats,
    compute_dashboard_stats,
    compute_history_stats,
    confidence_level,
    filter_by_sound_type,
    format_time_ago,
    group_by_date,
    live_preview,
    most_common_category,
)

NOW = pd.Timestamp("2026-02-03T12:00:00Z")


def _record(index: int, sound_type: str, ago: pd.Timedelta, confidence: float) -> DetectionRecord:
    return DetectionRecord(
        id=str(index),
        sound_type=sound_type,
        confidence=confidence,
        duration=1.0,
        timestamp=NOW - ago,
    )


@pytest.fixture
def history() -> list[DetectionRecord]:
    # newest first, as the history screen stores them
    return [
        _record(1, "dog_barking_speech", pd.Timedelta(minutes=1), 0.75),
        _record(2, "dog_barking_speech", pd.Timedelta(minutes=3), 0.5),
        _record(3, "doorbell_speech", pd.Timedelta(days=1), 0.25),
        _record(4, "cat_meowing_no_speech", pd.Timedelta(days=10), 1.0),
    ]


def test_dashboard_stats(history: list[DetectionRecord]) -> None:
    result = compute_dashboard_stats(history, now=NOW)

    assert result.today == 2
    assert result.weekly == 3
    assert result.most_common == "dog_barking_speech"
    assert result.accuracy_percent == 63
    assert result.confidence_trend_percent == 63
    assert result.confidence_trend_level == "medium"
    assert result.rate_per_minute == pytest.approx(0.4)
    assert len(result.sparkline) == 12
    assert result.sparkline[4] == 1
    assert result.sparkline[9] == 1
    assert sum(result.sparkline) == 2
    assert result.top_sounds == [
        ("dog_barking_speech", 2),
        ("doorbell_speech", 1),
        ("cat_meowing_no_speech", 1),
    ]
    assert result.to_dict()["top_sounds"][0] == ["dog_barking_speech", 2]


def test_dashboard_stats_empty() -> None:
    result = compute_dashboard_stats([], now=NOW)

    assert result.today == 0
    assert result.weekly == 0
    assert result.most_common == NO_CATEGORY
    assert result.accuracy_percent == 0
    assert result.confidence_trend_level == "low"
    assert result.rate_per_minute == 0.0
    assert result.sparkline == [0] * 12
    assert result.top_sounds == []


def test_history_stats(history: list[DetectionRecord]) -> None:
    stats = compute_history_stats(history)

    assert stats.total == 4
    assert stats.avg_confidence == pytest.approx(0.625)
    assert stats.most_common == "dog_barking_speech"
    assert compute_history_stats([]) == HistoryStats(
        total=0, avg_confidence=0.0, most_common="None"
    )


def test_most_common_ties_go_to_first_seen() -> None:
    ago = pd.Timedelta(minutes=1)
    records = [
        _record(1, "slam_speech", ago, 0.5),
        _record(2, "drill_speech", ago, 0.5),
        _record(3, "drill_speech", ago, 0.5),
        _record(4, "slam_speech", ago, 0.5),
    ]
    assert most_common_category(records) == "slam_speech"
    assert most_common_category([]) == "None"


def test_filter_by_sound_type(history: list[DetectionRecord]) -> None:
    assert len(filter_by_sound_type(history, "all")) == 4
    assert len(filter_by_sound_type(history, "")) == 4
    dogs = filter_by_sound_type(history, "DOG")
    assert dogs["id"].tolist() == ["1", "2"]
    assert filter_by_sound_type(history, "gun").empty


def test_group_by_date(history: list[DetectionRecord]) -> None:
    groups = group_by_date(history)

    assert [day for day, _ in groups] == [date(2026, 2, 3), date(2026, 2, 2), date(2026, 1, 24)]
    assert groups[0][1]["id"].tolist() == ["1", "2"]
    assert group_by_date([]) == []


def test_confidence_level() -> None:
    assert confidence_level(0.85) == "high"
    assert confidence_level(0.8) == "high"
    assert confidence_level(0.6) == "medium"
    assert confidence_level(0.59) == "low"


def test_format_time_ago() -> None:
    assert format_time_ago(NOW - pd.Timedelta(seconds=30), now=NOW) == "Just now"
    assert format_time_ago(NOW - pd.Timedelta(minutes=5), now=NOW) == "5m ago"
    assert format_time_ago(NOW - pd.Timedelta(hours=3), now=NOW) == "3h ago"
    assert format_time_ago(NOW - pd.Timedelta(days=2, hours=1), now=NOW) == "2d ago"


def test_live_preview_prefers_real_detections(history: list[DetectionRecord]) -> None:
    source = SimulatedDetectionSource(seed=7)

    real = live_preview(history, source)
    assert isinstance(real, DetectionRecord)
    assert real.id == "1"

    simulated = live_preview([], source)
    assert isinstance(simulated, SimulatedDetection)
    assert simulated.is_simulated
