from __future__ import annotations

import pandas as pd
import pytest

from soundaware_stats.export.csv_export import to_csv
from soundaware_stats.preprocess.time import add_time_features, localize_timestamps, resolve_now
from soundaware_stats.records import DetectionRecord
from soundaware_stats.stats.diversity import compute_entropy
from soundaware_stats.stats.rates import compute_rate_series
from soundaware_stats.viz.timeline import hourly_bins


def test_resolve_now_localizes_explicit_values() -> None:
    now = resolve_now("2026-02-03T12:00:00Z", timezone="Asia/Kolkata")
    assert now == pd.Timestamp("2026-02-03T12:00:00Z")
    assert str(now.tz) == "Asia/Kolkata"

    naive = resolve_now("2026-02-03 12:00:00", timezone="UTC")
    assert naive == pd.Timestamp("2026-02-03T12:00:00Z")


def test_resolve_now_defaults_to_clock_and_rejects_garbage() -> None:
    assert resolve_now(None).tzinfo is not None
    with pytest.raises(ValueError, match="Invalid reference time"):
        resolve_now("yesterday-ish")


def test_localize_timestamps_handles_datetime_dtype() -> None:
    naive = pd.Series(pd.to_datetime(["2026-02-03 01:00:00", None]))
    localized = localize_timestamps(naive, "UTC")
    assert str(localized.dt.tz) == "UTC"
    assert pd.isna(localized.iloc[1])


def test_add_time_features_computes_age_hour_and_date() -> None:
    frame = pd.DataFrame(
        {
            "timestamp": localize_timestamps(
                pd.Series(["2026-02-03T11:58:00Z", "2026-02-03T12:01:00Z", None]),
                "UTC",
            )
        }
    )
    out = add_time_features(frame, pd.Timestamp("2026-02-03T12:00:00Z"))

    assert out.loc[0, "age_seconds"] == 120.0
    assert out.loc[1, "age_seconds"] == -60.0
    assert pd.isna(out.loc[2, "age_seconds"])
    assert out.loc[0, "hour"] == 11
    assert str(out.loc[0, "date"]) == "2026-02-03"
    assert "age_seconds" not in frame.columns


def test_fall_back_hour_resolves_to_daylight_offset() -> None:
    expected = pd.Timestamp("2026-11-01T01:30:00-04:00")

    assert resolve_now("2026-11-01T01:30:00", timezone="America/New_York") == expected

    elementwise = localize_timestamps(pd.Series(["2026-11-01T01:30:00"]), "America/New_York")
    vectorized = localize_timestamps(
        pd.Series(pd.to_datetime(["2026-11-01 01:30:00", "2026-11-01 03:00:00"])),
        "America/New_York",
    )
    assert elementwise.iloc[0] == expected
    assert vectorized.iloc[0] == expected
    assert vectorized.iloc[1] == pd.Timestamp("2026-11-01T03:00:00-05:00")


def test_fall_back_hour_detections_stay_in_exports_and_statistics() -> None:
    records = [DetectionRecord("1", "slam_speech", 0.5, 1, "2026-11-01T01:30:00")]

    text = to_csv(records, timezone="America/New_York")
    assert text.split("\n")[1] == '"2026-11-01","01:30:00","slam_speech",50,1'
    assert hourly_bins(records, timezone="America/New_York")[1] == 1
    assert (
        compute_entropy(records, now="2026-11-01T01:30:00", timezone="America/New_York") == 0.0
    )
    rates = compute_rate_series(
        records, window_minutes=30, now="2026-11-01T01:31:00", timezone="America/New_York"
    )
    assert rates.sum() == 1
