from __future__ import annotations

import pytest

from soundaware_stats.config import DEFAULT_PALETTE
from soundaware_stats.records import DetectionRecord
from soundaware_stats.viz.donut import NO_DATA_LABEL, START_ANGLE, build_donut_chart


def _records(sound_types: list[str]) -> list[DetectionRecord]:
    return [
        DetectionRecord(str(index), sound_type, 0.8, 1.0, "2026-02-03T10:00:00Z")
        for index, sound_type in enumerate(sound_types)
    ]


def test_donut_empty_history_shows_placeholder() -> None:
    chart = build_donut_chart([])

    assert chart.is_empty
    assert chart.placeholder == NO_DATA_LABEL
    assert chart.total == 0
    assert chart.legend == ()


def test_donut_single_category_is_full_ring() -> None:
    chart = build_donut_chart(_records(["dog_barking_speech"] * 4))

    assert len(chart.slices) == 1
    only = chart.slices[0]
    assert only.sweep == pytest.approx(360.0)
    assert only.fill_rule == "evenodd"
    assert only.path.count(" A ") == 4
    assert chart.legend[0].label == "dog barking speech (100%)"
    assert chart.legend[0].percent == 100


def test_donut_slices_largest_first_from_twelve_oclock() -> None:
    chart = build_donut_chart(_records(["cat_meowing_no_speech"] + ["dog_barking_speech"] * 3))

    dog, cat = chart.slices
    assert dog.category == "dog_barking_speech"
    assert dog.start_angle == START_ANGLE
    assert dog.end_angle == pytest.approx(180.0)
    assert cat.start_angle == pytest.approx(180.0)
    assert cat.end_angle == pytest.approx(270.0)
    assert dog.color == DEFAULT_PALETTE[0]
    assert cat.color == DEFAULT_PALETTE[1]
    # 270 degree sweep needs the large-arc flag
    assert dog.path.startswith("M 60,6 A 54 54 0 1 1")
    assert chart.radius == pytest.approx(54.0)
    assert chart.inner_radius == pytest.approx(32.4)
    assert [entry.label for entry in chart.legend] == [
        "dog barking speech (75%)",
        "cat meowing no speech (25%)",
    ]


def test_donut_palette_cycles_and_legend_is_limited() -> None:
    kinds = [
        "applause_speech",
        "cough_speech",
        "crying_speech",
        "drill_speech",
        "slam_speech",
        "gun_shot_speech",
        "doorbell_speech",
    ]
    chart = build_donut_chart(_records(kinds), palette_size=6)

    assert len(chart.slices) == 7
    assert chart.slices[6].color == DEFAULT_PALETTE[0]
    assert sum(item.sweep for item in chart.slices) == pytest.approx(360.0)
    assert len(chart.legend) == 5
    assert chart.legend[0].label == "applause speech (14%)"
