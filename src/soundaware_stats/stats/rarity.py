from __future__ import annotations

from soundaware_stats.records import DetectionInput, detections_frame
from soundaware_stats.stats.common import category_counts

DEFAULT_RARITY_THRESHOLD = 2


def rare_categories(
    records: DetectionInput,
    threshold: int = DEFAULT_RARITY_THRESHOLD,
) -> list[tuple[str, int]]:
    """Sound types seen at most ``threshold`` times over the whole history."""
    counts = category_counts(detections_frame(records))
    rare = counts[counts <= int(threshold)]
    return [(str(sound_type), int(count)) for sound_type, count in rare.items()]


def compute_rarity(records: DetectionInput, threshold: int = DEFAULT_RARITY_THRESHOLD) -> int:
    return len(rare_categories(records, threshold=threshold))
