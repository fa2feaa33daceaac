from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import numpy as np

from soundaware_stats.records import MODEL_CLASSES


@dataclass(frozen=True)
class SimulatedDetection:
    """Placeholder shown on the home screen when no real detections exist.

    Deliberately not a ``DetectionRecord``: statistics, charts and exports reject it.
    """

    is_simulated: ClassVar[bool] = True

    sound_type: str
    confidence: float


class SimulatedDetectionSource:
    def __init__(self, seed: int = 42, classes: tuple[str, ...] = MODEL_CLASSES) -> None:
        if not classes:
            raise ValueError("classes must be non-empty")
        self.classes = classes
        self._rng = np.random.default_rng(seed)
        self._index = 0

    def next(self) -> SimulatedDetection:
        sound_type = self.classes[self._index % len(self.classes)]
        self._index += 1
        confidence = round(0.45 + float(self._rng.random()) * 0.5, 2)
        return SimulatedDetection(sound_type=sound_type, confidence=confidence)
