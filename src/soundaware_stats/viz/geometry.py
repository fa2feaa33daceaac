from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float


@dataclass(frozen=True)
class Point:
    x: float
    y: float


def fmt(value: float) -> str:
    """Compact coordinate text for path data: two decimals, no trailing zeros."""
    text = f"{float(value):.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def polar(cx: float, cy: float, radius: float, angle_deg: float) -> Point:
    """Point on a circle; angles grow clockwise in screen space, -90 is 12 o'clock."""
    radians = math.radians(angle_deg)
    return Point(cx + radius * math.cos(radians), cy + radius * math.sin(radians))


def polyline_path(points: list[Point] | tuple[Point, ...]) -> str:
    return " ".join(
        f"{'M' if index == 0 else 'L'} {fmt(point.x)},{fmt(point.y)}"
        for index, point in enumerate(points)
    )
