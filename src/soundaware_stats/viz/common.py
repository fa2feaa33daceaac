from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

# Virtual chart units per inch when rasterizing geometry.
UNITS_PER_INCH = 60.0


def figure_size(width: float, height: float, min_height: float = 1.5) -> tuple[float, float]:
    return (width / UNITS_PER_INCH, max(min_height, height / UNITS_PER_INCH))


def figure_path(figures_dir: Path, name: str, fmt: str = "png") -> Path:
    suffix = str(fmt or "").strip().lstrip(".") or "png"
    return figures_dir / f"{name}.{suffix}"


def save_figure(fig: Figure, path: Path, dpi: int = 150) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi)
    plt.close(fig)
    return path
