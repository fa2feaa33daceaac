from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_PALETTE = [
    "#0072B2",
    "#009E73",
    "#E69F00",
    "#CC79A7",
    "#56B4E9",
    "#D55E00",
]


class ColumnsConfig(BaseModel):
    id: str = "id"
    sound_type: str = "soundType"
    confidence: str = "confidence"
    duration: str = "duration"
    timestamp: str = "timestamp"


class TimeConfig(BaseModel):
    timezone: str = "UTC"


class WindowsConfig(BaseModel):
    rate_window_minutes: int = Field(default=30, ge=1)
    rate_bucket_count: int = Field(default=30, ge=1)
    entropy_window_minutes: float = Field(default=30.0, gt=0.0)
    surge_recent_buckets: int = Field(default=5, ge=1)
    dashboard_rate_minutes: int = Field(default=5, ge=1)
    sparkline_buckets: int = Field(default=12, ge=1)
    weekly_days: int = Field(default=7, ge=1)
    confidence_trend_records: int = Field(default=10, ge=1)


class ThresholdsConfig(BaseModel):
    rarity_threshold: int = Field(default=2, ge=0)
    confidence_bucket_count: int = Field(default=5, ge=1)
    confidence_sample_limit: int = Field(default=200, ge=1)
    surge_alert_percent: int = Field(default=50, ge=0)
    high_confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    medium_confidence: float = Field(default=0.6, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_confidence_levels(self) -> "ThresholdsConfig":
        if self.high_confidence < self.medium_confidence:
            raise ValueError("high_confidence must be >= medium_confidence")
        return self


class ChartsConfig(BaseModel):
    palette: list[str] = Field(default_factory=lambda: list(DEFAULT_PALETTE), min_length=1)
    timeline_width: float = Field(default=600.0, gt=0.0)
    timeline_height: float = Field(default=80.0, gt=0.0)
    timeline_bins: int = Field(default=24, ge=1, le=24)
    donut_size: float = Field(default=120.0, gt=12.0)
    donut_legend_limit: int = Field(default=5, ge=0)
    bar_width: float = Field(default=700.0, gt=0.0)
    bar_height: float = Field(default=120.0, gt=20.0)
    bar_top_categories: int = Field(default=4, ge=0)
    bar_palette_size: int = Field(default=5, ge=1)


class ExportConfig(BaseModel):
    app_name: str = "SoundAware"
    tagline: str = "AI-Powered Sound Detection App"
    date_format: str = "%Y-%m-%d"
    time_format: str = "%H:%M:%S"
    timestamp_format: str = "%Y-%m-%d %H:%M:%S"
    summary_recent_limit: int = Field(default=5, ge=0)


class OutputsConfig(BaseModel):
    figures_format: Literal["png", "svg", "pdf"] = "png"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    time: TimeConfig = Field(default_factory=TimeConfig)
    windows: WindowsConfig = Field(default_factory=WindowsConfig)
    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
    charts: ChartsConfig = Field(default_factory=ChartsConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


def load_config(path: Path | None) -> AppConfig:
    if path is None:
        config = AppConfig()
    else:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        config = AppConfig.model_validate(data)

    config.time.timezone = os.getenv("SOUNDAWARE_STATS_TIMEZONE") or config.time.timezone
    return config
