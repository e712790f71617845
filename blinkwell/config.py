from __future__ import annotations
from pathlib import Path
from typing import Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

# blink rate is always reported per minute, whatever the retention window
RATE_WINDOW_MS = 60_000


class Thresholds(BaseModel):
    """Read-only tuning for one tracking session."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    eye_closure_threshold: float = Field(0.4, ge=0.0, le=1.0)
    closed_ratio: float = 0.3
    open_ratio: float = 0.5
    epsilon: float = Field(0.1, gt=0.0)
    window_ms: float = Field(60_000.0, gt=0.0)
    average_blink_duration_ms: float = Field(150.0, ge=0.0)
    default_probability: float = Field(0.9, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_band(self) -> "Thresholds":
        if self.open_ratio <= self.closed_ratio:
            raise ValueError("open_ratio must be greater than closed_ratio")
        return self

    @property
    def open_probability_band(self) -> Tuple[float, float]:
        return self.closed_ratio, self.open_ratio


def load_thresholds(path: str | Path | None) -> Thresholds:
    if path is None:
        return Thresholds()
    with open(path, "r") as f:
        cfg = yaml.safe_load(f) or {}
    return Thresholds(**cfg)
