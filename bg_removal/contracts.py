from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Sequence, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, field_validator

from .config import (
    BRIGHTNESS_THRESHOLD,
    COLOR_TOLERANCE,
    DEFAULT_EDGE_CHANNEL,
    DEFAULT_MODE,
    EDGE_CHANNELS,
    EDGE_SENSITIVITY,
    ENV_PREFIX,
    FEATHER_RADIUS,
    MODES,
    SMOOTHING,
)

RGB = Tuple[int, int, int]
Palette = Tuple[RGB, ...]


def _clamp(value, bounds: Tuple[int, int, int]) -> int:
    lo, hi, _default = bounds
    try:
        v = float(value)
    except TypeError as e:
        raise ValueError(f"Expected a number, got {type(value).__name__}") from e
    return int(min(max(v, lo), hi))


class ProcessingSettings(BaseModel):
    """
    User-tunable parameters for one run.

    Numeric fields are clamped into their documented range rather than
    rejected, matching range-limited slider input.
    """

    model_config = ConfigDict(frozen=True)

    mode: Literal["smart", "simple"] = DEFAULT_MODE
    color_tolerance: int = COLOR_TOLERANCE[2]
    edge_sensitivity: int = EDGE_SENSITIVITY[2]
    feather_radius: int = FEATHER_RADIUS[2]
    edge_channel: Literal["red", "luminance"] = DEFAULT_EDGE_CHANNEL

    # simple mode only
    brightness_threshold: int = BRIGHTNESS_THRESHOLD[2]
    smoothing: int = SMOOTHING[2]

    @field_validator("color_tolerance", mode="before")
    @classmethod
    def _clamp_tolerance(cls, v):
        return _clamp(v, COLOR_TOLERANCE)

    @field_validator("edge_sensitivity", mode="before")
    @classmethod
    def _clamp_sensitivity(cls, v):
        return _clamp(v, EDGE_SENSITIVITY)

    @field_validator("feather_radius", mode="before")
    @classmethod
    def _clamp_feather(cls, v):
        return _clamp(v, FEATHER_RADIUS)

    @field_validator("brightness_threshold", mode="before")
    @classmethod
    def _clamp_brightness(cls, v):
        return _clamp(v, BRIGHTNESS_THRESHOLD)

    @field_validator("smoothing", mode="before")
    @classmethod
    def _clamp_smoothing(cls, v):
        return _clamp(v, SMOOTHING)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(float(raw))
    except (ValueError, OverflowError):
        return default


def _env_choice(name: str, choices: Sequence[str], default: str) -> str:
    raw = (os.getenv(ENV_PREFIX + name) or "").strip().lower()
    return raw if raw in choices else default


def settings_from_env() -> ProcessingSettings:
    """
    Build ProcessingSettings from BG_REMOVAL_* environment variables.

    Unparsable numbers and unknown mode/channel names fall back to the
    defaults; out-of-range numbers are clamped by the model itself.
    """
    return ProcessingSettings(
        mode=_env_choice("MODE", MODES, DEFAULT_MODE),
        color_tolerance=_env_int("TOLERANCE", COLOR_TOLERANCE[2]),
        edge_sensitivity=_env_int("EDGE_SENSITIVITY", EDGE_SENSITIVITY[2]),
        feather_radius=_env_int("FEATHER", FEATHER_RADIUS[2]),
        edge_channel=_env_choice("EDGE_CHANNEL", EDGE_CHANNELS, DEFAULT_EDGE_CHANNEL),
        brightness_threshold=_env_int("BRIGHTNESS_THRESHOLD", BRIGHTNESS_THRESHOLD[2]),
        smoothing=_env_int("SMOOTHING", SMOOTHING[2]),
    )


@dataclass
class ColorSample:
    color: RGB
    count: int = 1


@dataclass(frozen=True)
class StageTimings:
    sample_s: float
    edges_s: float
    classify_s: float
    feather_s: float
    composite_s: float
    total_s: float


@dataclass(frozen=True)
class PipelineResult:
    """Output raster plus every intermediate of one run (for debugging/tests)."""

    rgba: np.ndarray
    palette: Palette
    edges: np.ndarray
    raw_alpha: np.ndarray
    alpha: np.ndarray
    timings: StageTimings
