"""Colour-statistics background removal: border palette, Sobel edges, alpha feathering."""

from .contracts import ProcessingSettings
from .errors import BackgroundRemovalError, InvalidInput
from .pipeline import process_image, remove_background, run_pipeline

__all__ = [
    "BackgroundRemovalError",
    "InvalidInput",
    "ProcessingSettings",
    "process_image",
    "remove_background",
    "run_pipeline",
]
