from __future__ import annotations


class BackgroundRemovalError(Exception):
    """Base class for errors raised by the background removal core."""


class InvalidInput(BackgroundRemovalError, ValueError):
    """Raster with zero dimensions, wrong layout, or a mask/raster size mismatch."""
