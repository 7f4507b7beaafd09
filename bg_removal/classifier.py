from __future__ import annotations

import logging
import math

import numpy as np

from .color import color_distance_map, luminance
from .config import EDGE_ALPHA_FRACTION, SMOOTHING_ALPHA_STEP, SOFT_THRESHOLD_FACTOR
from .contracts import Palette

logger = logging.getLogger(__name__)

EDGE_ALPHA = int(math.floor(255 * EDGE_ALPHA_FRACTION))


def min_palette_distance(raster: np.ndarray, palette: Palette) -> np.ndarray:
    h, w = raster.shape[:2]
    best = np.full((h, w), np.inf, dtype=np.float64)
    for color in palette:
        np.minimum(best, color_distance_map(raster, color), out=best)
    return best


def classify_alpha(
    raster: np.ndarray,
    edges: np.ndarray,
    palette: Palette,
    color_tolerance: float,
) -> np.ndarray:
    """
    Raw alpha mask (H, W) uint8 from palette distance and the edge map.

      - background-coloured, not an edge -> 0
      - background-coloured, on an edge  -> EDGE_ALPHA (76)
      - anything else                     -> 255
    """
    h, w = raster.shape[:2]
    if edges.shape != (h, w):
        raise ValueError(f"Edge mask shape {edges.shape} does not match image {(h, w)}")

    alpha = np.full((h, w), 255, dtype=np.uint8)
    if not palette:
        return alpha

    background = min_palette_distance(raster, palette) < float(color_tolerance)
    alpha[background & ~edges] = 0
    alpha[background & edges] = EDGE_ALPHA
    logger.debug(
        "classify: %d transparent, %d edge-protected",
        int((alpha == 0).sum()),
        int((alpha == EDGE_ALPHA).sum()),
    )
    return alpha


def classify_luminance(raster: np.ndarray, brightness_threshold: float, smoothing: int) -> np.ndarray:
    """
    Simple mode: threshold on luminance instead of palette distance.

    Starts from the raster's own alpha. Only pixels with flat index p outside
    (W, N - W) may become fully transparent: the first row, the first pixel of
    the second row, and the last row. Everything else bright enough loses
    smoothing * 20 alpha.
    """
    h, w = raster.shape[:2]
    n = h * w
    alpha = raster[..., 3].copy()

    brightness = luminance(raster[..., :3])
    idx = np.arange(n).reshape(h, w)
    protected = (idx > w) & (idx < n - w)

    cut = (brightness > float(brightness_threshold)) & ~protected
    soft = ~cut & (brightness > float(brightness_threshold) * SOFT_THRESHOLD_FACTOR)

    alpha[cut] = 0
    reduced = alpha.astype(np.int32) - int(smoothing) * SMOOTHING_ALPHA_STEP
    alpha[soft] = np.maximum(reduced[soft], 0).astype(np.uint8)
    return alpha
