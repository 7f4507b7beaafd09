from __future__ import annotations

import logging
from typing import Iterator, List, Tuple

import numpy as np

from .color import color_distance
from .config import CLUSTER_DISTANCE, MAX_PALETTE_SIZE, SAMPLE_STRIDE
from .contracts import RGB, ColorSample, Palette

logger = logging.getLogger(__name__)


def _border_coords(w: int, h: int, stride: int = SAMPLE_STRIDE) -> Iterator[Tuple[int, int]]:
    """
    (x, y) positions sampled along the image borders.

    Top/bottom rows interleaved per column first, then left/right columns
    interleaved per row. Tiny images revisit the same pixels.
    """
    for x in range(0, w, stride):
        yield x, 0
        yield x, h - 1
    for y in range(0, h, stride):
        yield 0, y
        yield w - 1, y


def collect_samples(raster: np.ndarray) -> List[ColorSample]:
    """
    Cluster border pixels greedily: each pixel joins the first existing sample
    within CLUSTER_DISTANCE, otherwise it starts a new one. Sample colours are
    never updated after creation.
    """
    h, w = raster.shape[:2]
    samples: List[ColorSample] = []
    for x, y in _border_coords(w, h):
        px = raster[y, x]
        color: RGB = (int(px[0]), int(px[1]), int(px[2]))
        for s in samples:
            if color_distance(s.color, color) < CLUSTER_DISTANCE:
                s.count += 1
                break
        else:
            samples.append(ColorSample(color=color))
    return samples


def sample_background(raster: np.ndarray) -> Palette:
    """
    Estimate up to MAX_PALETTE_SIZE dominant border colours, most frequent
    first. Ties keep sampling order (sorted() is stable).
    """
    samples = collect_samples(raster)
    ranked = sorted(samples, key=lambda s: s.count, reverse=True)
    palette = tuple(s.color for s in ranked[:MAX_PALETTE_SIZE])
    logger.debug("palette: %s from %d clusters", palette, len(samples))
    return palette
