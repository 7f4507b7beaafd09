from __future__ import annotations

import logging
import math
from typing import List, Tuple

import numpy as np

logger = logging.getLogger(__name__)


def feather_offsets(radius: int) -> List[Tuple[int, int, int]]:
    """
    (dx, dy, candidate_alpha) for every offset within Euclidean distance radius.

    candidate_alpha = floor(255 * (1 - d / radius)).
    """
    out = []
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            d = math.sqrt(dx * dx + dy * dy)
            if d <= radius:
                out.append((dx, dy, int(math.floor(255 * (1 - d / radius)))))
    return out


def feather_alpha(raw: np.ndarray, radius: int) -> np.ndarray:
    """
    Soften hard cuts around fully transparent pixels.

    Every interior pixel (at least `radius` away from each border) with raw
    alpha 0 proposes a falloff value to its opaque-ish neighbours; each
    neighbour keeps the minimum of its raw value and all proposals. Reads only
    `raw`, writes a fresh array.
    """
    if raw.ndim != 2:
        raise ValueError(f"Expected 2D alpha mask, got shape={raw.shape}")
    out = raw.copy()
    r = int(radius)
    if r <= 0:
        return out

    h, w = raw.shape
    if h <= 2 * r or w <= 2 * r:
        return out

    sources = raw[r : h - r, r : w - r] == 0
    if not sources.any():
        return out
    receivers = raw > 0

    for dx, dy, candidate in feather_offsets(r):
        hit = np.zeros((h, w), dtype=bool)
        hit[r + dy : h - r + dy, r + dx : w - r + dx] = sources
        hit &= receivers
        if hit.any():
            out[hit] = np.minimum(out[hit], candidate)

    logger.debug("feather r=%d: %d pixels softened", r, int((out != raw).sum()))
    return out
