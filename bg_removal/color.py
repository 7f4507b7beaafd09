from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .config import LUMINANCE_WEIGHTS


def color_distance(a: Sequence[int], b: Sequence[int]) -> float:
    """Euclidean distance between two RGB triples, in [0, sqrt(3) * 255]."""
    dr = int(a[0]) - int(b[0])
    dg = int(a[1]) - int(b[1])
    db = int(a[2]) - int(b[2])
    return math.sqrt(dr * dr + dg * dg + db * db)


def color_distance_map(rgb: np.ndarray, color: Sequence[int]) -> np.ndarray:
    """
    Per-pixel color_distance of an (H, W, 3) array against one colour.

    Returns float64 (H, W).
    """
    diff = rgb[..., :3].astype(np.float64) - np.asarray(color[:3], dtype=np.float64)
    return np.sqrt(np.sum(diff * diff, axis=-1))


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Rec. 601 luma of an (H, W, 3+) array as float64 (H, W)."""
    wr, wg, wb = LUMINANCE_WEIGHTS
    c = rgb.astype(np.float64)
    return c[..., 0] * wr + c[..., 1] * wg + c[..., 2] * wb
