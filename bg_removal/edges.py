from __future__ import annotations

import logging

import cv2
import numpy as np

from .color import luminance
from .config import EDGE_THRESHOLD_SCALE

logger = logging.getLogger(__name__)


def edge_threshold(sensitivity: int) -> float:
    return float(sensitivity * EDGE_THRESHOLD_SCALE)


def detect_edges(raster: np.ndarray, threshold: float, channel: str = "red") -> np.ndarray:
    """
    Binary Sobel edge map of shape (H, W).

    The gradient is taken on the red channel only (or on luminance when
    channel == "luminance"). A pixel is an edge when sqrt(Gx^2 + Gy^2) exceeds
    threshold. The outermost row/column on every side is never an edge.
    """
    h, w = raster.shape[:2]
    edges = np.zeros((h, w), dtype=bool)
    if h < 3 or w < 3:
        return edges

    if channel == "red":
        src = raster[..., 0].astype(np.float64)
    elif channel == "luminance":
        src = luminance(raster[..., :3])
    else:
        raise ValueError(f"Unknown edge channel: {channel!r}")

    gx = cv2.Sobel(src, cv2.CV_64F, 1, 0, ksize=3)
    gy = cv2.Sobel(src, cv2.CV_64F, 0, 1, ksize=3)
    magnitude = np.sqrt(gx * gx + gy * gy)

    # border responses depend on OpenCV's padding; only the interior counts
    edges[1:-1, 1:-1] = magnitude[1:-1, 1:-1] > float(threshold)
    logger.debug("edges: %d of %d pixels above %.1f", int(edges.sum()), h * w, threshold)
    return edges
