from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from .errors import InvalidInput


def inject_alpha(rgba: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    """
    Return a new (H, W, 4) uint8 raster: R/G/B from the input, A from the mask.
    """
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        raise InvalidInput(f"Expected RGBA image (H,W,4), got {rgba.shape}")
    if alpha.ndim != 2 or alpha.shape[:2] != rgba.shape[:2]:
        raise InvalidInput(f"Alpha shape {alpha.shape} does not match image {rgba.shape[:2]}")

    out = rgba.copy()
    out[..., 3] = alpha.astype(np.uint8, copy=False)
    return out


def to_pil(rgba: np.ndarray) -> Image.Image:
    """
    Wrap an RGBA raster as a lossless PIL image.
    """
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        raise InvalidInput(f"Expected RGBA image (H,W,4), got {rgba.shape}")
    return Image.fromarray(np.ascontiguousarray(rgba, dtype=np.uint8))


def save_rgba_png(img: Image.Image, out_path: str) -> None:
    """
    Save as lossless RGBA PNG.
    """
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    img.save(out_path, format="PNG", optimize=False)
