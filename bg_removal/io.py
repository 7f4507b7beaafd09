from __future__ import annotations

from pathlib import Path
from typing import Iterator

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import InvalidInput

IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".gif", ".tif", ".tiff"}


def ensure_rgba(raster: np.ndarray) -> np.ndarray:
    """
    Validate a raster and return it as (H, W, 4) uint8.

    RGB input is promoted to fully opaque RGBA. The input array is never
    modified.
    """
    if not isinstance(raster, np.ndarray):
        raise InvalidInput(f"Expected numpy array, got {type(raster).__name__}")
    if raster.ndim != 3 or raster.shape[2] not in (3, 4):
        raise InvalidInput(f"Expected RGB(A) image (H,W,3|4), got shape={raster.shape}")
    h, w = raster.shape[:2]
    if h <= 0 or w <= 0:
        raise InvalidInput(f"Invalid image size: {(h, w)}")
    if raster.dtype != np.uint8:
        raise InvalidInput(f"Expected uint8 channels, got dtype={raster.dtype}")

    if raster.shape[2] == 3:
        alpha = np.full((h, w, 1), 255, dtype=np.uint8)
        return np.concatenate([raster, alpha], axis=2)
    return raster


def image_to_raster(img: Image.Image) -> np.ndarray:
    """Convert a Pillow image of any mode to an RGBA raster."""
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return ensure_rgba(np.array(img, dtype=np.uint8))


def load_image(path: str) -> np.ndarray:
    """
    Load an image file as RGBA uint8 ndarray of shape (H, W, 4).
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Could not read image: {path}")
    try:
        with Image.open(p) as img:
            img.load()
            return image_to_raster(img)
    except UnidentifiedImageError as e:
        raise InvalidInput(f"Unsupported image file: {path}") from e
    except OSError as e:
        # truncated/corrupt data only surfaces in load()
        raise InvalidInput(f"Could not decode image: {path} ({e})") from e


def iter_images(input_dir: Path) -> Iterator[Path]:
    for p in sorted(input_dir.rglob("*")):
        if p.is_file() and p.suffix.lower() in IMAGE_EXTS:
            yield p
