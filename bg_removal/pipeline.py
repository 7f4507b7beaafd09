from __future__ import annotations

import logging
import time
from typing import Optional

import numpy as np

from .classifier import classify_alpha, classify_luminance
from .composite import inject_alpha, save_rgba_png, to_pil
from .contracts import PipelineResult, ProcessingSettings, StageTimings
from .edges import detect_edges, edge_threshold
from .feather import feather_alpha
from .io import ensure_rgba, load_image
from .sampler import sample_background

logger = logging.getLogger(__name__)


def run_pipeline(raster: np.ndarray, settings: Optional[ProcessingSettings] = None) -> PipelineResult:
    """
    Deterministic, linear pipeline:
      1) Sample background palette from the borders
      2) Sobel edge map
      3) Classify raw alpha
      4) Feather
      5) Composite

    In simple mode steps 1, 2 and 4 are skipped and step 3 thresholds on
    luminance instead.
    """
    settings = settings or ProcessingSettings()
    rgba = ensure_rgba(raster)
    h, w = rgba.shape[:2]
    t0 = time.perf_counter()

    if settings.mode == "simple":
        t_cls0 = time.perf_counter()
        raw = classify_luminance(rgba, settings.brightness_threshold, settings.smoothing)
        t_cls1 = time.perf_counter()
        palette = ()
        edges = np.zeros((h, w), dtype=bool)
        alpha = raw
        t_pal = t_edge = t_feather = 0.0
    else:
        t_pal0 = time.perf_counter()
        palette = sample_background(rgba)
        t_pal = time.perf_counter() - t_pal0

        t_edge0 = time.perf_counter()
        edges = detect_edges(rgba, edge_threshold(settings.edge_sensitivity), channel=settings.edge_channel)
        t_edge = time.perf_counter() - t_edge0

        t_cls0 = time.perf_counter()
        raw = classify_alpha(rgba, edges, palette, settings.color_tolerance)
        t_cls1 = time.perf_counter()

        t_f0 = time.perf_counter()
        alpha = feather_alpha(raw, settings.feather_radius)
        t_feather = time.perf_counter() - t_f0

    t_comp0 = time.perf_counter()
    out = inject_alpha(rgba, alpha)
    t_comp1 = time.perf_counter()

    timings = StageTimings(
        sample_s=t_pal,
        edges_s=t_edge,
        classify_s=t_cls1 - t_cls0,
        feather_s=t_feather,
        composite_s=t_comp1 - t_comp0,
        total_s=t_comp1 - t0,
    )
    logger.debug("%dx%d %s mode done in %.3fs", w, h, settings.mode, timings.total_s)
    return PipelineResult(rgba=out, palette=palette, edges=edges, raw_alpha=raw, alpha=alpha, timings=timings)


def remove_background(raster: np.ndarray, settings: Optional[ProcessingSettings] = None) -> np.ndarray:
    """
    Core entry point: RGBA raster in, new RGBA raster out (RGB unchanged).
    """
    return run_pipeline(raster, settings).rgba


def process_image(image_path: str, out_path: str, settings: Optional[ProcessingSettings] = None) -> StageTimings:
    """
    Load an image file, remove its background and save a lossless RGBA PNG.
    """
    raster = load_image(image_path)
    result = run_pipeline(raster, settings)
    save_rgba_png(to_pil(result.rgba), out_path)
    return result.timings
