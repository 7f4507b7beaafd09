from __future__ import annotations

import argparse
import logging
import time
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv
from tqdm import tqdm

from .contracts import ProcessingSettings, settings_from_env
from .io import iter_images
from .pipeline import process_image


def _output_paths(images: List[Path], input_dir: Path, output_dir: Path) -> Dict[Path, Path]:
    """
    Map each input to <output_dir>/<relpath>.png. Inputs that would land on the
    same PNG (a.jpg + a.png) keep their extension in the name instead: a_jpg.png.
    """
    targets = {p: (output_dir / p.relative_to(input_dir)).with_suffix(".png") for p in images}
    seen = Counter(targets.values())
    for p, out in targets.items():
        if seen[out] > 1:
            targets[p] = out.with_name(f"{p.stem}_{p.suffix.lstrip('.').lower()}.png")
    return targets


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Colour-statistics background removal (no model, CPU).")
    parser.add_argument("--input", required=True, type=str, help="Input image or directory containing images.")
    parser.add_argument(
        "--output",
        required=True,
        type=str,
        help="Output directory for RGBA PNGs (name clashes keep the source extension, e.g. a_jpg.png).",
    )
    parser.add_argument("--mode", choices=("smart", "simple"), default=None, help="Pipeline variant.")
    parser.add_argument("--tolerance", type=int, default=None, help="Colour tolerance (10-100).")
    parser.add_argument("--edge-sensitivity", type=int, default=None, help="Edge sensitivity (1-10).")
    parser.add_argument("--feather", type=int, default=None, help="Feathering radius in pixels (0-5).")
    parser.add_argument("--edge-channel", choices=("red", "luminance"), default=None, help="Sobel input channel.")
    parser.add_argument("--brightness-threshold", type=int, default=None, help="Simple mode threshold (50-200).")
    parser.add_argument("--smoothing", type=int, default=None, help="Simple mode smoothing (0-5).")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    overrides = {
        "mode": args.mode,
        "color_tolerance": args.tolerance,
        "edge_sensitivity": args.edge_sensitivity,
        "feather_radius": args.feather,
        "edge_channel": args.edge_channel,
        "brightness_threshold": args.brightness_threshold,
        "smoothing": args.smoothing,
    }
    # CLI flags win over BG_REMOVAL_* env defaults
    fields = settings_from_env().model_dump()
    fields.update({k: v for k, v in overrides.items() if v is not None})
    settings = ProcessingSettings.model_validate(fields)

    input_path = Path(args.input)
    output_dir = Path(args.output)
    if not input_path.exists():
        raise FileNotFoundError(f"Input not found: {input_path}")

    if input_path.is_file():
        input_dir = input_path.parent
        images = [input_path]
    else:
        input_dir = input_path
        images = list(iter_images(input_dir))
    if not images:
        print(f"No images found under {input_dir}")
        return 0

    out_paths = _output_paths(images, input_dir, output_dir)
    total0 = time.perf_counter()
    for img_path in tqdm(images, desc="Removing background", unit="img"):
        timings = process_image(str(img_path), str(out_paths[img_path]), settings)

        print(
            f"{img_path.name}: total={timings.total_s:.3f}s "
            f"(sample={timings.sample_s:.3f}s edges={timings.edges_s:.3f}s "
            f"classify={timings.classify_s:.3f}s feather={timings.feather_s:.3f}s "
            f"comp={timings.composite_s:.3f}s)"
        )

    total1 = time.perf_counter()
    print(f"Done. {len(images)} images in {total1-total0:.2f}s ({settings.mode} mode)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
