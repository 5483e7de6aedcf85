"""
palette-swap
Recolour an image made of a few exact colours with a new, generated palette.

Usage:
  palette-swap INPUT [--out PATH | --outdir DIR]
               [--op generate|interpolate|sweep|random|invert|none]
               [--palette "[#RRGGBB,...]"] [--mode-quantity N] [--seed S] [--debug]

Operations:
  generate    : hue blocks with one shared chroma and a lightness ramp.
  interpolate : key hues blended in OKLab across the palette.
  sweep       : hues sweep around the colour wheel, lightness kept.
  random      : every channel of every colour drawn independently.
  invert      : hues rotated by 180 degrees.
  none        : keep the colours (useful with --palette).

Input:
  Any Pillow-readable image. Its distinct visible colours, darkest first, form the
  original palette. Fully transparent pixels are left untouched.

Output:
  PNG. If --out is omitted, writes <stem>_swapped.png next to INPUT (or in
  --outdir). A folder INPUT processes each image in it by name, skipping files
  that already end in _swapped. The new palette is printed as a
  '[#RRGGBB,...]' list.

Notes:
  --palette is applied before --op. generate/interpolate/sweep start again from
  the image colours, so pair --palette with invert or none.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from .constants import (
    DEFAULT_MODE_QUANTITY,
    DEFAULT_RANGES,
    IMAGE_EXTENSIONS,
    MANY_COLOURS_WARN,
    OUTPUT_SUFFIX,
)
from .core_types import ChannelRange
from .image_io import colours_to_lch, distinct_colours, load_image_rgba, save_image_rgba
from .palette import Palette
from .utils import (
    colour_usage_report,
    debug_log,
    error,
    format_seconds_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    warn,
)

OPERATIONS = ("generate", "interpolate", "sweep", "random", "invert", "none")


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: Path to the input image or folder
        out: optional output Path (single file only)
        outdir: optional output folder
        op: one of OPERATIONS
        palette: optional '[#RRGGBB,...]' list to import
        mode_quantity: max hue modes for generation
        seed: optional int seed for reproducible draws
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="palette-swap",
        description="Swap the exact colours of an image for a generated palette.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument("--out", type=Path, default=None, help="Output PNG path (single file)")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Folder for outputs (created if missing)"
    )
    parser.add_argument(
        "--op", choices=OPERATIONS, default="generate", help="Palette operation."
    )
    parser.add_argument(
        "--palette",
        default=None,
        help="Hex list '[#RRGGBB,...]' with one entry per image colour, darkest first.",
    )
    parser.add_argument(
        "--mode-quantity",
        type=int,
        default=DEFAULT_MODE_QUANTITY,
        help="Maximum number of hue modes for generate/interpolate/sweep.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser.parse_args(argv)


def default_ranges() -> List[ChannelRange]:
    """L, C, H channel ranges used by the tool."""
    return [ChannelRange(lo, hi, step) for lo, hi, step in DEFAULT_RANGES]


def run_operation(palette: Palette, op: str) -> None:
    """Apply one named palette operation in place."""
    if op == "generate":
        palette.generate()
    elif op == "interpolate":
        palette.generate_interpolated()
    elif op == "sweep":
        palette.generate_sweep()
    elif op == "random":
        palette.random_all()
    elif op == "invert":
        palette.invert()
    elif op != "none":
        raise ValueError(f"unknown operation {op!r}")


def process_image(
    src_path: Path,
    out_path: Optional[Path],
    op: str,
    palette_hex: Optional[str],
    mode_quantity: int,
    seed: Optional[int],
    debug: bool,
) -> Path:
    """
    Process one image end-to-end:
      load -> distinct colours -> palette edit -> swap -> save -> report.
    """
    t_start = time.perf_counter()
    if out_path is None:
        out_path = src_path.with_name(f"{src_path.stem}{OUTPUT_SUFFIX}.png")

    print_banner(src_path.name)

    rgb_in, alpha = load_image_rgba(src_path)
    height, width = rgb_in.shape[:2]
    unique_rgb, counts = distinct_colours(rgb_in, alpha)
    if unique_rgb.shape[0] == 0:
        raise ValueError("no visible pixels")
    if unique_rgb.shape[0] > MANY_COLOURS_WARN:
        warn(
            f"{unique_rgb.shape[0]} distinct colours; "
            "the image does not look like it uses a small fixed palette"
        )

    palette = Palette(
        colours_to_lch(unique_rgb),
        default_ranges(),
        mode_quantity,
        rng=np.random.default_rng(seed),
    )
    print_config_line(
        "palette",
        [
            ("Colours", len(palette)),
            ("Op", op),
            ("Modes", mode_quantity),
            ("Seed", "-" if seed is None else seed),
        ],
        debug=False,
    )
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [("Loaded", f"{width}x{height}"), ("Visible", int(counts.sum()))]
            )
        )
        debug_log(f"original {palette.palette_to_hex()}")

    t_edit = time.perf_counter()
    if palette_hex is not None:
        palette.hex_list_to_palette(palette_hex)
    run_operation(palette, op)

    mapped = palette.apply_to(rgb_in, mask=alpha)
    t_map = time.perf_counter()

    written = save_image_rgba(out_path, mapped, alpha)
    t_save = time.perf_counter()

    log(f"Palette: {palette.palette_to_hex()}")
    log(f"Wrote {written.name} | size={width}x{height} | colours={len(palette)}")
    if debug:
        debug_log("colours used:")
        for hex_code, count in colour_usage_report(mapped, alpha):
            debug_log(f"  {hex_code}: {count:,}")
        debug_log(
            f"load={format_seconds_compact(t_edit - t_start)}  "
            f"swap={format_seconds_compact(t_map - t_edit)}  "
            f"save={format_seconds_compact(t_save - t_map)}"
        )
    else:
        log(f"Total time {format_seconds_compact(t_save - t_start)}")
    return written


def list_input_images(folder: Path) -> List[Path]:
    """Image files directly inside `folder`, by name, skipping earlier outputs."""
    files = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTENSIONS
        and not p.stem.endswith(OUTPUT_SUFFIX)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


def _output_path(src: Path, out: Optional[Path], outdir: Optional[Path]) -> Optional[Path]:
    if out is not None:
        return out
    if outdir is not None:
        return outdir / f"{src.stem}{OUTPUT_SUFFIX}.png"
    return None


def _run_one(src: Path, out_path: Optional[Path], args: argparse.Namespace) -> bool:
    """Process one image; log and report failure instead of raising."""
    try:
        process_image(
            src,
            out_path,
            args.op,
            args.palette,
            args.mode_quantity,
            args.seed,
            args.debug,
        )
    except (ValueError, OSError) as exc:
        error(f"{src.name}: {exc}")
        return False
    return True


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point. Returns the process exit status.

    Handles a single file or a folder. In folder mode every image is processed
    in name order with its own palette; one failure does not stop the rest but
    makes the exit status 2.
    """
    args = parse_cli_args(argv)

    src: Path = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2
    if args.mode_quantity < 1:
        error("--mode-quantity must be at least 1")
        return 2
    if args.outdir is not None:
        args.outdir.mkdir(parents=True, exist_ok=True)

    if not src.is_dir():
        return 0 if _run_one(src, _output_path(src, args.out, args.outdir), args) else 2

    if args.out is not None:
        error("--out names a single file; use --outdir with a folder")
        return 2
    files = list_input_images(src)
    if args.debug:
        debug_log(key_value_pairs_to_string([("Folder", src.name), ("Images", len(files))]))
    if not files:
        warn(f"no images in {src}")

    failures = 0
    for path in files:
        if not _run_one(path, _output_path(path, None, args.outdir), args):
            failures += 1
    if failures:
        error(f"{failures} of {len(files)} images failed")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
