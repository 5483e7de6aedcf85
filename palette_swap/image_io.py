from __future__ import annotations

"""
Image I/O helpers (RGBA in sRGB) and distinct-colour extraction.

Embedded ICC profiles are ignored: pixel values are taken as sRGB bytes so that
exact palette matching sees the stored values.
"""

from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image, ImageOps

from .colour_convert import bytes_to_srgb, oklab_to_oklch, srgb_to_oklab
from .core_types import LchArray, U8Image, U8Mask


def load_image_rgba(path: Path) -> Tuple[U8Image, U8Mask]:
    """Load with Pillow, apply EXIF orientation, return (rgb [H,W,3], alpha [H,W])."""
    with Image.open(path) as im0:
        im = ImageOps.exif_transpose(im0).convert("RGBA")
    arr = np.array(im, dtype=np.uint8)
    return arr[..., :3].copy(), arr[..., 3].copy()


def save_image_rgba(path: Path, rgb: U8Image, alpha: U8Mask) -> Path:
    """Write RGB plus alpha as PNG. A non-.png suffix is replaced."""
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    height, width = rgb.shape[:2]
    out = np.zeros((height, width, 4), dtype=np.uint8)
    out[..., :3] = rgb[..., :3]
    out[..., 3] = alpha
    Image.fromarray(out).save(path)
    return path


def distinct_colours(rgb: U8Image, alpha: U8Mask) -> Tuple[U8Image, np.ndarray]:
    """
    Distinct visible colours, darkest first.

    Ordered by OKLab lightness, ties broken by byte value.

    Returns:
      unique_rgb: uint8 [U,3]
      counts: int64 [U]
    """
    visible_mask = alpha > 0
    if not np.any(visible_mask):
        return np.zeros((0, 3), dtype=np.uint8), np.zeros((0,), dtype=np.int64)
    flat = rgb[..., :3][visible_mask].reshape(-1, 3)
    uniques, counts = np.unique(flat, axis=0, return_counts=True)
    lightness = srgb_to_oklab(bytes_to_srgb(uniques))[:, 0]
    order = np.lexsort((uniques[:, 2], uniques[:, 1], uniques[:, 0], lightness))
    return (
        uniques[order].astype(np.uint8, copy=False),
        counts[order].astype(np.int64, copy=False),
    )


def colours_to_lch(unique_rgb: U8Image) -> LchArray:
    """uint8 [U,3] sRGB rows to float64 [U,3] OKLCh."""
    return oklab_to_oklch(srgb_to_oklab(bytes_to_srgb(unique_rgb))).reshape(-1, 3)


__all__ = [
    "load_image_rgba",
    "save_image_rgba",
    "distinct_colours",
    "colours_to_lch",
]
