from __future__ import annotations

"""
Exact-match palette swap for images.

Every pixel must be one of the original palette's colours. Each original entry
is paired with the new entry at the same index; matching pixels take the new
entry's gamut-safe byte colour. A pixel that matches nothing is an error, there
is no nearest-colour fallback.

Exports:
  reference_colours(original_lch)
  output_colours(new_lch)
  first_match_indices(colours_srgb, reference_srgb, tolerance)
  apply_pattern(image, original_palette, new_palette, mask=None)
"""

from typing import Iterable, Optional, Union

import numpy as np
from numpy.typing import NDArray

from .colour_convert import (
    bytes_to_srgb,
    oklab_to_rgb,
    oklch_to_oklab,
    oklch_to_rgb_gamut_safe,
    to_byte_rgb,
)
from .colour_space import LchLike, lch_rows
from .constants import MATCH_TOLERANCE
from .core_types import (
    LchArray,
    PixelMatchError,
    RGBArray,
    U8Image,
    U8Mask,
    assert_u8_image_rgb,
    assert_u8_mask_2d,
    coerce_to_rgb_tuple,
)

PaletteLike = Union[Iterable[LchLike], np.ndarray]


def reference_colours(original_lch: LchArray) -> RGBArray:
    """Matching keys: OKLCh -> OKLab -> companded, clamped sRGB. [P,3] float64."""
    return oklab_to_rgb(oklch_to_oklab(original_lch), linear=False)


def output_colours(new_lch: LchArray) -> NDArray[np.uint8]:
    """Replacement colours: gamut-safe sRGB as bytes. [P,3] uint8."""
    return to_byte_rgb(oklch_to_rgb_gamut_safe(new_lch))


def first_match_indices(
    colours_srgb: RGBArray, reference_srgb: RGBArray, tolerance: float = MATCH_TOLERANCE
) -> NDArray[np.int64]:
    """
    For each colour row, the lowest reference index whose channels are all
    within `tolerance`, or -1 when none is.

    Args:
      colours_srgb: [U,3] float
      reference_srgb: [P,3] float, P >= 1
    Returns:
      int64 [U]
    """
    diff = np.abs(colours_srgb[:, None, :] - reference_srgb[None, :, :])
    close = np.all(diff <= tolerance, axis=2)
    first = np.argmax(close, axis=1)
    return np.where(close.any(axis=1), first, -1).astype(np.int64)


def apply_pattern(
    image: U8Image,
    original_palette: PaletteLike,
    new_palette: PaletteLike,
    mask: Optional[U8Mask] = None,
) -> U8Image:
    """
    Swap every pixel from its original-palette colour to the paired new colour.

    Args:
      image: uint8 [H,W,3] or [H,W,4]; alpha is copied through untouched
      original_palette: OKLCh colours the image is drawn from
      new_palette: OKLCh colours to write, same length
      mask: optional uint8 [H,W]; pixels where it is 0 are skipped and kept as is
    Returns:
      new uint8 array with the shape of `image`
    Raises:
      ValueError: palettes empty or of different lengths, or mask shape mismatch
      PixelMatchError: a pixel matches no original colour (first in row-major order)
    """
    img = assert_u8_image_rgb(np.asarray(image))
    if mask is not None:
        mask = assert_u8_mask_2d(np.asarray(mask))
        if mask.shape != img.shape[:2]:
            raise ValueError(
                f"mask shape {mask.shape} does not match image {img.shape[:2]}"
            )
    original = lch_rows(original_palette)
    new = lch_rows(new_palette)
    if original.shape[0] == 0:
        raise ValueError("palettes must hold at least one colour")
    if original.shape[0] != new.shape[0]:
        raise ValueError(
            f"palette sizes differ: original {original.shape[0]}, new {new.shape[0]}"
        )

    out = img.copy()
    width = img.shape[1]
    flat = img[..., :3].reshape(-1, 3)
    if mask is None:
        positions = np.arange(flat.shape[0])
    else:
        positions = np.flatnonzero(mask.reshape(-1) > 0)
    if positions.size == 0:
        return out

    refs = reference_colours(original)
    replacements = output_colours(new)

    # Match once per distinct colour; the inverse index maps back to pixels.
    selected = flat[positions]
    unique_rgb, inverse = np.unique(selected, axis=0, return_inverse=True)
    inverse = inverse.reshape(-1)
    matched = first_match_indices(bytes_to_srgb(unique_rgb), refs)

    per_pixel = matched[inverse]
    if np.any(per_pixel < 0):
        first_bad = int(np.argmax(per_pixel < 0))
        y, x = divmod(int(positions[first_bad]), width)
        raise PixelMatchError(x, y, coerce_to_rgb_tuple(selected[first_bad]))

    out_rgb = out[..., :3].reshape(-1, 3)
    out_rgb[positions] = replacements[per_pixel]
    out[..., :3] = out_rgb.reshape(img.shape[0], width, 3)
    return out


__all__ = [
    "reference_colours",
    "output_colours",
    "first_match_indices",
    "apply_pattern",
]
