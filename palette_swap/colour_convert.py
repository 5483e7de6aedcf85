from __future__ import annotations

"""
Colour conversions between sRGB, linear sRGB, OKLab and OKLCh (D65).

Every function accepts a single triple or any (..., 3) array, preserves the
shape and returns float64 (to_byte_rgb returns uint8). Nothing here raises on
numeric input; out-of-range values propagate geometrically.

Exports:
  srgb_to_linear(srgb)
  linear_to_srgb(linear)
  srgb_to_oklab(rgb)
  oklab_to_oklch(lab)
  oklch_to_oklab(lch)
  oklab_to_rgb(lab, linear=False)
  in_gamut(linear_rgb)
  oklch_to_rgb_gamut_safe(lch)
  to_byte_rgb(rgb)
  bytes_to_srgb(rgb_u8)
"""

from typing import Sequence, Union

import numpy as np
from numpy.typing import NDArray

from .constants import (
    CHROMA_CEILING,
    GAMUT_SEARCH_ITERATIONS,
    M_LAB_TO_LMS,
    M_LMS_TO_LAB,
    M_LMS_TO_RGB,
    M_RGB_TO_LMS,
    SRGB_DECODE_THRESHOLD,
    SRGB_ENCODE_THRESHOLD,
)
from .core_types import LabArray, LchArray, RGBArray

ArrayLike3 = Union[Sequence[float], NDArray[np.generic]]


def _as_float(values: ArrayLike3) -> NDArray[np.float64]:
    return np.asarray(values, dtype=np.float64)


# sRGB transfer curve


def srgb_to_linear(srgb: ArrayLike3) -> RGBArray:
    """
    Inverse companding, sRGB (non-linear) to linear RGB.
    Odd-symmetric, so negative inputs stay negative.
    """
    c = _as_float(srgb)
    mag = np.abs(c)
    return np.where(
        mag <= SRGB_DECODE_THRESHOLD,
        c / 12.92,
        np.sign(c) * ((mag + 0.055) / 1.055) ** 2.4,
    )


def linear_to_srgb(linear: ArrayLike3) -> RGBArray:
    """Companding, linear RGB to sRGB. Non-positive input maps to 0. Not clamped."""
    c = _as_float(linear)
    pos = np.maximum(c, 0.0)
    encoded = np.where(
        pos < SRGB_ENCODE_THRESHOLD,
        12.92 * pos,
        1.055 * pos ** (1.0 / 2.4) - 0.055,
    )
    return np.where(c <= 0.0, 0.0, encoded)


# sRGB <-> OKLab


def srgb_to_oklab(rgb: ArrayLike3) -> LabArray:
    """sRGB in [0,1] to OKLab (L, a, b)."""
    linear = srgb_to_linear(rgb)
    lms = linear @ M_RGB_TO_LMS.T
    return np.cbrt(lms) @ M_LMS_TO_LAB.T


def oklab_to_rgb(lab: ArrayLike3, linear: bool = False) -> RGBArray:
    """
    OKLab to RGB.

    With linear=True the raw linear RGB is returned (may lie outside [0,1]).
    Otherwise the result is companded and clamped to [0,1].
    """
    lms_ = _as_float(lab) @ M_LAB_TO_LMS.T
    rgb_linear = (lms_ ** 3) @ M_LMS_TO_RGB.T
    if linear:
        return rgb_linear
    return np.clip(linear_to_srgb(rgb_linear), 0.0, 1.0)


# OKLab <-> OKLCh


def oklab_to_oklch(lab: ArrayLike3) -> LchArray:
    """
    OKLab to OKLCh. Chroma is capped at CHROMA_CEILING; hue in degrees [0,360).
    """
    arr = _as_float(lab)
    L = arr[..., 0]
    a = arr[..., 1]
    b = arr[..., 2]
    C = np.minimum(np.hypot(a, b), CHROMA_CEILING)
    H = np.mod(np.degrees(np.arctan2(b, a)), 360.0)
    # tiny negative angles round up to exactly 360.0
    H = np.where(H >= 360.0, 0.0, H)
    return np.stack([L, C, H], axis=-1)


def oklch_to_oklab(lch: ArrayLike3) -> LabArray:
    """OKLCh (hue in degrees) to OKLab."""
    arr = _as_float(lch)
    L = arr[..., 0]
    C = arr[..., 1]
    h_rad = np.radians(arr[..., 2])
    return np.stack([L, C * np.cos(h_rad), C * np.sin(h_rad)], axis=-1)


# Gamut


def in_gamut(linear_rgb: ArrayLike3) -> NDArray[np.bool_]:
    """True where all three linear channels lie in [0,1]. Reduces the last axis."""
    arr = _as_float(linear_rgb)
    return np.all((arr >= 0.0) & (arr <= 1.0), axis=-1)


def oklch_to_rgb_gamut_safe(lch: ArrayLike3) -> RGBArray:
    """
    OKLCh to companded, clamped sRGB, reducing chroma until the colour fits.

    A colour already in gamut at its own chroma is emitted as is. Otherwise
    chroma is bisected in [0, C] for GAMUT_SEARCH_ITERATIONS steps and the
    converged lower bound is used. Lightness and hue are never touched.
    """
    arr = _as_float(lch)
    L = arr[..., 0]
    H = arr[..., 2]
    requested = arr[..., 1]
    # in-gamut chroma along one hue is not always a single interval (near black, blue corner)
    fits_as_is = in_gamut(oklab_to_rgb(oklch_to_oklab(arr), linear=True))
    lo = np.zeros_like(requested)
    hi = requested.copy()

    for _ in range(GAMUT_SEARCH_ITERATIONS):
        mid = 0.5 * (lo + hi)
        lab = oklch_to_oklab(np.stack([L, mid, H], axis=-1))
        fits = in_gamut(oklab_to_rgb(lab, linear=True))
        lo = np.where(fits, mid, lo)
        hi = np.where(fits, hi, mid)

    chroma = np.where(fits_as_is, requested, lo)
    lab = oklch_to_oklab(np.stack([L, chroma, H], axis=-1))
    return oklab_to_rgb(lab, linear=False)


# Bytes


def to_byte_rgb(rgb: ArrayLike3) -> NDArray[np.uint8]:
    """[0,1] floats to uint8 per channel: round half up of clamp01(c) * 255."""
    scaled = np.clip(_as_float(rgb), 0.0, 1.0) * 255.0
    return np.floor(scaled + 0.5).astype(np.uint8)


def bytes_to_srgb(rgb_u8: ArrayLike3) -> RGBArray:
    """uint8 [0..255] to sRGB floats in [0,1]."""
    return np.clip(_as_float(rgb_u8) / 255.0, 0.0, 1.0)


__all__ = [
    "srgb_to_linear",
    "linear_to_srgb",
    "srgb_to_oklab",
    "oklab_to_rgb",
    "oklab_to_oklch",
    "oklch_to_oklab",
    "in_gamut",
    "oklch_to_rgb_gamut_safe",
    "to_byte_rgb",
    "bytes_to_srgb",
]
