"""
Global tunables used across the project.

- OKLab transform matrices (Ottosson, D65)
- Gamut search and pixel matching constants
- Palette generation defaults (channel ranges, mode quantity)
"""
from __future__ import annotations

from typing import Tuple

import numpy as np

# =====================
# OKLab matrices (D65)
# =====================
# linear sRGB -> LMS
M_RGB_TO_LMS = np.array(
    [
        [0.4122214708, 0.5363325363, 0.0514459929],
        [0.2119034982, 0.6806995451, 0.1073969566],
        [0.0883024619, 0.2817188376, 0.6299787005],
    ],
    dtype=np.float64,
)

# cube-rooted LMS -> OKLab
M_LMS_TO_LAB = np.array(
    [
        [0.2104542553, 0.7936177850, -0.0040720468],
        [1.9779984951, -2.4285922050, 0.4505937099],
        [0.0259040371, 0.7827717662, -0.8086757660],
    ],
    dtype=np.float64,
)

# OKLab -> cube-rooted LMS
M_LAB_TO_LMS = np.array(
    [
        [1.0, 0.3963377774, 0.2158037573],
        [1.0, -0.1055613458, -0.0638541728],
        [1.0, -0.0894841775, -1.2914855480],
    ],
    dtype=np.float64,
)

# LMS -> linear sRGB
M_LMS_TO_RGB = np.array(
    [
        [4.0767416621, -3.3077115901, 0.2309699292],
        [-1.2684380046, 2.6097574011, -0.3413193965],
        [-0.0041960863, -0.7034186147, 1.7076147010],
    ],
    dtype=np.float64,
)

# ==================
# Colour conversion
# ==================
# Usable chroma ceiling for OKLab -> OKLCh; a UI bound, not the sRGB gamut.
CHROMA_CEILING: float = 0.37
GAMUT_SEARCH_ITERATIONS: int = 20

# sRGB transfer curve
SRGB_DECODE_THRESHOLD: float = 0.04045
SRGB_ENCODE_THRESHOLD: float = 0.0031308

# ================
# Pixel matching
# ================
MATCH_TOLERANCE: float = 0.01

# ===================
# Palette generation
# ===================
MIN_LIGHTNESS_SPREAD: float = 0.25

# (min, max, step) per channel in L, C, H order
DEFAULT_RANGES: Tuple[Tuple[float, float, float], ...] = (
    (0.0, 1.0, 0.01),
    (0.0, 0.47, 0.01),
    (0.0, 360.0, 1.0),
)
DEFAULT_MODE_QUANTITY: int = 4

# ====
# CLI
# ====
OUTPUT_SUFFIX: str = "_swapped"
# files picked up when the input is a folder
IMAGE_EXTENSIONS: Tuple[str, ...] = (".png", ".jpg", ".jpeg", ".webp", ".bmp", ".gif")
# more distinct colours than this suggests a photo rather than a fixed palette
MANY_COLOURS_WARN: int = 64

__all__ = [
    "M_RGB_TO_LMS",
    "M_LMS_TO_LAB",
    "M_LAB_TO_LMS",
    "M_LMS_TO_RGB",
    "CHROMA_CEILING",
    "GAMUT_SEARCH_ITERATIONS",
    "SRGB_DECODE_THRESHOLD",
    "SRGB_ENCODE_THRESHOLD",
    "MATCH_TOLERANCE",
    "MIN_LIGHTNESS_SPREAD",
    "DEFAULT_RANGES",
    "DEFAULT_MODE_QUANTITY",
    "OUTPUT_SUFFIX",
    "IMAGE_EXTENSIONS",
    "MANY_COLOURS_WARN",
]
