from __future__ import annotations

"""
Core type aliases, small value objects, errors, and lightweight helpers.
"""

import re
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 3) or (H, W, 4)
U8Mask = NDArray[np.uint8]  # (H, W)
RGBArray = NDArray[np.float64]  # (..., 3) sRGB, companded or linear
LabArray = NDArray[np.float64]  # (..., 3) OKLab
LchArray = NDArray[np.float64]  # (..., 3) OKLCh, hue in degrees

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]{6}")

# Errors


class PixelMatchError(ValueError):
    """A pixel matched no entry of the original palette."""

    def __init__(self, x: int, y: int, rgb: RGBTuple) -> None:
        self.x = int(x)
        self.y = int(y)
        self.rgb = (int(rgb[0]), int(rgb[1]), int(rgb[2]))
        super().__init__(
            f"Pixel ({self.x},{self.y}) with RGB=({self.rgb[0]},{self.rgb[1]},"
            f"{self.rgb[2]}) does not match any colour of the original palette"
        )


# Value objects


@dataclass(frozen=True)
class ChannelRange:
    """Closed interval bounding one channel, with a UI step size."""

    min: float
    max: float
    step: float

    def __post_init__(self) -> None:
        if not self.max > self.min:
            raise ValueError("ChannelRange max must be greater than min")
        if not self.step > 0:
            raise ValueError("ChannelRange step must be greater than 0")

    @property
    def span(self) -> float:
        return float(self.max - self.min)

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def sample(self, rng: np.random.Generator) -> float:
        """Uniform draw in [min, max)."""
        return float(rng.uniform(self.min, self.max))


# Small helpers


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB byte tuple to uppercase hex string '#RRGGBB'."""
    return f"#{int(rgb[0]):02X}{int(rgb[1]):02X}{int(rgb[2]):02X}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """
    Parse 'RRGGBB' or '#RRGGBB' (case-insensitive) into an RGB byte tuple.
    Anything but exactly six hex digits after the optional '#' is rejected,
    surrounding whitespace included.
    """
    s = hex_str[1:] if hex_str.startswith("#") else hex_str
    if _HEX_DIGITS.fullmatch(s) is None:
        raise ValueError(f"invalid hex colour {hex_str!r}: expected 6 hex digits")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


def format_hex_list(hexes: Sequence[HexStr]) -> str:
    """['#AABBCC', ...] -> '[#AABBCC,...]'."""
    return "[" + ",".join(hexes) + "]"


def parse_hex_list(text: str) -> list[HexStr]:
    """
    Split a '[#RRGGBB,#RRGGBB,...]' list into its entries.
    Brackets are optional; entries may be separated by commas and/or whitespace.
    Entries are returned as given and are not validated here.
    """
    body = text.strip()
    if body.startswith("["):
        body = body[1:]
    if body.endswith("]"):
        body = body[:-1]
    return [tok for tok in re.split(r"[,\s]+", body) if tok]


def coerce_to_rgb_tuple(value: Union[Sequence[int], NDArray[np.generic]]) -> RGBTuple:
    """Coerce a 3-length sequence or array row to an (int, int, int) RGB tuple."""
    if len(value) < 3:
        raise ValueError("sequence too small for RGB")
    return (int(value[0]), int(value[1]), int(value[2]))


def assert_u8_image_rgb(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,3 or 4) image and return it typed as U8Image."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] not in (3, 4):
        raise TypeError("expected uint8 (H,W,3/4) image")
    return image  # type: ignore[return-value]


def assert_u8_mask_2d(mask_array: np.ndarray) -> U8Mask:
    """Validate a uint8 (H,W) mask and return it typed as U8Mask."""
    if mask_array.dtype != np.uint8 or mask_array.ndim != 2:
        raise TypeError("expected uint8 (H,W) mask")
    return mask_array  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "U8Image",
    "U8Mask",
    "RGBArray",
    "LabArray",
    "LchArray",
    # errors
    "PixelMatchError",
    # value objects
    "ChannelRange",
    # helpers
    "rgb_to_hex",
    "hex_to_rgb",
    "format_hex_list",
    "parse_hex_list",
    "coerce_to_rgb_tuple",
    "assert_u8_image_rgb",
    "assert_u8_mask_2d",
]
