from __future__ import annotations

"""
Typed colour values, one class per colour space.

Each conversion is a method from one type to another, so a triple always
carries its meaning. The arithmetic lives in colour_convert; these classes are
thin wrappers for single colours. Bulk data stays in numpy arrays.
"""

from dataclasses import astuple, dataclass
from typing import Iterable, Sequence, Union

import numpy as np

from .colour_convert import (
    bytes_to_srgb,
    in_gamut,
    linear_to_srgb,
    oklab_to_oklch,
    oklab_to_rgb,
    oklch_to_oklab,
    oklch_to_rgb_gamut_safe,
    srgb_to_linear,
    srgb_to_oklab,
    to_byte_rgb,
)
from .core_types import HexStr, LchArray, RGBTuple, hex_to_rgb, rgb_to_hex


@dataclass(frozen=True)
class Srgb:
    """Companded sRGB, nominally in [0,1]."""

    r: float
    g: float
    b: float

    @classmethod
    def from_bytes(cls, rgb: RGBTuple) -> "Srgb":
        return cls(*(float(v) for v in bytes_to_srgb(rgb)))

    @classmethod
    def from_hex(cls, hex_str: HexStr) -> "Srgb":
        return cls.from_bytes(hex_to_rgb(hex_str))

    def as_array(self) -> np.ndarray:
        return np.array(astuple(self), dtype=np.float64)

    def to_bytes(self) -> RGBTuple:
        r, g, b = to_byte_rgb(self.as_array()).tolist()
        return (r, g, b)

    def to_hex(self) -> HexStr:
        return rgb_to_hex(self.to_bytes())

    def to_linear(self) -> "LinearSrgb":
        return LinearSrgb(*(float(v) for v in srgb_to_linear(self.as_array())))

    def to_oklab(self) -> "OkLab":
        return OkLab(*(float(v) for v in srgb_to_oklab(self.as_array())))


@dataclass(frozen=True)
class LinearSrgb:
    """Linear-light sRGB. Out-of-gamut values are kept as they are."""

    r: float
    g: float
    b: float

    def as_array(self) -> np.ndarray:
        return np.array(astuple(self), dtype=np.float64)

    def in_gamut(self) -> bool:
        return bool(in_gamut(self.as_array()))

    def to_srgb(self) -> Srgb:
        """Companded and clamped to [0,1]."""
        encoded = np.clip(linear_to_srgb(self.as_array()), 0.0, 1.0)
        return Srgb(*(float(v) for v in encoded))


@dataclass(frozen=True)
class OkLab:
    L: float
    a: float
    b: float

    def as_array(self) -> np.ndarray:
        return np.array(astuple(self), dtype=np.float64)

    def to_oklch(self) -> "OkLch":
        return OkLch(*(float(v) for v in oklab_to_oklch(self.as_array())))

    def to_linear_srgb(self) -> LinearSrgb:
        return LinearSrgb(*(float(v) for v in oklab_to_rgb(self.as_array(), linear=True)))

    def to_srgb(self) -> Srgb:
        return Srgb(*(float(v) for v in oklab_to_rgb(self.as_array(), linear=False)))


@dataclass(frozen=True)
class OkLch:
    """OKLCh with hue H in degrees."""

    L: float
    C: float
    H: float

    @classmethod
    def from_hex(cls, hex_str: HexStr) -> "OkLch":
        return Srgb.from_hex(hex_str).to_oklab().to_oklch()

    def as_array(self) -> np.ndarray:
        return np.array(astuple(self), dtype=np.float64)

    def to_oklab(self) -> OkLab:
        return OkLab(*(float(v) for v in oklch_to_oklab(self.as_array())))

    def to_srgb_gamut_safe(self) -> Srgb:
        return Srgb(*(float(v) for v in oklch_to_rgb_gamut_safe(self.as_array())))

    def to_hex(self) -> HexStr:
        return self.to_srgb_gamut_safe().to_hex()


LchLike = Union[OkLch, Sequence[float], np.ndarray]


def lch_rows(values: Union[Iterable[LchLike], np.ndarray]) -> LchArray:
    """
    Coerce OkLch values, 3-sequences or an (N,3) array into a float64 (N,3) array.
    Always returns a fresh copy.
    """
    if isinstance(values, np.ndarray):
        arr = np.array(values, dtype=np.float64)
    else:
        rows = [v.as_array() if isinstance(v, OkLch) else v for v in values]
        arr = np.array(rows, dtype=np.float64)
    if arr.ndim == 1 and arr.size == 0:
        arr = arr.reshape(0, 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"expected OKLCh triples, got array of shape {arr.shape}")
    return arr


__all__ = ["Srgb", "LinearSrgb", "OkLab", "OkLch", "LchLike", "lch_rows"]
