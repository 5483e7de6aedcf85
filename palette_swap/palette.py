from __future__ import annotations

"""
Editable palette of OKLCh colours.

A Palette holds N colours ("current") plus an immutable copy of the colours it
was built with ("original"). Generation, randomisation, inversion and hex
import all write into current in place; reset copies original back.

Random draws use a numpy Generator. Each randomised method takes an optional
rng that overrides the palette's own generator for that call.
"""

from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .colour_convert import (
    bytes_to_srgb,
    oklab_to_oklch,
    oklch_to_oklab,
    oklch_to_rgb_gamut_safe,
    srgb_to_oklab,
    to_byte_rgb,
)
from .colour_space import LchLike, OkLch, lch_rows
from .constants import MIN_LIGHTNESS_SPREAD
from .core_types import (
    ChannelRange,
    HexStr,
    LchArray,
    U8Image,
    U8Mask,
    format_hex_list,
    hex_to_rgb as parse_hex,
    parse_hex_list,
    rgb_to_hex as format_hex,
)
from .pattern_to_image import apply_pattern


class Palette:
    """N OKLCh colours with per-channel ranges and a construction snapshot."""

    def __init__(
        self,
        initial: Union[Iterable[LchLike], np.ndarray],
        ranges: Sequence[ChannelRange],
        mode_quantity: int,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        colours = lch_rows(initial)
        if colours.shape[0] == 0:
            raise ValueError("Palette requires at least 1 colour")
        ranges = tuple(ranges)
        if len(ranges) != 3:
            raise ValueError("Palette requires exactly 3 channel ranges (L, C, H)")
        if not all(isinstance(r, ChannelRange) for r in ranges):
            raise ValueError("Palette ranges must be ChannelRange instances")
        if int(mode_quantity) != mode_quantity or mode_quantity < 1:
            raise ValueError("Palette mode_quantity must be an integer >= 1")

        self._current: LchArray = colours.copy()
        self._original: LchArray = colours.copy()
        self._original.setflags(write=False)
        self._ranges: Tuple[ChannelRange, ChannelRange, ChannelRange] = ranges  # type: ignore[assignment]
        self._mode_quantity = int(mode_quantity)
        self._rng = rng if rng is not None else np.random.default_rng()

    # Read access

    def __len__(self) -> int:
        return int(self._current.shape[0])

    def __repr__(self) -> str:
        return f"Palette(n={len(self)}, mode_quantity={self._mode_quantity})"

    @property
    def ranges(self) -> Tuple[ChannelRange, ChannelRange, ChannelRange]:
        return self._ranges

    @property
    def mode_quantity(self) -> int:
        return self._mode_quantity

    @property
    def current_lch(self) -> LchArray:
        """Copy of the current colours as an (N,3) OKLCh array."""
        return self._current.copy()

    @property
    def original_lch(self) -> LchArray:
        """Read-only (N,3) OKLCh array of the construction colours."""
        return self._original

    @property
    def colors(self) -> List[OkLch]:
        return [OkLch(*row) for row in self._current.tolist()]

    @property
    def original_colors(self) -> List[OkLch]:
        return [OkLch(*row) for row in self._original.tolist()]

    def color(self, index: int) -> OkLch:
        return OkLch(*self._current[index].tolist())

    # Random helpers

    def _rng_for(self, rng: Optional[np.random.Generator]) -> np.random.Generator:
        return rng if rng is not None else self._rng

    @staticmethod
    def _draw_lightness_window(rng: np.random.Generator) -> Tuple[float, float]:
        """Two draws in [0,1], ordered, widened to at least MIN_LIGHTNESS_SPREAD."""
        l_min = float(rng.uniform(0.0, 1.0))
        l_max = float(rng.uniform(0.0, 1.0))
        if l_min > l_max:
            l_min, l_max = l_max, l_min
        if l_max - l_min < MIN_LIGHTNESS_SPREAD:
            if l_max + MIN_LIGHTNESS_SPREAD <= 1.0:
                l_max += MIN_LIGHTNESS_SPREAD
            else:
                l_min = max(0.0, l_min - MIN_LIGHTNESS_SPREAD)
        return l_min, l_max

    def _draw_hue_anchors(self, rng: np.random.Generator) -> np.ndarray:
        """
        Draw a mode count, start hue and direction; return the mode anchors.
        Anchors are 360/modes apart, wrapped into [0,360).
        """
        max_modes = min(self._mode_quantity, len(self))
        modes = int(rng.integers(1, max_modes + 1))
        hue_start = float(rng.uniform(0.0, 360.0))
        clockwise = bool(rng.integers(0, 2))
        direction = 1.0 if clockwise else -1.0
        anchors = hue_start + direction * np.arange(modes) * (360.0 / modes)
        anchors = np.mod(anchors, 360.0)
        return np.where(anchors >= 360.0, 0.0, anchors)

    def _block_sizes(self, modes: int) -> List[int]:
        """Split N slots into `modes` contiguous blocks; the first N % modes get one extra."""
        base, remainder = divmod(len(self), modes)
        return [base + (1 if m < remainder else 0) for m in range(modes)]

    def _lightness_ramp(self, l_min: float, l_max: float) -> np.ndarray:
        n = len(self)
        if n == 1:
            return np.array([l_min], dtype=np.float64)
        return l_min + (np.arange(n, dtype=np.float64) / (n - 1)) * (l_max - l_min)

    # Generation

    def generate(self, rng: Optional[np.random.Generator] = None) -> None:
        """
        Segment mode: contiguous blocks share one hue anchor, every colour shares
        one chroma, and lightness ramps across the whole palette.
        """
        rng = self._rng_for(rng)
        self.reset_all()

        l_min, l_max = self._draw_lightness_window(rng)
        anchors = self._draw_hue_anchors(rng)
        chroma = self._ranges[1].sample(rng)

        self._current[:, 0] = self._lightness_ramp(l_min, l_max)
        self._current[:, 1] = chroma
        self._current[:, 2] = np.repeat(anchors, self._block_sizes(anchors.shape[0]))

    def generate_interpolated(self, rng: Optional[np.random.Generator] = None) -> None:
        """
        Key colours at evenly spread positions, with the gaps filled by linear
        interpolation in OKLab.
        """
        rng = self._rng_for(rng)
        self.reset_all()

        l_min, l_max = self._draw_lightness_window(rng)
        anchors = self._draw_hue_anchors(rng)
        chroma = self._ranges[1].sample(rng)
        modes = int(anchors.shape[0])
        n = len(self)

        if modes == 1:
            self._current[:, 0] = self._lightness_ramp(l_min, l_max)
            self._current[:, 1] = chroma
            self._current[:, 2] = anchors[0]
            return

        # round(i * (n-1) / (modes-1)), half up, in integer arithmetic
        keys = [(2 * i * (n - 1) + (modes - 1)) // (2 * (modes - 1)) for i in range(modes)]
        for i, pos in enumerate(keys):
            lightness = l_min + (i / (modes - 1)) * (l_max - l_min)
            self._current[pos] = (lightness, chroma, anchors[i])

        for start, end in zip(keys[:-1], keys[1:]):
            if end - start < 2:
                continue
            lab_start = oklch_to_oklab(self._current[start])
            lab_end = oklch_to_oklab(self._current[end])
            t = (np.arange(start + 1, end, dtype=np.float64) - start) / (end - start)
            lab = lab_start + t[:, None] * (lab_end - lab_start)
            self._current[start + 1 : end] = oklab_to_oklch(lab)

    def generate_sweep(self, rng: Optional[np.random.Generator] = None) -> None:
        """
        Hue sweep: each block walks across its own 360/modes arc of the hue
        circle, starting at its anchor and moving in the drawn direction. Chroma
        is shared; lightness keeps the original values.
        """
        rng = self._rng_for(rng)
        self.reset_all()

        max_modes = min(self._mode_quantity, len(self))
        modes = int(rng.integers(1, max_modes + 1))
        hue_start = float(rng.uniform(0.0, 360.0))
        direction = 1.0 if bool(rng.integers(0, 2)) else -1.0
        chroma = self._ranges[1].sample(rng)
        arc = 360.0 / modes

        hues: List[np.ndarray] = []
        for m, size in enumerate(self._block_sizes(modes)):
            if size == 0:
                continue
            offsets = m * arc + np.arange(size, dtype=np.float64) * (arc / size)
            hues.append(hue_start + direction * offsets)
        hue = np.mod(np.concatenate(hues), 360.0)

        self._current[:, 1] = chroma
        self._current[:, 2] = np.where(hue >= 360.0, 0.0, hue)

    # Randomisation

    def _range_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        lows = np.array([r.min for r in self._ranges], dtype=np.float64)
        highs = np.array([r.max for r in self._ranges], dtype=np.float64)
        return lows, highs

    def random_single(self, index: int, rng: Optional[np.random.Generator] = None) -> None:
        """Independent uniform draw of L, C and H for one colour."""
        rng = self._rng_for(rng)
        lows, highs = self._range_bounds()
        self._current[index] = rng.uniform(lows, highs)

    def random_all(self, rng: Optional[np.random.Generator] = None) -> None:
        """Independent uniform draw of every channel of every colour."""
        rng = self._rng_for(rng)
        lows, highs = self._range_bounds()
        self._current[:] = rng.uniform(lows, highs, size=self._current.shape)

    # Edits

    def invert(self) -> None:
        """Rotate every hue by 180 degrees."""
        self._current[:, 2] = np.mod(self._current[:, 2] + 180.0, 360.0)

    def reset(self, index: int) -> None:
        self._current[index] = self._original[index]

    def reset_all(self) -> None:
        self._current[:] = self._original

    def set_color(self, index: int, lch: LchLike) -> None:
        """Overwrite one current colour with an OKLCh triple."""
        self._current[index] = lch_rows([lch])[0]

    # Hex / bytes

    def to_byte_colors(self) -> U8Image:
        """(N,3) uint8 gamut-safe sRGB of the current colours."""
        return to_byte_rgb(oklch_to_rgb_gamut_safe(self._current))

    def rgb_to_hex(self, index: int) -> HexStr:
        """'#RRGGBB' of one current colour (gamut-safe)."""
        return format_hex(to_byte_rgb(oklch_to_rgb_gamut_safe(self._current[index])).tolist())

    def palette_to_hex(self) -> str:
        """'[#RRGGBB,#RRGGBB,...]' of all current colours."""
        return format_hex_list([format_hex(row) for row in self.to_byte_colors().tolist()])

    def hex_to_rgb(self, hex_str: str, index: int) -> None:
        """
        Set current[index] from '#RRGGBB' / 'RRGGBB'. The original snapshot is
        untouched, so reset(index) goes back to the construction colour.
        """
        rgb = parse_hex(hex_str)
        self._current[index] = oklab_to_oklch(srgb_to_oklab(bytes_to_srgb(rgb)))

    def hex_list_to_palette(self, text: str) -> None:
        """
        Set every current colour from a '[#RRGGBB,...]' list. The list must hold
        exactly N entries; nothing is changed unless all of them parse.
        """
        entries = parse_hex_list(text)
        if len(entries) != len(self):
            raise ValueError(
                f"hex list has {len(entries)} colours, palette has {len(self)}"
            )
        rgbs = np.array([parse_hex(entry) for entry in entries], dtype=np.uint8)
        self._current[:] = oklab_to_oklch(srgb_to_oklab(bytes_to_srgb(rgbs)))

    # Images

    def apply_to(self, image: U8Image, mask: Optional[U8Mask] = None) -> U8Image:
        """Recolour an image drawn from the original colours with the current ones."""
        return apply_pattern(image, self._original, self._current, mask=mask)


__all__ = ["Palette"]
