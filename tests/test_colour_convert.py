"""
Tests for the vectorised colour conversions and gamut mapping.
"""

import numpy as np
import pytest

from palette_swap.colour_convert import (
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
from palette_swap.constants import CHROMA_CEILING


class TestSrgbOklab:
    """sRGB <-> OKLab."""

    def test_white_is_neutral(self):
        """White should land on L=1 with no chroma."""
        lab = srgb_to_oklab([1.0, 1.0, 1.0])
        assert lab.tolist() == pytest.approx([1.0, 0.0, 0.0], abs=1e-4)

    def test_black_is_zero(self):
        lab = srgb_to_oklab([0.0, 0.0, 0.0])
        assert lab.tolist() == pytest.approx([0.0, 0.0, 0.0], abs=1e-9)

    def test_pure_red_reference_values(self):
        """Pure red should match the published OKLab coordinates."""
        lab = srgb_to_oklab([1.0, 0.0, 0.0])
        assert lab.tolist() == pytest.approx([0.62796, 0.22486, 0.12585], abs=1e-4)

    def test_round_trip_to_linear(self, rng):
        """sRGB -> OKLab -> linear RGB should equal the inverse-companded input."""
        srgb = rng.uniform(0.0, 1.0, size=(500, 3))
        linear = oklab_to_rgb(srgb_to_oklab(srgb), linear=True)
        np.testing.assert_allclose(linear, srgb_to_linear(srgb), atol=1e-5)

    def test_round_trip_companded(self, rng):
        srgb = rng.uniform(0.0, 1.0, size=(500, 3))
        np.testing.assert_allclose(oklab_to_rgb(srgb_to_oklab(srgb)), srgb, atol=1e-5)

    def test_shape_preserved(self):
        img = np.zeros((4, 5, 3))
        assert srgb_to_oklab(img).shape == (4, 5, 3)
        assert oklab_to_rgb(img).shape == (4, 5, 3)

    def test_companded_output_is_clamped(self):
        """Out-of-gamut OKLab should clamp to [0,1] unless linear is requested."""
        lab = [0.7, 0.4, 0.4]
        rgb = oklab_to_rgb(lab)
        assert np.all(rgb >= 0.0) and np.all(rgb <= 1.0)
        assert not in_gamut(oklab_to_rgb(lab, linear=True))


class TestTransferCurve:
    def test_linear_threshold_segment(self):
        assert srgb_to_linear([0.04]).tolist() == pytest.approx([0.04 / 12.92])
        assert linear_to_srgb([0.001]).tolist() == pytest.approx([0.01292])

    def test_negative_input_keeps_sign(self):
        """Inverse companding is odd-symmetric."""
        assert float(srgb_to_linear([-0.5])[0]) == pytest.approx(-float(srgb_to_linear([0.5])[0]))

    def test_non_positive_encodes_to_zero(self):
        assert linear_to_srgb([-0.3, 0.0]).tolist() == [0.0, 0.0]


class TestOklch:
    """OKLab <-> OKLCh."""

    def test_round_trip_ab(self, rng):
        """OKLab -> OKLCh -> OKLab should reproduce a and b below the ceiling."""
        lab = np.column_stack(
            [
                rng.uniform(0.0, 1.0, 300),
                rng.uniform(-0.25, 0.25, 300),
                rng.uniform(-0.25, 0.25, 300),
            ]
        )
        back = oklch_to_oklab(oklab_to_oklch(lab))
        np.testing.assert_allclose(back, lab, atol=1e-9)

    def test_hue_normalised(self):
        lch = oklab_to_oklch([0.5, 0.0, -0.1])
        assert lch.tolist() == pytest.approx([0.5, 0.1, 270.0])

    def test_hue_never_reaches_360(self):
        lch = oklab_to_oklch([0.5, 0.1, -1e-20])
        assert 0.0 <= lch[2] < 360.0

    def test_chroma_capped_at_ceiling(self):
        lch = oklab_to_oklch([0.5, 0.5, 0.0])
        assert float(lch[1]) == pytest.approx(CHROMA_CEILING)
        assert float(lch[2]) == pytest.approx(0.0)

    def test_polar_to_cartesian(self):
        lab = oklch_to_oklab([0.7, 0.1, 90.0])
        assert lab.tolist() == pytest.approx([0.7, 0.0, 0.1], abs=1e-12)


class TestGamut:
    def test_in_gamut_reduces_last_axis(self):
        arr = np.array([[0.0, 0.5, 1.0], [1.01, 0.5, 0.5], [-0.01, 0.0, 0.0]])
        assert in_gamut(arr).tolist() == [True, False, False]

    @pytest.mark.parametrize("chroma", [0.0, 0.05, 0.2, 0.37, 0.6])
    def test_gamut_safe_output_in_range(self, chroma):
        """Gamut-safe output is in [0,1] and never gains chroma."""
        L, H = np.meshgrid(np.linspace(0.05, 0.95, 10), np.arange(0.0, 360.0, 30.0))
        lch = np.stack([L.ravel(), np.full(L.size, chroma), H.ravel()], axis=-1)

        rgb = oklch_to_rgb_gamut_safe(lch)

        assert rgb.shape == lch.shape
        assert np.all(rgb >= 0.0) and np.all(rgb <= 1.0)
        effective = oklab_to_oklch(srgb_to_oklab(rgb))
        assert np.all(effective[:, 1] <= chroma + 1e-5)
        np.testing.assert_allclose(effective[:, 0], lch[:, 0], atol=1e-5)

    def test_gamut_safe_keeps_hue(self):
        """Chroma is reduced, hue is not."""
        lch = np.array([[0.6, 0.35, 200.0], [0.4, 0.3, 30.0], [0.8, 0.25, 140.0]])
        effective = oklab_to_oklch(srgb_to_oklab(oklch_to_rgb_gamut_safe(lch)))
        assert np.all(effective[:, 1] > 0.02)
        np.testing.assert_allclose(effective[:, 2], lch[:, 2], atol=0.5)

    def test_in_gamut_colour_unchanged(self):
        srgb = np.array([0.2, 0.5, 0.8])
        lch = oklab_to_oklch(srgb_to_oklab(srgb))
        assert to_byte_rgb(oklch_to_rgb_gamut_safe(lch)).tolist() == to_byte_rgb(srgb).tolist()

    @pytest.mark.parametrize(
        "rgb",
        [(0, 0, 255), (0, 0, 96), (0, 0, 42), (0, 0, 1), (10, 0, 200), (255, 0, 255)],
    )
    def test_in_gamut_blues_keep_their_chroma(self, rgb):
        """Dark and saturated blues come back unchanged, not desaturated."""
        lch = oklab_to_oklch(srgb_to_oklab(bytes_to_srgb(rgb)))
        assert to_byte_rgb(oklch_to_rgb_gamut_safe(lch)).tolist() == list(rgb)

    def test_byte_grid_round_trips_exactly(self):
        """Every 5th level per channel (0 and 255 included) survives bytes -> OKLCh -> bytes."""
        levels = np.arange(0, 256, 5, dtype=np.uint8)
        r, g, b = np.meshgrid(levels, levels, levels, indexing="ij")
        grid = np.stack([r.ravel(), g.ravel(), b.ravel()], axis=-1)

        lch = oklab_to_oklch(srgb_to_oklab(bytes_to_srgb(grid)))
        back = to_byte_rgb(oklch_to_rgb_gamut_safe(lch))

        bad = np.flatnonzero(np.any(back != grid, axis=-1))
        assert bad.size == 0, f"{bad.size} colours changed, first {grid[bad[:5]].tolist()}"

    def test_negative_chroma_does_not_raise(self):
        rgb = oklch_to_rgb_gamut_safe([0.5, -0.1, 40.0])
        assert np.all(np.isfinite(rgb))


class TestBytes:
    def test_round_half_up(self):
        assert to_byte_rgb([0.0, 0.5, 1.0]).tolist() == [0, 128, 255]

    def test_clamps_each_channel(self):
        assert to_byte_rgb([-0.2, 1.3, 0.001]).tolist() == [0, 255, 0]

    def test_dtype(self):
        assert to_byte_rgb(np.zeros((2, 2, 3))).dtype == np.uint8

    def test_bytes_round_trip(self):
        values = np.arange(256, dtype=np.uint8)
        rgb = np.stack([values, values[::-1], values], axis=-1)
        assert np.array_equal(to_byte_rgb(bytes_to_srgb(rgb)), rgb)
