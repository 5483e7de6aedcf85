"""
Pytest configuration and shared fixtures for palette_swap tests.
"""

import numpy as np
import pytest

from palette_swap import ChannelRange, OkLch, Palette
from palette_swap.constants import DEFAULT_RANGES


@pytest.fixture
def rng():
    """Seeded generator so randomised tests are reproducible."""
    return np.random.default_rng(1234)


@pytest.fixture
def default_ranges():
    """L, C, H ranges used by the command line tool."""
    return [ChannelRange(lo, hi, step) for lo, hi, step in DEFAULT_RANGES]


@pytest.fixture
def sample_hexes():
    """A small fixed palette, darkest to lightest."""
    return ["#1B1B2F", "#3E4A89", "#8A4F7D", "#D4A373", "#F6F1E9"]


@pytest.fixture
def sample_lch(sample_hexes):
    """sample_hexes as OkLch values."""
    return [OkLch.from_hex(h) for h in sample_hexes]


@pytest.fixture
def make_palette(sample_lch, default_ranges):
    """Factory: Palette over sample_lch with a seeded generator."""

    def _make(mode_quantity=4, seed=0, colours=None, ranges=None):
        return Palette(
            sample_lch if colours is None else colours,
            default_ranges if ranges is None else ranges,
            mode_quantity,
            rng=np.random.default_rng(seed),
        )

    return _make
