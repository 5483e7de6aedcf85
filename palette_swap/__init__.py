"""
palette_swap package.

Purpose:
  OKLab/OKLCh palette engine: generate and edit small palettes, then swap an
  image's exact colours for them. See palette_swap.cli for the command line.

Public API:
  Palette         : editable OKLCh palette with generation and hex import/export.
  ChannelRange    : (min, max, step) bound for one channel.
  apply_pattern   : exact-match original -> new palette swap for an image.
  PixelMatchError : raised when a pixel matches no original colour.
  Srgb, LinearSrgb, OkLab, OkLch : typed single-colour values.
  colour_convert  : vectorised colour space transforms.
  image_io        : Pillow load/save and distinct-colour extraction.
  utils           : print-based logging and report helpers.

Quick start:
  from palette_swap import Palette, ChannelRange, apply_pattern
  from palette_swap.colour_convert import srgb_to_oklab, oklab_to_oklch
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import core_types
from . import image_io
from . import utils

from .colour_space import LinearSrgb, OkLab, OkLch, Srgb  # noqa: E402,F401
from .core_types import ChannelRange, PixelMatchError  # noqa: E402,F401
from .palette import Palette  # noqa: E402,F401
from .pattern_to_image import apply_pattern  # noqa: E402,F401

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "image_io",
    "utils",
    "Srgb",
    "LinearSrgb",
    "OkLab",
    "OkLch",
    "ChannelRange",
    "PixelMatchError",
    "Palette",
    "apply_pattern",
]
