from __future__ import annotations

"""
Shared utilities for palette_swap.

Time formatting, colour usage reports and tidy print-based logging for the CLI.
The colour core never logs; only the command-line front end calls these.
"""

import sys
from typing import Any, Iterable, List, Tuple

import numpy as np

from .core_types import HexStr, U8Image, U8Mask, rgb_to_hex


#  Time formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


# Image reports


def colour_usage_report(
    rgb: U8Image, alpha_mask: U8Mask
) -> List[Tuple[HexStr, int]]:
    """
    Visible colours of an image as (hex, count), most used first.
    Ties keep byte order so the report is stable.
    """
    visible_mask = alpha_mask > 0
    if not np.any(visible_mask):
        return []
    flat = rgb[..., :3][visible_mask].reshape(-1, 3)
    uniques, counts = np.unique(flat, axis=0, return_counts=True)
    order = np.argsort(-counts, kind="stable")
    return [(rgb_to_hex(uniques[i].tolist()), int(counts[i])) for i in order]


#  Pretty logging


def format_number_compact(value: Any) -> str:
    """'on'/'off' for bools, 1,234 style for ints, trimmed 3-decimal floats."""
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """Format (name, value) pairs as 'Name: value' blocks separated by sep."""
    return sep.join(f"{name}{eq}{format_number_compact(value)}" for name, value in pairs)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit one config line, e.g.:
      [palette] Colours: 6  Op: generate  Modes: 4  Seed: 7
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    "format_seconds_compact",
    "colour_usage_report",
    "format_number_compact",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
