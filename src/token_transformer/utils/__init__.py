"""Utility modules for the token transformer."""

from .color_math import (
    HSL,
    OKLCH,
    RGB,
    ColorParseError,
    ParsedColor,
    color_confidence,
    color_distance,
    find_closest_color,
    hex_to_rgb,
    hsl_to_rgb,
    is_color_value,
    oklch_to_rgb,
    parse_color,
    rgb_to_hex,
    rgb_to_hsl,
)
from .text import split_top_level

__all__ = [
    "HSL",
    "OKLCH",
    "RGB",
    "ColorParseError",
    "ParsedColor",
    "color_confidence",
    "color_distance",
    "find_closest_color",
    "hex_to_rgb",
    "hsl_to_rgb",
    "is_color_value",
    "oklch_to_rgb",
    "parse_color",
    "rgb_to_hex",
    "rgb_to_hsl",
    "split_top_level",
]
