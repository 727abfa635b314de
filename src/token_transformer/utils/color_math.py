"""Color format conversion and comparison utilities.

This module converts between hex, rgb(a), hsl(a) and oklch string
representations and computes a normalized distance between colors.
All functions are pure; the only side channel is the optional
``diagnostics`` list accepted by :func:`parse_color`.

Notes
-----
The OKLCH to RGB conversion is a simplified hue-sector interpolation, not a
colorimetric transform. Token and query values go through the same
approximation, so exact OKLCH matches still resolve with confidence 1, but
distances between an OKLCH token and a hex query are only indicative.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

import numpy as np
from loguru import logger
from pydantic import BaseModel, ConfigDict

from ..config import ColorFormat
from ..diagnostics import Diagnostic, DiagnosticSeverity

if TYPE_CHECKING:
    from numpy.typing import NDArray

# Largest possible Euclidean distance inside the RGB cube
MAX_RGB_DISTANCE = 255 * math.sqrt(3)


class ColorParseError(ValueError):
    """Raised when a recognized color family carries malformed components."""


# =============================================================================
# Color representations
# =============================================================================


class RGB(BaseModel):
    """RGB channels in 0-255 with optional alpha in 0-1."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    r: int
    g: int
    b: int
    a: float | None = None

    def as_array(self) -> NDArray:
        return np.array([self.r, self.g, self.b], dtype=float)


class HSL(BaseModel):
    """Hue in whole degrees, saturation and lightness in whole percent."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    h: int
    s: int
    l: int
    a: float | None = None


class OKLCH(BaseModel):
    """OKLCH lightness (0-1 fraction), chroma and hue."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    l: float
    c: float
    h: float
    a: float | None = None


@dataclass(frozen=True)
class ParsedColor:
    """All representations derived from one color string.

    ``is_fallback`` is set when the input was not a recognized color and the
    result is the opaque-black placeholder. It never signals a match.
    """

    hex: str
    rgb: RGB
    hsl: HSL | None = None
    oklch: OKLCH | None = None
    format: ColorFormat | None = None
    is_fallback: bool = False


# =============================================================================
# Helpers
# =============================================================================

_HEX_DIGITS = re.compile(r"^[0-9a-fA-F]+$")
_FUNCTION_BODY = re.compile(r"^([a-z]+)\s*\((.*)\)$", re.IGNORECASE | re.DOTALL)
_COMPONENT_SPLIT = re.compile(r"[\s,/]+")

# Anchored value shapes used to decide whether a raw value *is* a color
_STRICT_COLOR_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$"),
    re.compile(r"^rgb\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*\)$"),
    re.compile(r"^rgba\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*,\s*[\d.]+\s*\)$"),
    re.compile(r"^hsl\(\s*\d+\s*,\s*\d+%\s*,\s*\d+%\s*\)$"),
    re.compile(r"^hsla\(\s*\d+\s*,\s*\d+%\s*,\s*\d+%\s*,\s*[\d.]+\s*\)$"),
    re.compile(r"^oklch\(\s*[\d.]+%?\s+[\d.]+\s+[\d.]+(?:\s*/\s*[\d.]+%?)?\s*\)$"),
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def _to_float(token: str, original: str) -> float:
    try:
        number = float(token)
    except ValueError as e:
        raise ColorParseError(f"Invalid color component {token!r} in {original!r}") from e
    if math.isnan(number) or math.isinf(number):
        raise ColorParseError(f"Invalid color component {token!r} in {original!r}")
    return number


def _parse_alpha(token: str, original: str) -> float:
    if token.endswith("%"):
        return _clamp(_to_float(token[:-1], original) / 100, 0.0, 1.0)
    return _clamp(_to_float(token, original), 0.0, 1.0)


def _function_components(text: str, names: tuple[str, ...]) -> list[str]:
    match = _FUNCTION_BODY.match(text.strip())
    if not match or match.group(1).lower() not in names:
        raise ColorParseError(f"Invalid {names[0]} color: {text}")
    return [part for part in _COMPONENT_SPLIT.split(match.group(2).strip()) if part]


# =============================================================================
# Conversions
# =============================================================================


def rgb_to_hex(rgb: RGB) -> str:
    """Convert RGB to a lowercase hex string.

    Alpha below 1 appends a two-digit suffix (8-digit form); otherwise the
    result is the 6-digit form.
    """

    def to_hex(value: float) -> str:
        return f"{int(_clamp(_round_half_up(value), 0, 255)):02x}"

    hex_str = "#" + to_hex(rgb.r) + to_hex(rgb.g) + to_hex(rgb.b)
    if rgb.a is not None and rgb.a < 1:
        hex_str += to_hex(rgb.a * 255)
    return hex_str


def hex_to_rgb(hex_str: str) -> RGB:
    """Convert a 3/4/6/8-digit hex string to RGB.

    Raises
    ------
    ColorParseError
        If the digits are not valid hex or the length is unsupported.
    """
    digits = hex_str.strip().lstrip("#")
    if not _HEX_DIGITS.match(digits) or len(digits) not in (3, 4, 6, 8):
        raise ColorParseError(f"Invalid hex color: {hex_str}")

    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)

    r = int(digits[0:2], 16)
    g = int(digits[2:4], 16)
    b = int(digits[4:6], 16)
    a = int(digits[6:8], 16) / 255 if len(digits) == 8 else None
    return RGB(r=r, g=g, b=b, a=a)


def rgb_to_hsl(rgb: RGB) -> HSL:
    """Convert RGB to HSL (whole degrees and percentages)."""
    r, g, b = rgb.r / 255, rgb.g / 255, rgb.b / 255
    high = max(r, g, b)
    low = min(r, g, b)
    delta = high - low

    h = 0.0
    s = 0.0
    lightness = (high + low) / 2

    if delta != 0:
        s = delta / (2 - high - low) if lightness > 0.5 else delta / (high + low)
        if high == r:
            h = (g - b) / delta + (6 if g < b else 0)
        elif high == g:
            h = (b - r) / delta + 2
        else:
            h = (r - g) / delta + 4
        h *= 60

    return HSL(
        h=_round_half_up(h) % 360,
        s=_round_half_up(s * 100),
        l=_round_half_up(lightness * 100),
        a=rgb.a,
    )


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def _hsl_channels(h: float, s: float, lightness: float) -> tuple[float, float, float]:
    """HSL with hue in degrees and s/l as 0-1 fractions to 0-1 RGB."""
    hue = (h % 360) / 360
    if s == 0:
        return lightness, lightness, lightness
    q = lightness * (1 + s) if lightness < 0.5 else lightness + s - lightness * s
    p = 2 * lightness - q
    return (
        _hue_to_channel(p, q, hue + 1 / 3),
        _hue_to_channel(p, q, hue),
        _hue_to_channel(p, q, hue - 1 / 3),
    )


def hsl_to_rgb(hsl: HSL) -> RGB:
    """Convert HSL (degrees, percent, percent) to RGB."""
    r, g, b = _hsl_channels(hsl.h, hsl.s / 100, hsl.l / 100)
    return RGB(
        r=_round_half_up(r * 255),
        g=_round_half_up(g * 255),
        b=_round_half_up(b * 255),
        a=hsl.a,
    )


def oklch_to_rgb(oklch: OKLCH) -> RGB:
    """Approximate OKLCH to RGB with a hue-sector interpolation.

    This is deliberately not a colorimetric conversion. Lightness scales the
    channels, chroma controls how far the channels spread, and the hue picks
    which channel dominates within each 60 degree sector.
    """
    lightness = _clamp(oklch.l, 0.0, 1.0)
    chroma = _clamp(oklch.c, 0.0, 0.4)
    hue = math.fmod(oklch.h, 360)

    hue_section = math.floor(hue / 60)
    hue_remainder = math.fmod(hue, 60) / 60

    peak = lightness * (1 + chroma * 2 - 1)
    low = lightness * (1 - chroma)
    mid = lightness * (1 - chroma * (1 - hue_remainder))
    high = lightness * (1 - chroma * hue_remainder)

    sectors = {
        0: (peak, mid, low),
        1: (high, peak, low),
        2: (low, peak, mid),
        3: (low, high, peak),
        4: (mid, low, peak),
        5: (peak, low, high),
    }
    # Negative hues fall outside every sector and render as gray
    r, g, b = sectors.get(int(math.fmod(hue_section, 6)), (lightness,) * 3)

    return RGB(
        r=int(_clamp(_round_half_up(r * 255), 0, 255)),
        g=int(_clamp(_round_half_up(g * 255), 0, 255)),
        b=int(_clamp(_round_half_up(b * 255), 0, 255)),
        a=oklch.a,
    )


# =============================================================================
# Parsing
# =============================================================================


def _parse_hex(text: str) -> ParsedColor:
    rgb = hex_to_rgb(text)
    return ParsedColor(
        hex=rgb_to_hex(rgb), rgb=rgb, hsl=rgb_to_hsl(rgb), format=ColorFormat.HEX
    )


def _parse_rgb(text: str) -> ParsedColor:
    parts = _function_components(text, ("rgb", "rgba"))
    if len(parts) not in (3, 4):
        raise ColorParseError(f"Expected 3 or 4 components in {text!r}")

    channels = []
    for part in parts[:3]:
        if part.endswith("%"):
            value = _to_float(part[:-1], text) * 255 / 100
        else:
            value = _to_float(part, text)
        channels.append(int(_clamp(_round_half_up(value), 0, 255)))

    alpha = _parse_alpha(parts[3], text) if len(parts) == 4 else None
    rgb = RGB(r=channels[0], g=channels[1], b=channels[2], a=alpha)
    return ParsedColor(
        hex=rgb_to_hex(rgb), rgb=rgb, hsl=rgb_to_hsl(rgb), format=ColorFormat.RGB
    )


def _parse_hsl(text: str) -> ParsedColor:
    parts = _function_components(text, ("hsl", "hsla"))
    if len(parts) not in (3, 4):
        raise ColorParseError(f"Expected 3 or 4 components in {text!r}")

    h = _to_float(parts[0].removesuffix("deg"), text)
    s = _clamp(_to_float(parts[1].rstrip("%"), text), 0.0, 100.0)
    lightness = _clamp(_to_float(parts[2].rstrip("%"), text), 0.0, 100.0)
    alpha = _parse_alpha(parts[3], text) if len(parts) == 4 else None

    r, g, b = _hsl_channels(h, s / 100, lightness / 100)
    rgb = RGB(
        r=_round_half_up(r * 255),
        g=_round_half_up(g * 255),
        b=_round_half_up(b * 255),
        a=alpha,
    )
    hsl = HSL(
        h=_round_half_up(h) % 360,
        s=_round_half_up(s),
        l=_round_half_up(lightness),
        a=alpha,
    )
    return ParsedColor(hex=rgb_to_hex(rgb), rgb=rgb, hsl=hsl, format=ColorFormat.HSL)


def _parse_oklch(text: str) -> ParsedColor:
    parts = _function_components(text, ("oklch",))
    if len(parts) not in (3, 4):
        raise ColorParseError(f"Invalid OKLCH color: {text}")

    raw_l = parts[0]
    if raw_l.endswith("%"):
        lightness = _to_float(raw_l[:-1], text) / 100
    else:
        lightness = _to_float(raw_l, text)
    chroma = _to_float(parts[1], text)
    hue = _to_float(parts[2].removesuffix("deg"), text)
    alpha = _parse_alpha(parts[3], text) if len(parts) == 4 else None

    oklch = OKLCH(l=lightness, c=chroma, h=hue, a=alpha)
    rgb = oklch_to_rgb(oklch)
    return ParsedColor(
        hex=rgb_to_hex(rgb),
        rgb=rgb,
        hsl=rgb_to_hsl(rgb),
        oklch=oklch,
        format=ColorFormat.OKLCH,
    )


def detect_color_format(text: str) -> ColorFormat | None:
    """Identify the color family by its literal prefix, ignoring whitespace."""
    cleaned = re.sub(r"\s+", "", text).lower()
    if cleaned.startswith("oklch("):
        return ColorFormat.OKLCH
    if cleaned.startswith("#"):
        return ColorFormat.HEX
    if cleaned.startswith(("rgb(", "rgba(")):
        return ColorFormat.RGB
    if cleaned.startswith(("hsl(", "hsla(")):
        return ColorFormat.HSL
    return None


_PARSERS = {
    ColorFormat.HEX: _parse_hex,
    ColorFormat.RGB: _parse_rgb,
    ColorFormat.HSL: _parse_hsl,
    ColorFormat.OKLCH: _parse_oklch,
}


def parse_color(
    text: str, diagnostics: list[Diagnostic] | None = None
) -> ParsedColor:
    """
    Parse a color string into all of its representations.

    Parameters
    ----------
    text : str
        Color in hex, rgb(a), hsl(a) or oklch form.
    diagnostics : list[Diagnostic], optional
        Receives a diagnostic when the input is not a recognized color.

    Returns
    -------
    ParsedColor
        Hex, RGB and (where available) HSL/OKLCH forms. Unrecognized input
        returns opaque black with ``is_fallback=True`` instead of raising.

    Raises
    ------
    ColorParseError
        If the input belongs to a recognized family but its components are
        malformed (e.g. ``oklch(abc)``).
    """
    color_format = detect_color_format(text)
    if color_format is None:
        logger.warning(f"Unrecognized color format: {text}, defaulting to black")
        if diagnostics is not None:
            diagnostics.append(
                Diagnostic(
                    source="color",
                    message="Unrecognized color format, defaulted to black",
                    value=text,
                    severity=DiagnosticSeverity.WARNING,
                )
            )
        return ParsedColor(hex="#000000", rgb=RGB(r=0, g=0, b=0), is_fallback=True)

    if color_format is ColorFormat.HEX:
        return _parse_hex("".join(text.split()))
    return _PARSERS[color_format](text.strip())


def is_color_value(value: str) -> bool:
    """Return True if ``value`` is exactly one color literal."""
    stripped = value.strip()
    return any(pattern.match(stripped) for pattern in _STRICT_COLOR_PATTERNS)


# =============================================================================
# Distance
# =============================================================================


def color_distance(color1: RGB, color2: RGB) -> float:
    """Euclidean RGB distance normalized to [0, 1] (0 means identical)."""
    distance = np.linalg.norm(color1.as_array() - color2.as_array())
    return float(distance / MAX_RGB_DISTANCE)


def color_confidence(color1: RGB, color2: RGB) -> float:
    """Confidence that two colors are the same, ``1 - color_distance``."""
    return 1.0 - color_distance(color1, color2)


def rgb_matrix(colors: Sequence[RGB]) -> NDArray:
    """Stack RGB channels into an ``(n, 3)`` float array."""
    if not colors:
        return np.empty((0, 3), dtype=float)
    return np.array([[c.r, c.g, c.b] for c in colors], dtype=float)


def find_closest_color(
    target: RGB, candidates: Sequence[RGB] | NDArray
) -> tuple[int | None, float]:
    """
    Find the candidate nearest to ``target``.

    Parameters
    ----------
    target : RGB
        The color to match.
    candidates : sequence of RGB or NDArray
        Candidate colors, or a precomputed ``(n, 3)`` matrix from
        :func:`rgb_matrix`.

    Returns
    -------
    tuple[int | None, float]
        Index of the closest candidate and its confidence. Ties resolve to
        the earliest candidate. ``(None, 0.0)`` when there are no candidates.
    """
    matrix = candidates if isinstance(candidates, np.ndarray) else rgb_matrix(candidates)
    if matrix.shape[0] == 0:
        return None, 0.0

    distances = np.linalg.norm(matrix - target.as_array(), axis=1) / MAX_RGB_DISTANCE
    index = int(np.argmin(distances))
    return index, float(1.0 - distances[index])
