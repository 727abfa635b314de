"""
Lookup tables and value shape checks for the pattern matchers.

The tables are read-only mappings built at import time:

- ``UTILITY_PREFIXES``: arbitrary-value utility prefix to the CSS property
  and category it sets. A prefix may carry several targets (``text-`` sets
  either ``color`` or ``fontSize``); the value shape picks between them.
- ``CSS_PROPERTY_CATEGORIES``: camelCase style property to category.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import NamedTuple

from ..config import TokenCategory
from ..utils.color_math import detect_color_format
from ..utils.text import split_top_level
from .base import ColorDetails, LengthDetails, ShadowDetails, ValueDetails


class PrefixTarget(NamedTuple):
    """CSS property and token category addressed by a utility prefix."""

    property: str
    category: TokenCategory


_C = TokenCategory

# =============================================================================
# Utility-class prefixes
# =============================================================================

UTILITY_PREFIXES: MappingProxyType[str, tuple[PrefixTarget, ...]] = MappingProxyType(
    {
        # Colors
        "bg-": (PrefixTarget("backgroundColor", _C.COLOR),),
        "text-": (
            PrefixTarget("color", _C.COLOR),
            PrefixTarget("fontSize", _C.TYPOGRAPHY),
        ),
        "border-": (PrefixTarget("borderColor", _C.COLOR),),
        "border-t-": (PrefixTarget("borderTopColor", _C.COLOR),),
        "border-b-": (PrefixTarget("borderBottomColor", _C.COLOR),),
        "border-l-": (PrefixTarget("borderLeftColor", _C.COLOR),),
        "border-r-": (PrefixTarget("borderRightColor", _C.COLOR),),
        "outline-": (PrefixTarget("outlineColor", _C.COLOR),),
        "fill-": (PrefixTarget("fill", _C.COLOR),),
        "stroke-": (PrefixTarget("stroke", _C.COLOR),),
        "from-": (PrefixTarget("gradientColorFrom", _C.COLOR),),
        "to-": (PrefixTarget("gradientColorTo", _C.COLOR),),
        "via-": (PrefixTarget("gradientColorVia", _C.COLOR),),
        # Border radius
        "rounded-": (PrefixTarget("borderRadius", _C.BORDER_RADIUS),),
        "rounded-t-": (PrefixTarget("borderTopRadius", _C.BORDER_RADIUS),),
        "rounded-b-": (PrefixTarget("borderBottomRadius", _C.BORDER_RADIUS),),
        "rounded-l-": (PrefixTarget("borderLeftRadius", _C.BORDER_RADIUS),),
        "rounded-r-": (PrefixTarget("borderRightRadius", _C.BORDER_RADIUS),),
        "rounded-tl-": (PrefixTarget("borderTopLeftRadius", _C.BORDER_RADIUS),),
        "rounded-tr-": (PrefixTarget("borderTopRightRadius", _C.BORDER_RADIUS),),
        "rounded-bl-": (PrefixTarget("borderBottomLeftRadius", _C.BORDER_RADIUS),),
        "rounded-br-": (PrefixTarget("borderBottomRightRadius", _C.BORDER_RADIUS),),
        # Shadows
        "shadow-": (PrefixTarget("boxShadow", _C.SHADOW),),
        # Spacing
        "m-": (PrefixTarget("margin", _C.SPACING),),
        "mt-": (PrefixTarget("marginTop", _C.SPACING),),
        "mr-": (PrefixTarget("marginRight", _C.SPACING),),
        "mb-": (PrefixTarget("marginBottom", _C.SPACING),),
        "ml-": (PrefixTarget("marginLeft", _C.SPACING),),
        "mx-": (PrefixTarget("marginHorizontal", _C.SPACING),),
        "my-": (PrefixTarget("marginVertical", _C.SPACING),),
        "p-": (PrefixTarget("padding", _C.SPACING),),
        "pt-": (PrefixTarget("paddingTop", _C.SPACING),),
        "pr-": (PrefixTarget("paddingRight", _C.SPACING),),
        "pb-": (PrefixTarget("paddingBottom", _C.SPACING),),
        "pl-": (PrefixTarget("paddingLeft", _C.SPACING),),
        "px-": (PrefixTarget("paddingHorizontal", _C.SPACING),),
        "py-": (PrefixTarget("paddingVertical", _C.SPACING),),
        "gap-": (PrefixTarget("gap", _C.SPACING),),
        "gap-x-": (PrefixTarget("columnGap", _C.SPACING),),
        "gap-y-": (PrefixTarget("rowGap", _C.SPACING),),
        "space-x-": (PrefixTarget("spaceX", _C.SPACING),),
        "space-y-": (PrefixTarget("spaceY", _C.SPACING),),
        # Typography
        "font-": (PrefixTarget("fontWeight", _C.TYPOGRAPHY),),
        "leading-": (PrefixTarget("lineHeight", _C.TYPOGRAPHY),),
        "tracking-": (PrefixTarget("letterSpacing", _C.TYPOGRAPHY),),
    }
)

# =============================================================================
# Style properties
# =============================================================================

CSS_PROPERTY_CATEGORIES: MappingProxyType[str, TokenCategory] = MappingProxyType(
    {
        # Colors
        "color": _C.COLOR,
        "backgroundColor": _C.COLOR,
        "borderColor": _C.COLOR,
        "fill": _C.COLOR,
        "stroke": _C.COLOR,
        "outlineColor": _C.COLOR,
        "background": _C.COLOR,
        # Spacing
        "margin": _C.SPACING,
        "marginTop": _C.SPACING,
        "marginRight": _C.SPACING,
        "marginBottom": _C.SPACING,
        "marginLeft": _C.SPACING,
        "padding": _C.SPACING,
        "paddingTop": _C.SPACING,
        "paddingRight": _C.SPACING,
        "paddingBottom": _C.SPACING,
        "paddingLeft": _C.SPACING,
        "gap": _C.SPACING,
        "columnGap": _C.SPACING,
        "rowGap": _C.SPACING,
        # Border radius
        "borderRadius": _C.BORDER_RADIUS,
        "borderTopLeftRadius": _C.BORDER_RADIUS,
        "borderTopRightRadius": _C.BORDER_RADIUS,
        "borderBottomLeftRadius": _C.BORDER_RADIUS,
        "borderBottomRightRadius": _C.BORDER_RADIUS,
        # Shadows
        "boxShadow": _C.SHADOW,
        "textShadow": _C.SHADOW,
        "filter": _C.SHADOW,
        # Typography
        "fontSize": _C.TYPOGRAPHY,
        "fontWeight": _C.TYPOGRAPHY,
        "lineHeight": _C.TYPOGRAPHY,
        "letterSpacing": _C.TYPOGRAPHY,
        "fontFamily": _C.TYPOGRAPHY,
    }
)


def camel_case_property(name: str) -> str:
    """``background-color`` -> ``backgroundColor``."""
    head, *rest = name.split("-")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


# =============================================================================
# Value shapes
# =============================================================================

COLOR_SHAPE = re.compile(
    r"^(?:#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})"
    r"|(?:rgba?|hsla?|oklch)\s*\([^()]*\))$",
    re.IGNORECASE,
)
LENGTH_SHAPE = re.compile(r"^(-?(?:\d+\.?\d*|\.\d+))([a-zA-Z]+|%)?$")
_FONT_KEYWORDS = frozenset({"normal", "bold", "bolder", "lighter"})
_FONT_FAMILY = re.compile(
    r"""^(?:"[^"]+"|'[^']+'|[A-Za-z][\w-]*(?:\s+[A-Za-z][\w-]*)*)"""
    r"""(?:\s*,\s*(?:"[^"]+"|'[^']+'|[A-Za-z][\w-]*(?:\s+[A-Za-z][\w-]*)*))*$"""
)
_DROP_SHADOW = re.compile(r"^drop-shadow\s*\((.*)\)$", re.DOTALL)


def is_color_shape(value: str) -> bool:
    return bool(COLOR_SHAPE.match(value.strip()))


def is_length(value: str) -> bool:
    """A number with a unit, or a bare zero."""
    match = LENGTH_SHAPE.match(value.strip())
    if match is None:
        return False
    return match.group(2) is not None or float(match.group(1)) == 0


def is_length_list(value: str, max_items: int = 4) -> bool:
    """One to ``max_items`` space-separated lengths (``8px 16px``)."""
    parts = value.split()
    return 0 < len(parts) <= max_items and all(is_length(p) for p in parts)


def _shadow_layer_ok(layer: str) -> bool:
    layer = layer.strip()
    unwrapped = _DROP_SHADOW.match(layer)
    if unwrapped:
        layer = unwrapped.group(1).strip()
    tokens = [t for _, t in split_top_level(layer, whitespace=True)]
    tokens = [t for t in tokens if t.lower() != "inset"]
    if len(tokens) < 3 or not is_color_shape(tokens[-1]):
        return False
    lengths = tokens[:-1]
    return 2 <= len(lengths) <= 4 and all(is_length(t) for t in lengths)


def is_shadow(value: str) -> bool:
    """Every comma-separated layer has 2-4 lengths followed by a color."""
    layers = split_top_level(value, ",")
    return bool(layers) and all(_shadow_layer_ok(layer) for _, layer in layers)


def is_typography(value: str, property_name: str | None = None) -> bool:
    value = value.strip()
    if property_name == "fontFamily":
        return bool(_FONT_FAMILY.match(value))
    if value.lower() in _FONT_KEYWORDS or is_length(value):
        return True
    try:
        float(value)
    except ValueError:
        return False
    return True


def matches_shape(
    category: TokenCategory, value: str, property_name: str | None = None
) -> bool:
    """Check a literal style value against the shape expected for ``category``."""
    if category is TokenCategory.COLOR:
        return is_color_shape(value)
    if category in (TokenCategory.SPACING, TokenCategory.BORDER_RADIUS):
        return is_length_list(value)
    if category is TokenCategory.SHADOW:
        return is_shadow(value)
    return is_typography(value, property_name)


def choose_target(targets: tuple[PrefixTarget, ...], value: str) -> PrefixTarget:
    """Pick the first target whose category fits the value, else the first."""
    if len(targets) > 1:
        for target in targets:
            if matches_shape(target.category, value, target.property):
                return target
    return targets[0]


# =============================================================================
# Details
# =============================================================================


def describe_value(category: TokenCategory, value: str, dynamic: bool = False) -> ValueDetails:
    """Build the category-specific details record for a matched value."""
    if category is TokenCategory.COLOR:
        return ColorDetails(color_format=detect_color_format(value), dynamic=dynamic)

    if category is TokenCategory.SHADOW:
        layers = split_top_level(value, ",")
        inset = any(
            t.lower() == "inset"
            for _, layer in layers
            for _, t in split_top_level(layer, whitespace=True)
        )
        return ShadowDetails(layer_count=len(layers), inset=inset, dynamic=dynamic)

    first = value.split()[0] if value.split() else ""
    match = LENGTH_SHAPE.match(first)
    if match is None:
        return LengthDetails(dynamic=dynamic)
    return LengthDetails(
        magnitude=float(match.group(1)), unit=match.group(2), dynamic=dynamic
    )
