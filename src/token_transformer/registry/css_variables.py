"""
CSS custom property parsing for the token registry.

Extracts ``--name: value;`` declarations from CSS text, classifies each
variable into a token category, and derives token names, utility-class
aliases and structured shadow layers. This is a simplified scanner: it does
not model selectors, cascade or ``@media`` scoping, and the last declaration
of a variable wins.
"""

from __future__ import annotations

import re

from ..config import TokenCategory
from ..utils.color_math import is_color_value
from ..utils.text import split_top_level
from .tokens import ShadowLayer


class ShadowParseError(ValueError):
    """Raised when a shadow value cannot be split into layers."""


# =============================================================================
# Naming conventions
# =============================================================================

_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_DECLARATION_START = re.compile(r"--([A-Za-z0-9_-]+)\s*:")

# Leading category prefixes removed to form a token name
_NAME_PREFIX = re.compile(r"^(color-|font-|spacing-|border-radius-|shadow-)")

# Trailing typography suffixes removed to form the shared base name
_TYPOGRAPHY_SUFFIX = re.compile(
    r"-(font-family|font-size|font-weight|line-height|letter-spacing)$"
)

# Substrings marking a typography variable, checked in order
TYPOGRAPHY_MARKERS: tuple[str, ...] = (
    "font-family",
    "font-size",
    "font-weight",
    "line-height",
    "letter-spacing",
    "text-",
)

_TYPOGRAPHY_FIELDS: tuple[tuple[str, str], ...] = (
    ("font-family", "font_family"),
    ("font-size", "font_size"),
    ("font-weight", "font_weight"),
    ("line-height", "line_height"),
    ("letter-spacing", "letter_spacing"),
)

# Variable prefix -> utility-class alias template
_ALIAS_TEMPLATES: dict[TokenCategory, tuple[str, str]] = {
    TokenCategory.COLOR: ("--color-", "text-{name}"),
    TokenCategory.SPACING: ("--spacing-", "p-{name}"),
    TokenCategory.BORDER_RADIUS: ("--border-radius-", "rounded-{name}"),
    TokenCategory.SHADOW: ("--shadow-", "shadow-{name}"),
}

_LENGTH = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)(?:[a-z%]+)?$", re.IGNORECASE)


# =============================================================================
# Declaration scanning
# =============================================================================


def _remove_comments(content: str) -> str:
    return _COMMENT.sub("", content)


def _scan_value_end(content: str, start: int) -> int:
    """Index of the ``;`` (or block-closing ``}``) that ends a value."""
    depth = 0
    quote: str | None = None
    i = start
    while i < len(content):
        ch = content[i]
        if quote is not None:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch in "([{":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif ch == "}":
            if depth == 0:
                return i
            depth -= 1
        elif ch == ";" and depth == 0:
            return i
        i += 1
    return len(content)


def extract_css_variables(css_content: str) -> dict[str, str]:
    """
    Extract CSS custom property declarations.

    Parameters
    ----------
    css_content : str
        Raw CSS text.

    Returns
    -------
    dict[str, str]
        Variable name (with ``--``) to trimmed raw value, in order of first
        declaration. When a variable is declared more than once the last
        value is kept.
    """
    content = _remove_comments(css_content)
    variables: dict[str, str] = {}
    pos = 0

    while True:
        match = _DECLARATION_START.search(content, pos)
        if match is None:
            break

        # Only accept declarations that start a statement
        j = match.start() - 1
        while j >= 0 and content[j].isspace():
            j -= 1
        if j >= 0 and content[j] not in "{;":
            pos = match.start() + 2
            continue

        value_end = _scan_value_end(content, match.end())
        value = content[match.end() : value_end].strip()
        if value:
            variables[f"--{match.group(1)}"] = value
        pos = value_end + 1

    return variables


# =============================================================================
# Classification
# =============================================================================


def is_variable_reference(value: str) -> bool:
    return value.strip().startswith("var(")


def is_typography_variable(css_variable: str) -> bool:
    return any(marker in css_variable for marker in TYPOGRAPHY_MARKERS)


def classify_variable(css_variable: str, value: str) -> TokenCategory | None:
    """Decide the token category of a declaration.

    Colors are recognized by value shape; every other category by name.
    Returns None for declarations the registry does not model.
    """
    if is_color_value(value):
        return TokenCategory.COLOR
    if "spacing" in css_variable:
        return TokenCategory.SPACING
    if "border-radius" in css_variable:
        return TokenCategory.BORDER_RADIUS
    if "shadow" in css_variable:
        return TokenCategory.SHADOW
    if is_typography_variable(css_variable):
        return TokenCategory.TYPOGRAPHY
    return None


def token_name(css_variable: str) -> str:
    """``--color-primary`` -> ``primary``."""
    return _NAME_PREFIX.sub("", css_variable.removeprefix("--"))


def typography_base_name(name: str) -> str:
    """``header-1-font-size`` -> ``header-1``."""
    return _TYPOGRAPHY_SUFFIX.sub("", name)


def typography_field(css_variable: str) -> str | None:
    """Name of the ``TypographyValue`` field a variable sets, if any."""
    for marker, field_name in _TYPOGRAPHY_FIELDS:
        if marker in css_variable:
            return field_name
    return None


def utility_alias(css_variable: str, name: str, category: TokenCategory) -> str | None:
    template = _ALIAS_TEMPLATES.get(category)
    if template is None or not css_variable.startswith(template[0]):
        return None
    return template[1].format(name=name)


def coerce_number(value: str) -> int | float | str:
    """Return ``value`` as a number when it is purely numeric."""
    try:
        number = float(value)
    except ValueError:
        return value
    if number.is_integer() and "." not in value and "e" not in value.lower():
        return int(number)
    return number


# =============================================================================
# Shadows
# =============================================================================


def parse_shadow_components(shadow_value: str) -> tuple[ShadowLayer, ...]:
    """
    Split a box-shadow value into layers.

    Commas inside parentheses do not separate layers. Within a layer the
    first two to four length tokens are x, y, blur and spread, ``inset`` may
    appear anywhere, and the remaining tokens form the color.

    Raises
    ------
    ShadowParseError
        If a layer does not carry at least two offsets or carries more than
        four lengths.
    """
    layers: list[ShadowLayer] = []

    for _, part in split_top_level(shadow_value, ","):
        tokens = [t for _, t in split_top_level(part.strip(), whitespace=True)]
        inset = any(t.lower() == "inset" for t in tokens)
        tokens = [t for t in tokens if t.lower() != "inset"]

        lengths = [t for t in tokens if _LENGTH.match(t)]
        colors = [t for t in tokens if not _LENGTH.match(t)]
        if not 2 <= len(lengths) <= 4:
            raise ShadowParseError(f"Cannot read offsets from shadow layer {part.strip()!r}")

        layers.append(
            ShadowLayer(
                offset_x=lengths[0],
                offset_y=lengths[1],
                blur=lengths[2] if len(lengths) > 2 else "0",
                spread=lengths[3] if len(lengths) > 3 else "0",
                color=" ".join(colors) or "currentColor",
                inset=inset,
            )
        )

    if not layers:
        raise ShadowParseError(f"Empty shadow value {shadow_value!r}")
    return tuple(layers)
