"""Design token registry built from CSS custom properties."""

from .css_variables import ShadowParseError, extract_css_variables, parse_shadow_components
from .token_registry import (
    RegistryError,
    RegistryNotInitializedError,
    TokenExportError,
    TokenMatch,
    TokenRegistry,
    TokenSourceError,
)
from .tokens import (
    BorderRadiusToken,
    ColorToken,
    ColorValue,
    DesignToken,
    ShadowLayer,
    ShadowToken,
    SpacingToken,
    TypographyToken,
    TypographyValue,
)

__all__ = [
    # Registry
    "TokenRegistry",
    "TokenMatch",
    # Errors
    "RegistryError",
    "RegistryNotInitializedError",
    "TokenSourceError",
    "TokenExportError",
    "ShadowParseError",
    # Tokens
    "DesignToken",
    "ColorToken",
    "ColorValue",
    "TypographyToken",
    "TypographyValue",
    "SpacingToken",
    "BorderRadiusToken",
    "ShadowToken",
    "ShadowLayer",
    # Parsing
    "extract_css_variables",
    "parse_shadow_components",
]
