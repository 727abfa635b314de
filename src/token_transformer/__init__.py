"""
Token Transformer

Finds hardcoded style values in component source (arbitrary-value utility
classes and inline style objects) and resolves them to named design tokens
parsed from CSS custom properties, with a confidence score per match.
"""

from loguru import logger

from .config import (
    # Enums
    TokenCategory,
    MatchScope,
    ColorFormat,
    # Config classes
    TokenRegistryConfig,
    TokenMatchOptions,
    MatcherOptions,
    TokenTransformerSettings,
    get_settings,
)

from .diagnostics import Diagnostic, DiagnosticSeverity

from .registry import (
    # Registry
    TokenRegistry,
    TokenMatch,
    # Errors
    RegistryError,
    RegistryNotInitializedError,
    TokenSourceError,
    TokenExportError,
    # Tokens
    DesignToken,
    ColorToken,
    TypographyToken,
    SpacingToken,
    BorderRadiusToken,
    ShadowToken,
)

from .matchers import (
    PatternMatcher,
    UtilityClassMatcher,
    InlineStyleMatcher,
    MatchResult,
    MatchLocation,
    MatchContext,
    ScanResult,
)

from .analysis import ReplacementCandidate, find_replacement_candidates

from .utils import ColorParseError, parse_color, color_distance

__version__ = "0.1.0"

# Library code stays quiet unless the application opts in
logger.disable("token_transformer")

__all__ = [
    # Enums
    "TokenCategory",
    "MatchScope",
    "ColorFormat",
    # Config
    "TokenRegistryConfig",
    "TokenMatchOptions",
    "MatcherOptions",
    "TokenTransformerSettings",
    "get_settings",
    # Diagnostics
    "Diagnostic",
    "DiagnosticSeverity",
    # Registry
    "TokenRegistry",
    "TokenMatch",
    "RegistryError",
    "RegistryNotInitializedError",
    "TokenSourceError",
    "TokenExportError",
    "DesignToken",
    "ColorToken",
    "TypographyToken",
    "SpacingToken",
    "BorderRadiusToken",
    "ShadowToken",
    # Matchers
    "PatternMatcher",
    "UtilityClassMatcher",
    "InlineStyleMatcher",
    "MatchResult",
    "MatchLocation",
    "MatchContext",
    "ScanResult",
    # Analysis
    "ReplacementCandidate",
    "find_replacement_candidates",
    # Color
    "ColorParseError",
    "parse_color",
    "color_distance",
]
