"""Source pattern matchers for hardcoded style values."""

from .base import (
    ColorDetails,
    LengthDetails,
    MatchContext,
    MatchLocation,
    MatchResult,
    PatternMatcher,
    ScanResult,
    ShadowDetails,
    create_match_location,
    get_context,
    get_full_line,
    get_line_and_column,
)
from .inline_style import InlineStyleMatcher
from .patterns import CSS_PROPERTY_CATEGORIES, UTILITY_PREFIXES, PrefixTarget
from .utility_class import UtilityClassMatcher

__all__ = [
    # Records
    "MatchResult",
    "MatchLocation",
    "MatchContext",
    "ScanResult",
    "ColorDetails",
    "LengthDetails",
    "ShadowDetails",
    # Matchers
    "PatternMatcher",
    "UtilityClassMatcher",
    "InlineStyleMatcher",
    # Tables
    "CSS_PROPERTY_CATEGORIES",
    "UTILITY_PREFIXES",
    "PrefixTarget",
    # Location helpers
    "create_match_location",
    "get_context",
    "get_full_line",
    "get_line_and_column",
]
