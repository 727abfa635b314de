"""
Configuration classes for the token transformer.

Holds the shared enums (token categories, match scopes, color formats),
the option models accepted by the registry and the pattern matchers, and
the environment-driven settings. Uses Pydantic for validation and type safety.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_COLOR_THRESHOLD = 0.85


# =============================================================================
# Enums
# =============================================================================


class TokenCategory(str, Enum):
    """Categories of design tokens (and of matched style values)."""

    COLOR = "color"
    TYPOGRAPHY = "typography"
    SPACING = "spacing"
    BORDER_RADIUS = "borderRadius"
    SHADOW = "shadow"


class MatchScope(str, Enum):
    """Syntactic context a matched value was found in."""

    INLINE_STYLE = "inline-style"
    UTILITY_CLASS = "utility-class"
    PROP = "prop"
    STYLED_COMPONENT = "styled-component"


class ColorFormat(str, Enum):
    """Textual color families understood by the color math."""

    HEX = "hex"
    RGB = "rgb"
    HSL = "hsl"
    OKLCH = "oklch"


ALL_CATEGORIES: tuple[TokenCategory, ...] = tuple(TokenCategory)


# =============================================================================
# Registry configuration
# =============================================================================


class TokenRegistryConfig(BaseModel):
    """Where the registry reads its CSS from and how colors are normalized."""

    css_path: Path | None = None
    css_content: str | None = None
    normalize_colors: bool = Field(
        default=True,
        description="Keep HSL/OKLCH representations alongside hex and RGB",
    )

    model_config = {"extra": "forbid"}

    @property
    def has_source(self) -> bool:
        return self.css_path is not None or bool(self.css_content)


class TokenMatchOptions(BaseModel):
    """Options for token lookups."""

    threshold: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Minimum confidence; None uses the configured default",
    )
    categories: list[TokenCategory] | None = None
    exact: bool = False

    model_config = {"extra": "forbid"}

    @classmethod
    def exact_only(cls) -> TokenMatchOptions:
        return cls(exact=True)


# =============================================================================
# Matcher configuration
# =============================================================================


class MatcherOptions(BaseModel):
    """Options shared by the pattern matchers."""

    types: list[TokenCategory] | None = Field(
        default=None, description="Categories to emit; None means all"
    )
    include_context: bool = True
    context_size: int = Field(
        default=100, ge=0, description="Characters kept either side of a match"
    )
    scope_limit: list[MatchScope] | None = None
    custom_patterns: list[re.Pattern] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    @field_validator("custom_patterns", mode="before")
    @classmethod
    def compile_patterns(cls, v):
        if v is None:
            return []
        return [re.compile(p) if isinstance(p, str) else p for p in v]

    @model_validator(mode="after")
    def check_types_not_empty(self) -> MatcherOptions:
        if self.types is not None and len(self.types) == 0:
            raise ValueError("types must be None or contain at least one category")
        return self

    @property
    def categories(self) -> tuple[TokenCategory, ...]:
        return tuple(self.types) if self.types is not None else ALL_CATEGORIES

    def allows_scope(self, scope: MatchScope) -> bool:
        return self.scope_limit is None or scope in self.scope_limit


# =============================================================================
# Environment settings
# =============================================================================


class TokenTransformerSettings(BaseSettings):
    """Settings loaded from environment variables (``TOKEN_TRANSFORMER_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="TOKEN_TRANSFORMER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    css_path: Path | None = None
    color_threshold: float = Field(default=DEFAULT_COLOR_THRESHOLD, ge=0.0, le=1.0)


@lru_cache
def get_settings() -> TokenTransformerSettings:
    """Get cached settings instance."""
    return TokenTransformerSettings()
