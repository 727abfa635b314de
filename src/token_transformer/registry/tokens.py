"""
Design token models.

Tokens are immutable Pydantic models; the five variants form a tagged union
discriminated by ``category``. Field names serialize in camelCase
(``cssVariable``, ``tailwindClass``, ``originalValue``) so exported JSON
matches the conventions of the component sources the tokens are applied to.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..config import TokenCategory
from ..utils.color_math import HSL, OKLCH, RGB


_TOKEN_MODEL_CONFIG = ConfigDict(
    frozen=True,
    extra="forbid",
    alias_generator=to_camel,
    populate_by_name=True,
)


# =============================================================================
# Value containers
# =============================================================================


class ColorValue(BaseModel):
    """Normalized color formats."""

    model_config = _TOKEN_MODEL_CONFIG

    hex: str
    rgb: RGB
    hsl: HSL | None = None
    oklch: OKLCH | None = None


class TypographyValue(BaseModel):
    """Font properties gathered from one or more declarations."""

    model_config = _TOKEN_MODEL_CONFIG

    font_family: str | None = None
    font_size: str | None = None
    font_weight: int | float | str | None = None
    line_height: int | float | str | None = None
    letter_spacing: str | None = None

    def field_values(self) -> list[str]:
        """Declared values as strings, in field order."""
        values = [
            self.font_family,
            self.font_size,
            self.font_weight,
            self.line_height,
            self.letter_spacing,
        ]
        return [str(v) for v in values if v is not None]


class ShadowLayer(BaseModel):
    """One comma-separated layer of a box-shadow value."""

    model_config = _TOKEN_MODEL_CONFIG

    offset_x: str
    offset_y: str
    blur: str = "0"
    spread: str = "0"
    color: str = "currentColor"
    inset: bool = False


# =============================================================================
# Tokens
# =============================================================================


class BaseToken(BaseModel):
    """Fields shared by every token variant."""

    model_config = _TOKEN_MODEL_CONFIG

    name: str
    css_variable: str
    tailwind_class: str | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ColorToken(BaseToken):
    category: Literal[TokenCategory.COLOR] = TokenCategory.COLOR
    original_value: str
    value: ColorValue


class TypographyToken(BaseToken):
    category: Literal[TokenCategory.TYPOGRAPHY] = TokenCategory.TYPOGRAPHY
    value: TypographyValue = Field(default_factory=TypographyValue)


class SpacingToken(BaseToken):
    category: Literal[TokenCategory.SPACING] = TokenCategory.SPACING
    value: str


class BorderRadiusToken(BaseToken):
    category: Literal[TokenCategory.BORDER_RADIUS] = TokenCategory.BORDER_RADIUS
    value: str


class ShadowToken(BaseToken):
    category: Literal[TokenCategory.SHADOW] = TokenCategory.SHADOW
    value: str
    components: tuple[ShadowLayer, ...] | None = None


DesignToken = Annotated[
    Union[ColorToken, TypographyToken, SpacingToken, BorderRadiusToken, ShadowToken],
    Field(discriminator="category"),
]
