"""
Token registry: parses design tokens from CSS variables and answers
lookup and nearest-match queries.

The registry moves one way from uninitialized to initialized. Every query
raises :class:`RegistryNotInitializedError` before :meth:`TokenRegistry.initialize`
has run; after that the registry is read-only.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from ..config import TokenCategory, TokenMatchOptions, TokenRegistryConfig, get_settings
from ..diagnostics import Diagnostic, DiagnosticSeverity
from ..utils.color_math import (
    ColorParseError,
    find_closest_color,
    is_color_value,
    parse_color,
    rgb_matrix,
)
from .css_variables import (
    ShadowParseError,
    classify_variable,
    coerce_number,
    extract_css_variables,
    is_variable_reference,
    parse_shadow_components,
    token_name,
    typography_base_name,
    typography_field,
    utility_alias,
)
from .tokens import (
    BorderRadiusToken,
    ColorToken,
    ColorValue,
    DesignToken,
    ShadowToken,
    SpacingToken,
    TypographyToken,
    TypographyValue,
)


class RegistryError(Exception):
    """Base class for fatal registry errors."""


class RegistryNotInitializedError(RegistryError):
    """Raised when the registry is queried before initialize()."""


class TokenSourceError(RegistryError):
    """Raised when no CSS source is configured or it cannot be read."""


class TokenExportError(RegistryError):
    """Raised when tokens cannot be written to JSON."""


# Fixed search order when no category is requested
BEST_MATCH_ORDER: tuple[TokenCategory, ...] = (
    TokenCategory.COLOR,
    TokenCategory.SPACING,
    TokenCategory.BORDER_RADIUS,
    TokenCategory.SHADOW,
)

_NUMERIC_TYPOGRAPHY_FIELDS = frozenset({"font_weight", "line_height"})


@dataclass(frozen=True)
class TokenMatch:
    """A token matched to a queried value."""

    token: DesignToken
    confidence: float
    original_value: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "token": self.token.to_dict(),
            "confidence": self.confidence,
            "originalValue": self.original_value,
        }


class TokenRegistry:
    """
    Registry of design tokens parsed from CSS custom properties.

    Parameters
    ----------
    css_content : str, optional
        Raw CSS with token declarations.
    css_path : str or Path, optional
        CSS file to read. Takes precedence over ``css_content``.
    normalize_colors : bool, default True
        Keep HSL/OKLCH representations on color tokens.
    config : TokenRegistryConfig, optional
        Full configuration; overrides the individual arguments.

    Examples
    --------
    >>> registry = TokenRegistry(css_content=":root { --spacing-sm: 1rem; }")
    >>> registry.initialize()
    >>> registry.find_best_match("1rem").token.name
    'sm'
    """

    def __init__(
        self,
        css_content: str | None = None,
        css_path: str | Path | None = None,
        normalize_colors: bool = True,
        config: TokenRegistryConfig | None = None,
    ):
        if config is None:
            config = TokenRegistryConfig(
                css_path=Path(css_path) if css_path is not None else None,
                css_content=css_content,
                normalize_colors=normalize_colors,
            )
        self.config = config

        self._css_vars: dict[str, str] = {}
        self._tokens: dict[TokenCategory, tuple[DesignToken, ...]] = {
            category: () for category in TokenCategory
        }
        self._color_matrix = rgb_matrix([])
        self._diagnostics: list[Diagnostic] = []
        self._initialized = False

    @classmethod
    def from_config(cls, config: TokenRegistryConfig) -> TokenRegistry:
        return cls(config=config)

    # -------------------------------------------------------------------------
    # Initialization
    # -------------------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self, source: str | Path | None = None) -> TokenRegistry:
        """
        Load tokens from CSS.

        Parameters
        ----------
        source : str or Path, optional
            CSS text (``str``) or a CSS file (``Path``). Defaults to the
            configured source, then to the ``TOKEN_TRANSFORMER_CSS_PATH``
            setting.

        Returns
        -------
        TokenRegistry
            ``self``, for chaining. Calling again after success is a no-op.

        Raises
        ------
        TokenSourceError
            If no source is available or the file cannot be read.
        """
        if self._initialized:
            return self

        css_content = self._read_source(source)
        self._css_vars = extract_css_variables(css_content)
        self._build_tokens()
        self._initialized = True

        counts = ", ".join(f"{k}={v}" for k, v in self.get_token_counts().items())
        logger.info(
            f"Token registry initialized from {len(self._css_vars)} variables ({counts})"
        )
        return self

    def _read_source(self, source: str | Path | None) -> str:
        if isinstance(source, Path):
            return self._read_file(source)
        if isinstance(source, str):
            if not source:
                raise TokenSourceError("No CSS source provided. CSS content is empty.")
            return source
        if self.config.css_path is not None:
            return self._read_file(self.config.css_path)
        if self.config.css_content:
            return self.config.css_content

        settings_path = get_settings().css_path
        if settings_path is not None:
            return self._read_file(settings_path)
        raise TokenSourceError("No CSS source provided. Specify css_path or css_content.")

    @staticmethod
    def _read_file(path: Path) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise TokenSourceError(f"Failed to read CSS file {path}: {e}") from e

    def _record(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)
        if diagnostic.severity is DiagnosticSeverity.WARNING:
            logger.warning(str(diagnostic))
        else:
            logger.debug(str(diagnostic))

    def _build_tokens(self) -> None:
        colors: list[ColorToken] = []
        spacing: list[SpacingToken] = []
        radii: list[BorderRadiusToken] = []
        shadows: list[ShadowToken] = []
        # Typography accumulates across declarations until every variable is read
        typography: dict[str, dict[str, Any]] = {}

        for css_variable, value in self._css_vars.items():
            if is_variable_reference(value):
                self._record(
                    Diagnostic(
                        source="registry",
                        message="Variable reference does not resolve to a token",
                        value=css_variable,
                        severity=DiagnosticSeverity.INFO,
                    )
                )
                continue

            category = classify_variable(css_variable, value)
            if category is None:
                logger.debug(f"Skipping {css_variable}: not a modelled token category")
                continue

            name = token_name(css_variable)
            if category is TokenCategory.COLOR:
                token = self._create_color_token(name, css_variable, value)
                if token is not None:
                    colors.append(token)
            elif category is TokenCategory.SPACING:
                spacing.append(
                    SpacingToken(
                        name=name,
                        css_variable=css_variable,
                        tailwind_class=utility_alias(css_variable, name, category),
                        value=value,
                    )
                )
            elif category is TokenCategory.BORDER_RADIUS:
                radii.append(
                    BorderRadiusToken(
                        name=name,
                        css_variable=css_variable,
                        tailwind_class=utility_alias(css_variable, name, category),
                        value=value,
                    )
                )
            elif category is TokenCategory.SHADOW:
                shadows.append(self._create_shadow_token(name, css_variable, value))
            else:
                fields = typography.setdefault(typography_base_name(name), {})
                field_name = typography_field(css_variable)
                if field_name is not None:
                    fields[field_name] = (
                        coerce_number(value)
                        if field_name in _NUMERIC_TYPOGRAPHY_FIELDS
                        else value
                    )

        typography_tokens = [
            TypographyToken(
                name=base_name,
                css_variable=f"--{base_name}",
                value=TypographyValue(**fields),
            )
            for base_name, fields in typography.items()
        ]

        self._tokens = {
            TokenCategory.COLOR: tuple(colors),
            TokenCategory.TYPOGRAPHY: tuple(typography_tokens),
            TokenCategory.SPACING: tuple(spacing),
            TokenCategory.BORDER_RADIUS: tuple(radii),
            TokenCategory.SHADOW: tuple(shadows),
        }
        self._color_matrix = rgb_matrix([t.value.rgb for t in colors])
        self._color_matrix.setflags(write=False)

    def _create_color_token(
        self, name: str, css_variable: str, value: str
    ) -> ColorToken | None:
        try:
            parsed = parse_color(value, self._diagnostics)
        except ColorParseError as e:
            self._record(
                Diagnostic(
                    source="registry",
                    message=f"Failed to parse color token {css_variable}: {e}",
                    value=value,
                )
            )
            return None

        return ColorToken(
            name=name,
            css_variable=css_variable,
            tailwind_class=utility_alias(css_variable, name, TokenCategory.COLOR),
            original_value=value,
            value=ColorValue(
                hex=parsed.hex,
                rgb=parsed.rgb,
                hsl=parsed.hsl if self.config.normalize_colors else None,
                oklch=parsed.oklch if self.config.normalize_colors else None,
            ),
        )

    def _create_shadow_token(self, name: str, css_variable: str, value: str) -> ShadowToken:
        try:
            components = parse_shadow_components(value)
        except ShadowParseError as e:
            self._record(
                Diagnostic(
                    source="registry",
                    message=f"Shadow components unavailable for {css_variable}: {e}",
                    value=value,
                    severity=DiagnosticSeverity.INFO,
                )
            )
            components = None

        return ShadowToken(
            name=name,
            css_variable=css_variable,
            tailwind_class=utility_alias(css_variable, name, TokenCategory.SHADOW),
            value=value,
            components=components,
        )

    # -------------------------------------------------------------------------
    # Read accessors
    # -------------------------------------------------------------------------

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RegistryNotInitializedError(
                "TokenRegistry not initialized. Call initialize() first."
            )

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        """Non-fatal issues recorded while building tokens."""
        return tuple(self._diagnostics)

    @property
    def css_variables(self) -> dict[str, str]:
        """Copy of the parsed CSS variable table."""
        self._require_initialized()
        return dict(self._css_vars)

    def get_tokens_by_category(self, category: TokenCategory | str) -> list[DesignToken]:
        self._require_initialized()
        try:
            category = TokenCategory(category)
        except ValueError:
            return []
        return list(self._tokens[category])

    def get_all_tokens(self) -> list[DesignToken]:
        self._require_initialized()
        return [token for category in TokenCategory for token in self._tokens[category]]

    def get_token_counts(self) -> dict[str, int]:
        self._require_initialized()
        return {category.value: len(self._tokens[category]) for category in TokenCategory}

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def find_token_by_name(self, name: str) -> DesignToken | None:
        """Find a token by name, CSS variable (with or without ``--``) or alias."""
        self._require_initialized()
        for token in self.get_all_tokens():
            if (
                token.name == name
                or token.css_variable == name
                or token.css_variable == f"--{name}"
                or token.tailwind_class == name
            ):
                return token
        return None

    def find_token_by_css_variable(self, css_variable: str) -> DesignToken | None:
        self._require_initialized()
        for token in self.get_all_tokens():
            if token.css_variable == css_variable:
                return token
        return None

    def find_closest_color_match(
        self, color_value: str, options: TokenMatchOptions | None = None
    ) -> TokenMatch | None:
        """
        Find the color token closest to ``color_value``.

        Parameters
        ----------
        color_value : str
            Color to match (hex, rgb, hsl or oklch).
        options : TokenMatchOptions, optional
            ``threshold`` (default from settings, 0.85) and ``exact``.

        Returns
        -------
        TokenMatch or None
            An exact hex match with confidence 1 when one exists; otherwise
            the nearest token if its confidence reaches the threshold. None
            when nothing qualifies, when ``exact`` is requested without an
            exact hit, or when ``color_value`` cannot be parsed.
        """
        self._require_initialized()
        options = options or TokenMatchOptions()
        threshold = (
            options.threshold
            if options.threshold is not None
            else get_settings().color_threshold
        )

        try:
            target = parse_color(color_value)
        except ColorParseError as e:
            logger.warning(f"Failed to find color match for {color_value}: {e}")
            return None
        if target.is_fallback:
            return None

        color_tokens = self._tokens[TokenCategory.COLOR]
        target_hex = target.hex.lower()
        for token in color_tokens:
            if token.value.hex.lower() == target_hex:
                return TokenMatch(token=token, confidence=1.0, original_value=color_value)

        if options.exact:
            return None

        index, confidence = find_closest_color(target.rgb, self._color_matrix)
        if index is None or confidence < threshold:
            return None
        return TokenMatch(
            token=color_tokens[index], confidence=confidence, original_value=color_value
        )

    def _find_exact_value(self, value: str, category: TokenCategory) -> TokenMatch | None:
        wanted = value.strip()
        for token in self._tokens[category]:
            if isinstance(token, TypographyToken):
                hit = wanted in token.value.field_values()
            else:
                hit = token.value == wanted
            if hit:
                return TokenMatch(token=token, confidence=1.0, original_value=value)
        return None

    def find_best_match(
        self,
        value: str,
        category: TokenCategory | str | None = None,
        options: TokenMatchOptions | None = None,
    ) -> TokenMatch | None:
        """
        Find the best token for a raw style value.

        Without a category the search runs color (only when ``value`` is a
        color literal), spacing, border radius, then shadow, and returns the
        first hit. A value equal to both a spacing and a border-radius token
        therefore resolves to spacing. ``options.categories`` narrows that
        order. Non-color categories use exact string equality; typography is
        only searched when requested explicitly.
        """
        self._require_initialized()
        options = options or TokenMatchOptions()

        if category is not None:
            try:
                order: tuple[TokenCategory, ...] = (TokenCategory(category),)
            except ValueError:
                logger.debug(f"No tokens for unknown category {category!r}")
                return None
        elif options.categories is not None:
            order = tuple(c for c in BEST_MATCH_ORDER if c in options.categories)
        else:
            order = BEST_MATCH_ORDER

        for current in order:
            if current is TokenCategory.COLOR:
                if not is_color_value(value):
                    continue
                match = self.find_closest_color_match(value, options)
            else:
                match = self._find_exact_value(value, current)
            if match is not None:
                return match
        return None

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export_tokens_to_json(self, file_path: str | Path) -> Path:
        """
        Write all tokens to a JSON file.

        Raises
        ------
        TokenExportError
            If the file cannot be written.
        """
        self._require_initialized()
        path = Path(file_path)
        payload = [token.to_dict() for token in self.get_all_tokens()]

        try:
            path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            raise TokenExportError(f"Failed to export tokens to JSON: {e}") from e

        logger.info(f"Exported {len(payload)} tokens to {path}")
        return path
