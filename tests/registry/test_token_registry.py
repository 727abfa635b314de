"""
Tests for TokenRegistry initialization, lookups and matching.
"""

import json

import pytest
from pydantic import ValidationError

from token_transformer import (
    DiagnosticSeverity,
    RegistryNotInitializedError,
    TokenCategory,
    TokenExportError,
    TokenMatchOptions,
    TokenRegistry,
    TokenRegistryConfig,
    TokenSourceError,
)
from token_transformer.registry import ColorToken, ShadowToken, TypographyToken


class TestInitialization:
    """Tests for the uninitialized -> initialized lifecycle."""

    def test_queries_before_initialize_raise(self, tokens_css):
        registry = TokenRegistry(css_content=tokens_css)
        assert not registry.initialized
        with pytest.raises(RegistryNotInitializedError):
            registry.get_all_tokens()
        with pytest.raises(RegistryNotInitializedError):
            registry.find_best_match("1rem")
        with pytest.raises(RegistryNotInitializedError):
            registry.find_closest_color_match("#fff")

    def test_initialize_is_idempotent(self, tokens_css):
        registry = TokenRegistry(css_content=tokens_css)
        registry.initialize()
        tokens = registry.get_all_tokens()
        assert registry.initialize() is registry
        assert registry.get_all_tokens() == tokens

    def test_initialize_from_path(self, tokens_css_path):
        registry = TokenRegistry(css_path=tokens_css_path).initialize()
        assert registry.get_token_counts()["spacing"] == 4

    def test_initialize_with_text_source(self):
        registry = TokenRegistry().initialize(":root { --spacing-sm: 1rem; }")
        assert registry.find_token_by_name("sm") is not None

    def test_initialize_with_path_source(self, tokens_css_path):
        registry = TokenRegistry().initialize(tokens_css_path)
        assert registry.get_token_counts()["color"] == 7

    def test_path_takes_precedence_over_content(self, tokens_css_path):
        registry = TokenRegistry(
            css_content=":root { --spacing-only: 1px; }", css_path=tokens_css_path
        ).initialize()
        assert registry.get_token_counts()["color"] == 7

    def test_from_config(self, tokens_css):
        config = TokenRegistryConfig(css_content=tokens_css)
        registry = TokenRegistry.from_config(config).initialize()
        assert registry.config is config

    def test_missing_source_raises(self):
        with pytest.raises(TokenSourceError):
            TokenRegistry().initialize()

    def test_empty_content_raises(self):
        with pytest.raises(TokenSourceError):
            TokenRegistry(css_content="").initialize()
        with pytest.raises(TokenSourceError):
            TokenRegistry().initialize("")

    def test_unreadable_file_raises(self, tmp_path):
        with pytest.raises(TokenSourceError):
            TokenRegistry(css_path=tmp_path / "missing.css").initialize()

    def test_settings_css_path(self, monkeypatch, tokens_css_path):
        from token_transformer.config import get_settings

        monkeypatch.setenv("TOKEN_TRANSFORMER_CSS_PATH", str(tokens_css_path))
        get_settings.cache_clear()
        registry = TokenRegistry().initialize()
        assert registry.get_token_counts()["shadow"] == 3


class TestTokenBuilding:
    """Tests for the tokens built from the CSS fixture."""

    def test_counts(self, registry):
        assert registry.get_token_counts() == {
            "color": 7,
            "typography": 2,
            "spacing": 4,
            "borderRadius": 3,
            "shadow": 3,
        }

    def test_variable_reference_is_skipped_with_diagnostic(self, registry):
        assert registry.find_token_by_css_variable("--color-link") is None
        skipped = [d for d in registry.diagnostics if d.value == "--color-link"]
        assert len(skipped) == 1
        assert skipped[0].severity is DiagnosticSeverity.INFO

    def test_unmodelled_variables_are_dropped(self, registry):
        assert registry.find_token_by_css_variable("--z-index-modal") is None
        assert registry.find_token_by_css_variable("--transition-fast") is None

    def test_color_token(self, registry):
        token = registry.find_token_by_css_variable("--color-primary")
        assert isinstance(token, ColorToken)
        assert token.name == "primary"
        assert token.tailwind_class == "text-primary"
        assert token.original_value == "#25c9d0"
        assert token.value.hex == "#25c9d0"
        assert (token.value.rgb.r, token.value.rgb.g, token.value.rgb.b) == (37, 201, 208)
        assert token.value.hsl is not None

    def test_oklch_token_keeps_oklch(self, registry):
        token = registry.find_token_by_name("olivia-blue")
        assert token.value.oklch.l == pytest.approx(0.7621)
        assert token.tailwind_class is None

    def test_normalize_colors_off(self, tokens_css):
        registry = TokenRegistry(css_content=tokens_css, normalize_colors=False).initialize()
        token = registry.find_token_by_name("olivia-blue")
        assert token.value.hsl is None
        assert token.value.oklch is None

    def test_typography_merges_by_base_name(self, registry):
        tokens = registry.get_tokens_by_category("typography")
        header = next(t for t in tokens if t.name == "header-1")
        assert isinstance(header, TypographyToken)
        assert header.css_variable == "--header-1"
        assert header.value.font_family == '"Open Sans", sans-serif'
        assert header.value.font_size == "2.5rem"
        assert header.value.font_weight == 700
        assert header.value.line_height == 1.2

    def test_shadow_components(self, registry):
        token = registry.find_token_by_css_variable("--shadow-md")
        assert isinstance(token, ShadowToken)
        assert len(token.components) == 2
        inner = registry.find_token_by_name("shadow-inner")
        assert inner.components[0].inset is True

    def test_unparseable_shadow_keeps_value(self):
        registry = TokenRegistry(css_content=":root { --shadow-none: none; }").initialize()
        token = registry.find_token_by_name("none")
        assert token.value == "none"
        assert token.components is None
        assert any(d.value == "none" for d in registry.diagnostics)

    def test_malformed_color_is_skipped(self):
        css = ":root { --color-bad: rgba(0, 0, 0, 1.2.3); --color-good: #fff; }"
        registry = TokenRegistry(css_content=css).initialize()
        assert registry.find_token_by_name("bad") is None
        assert registry.find_token_by_name("good") is not None
        warnings = [d for d in registry.diagnostics if d.severity is DiagnosticSeverity.WARNING]
        assert len(warnings) == 1

    def test_accessors_return_copies(self, registry):
        tokens = registry.get_tokens_by_category(TokenCategory.SPACING)
        tokens.clear()
        assert len(registry.get_tokens_by_category(TokenCategory.SPACING)) == 4

        counts = registry.get_token_counts()
        counts["spacing"] = 0
        assert registry.get_token_counts()["spacing"] == 4

    def test_unknown_category_is_empty(self, registry):
        assert registry.get_tokens_by_category("opacity") == []

    def test_tokens_are_frozen(self, registry):
        token = registry.find_token_by_name("sm")
        with pytest.raises(ValidationError):
            token.value = "2rem"


class TestLookups:
    """Tests for name and variable lookups."""

    def test_find_by_name_variants(self, registry):
        by_name = registry.find_token_by_name("sm")
        assert by_name.css_variable == "--spacing-sm"
        assert registry.find_token_by_name("--spacing-sm") is by_name
        assert registry.find_token_by_name("spacing-sm") is by_name
        assert registry.find_token_by_name("p-sm") is by_name

    def test_find_by_name_missing(self, registry):
        assert registry.find_token_by_name("nope") is None

    def test_find_by_css_variable_is_exact(self, registry):
        assert registry.find_token_by_css_variable("--spacing-sm").name == "sm"
        assert registry.find_token_by_css_variable("spacing-sm") is None


class TestColorMatching:
    """Tests for find_closest_color_match."""

    def test_oklch_white_matches_exactly(self, registry):
        match = registry.find_closest_color_match("oklch(1 0 0)")
        assert match.token.name == "white"
        assert match.confidence == 1.0
        assert match.original_value == "oklch(1 0 0)"

    def test_exact_hex_is_case_insensitive(self, registry):
        match = registry.find_closest_color_match("#25C9D0")
        assert match.token.name == "primary"
        assert match.confidence == 1.0

    def test_exact_hex_preferred_over_nearer_candidate(self):
        css = ":root { --color-a: #fe0000; --color-b: #ff0000; }"
        registry = TokenRegistry(css_content=css).initialize()
        match = registry.find_closest_color_match("rgb(255, 0, 0)")
        assert match.token.name == "b"
        assert match.confidence == 1.0

    def test_nearest_above_threshold(self, registry):
        match = registry.find_closest_color_match("#26c9d0")
        assert match.token.name == "primary"
        assert 0.99 < match.confidence < 1.0

    def test_below_threshold_is_none(self, registry):
        assert registry.find_closest_color_match("#990000") is None

    def test_custom_threshold(self, registry):
        match = registry.find_closest_color_match(
            "#990000", TokenMatchOptions(threshold=0.7)
        )
        assert match.token.name == "danger"

    def test_settings_threshold(self, registry, monkeypatch):
        from token_transformer.config import get_settings

        monkeypatch.setenv("TOKEN_TRANSFORMER_COLOR_THRESHOLD", "0.7")
        get_settings.cache_clear()
        assert registry.find_closest_color_match("#990000").token.name == "danger"

    def test_exact_option_without_exact_hit(self, registry):
        assert registry.find_closest_color_match("#26c9d0", TokenMatchOptions.exact_only()) is None

    def test_unrecognized_value_is_no_match(self, registry):
        assert registry.find_closest_color_match("banana") is None

    def test_malformed_value_is_no_match(self, registry):
        assert registry.find_closest_color_match("oklch(abc)") is None

    def test_lookup_does_not_record_diagnostics(self, registry):
        before = len(registry.diagnostics)
        registry.find_closest_color_match("banana")
        assert len(registry.diagnostics) == before


class TestBestMatch:
    """Tests for find_best_match category precedence."""

    def test_spacing_scenario(self):
        registry = TokenRegistry(css_content=":root { --spacing-sm: 1rem; }").initialize()
        match = registry.find_best_match("1rem")
        assert match.token.name == "sm"
        assert match.token.category is TokenCategory.SPACING
        assert match.confidence == 1.0

    def test_spacing_wins_over_border_radius(self, registry):
        match = registry.find_best_match("0.5rem")
        assert match.token.category is TokenCategory.SPACING
        assert match.token.name == "xs"

    def test_explicit_category(self, registry):
        match = registry.find_best_match("0.5rem", TokenCategory.BORDER_RADIUS)
        assert match.token.category is TokenCategory.BORDER_RADIUS

    def test_categories_option_narrows_search(self, registry):
        options = TokenMatchOptions(categories=["borderRadius"])
        match = registry.find_best_match("0.5rem", options=options)
        assert match.token.category is TokenCategory.BORDER_RADIUS

    def test_color_value(self, registry):
        match = registry.find_best_match("#0f5c7d")
        assert match.token.name == "olivia-blue-dark"

    def test_non_color_value_skips_color(self, registry):
        assert registry.find_best_match("9999px").token.name == "full"

    def test_shadow_exact_equality(self, registry):
        match = registry.find_best_match("0 1px 2px rgba(0, 0, 0, 0.05)")
        assert match.token.category is TokenCategory.SHADOW

    def test_typography_only_when_requested(self, registry):
        assert registry.find_best_match("2.5rem") is None
        match = registry.find_best_match("2.5rem", "typography")
        assert match.token.name == "header-1"
        assert registry.find_best_match("700", TokenCategory.TYPOGRAPHY).token.name == "header-1"

    def test_no_match(self, registry):
        assert registry.find_best_match("17px") is None

    def test_unknown_category_is_no_match(self, registry):
        assert registry.find_best_match("1rem", "opacity") is None


class TestExport:
    """Tests for export_tokens_to_json."""

    def test_export_round_trips(self, registry, tmp_path):
        path = registry.export_tokens_to_json(tmp_path / "tokens.json")
        data = json.loads(path.read_text())

        assert len(data) == len(registry.get_all_tokens())
        primary = next(t for t in data if t["cssVariable"] == "--color-primary")
        assert primary["tailwindClass"] == "text-primary"
        assert primary["originalValue"] == "#25c9d0"
        assert primary["category"] == "color"

        shadow = next(t for t in data if t["cssVariable"] == "--shadow-sm")
        assert shadow["components"][0]["offsetY"] == "1px"

    def test_export_omits_missing_fields(self, registry, tmp_path):
        path = registry.export_tokens_to_json(tmp_path / "tokens.json")
        data = json.loads(path.read_text())
        olivia = next(t for t in data if t["cssVariable"] == "--olivia-blue")
        assert "tailwindClass" not in olivia

    def test_export_failure_raises(self, registry, tmp_path):
        with pytest.raises(TokenExportError):
            registry.export_tokens_to_json(tmp_path / "missing" / "tokens.json")
