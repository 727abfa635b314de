"""
Tests for CSS custom property extraction and classification.
"""

import pytest

from token_transformer.config import TokenCategory
from token_transformer.registry.css_variables import (
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


class TestExtractCSSVariables:
    """Tests for extract_css_variables."""

    def test_basic_declarations(self):
        css = ":root { --spacing-sm: 1rem; --color-primary: #25c9d0; }"
        assert extract_css_variables(css) == {
            "--spacing-sm": "1rem",
            "--color-primary": "#25c9d0",
        }

    def test_comments_are_ignored(self):
        css = ":root { /* --fake: 1px; */ --real: 2px; }"
        assert extract_css_variables(css) == {"--real": "2px"}

    def test_last_declaration_wins(self):
        css = ":root { --a: 1px; } .dark { --a: 2px; }"
        assert extract_css_variables(css) == {"--a": "2px"}

    def test_semicolon_inside_parentheses(self):
        css = ":root { --icon: url(data:image/png;base64,AAA); --next: 1px; }"
        variables = extract_css_variables(css)
        assert variables["--icon"] == "url(data:image/png;base64,AAA)"
        assert variables["--next"] == "1px"

    def test_semicolon_inside_quotes(self):
        css = ':root { --font: "A;B", serif; }'
        assert extract_css_variables(css) == {"--font": '"A;B", serif'}

    def test_value_ended_by_block_close(self):
        css = ":root { --a: 4px }\n.b { color: red; }"
        assert extract_css_variables(css) == {"--a": "4px"}

    def test_multiline_value(self):
        css = ":root {\n  --shadow-md:\n    0 1px 2px #000,\n    0 2px 4px #111;\n}"
        assert extract_css_variables(css)["--shadow-md"] == "0 1px 2px #000,\n    0 2px 4px #111"

    def test_variable_usage_is_not_a_declaration(self):
        css = ".x { color: var(--brand); }"
        assert extract_css_variables(css) == {}

    def test_fixture_file(self, tokens_css):
        variables = extract_css_variables(tokens_css)
        assert variables["--olivia-blue"] == "oklch(76.21% 0.1238 199.53)"
        assert variables["--color-link"] == "var(--color-primary)"
        assert list(variables)[0] == "--olivia-blue"


class TestClassification:
    """Tests for category classification and naming."""

    @pytest.mark.parametrize(
        "name,value,expected",
        [
            ("--olivia-blue", "oklch(1 0 0)", TokenCategory.COLOR),
            ("--spacing-shadow", "#fff", TokenCategory.COLOR),
            ("--spacing-sm", "1rem", TokenCategory.SPACING),
            ("--border-radius-xs", "0.5rem", TokenCategory.BORDER_RADIUS),
            ("--shadow-sm", "0 1px 2px #000", TokenCategory.SHADOW),
            ("--body-font-size", "1rem", TokenCategory.TYPOGRAPHY),
            ("--text-transform", "uppercase", TokenCategory.TYPOGRAPHY),
            ("--z-index-modal", "1000", None),
        ],
    )
    def test_classify_variable(self, name, value, expected):
        assert classify_variable(name, value) is expected

    def test_spacing_precedes_typography(self):
        assert classify_variable("--letter-spacing-wide", "0.1em") is TokenCategory.SPACING

    def test_variable_reference(self):
        assert is_variable_reference(" var(--color-primary)")
        assert not is_variable_reference("calc(var(--a) * 2)")

    @pytest.mark.parametrize(
        "variable,expected",
        [
            ("--color-primary", "primary"),
            ("--spacing-sm", "sm"),
            ("--border-radius-xs", "xs"),
            ("--shadow-md", "md"),
            ("--font-body", "body"),
            ("--olivia-blue", "olivia-blue"),
        ],
    )
    def test_token_name(self, variable, expected):
        assert token_name(variable) == expected

    def test_typography_base_name(self):
        assert typography_base_name("header-1-font-size") == "header-1"
        assert typography_base_name("header-1-line-height") == "header-1"
        assert typography_base_name("display") == "display"

    def test_typography_field(self):
        assert typography_field("--header-1-font-weight") == "font_weight"
        assert typography_field("--text-transform") is None

    def test_utility_alias(self):
        assert utility_alias("--color-primary", "primary", TokenCategory.COLOR) == "text-primary"
        assert utility_alias("--spacing-sm", "sm", TokenCategory.SPACING) == "p-sm"
        assert utility_alias("--border-radius-xs", "xs", TokenCategory.BORDER_RADIUS) == "rounded-xs"
        assert utility_alias("--shadow-md", "md", TokenCategory.SHADOW) == "shadow-md"
        assert utility_alias("--olivia-blue", "olivia-blue", TokenCategory.COLOR) is None

    @pytest.mark.parametrize(
        "value,expected",
        [("700", 700), ("1.2", 1.2), ("bold", "bold"), ("1.5rem", "1.5rem")],
    )
    def test_coerce_number(self, value, expected):
        result = coerce_number(value)
        assert result == expected
        assert type(result) is type(expected)


class TestShadowComponents:
    """Tests for parse_shadow_components."""

    def test_single_layer(self):
        (layer,) = parse_shadow_components("0 1px 2px rgba(0, 0, 0, 0.05)")
        assert layer.offset_x == "0"
        assert layer.offset_y == "1px"
        assert layer.blur == "2px"
        assert layer.spread == "0"
        assert layer.color == "rgba(0, 0, 0, 0.05)"
        assert layer.inset is False

    def test_commas_inside_color_do_not_split_layers(self):
        layers = parse_shadow_components(
            "0 4px 6px -1px rgba(0, 0, 0, 0.1), 0 2px 4px -2px rgba(0, 0, 0, 0.1)"
        )
        assert len(layers) == 2
        assert layers[0].spread == "-1px"
        assert layers[1].offset_y == "2px"

    def test_inset_anywhere(self):
        (first,) = parse_shadow_components("inset 0 2px 4px #000")
        (second,) = parse_shadow_components("0 2px 4px #000 inset")
        assert first.inset and second.inset
        assert first.color == second.color == "#000"

    def test_missing_color_defaults(self):
        (layer,) = parse_shadow_components("2px 2px")
        assert layer.color == "currentColor"

    @pytest.mark.parametrize("value", ["none", "1px #000", "1px 2px 3px 4px 5px #000"])
    def test_invalid_shadows_raise(self, value):
        with pytest.raises(ShadowParseError):
            parse_shadow_components(value)
