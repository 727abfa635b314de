"""
Tests for the quote- and bracket-aware scanner.
"""

from token_transformer.matchers.lexer import (
    find_closing,
    iter_string_literals,
    scan_literal,
    split_top_level,
)


class TestFindClosing:
    """Tests for find_closing."""

    def test_nested_braces(self):
        source = "{ a: { b: 1 }, c: 2 }"
        assert find_closing(source, 0) == len(source) - 1
        assert find_closing(source, 5) == 12

    def test_brackets_inside_strings_are_ignored(self):
        source = "{ a: '}', b: \"{\" }"
        assert find_closing(source, 0) == len(source) - 1

    def test_template_interpolation(self):
        source = "[${x ? '#000' : '#fff'}]"
        assert find_closing(source, 0) == len(source) - 1

    def test_unbalanced_returns_none(self):
        assert find_closing("{ a: 1", 0) is None

    def test_limit(self):
        assert find_closing("[ab] c]", 0, 3) is None

    def test_not_an_opener(self):
        assert find_closing("abc", 0) is None


class TestScanLiteral:
    """Tests for scan_literal."""

    def test_double_quoted(self):
        literal = scan_literal('x = "hello"', 4)
        assert literal.text == "hello"
        assert (literal.start, literal.end) == (4, 11)
        assert literal.content_start == 5

    def test_escaped_quote(self):
        literal = scan_literal(r"'it\'s'", 0)
        assert literal.text == r"it\'s"

    def test_single_quote_stops_at_newline(self):
        assert scan_literal("'abc\ndef'", 0) is None

    def test_double_quote_spans_lines(self):
        assert scan_literal('"a\nb"', 0).text == "a\nb"

    def test_template_interpolations(self):
        source = "`a ${b} c ${d}`"
        literal = scan_literal(source, 0)
        assert literal.is_template
        assert literal.is_dynamic
        assert [source[s:e] for s, e in literal.interpolations] == ["b", "d"]

    def test_plain_template_is_not_dynamic(self):
        assert not scan_literal("`abc`", 0).is_dynamic


class TestIterStringLiterals:
    """Tests for iter_string_literals."""

    def test_source_order(self):
        source = """a("x", 'y', `z`)"""
        assert [lit.text for lit in iter_string_literals(source)] == ["x", "y", "z"]

    def test_comments_are_skipped(self):
        source = "// 'not'\n/* \"nor\" */ 'yes'"
        assert [lit.text for lit in iter_string_literals(source)] == ["yes"]

    def test_url_is_not_a_comment(self):
        source = "<a>http://x</a> 'yes'"
        assert [lit.text for lit in iter_string_literals(source)] == ["yes"]

    def test_nested_literals(self):
        source = "`${on ? '#000' : '#fff'}`"
        flat = [lit.text for lit in iter_string_literals(source)]
        nested = [lit.text for lit in iter_string_literals(source, nested=True)]
        assert flat == ["${on ? '#000' : '#fff'}"]
        assert nested == ["${on ? '#000' : '#fff'}", "#000", "#fff"]

    def test_apostrophe_in_text(self):
        source = "<p>Don't</p>\n<a title='ok'>"
        assert [lit.text for lit in iter_string_literals(source)] == ["ok"]

    def test_range(self):
        source = "'a' 'b' 'c'"
        assert [lit.text for lit in iter_string_literals(source, 4, 7)] == ["b"]


class TestSplitTopLevel:
    """Tests for split_top_level."""

    def test_commas_in_nested_structures(self):
        parts = split_top_level("a: rgb(0, 0, 0), b: '1,2', c: { d: 1, e: 2 }")
        assert [p.strip() for _, p in parts] == ["a: rgb(0, 0, 0)", "b: '1,2'", "c: { d: 1, e: 2 }"]

    def test_offsets(self):
        text = "x,  y"
        assert split_top_level(text) == [(0, "x"), (2, "  y")]

    def test_whitespace_mode(self):
        parts = split_top_level("0 1px  rgba(0, 0, 0, 0.1)", whitespace=True)
        assert [p for _, p in parts] == ["0", "1px", "rgba(0, 0, 0, 0.1)"]

    def test_trailing_separator_dropped(self):
        assert [p for _, p in split_top_level("a, b,")] == ["a", " b"]

    def test_comments_are_opaque_when_requested(self):
        text = "// don't, really\na: 1, /* b, 'c */ d: 2"
        parts = split_top_level(text, comments=True)
        assert [p.strip() for _, p in parts] == ["// don't, really\na: 1", "/* b, 'c */ d: 2"]

    def test_comments_are_plain_text_by_default(self):
        assert len(split_top_level("/* a, b */ c")) == 2
