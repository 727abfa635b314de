"""
Matcher for inline style objects: ``style={{ ... }}`` and ``style={name}``.
"""

from __future__ import annotations

import re

from loguru import logger

from ..config import MatcherOptions, MatchScope, TokenCategory
from ..diagnostics import Diagnostic, DiagnosticSeverity
from .base import MatchResult, PatternMatcher
from .lexer import (
    find_closing,
    iter_string_literals,
    scan_literal,
    skip_whitespace,
    split_top_level,
)
from .patterns import CSS_PROPERTY_CATEGORIES, camel_case_property, describe_value, matches_shape

_STYLE_ATTRIBUTE = re.compile(r"\bstyle\s*=\s*\{")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
_COMMENTS = re.compile(r"(?:\s*(?://[^\n]*|/\*.*?\*/))*", re.DOTALL)
_KEY = re.compile(r"""\s*(?:"([^"]+)"|'([^']+)'|([A-Za-z_$][\w$-]*))\s*:""")

_SOURCE = "inline-style"


class InlineStyleMatcher(PatternMatcher):
    """
    Find literal style values inside JSX ``style`` objects.

    Object bodies are bounded by brace depth. Nested objects (pseudo-state
    blocks such as ``':hover': {...}``) are searched one level deep.
    ``style={name}`` is resolved to a ``const``/``let``/``var`` declaration of
    ``name`` in the same source and the name becomes the first path element.

    Values are never evaluated. A plain string literal must fit the shape of
    its category; inside an expression (ternary, concatenation, template
    interpolation) each string operand that fits is reported as dynamic.
    """

    name = "InlineStyleMatcher"
    scope = MatchScope.INLINE_STYLE

    def _scan(
        self, source: str, options: MatcherOptions, diagnostics: list[Diagnostic]
    ) -> list[MatchResult]:
        results: list[MatchResult] = []

        for attribute in _STYLE_ATTRIBUTE.finditer(source):
            brace = attribute.end() - 1
            close = find_closing(source, brace)
            if close is None:
                diagnostics.append(
                    Diagnostic(
                        source=_SOURCE,
                        message="Unbalanced braces after style attribute",
                        value=source[attribute.start() : attribute.start() + 40],
                    )
                )
                continue

            body = skip_whitespace(source, brace + 1)
            if body < close and source[body] == "{":
                body_close = find_closing(source, body, close)
                if body_close is not None:
                    results.extend(
                        self._scan_object(
                            source, body, body_close, ("style",), attribute.start(),
                            options, diagnostics,
                        )
                    )
                continue

            expression = source[brace + 1 : close].strip()
            if _IDENTIFIER.match(expression):
                results.extend(
                    self._scan_identifier(
                        source, expression, attribute.start(), options, diagnostics
                    )
                )
            else:
                logger.debug(f"Skipping computed style expression: {expression}")

        for pattern in options.custom_patterns:
            for found in pattern.finditer(source):
                brace = found.end() - 1
                if brace < 0 or source[brace] != "{":
                    continue
                close = find_closing(source, brace)
                if close is not None:
                    results.extend(
                        self._scan_object(
                            source, brace, close, ("style",), found.start(),
                            options, diagnostics,
                        )
                    )

        return results

    def _scan_identifier(
        self,
        source: str,
        identifier: str,
        anchor: int,
        options: MatcherOptions,
        diagnostics: list[Diagnostic],
    ) -> list[MatchResult]:
        declaration = re.compile(
            rf"\b(?:const|let|var)\s+{re.escape(identifier)}\s*(?::[^=]+)?=\s*\{{"
        )
        found = declaration.search(source)
        if found is None:
            diagnostics.append(
                Diagnostic(
                    source=_SOURCE,
                    message="Style variable has no object literal declaration",
                    value=identifier,
                    severity=DiagnosticSeverity.INFO,
                )
            )
            logger.debug(f"Could not resolve style variable {identifier}")
            return []

        brace = found.end() - 1
        close = find_closing(source, brace)
        if close is None:
            return []
        return self._scan_object(
            source, brace, close, (identifier, "style"), anchor, options, diagnostics
        )

    def _scan_object(
        self,
        source: str,
        open_brace: int,
        close: int,
        path: tuple[str, ...],
        anchor: int,
        options: MatcherOptions,
        diagnostics: list[Diagnostic],
        nested: bool = False,
    ) -> list[MatchResult]:
        results: list[MatchResult] = []
        body_start = open_brace + 1

        entries = split_top_level(source[body_start:close], ",", comments=True)
        for offset, entry in entries:
            lead = _COMMENTS.match(entry)
            key_match = _KEY.match(entry, lead.end())
            # Spreads, shorthand properties and methods have no "key:" prefix
            if key_match is None:
                continue

            key = next(group for group in key_match.groups() if group)
            entry_start = body_start + offset
            value_start = skip_whitespace(source, entry_start + key_match.end())
            value_end = entry_start + len(entry.rstrip())
            if value_start >= value_end:
                continue

            if source[value_start] == "{":
                inner_close = find_closing(source, value_start, value_end)
                if not nested and inner_close is not None:
                    results.extend(
                        self._scan_object(
                            source, value_start, inner_close, path + (key,), anchor,
                            options, diagnostics, nested=True,
                        )
                    )
                continue

            property_name = camel_case_property(key)
            category = CSS_PROPERTY_CATEGORIES.get(property_name)
            if category is None or category not in options.categories:
                continue

            results.extend(
                self._scan_value(
                    source, value_start, value_end, category, property_name,
                    path + (property_name,), anchor, options, diagnostics,
                )
            )

        return results

    def _scan_value(
        self,
        source: str,
        start: int,
        end: int,
        category: TokenCategory,
        property_name: str,
        path: tuple[str, ...],
        anchor: int,
        options: MatcherOptions,
        diagnostics: list[Diagnostic],
    ) -> list[MatchResult]:
        literal = scan_literal(source, start, end)
        plain = (
            literal is not None
            and not literal.is_dynamic
            and _COMMENTS.fullmatch(source, literal.end, end) is not None
        )
        if plain:
            text = literal.text
            value = text.strip()
            if not matches_shape(category, value, property_name):
                diagnostics.append(
                    Diagnostic(
                        source=_SOURCE,
                        message=f"Value for {property_name} is not a {category.value} literal",
                        value=value,
                        severity=DiagnosticSeverity.INFO,
                    )
                )
                return []
            value_start = literal.content_start + len(text) - len(text.lstrip())
            return [
                self._build_result(
                    source,
                    value_start,
                    value_start + len(value),
                    category=category,
                    property_name=property_name,
                    anchor=anchor,
                    options=options,
                    path=path,
                    details=describe_value(category, value),
                )
            ]

        results = []
        for operand in iter_string_literals(source, start, end, nested=True):
            value = operand.text.strip()
            if operand.is_dynamic or not matches_shape(category, value, property_name):
                continue
            value_start = operand.content_start + len(operand.text) - len(operand.text.lstrip())
            results.append(
                self._build_result(
                    source,
                    value_start,
                    value_start + len(value),
                    category=category,
                    property_name=property_name,
                    anchor=anchor,
                    options=options,
                    path=path,
                    details=describe_value(category, value, dynamic=True),
                )
            )

        if not results:
            diagnostics.append(
                Diagnostic(
                    source=_SOURCE,
                    message=f"Computed value for {property_name} was not evaluated",
                    value=source[start:end],
                    severity=DiagnosticSeverity.INFO,
                )
            )
        return results
