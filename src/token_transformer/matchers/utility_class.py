"""
Matcher for arbitrary-value utility classes such as ``bg-[#25C9D0]``.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from loguru import logger

from ..config import MatcherOptions, MatchScope
from ..diagnostics import Diagnostic
from .base import MatchResult, PatternMatcher
from .lexer import find_closing, iter_string_literals, scan_literal
from .patterns import UTILITY_PREFIXES, choose_target, describe_value

_CLASS_ATTRIBUTE = re.compile(r"\bclassName\s*=\s*")


class _Candidate(NamedTuple):
    """A span of source text that may hold utility classes."""

    start: int
    end: int
    anchor: int


def _is_prefix_char(ch: str) -> bool:
    return ch.isalnum() or ch == "-"


class UtilityClassMatcher(PatternMatcher):
    """
    Find ``<prefix>[<value>]`` classes inside ``className`` attributes.

    Candidate text is every string literal attached to ``className=``:
    quoted, template and brace-wrapped forms, including each literal inside
    a brace expression such as a ternary or a helper call. When the source
    has no ``className`` attribute at all, every string literal is scanned.

    Examples
    --------
    >>> matcher = UtilityClassMatcher()
    >>> [m.value for m in matcher.match('<div className="bg-[#fff] p-[4px]" />')]
    ['#fff', '4px']
    """

    name = "UtilityClassMatcher"
    scope = MatchScope.UTILITY_CLASS

    def _scan(
        self, source: str, options: MatcherOptions, diagnostics: list[Diagnostic]
    ) -> list[MatchResult]:
        candidates = self._attribute_candidates(source)
        candidates.extend(self._custom_candidates(source, options))
        if not candidates:
            logger.debug("No className attributes found; scanning all string literals")
            candidates = [
                _Candidate(lit.content_start, lit.content_end, lit.start)
                for lit in iter_string_literals(source, nested=True)
            ]

        results: list[MatchResult] = []
        for candidate in candidates:
            results.extend(self._scan_candidate(source, candidate, options))
        return results

    def _attribute_candidates(self, source: str) -> list[_Candidate]:
        candidates: list[_Candidate] = []
        for attribute in _CLASS_ATTRIBUTE.finditer(source):
            pos = attribute.end()
            if pos >= len(source):
                continue

            if source[pos] == "{":
                close = find_closing(source, pos)
                if close is None:
                    continue
                literals = iter_string_literals(source, pos + 1, close, nested=True)
            else:
                literal = scan_literal(source, pos)
                literals = [literal] if literal is not None else []

            candidates.extend(
                _Candidate(lit.content_start, lit.content_end, attribute.start())
                for lit in literals
            )
        return candidates

    @staticmethod
    def _custom_candidates(source: str, options: MatcherOptions) -> list[_Candidate]:
        """Regions matched by caller patterns; the first group when present."""
        candidates = []
        for pattern in options.custom_patterns:
            for found in pattern.finditer(source):
                start, end = found.span(1) if pattern.groups else found.span()
                if start >= 0:
                    candidates.append(_Candidate(start, end, found.start()))
        return candidates

    def _scan_candidate(
        self, source: str, candidate: _Candidate, options: MatcherOptions
    ) -> list[MatchResult]:
        results: list[MatchResult] = []
        i = candidate.start

        while i < candidate.end:
            ch = source[i]
            if ch == "$" and i + 1 < candidate.end and source[i + 1] == "{":
                close = find_closing(source, i + 1, candidate.end)
                i = candidate.end if close is None else close + 1
                continue
            if ch != "[":
                i += 1
                continue

            close = find_closing(source, i, candidate.end)
            if close is None:
                i += 1
                continue

            result = self._build_class_match(source, candidate, i, close, options)
            if result is not None:
                results.append(result)
            i = close + 1

        return results

    def _build_class_match(
        self,
        source: str,
        candidate: _Candidate,
        bracket: int,
        close: int,
        options: MatcherOptions,
    ) -> MatchResult | None:
        prefix_start = bracket
        while prefix_start > candidate.start and _is_prefix_char(source[prefix_start - 1]):
            prefix_start -= 1

        prefix = source[prefix_start:bracket]
        targets = UTILITY_PREFIXES.get(prefix.lstrip("-"))
        if targets is None:
            return None

        value = source[bracket + 1 : close]
        if not value.strip():
            return None

        target = choose_target(targets, value)
        if target.category not in options.categories:
            return None

        dynamic = "${" in value
        return self._build_result(
            source,
            bracket + 1,
            close,
            category=target.category,
            property_name=target.property,
            anchor=candidate.anchor,
            options=options,
            path=("className", source[prefix_start : close + 1]),
            details=describe_value(target.category, value, dynamic=dynamic),
        )
