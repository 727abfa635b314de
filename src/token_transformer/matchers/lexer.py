"""
Quote- and bracket-aware scanning over component source text.

Both matchers work on raw text rather than a syntax tree. This module finds
the pieces they need (string literals, template interpolations, balanced
bracket pairs) by tracking depth explicitly, so nested objects and
bracketed values are bounded correctly without nested regular expressions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from ..utils.text import split_top_level

_PAIRS = {"{": "}", "[": "]", "(": ")"}
_QUOTES = "\"'`"

__all__ = [
    "StringLiteral",
    "find_closing",
    "iter_string_literals",
    "scan_literal",
    "skip_whitespace",
    "split_top_level",
]


@dataclass(frozen=True)
class StringLiteral:
    """A quoted string found in source text.

    ``start`` is the opening quote and ``end`` is one past the closing
    quote. ``interpolations`` holds the ``(start, end)`` spans of the
    expressions inside ``${...}`` for template literals.
    """

    quote: str
    start: int
    end: int
    text: str
    interpolations: tuple[tuple[int, int], ...] = field(default=())

    @property
    def content_start(self) -> int:
        return self.start + 1

    @property
    def content_end(self) -> int:
        return self.end - 1

    @property
    def is_template(self) -> bool:
        return self.quote == "`"

    @property
    def is_dynamic(self) -> bool:
        return bool(self.interpolations)


def skip_whitespace(source: str, index: int) -> int:
    while index < len(source) and source[index].isspace():
        index += 1
    return index


def _scan_quoted(source: str, index: int, limit: int) -> int | None:
    quote = source[index]
    j = index + 1
    while j < limit:
        ch = source[j]
        if ch == "\\":
            j += 2
            continue
        if ch == quote:
            return j + 1
        # JSX text apostrophes must not swallow the rest of the file
        if ch == "\n" and quote == "'":
            return None
        j += 1
    return None


def _scan_template(
    source: str, index: int, limit: int
) -> tuple[int, tuple[tuple[int, int], ...]] | None:
    spans: list[tuple[int, int]] = []
    j = index + 1
    while j < limit:
        ch = source[j]
        if ch == "\\":
            j += 2
            continue
        if ch == "`":
            return j + 1, tuple(spans)
        if ch == "$" and j + 1 < limit and source[j + 1] == "{":
            close = find_closing(source, j + 1, limit)
            if close is None:
                return None
            spans.append((j + 2, close))
            j = close + 1
            continue
        j += 1
    return None


def scan_literal(source: str, index: int, limit: int | None = None) -> StringLiteral | None:
    """Read the string literal whose opening quote is at ``index``.

    Returns None when the character is not a quote or the literal is not
    terminated before ``limit``. Single-quoted strings end at a newline;
    double quotes and backticks may span lines.
    """
    limit = len(source) if limit is None else limit
    if index >= limit or source[index] not in _QUOTES:
        return None

    quote = source[index]
    if quote == "`":
        scanned = _scan_template(source, index, limit)
        if scanned is None:
            return None
        end, spans = scanned
    else:
        end = _scan_quoted(source, index, limit)
        if end is None:
            return None
        spans = ()

    return StringLiteral(
        quote=quote,
        start=index,
        end=end,
        text=source[index + 1 : end - 1],
        interpolations=spans,
    )


def find_closing(source: str, index: int, limit: int | None = None) -> int | None:
    """
    Find the bracket that closes the one at ``index``.

    Parameters
    ----------
    source : str
        Text to scan.
    index : int
        Position of an opening ``{``, ``[`` or ``(``.
    limit : int, optional
        Stop scanning at this position.

    Returns
    -------
    int or None
        Index of the matching closer, or None if the brackets are unbalanced
        before ``limit``. String literals are skipped whole.
    """
    limit = len(source) if limit is None else limit
    if index >= limit or source[index] not in _PAIRS:
        return None

    stack = [_PAIRS[source[index]]]
    j = index + 1
    while j < limit:
        ch = source[j]
        if ch in _QUOTES:
            literal = scan_literal(source, j, limit)
            j = literal.end if literal is not None else j + 1
            continue
        if ch in _PAIRS:
            stack.append(_PAIRS[ch])
        elif ch == stack[-1]:
            stack.pop()
            if not stack:
                return j
        j += 1
    return None


def iter_string_literals(
    source: str,
    start: int = 0,
    end: int | None = None,
    *,
    nested: bool = False,
) -> Iterator[StringLiteral]:
    """
    Yield string literals between ``start`` and ``end`` in source order.

    ``//`` line comments and ``/* */`` block comments are skipped. With
    ``nested=True`` the literals inside template interpolations are yielded
    after the template that contains them.
    """
    end = len(source) if end is None else end
    i = start
    while i < end:
        ch = source[i]
        if ch == "/" and i + 1 < end and source[i + 1] == "/":
            # "//" directly after ":" is a URL in JSX text, not a comment
            if i == 0 or source[i - 1] != ":":
                newline = source.find("\n", i, end)
                i = end if newline == -1 else newline + 1
                continue
        if ch == "/" and i + 1 < end and source[i + 1] == "*":
            close = source.find("*/", i + 2, end)
            i = end if close == -1 else close + 2
            continue
        if ch in _QUOTES:
            literal = scan_literal(source, i, end)
            if literal is None:
                i += 1
                continue
            yield literal
            if nested:
                for span_start, span_end in literal.interpolations:
                    yield from iter_string_literals(
                        source, span_start, span_end, nested=True
                    )
            i = literal.end
            continue
        i += 1
