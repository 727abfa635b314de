"""Depth-aware text splitting shared by the CSS and component scanners."""

from __future__ import annotations

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = frozenset(_OPENERS.values())
_QUOTES = frozenset("\"'`")


def _skip_comment(text: str, i: int) -> int:
    """Return the index after a ``//`` or ``/* */`` comment at ``i``, or ``i``."""
    if text.startswith("//", i) and (i == 0 or text[i - 1] != ":"):
        newline = text.find("\n", i)
        return len(text) if newline == -1 else newline + 1
    if text.startswith("/*", i):
        close = text.find("*/", i + 2)
        return len(text) if close == -1 else close + 2
    return i


def split_top_level(
    text: str,
    separator: str = ",",
    *,
    whitespace: bool = False,
    comments: bool = False,
) -> list[tuple[int, str]]:
    """Split ``text`` on a separator that sits outside brackets and quotes.

    Parameters
    ----------
    text : str
        Text to split.
    separator : str, default ","
        Single separator character. Ignored when ``whitespace`` is True.
    whitespace : bool, default False
        Split on runs of whitespace instead of ``separator``.
    comments : bool, default False
        Treat ``//`` line comments and ``/* */`` block comments as opaque,
        so quotes and separators inside them are ignored. Comments stay in
        the returned pieces.

    Returns
    -------
    list[tuple[int, str]]
        ``(offset, piece)`` pairs, where ``offset`` is the index of the
        piece's first character in ``text``. Pieces are not stripped; empty
        pieces are dropped.
    """
    pieces: list[tuple[int, str]] = []
    depth = 0
    quote: str | None = None
    start = 0
    i = 0

    def flush(end: int) -> None:
        piece = text[start:end]
        if piece.strip():
            pieces.append((start, piece))

    while i < len(text):
        ch = text[i]
        if quote is None and comments and ch == "/":
            after = _skip_comment(text, i)
            if after != i:
                i = after
                continue
        if quote is not None:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth = max(0, depth - 1)
        elif depth == 0:
            if whitespace and ch.isspace():
                flush(i)
                start = i + 1
            elif not whitespace and ch == separator:
                flush(i)
                start = i + 1
        i += 1

    flush(len(text))
    return pieces
