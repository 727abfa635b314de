"""
Match records and the shared matcher interface.

A matcher scans component source text and returns :class:`MatchResult`
records in order of appearance. Each record carries a ``details`` variant
keyed by category:

- ``ColorDetails``: the literal's color family.
- ``LengthDetails``: magnitude and unit of the first length.
- ``ShadowDetails``: layer count and whether any layer is inset.

All variants carry ``dynamic``, set when the value came from an
interpolation or a branch of an expression rather than a plain literal.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from ..config import ColorFormat, MatcherOptions, MatchScope, TokenCategory
from ..diagnostics import Diagnostic


# =============================================================================
# Location helpers
# =============================================================================


@dataclass(frozen=True)
class MatchLocation:
    """Absolute offsets (end exclusive) plus the 1-based line and column of start."""

    start: int
    end: int
    line: int
    column: int

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end, "line": self.line, "column": self.column}


@dataclass(frozen=True)
class MatchContext:
    """Source line containing the match, the enclosing element and a wider snippet."""

    line: str
    element: str | None = None
    snippet: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, "element": self.element, "snippet": self.snippet}


def get_line_and_column(source: str, index: int) -> tuple[int, int]:
    """1-based line and column of ``index``; ``(0, 0)`` when out of range."""
    if index < 0 or index > len(source):
        return 0, 0
    line = source.count("\n", 0, index) + 1
    column = index - (source.rfind("\n", 0, index) + 1) + 1
    return line, column


def create_match_location(source: str, start: int, end: int) -> MatchLocation:
    line, column = get_line_and_column(source, start)
    return MatchLocation(start=start, end=end, line=line, column=column)


def get_full_line(source: str, index: int) -> str:
    """The whole line containing ``index``, without its newline."""
    line_start = source.rfind("\n", 0, index) + 1
    line_end = source.find("\n", index)
    return source[line_start : len(source) if line_end == -1 else line_end]


def get_context(source: str, start: int, end: int, context_size: int = 100) -> str:
    """Up to ``context_size`` characters either side of a span."""
    return source[max(0, start - context_size) : min(len(source), end + context_size)]


_ELEMENT_OPEN = re.compile(r"<([A-Za-z][\w.$]*)")
_TAG_CLOSE = re.compile(r"(?<!=)>")


def find_element_name(source: str, index: int) -> str | None:
    """
    Best-effort name of the JSX element whose attributes contain ``index``.

    Looks for the nearest ``<Tag`` before ``index`` on the same line, then
    for an unclosed ``<Tag`` on earlier lines (attributes split over several
    lines). Arrow functions (``=>``) inside attributes do not close a tag.
    """
    line_start = source.rfind("\n", 0, index) + 1
    on_line = list(_ELEMENT_OPEN.finditer(source, line_start, index))
    if on_line:
        return on_line[-1].group(1)

    before = list(_ELEMENT_OPEN.finditer(source, 0, index))
    if not before:
        return None
    last = before[-1]
    if _TAG_CLOSE.search(source, last.end(), index):
        return None
    return last.group(1)


# =============================================================================
# Value details
# =============================================================================


@dataclass(frozen=True)
class ColorDetails:
    kind: ClassVar[str] = "color"

    color_format: ColorFormat | None = None
    dynamic: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "colorFormat": self.color_format.value if self.color_format else None,
            "dynamic": self.dynamic,
        }


@dataclass(frozen=True)
class LengthDetails:
    kind: ClassVar[str] = "length"

    magnitude: float | None = None
    unit: str | None = None
    dynamic: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "magnitude": self.magnitude,
            "unit": self.unit,
            "dynamic": self.dynamic,
        }


@dataclass(frozen=True)
class ShadowDetails:
    kind: ClassVar[str] = "shadow"

    layer_count: int = 1
    inset: bool = False
    dynamic: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "layerCount": self.layer_count,
            "inset": self.inset,
            "dynamic": self.dynamic,
        }


ValueDetails = Union[ColorDetails, LengthDetails, ShadowDetails]


# =============================================================================
# Match records
# =============================================================================


@dataclass(frozen=True)
class MatchResult:
    """A style value found in source text."""

    category: TokenCategory
    value: str
    property: str
    scope: MatchScope
    location: MatchLocation
    context: MatchContext | None = None
    path: tuple[str, ...] = ()
    details: ValueDetails | None = None

    @property
    def dynamic(self) -> bool:
        return self.details is not None and self.details.dynamic

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "category": self.category.value,
            "value": self.value,
            "property": self.property,
            "scope": self.scope.value,
            "context": self.context.to_dict() if self.context else None,
            "location": self.location.to_dict(),
            "path": list(self.path),
            "details": self.details.to_dict() if self.details else None,
        }


@dataclass
class ScanResult:
    """Matches from one scan plus the non-fatal issues met along the way."""

    matches: list[MatchResult] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.matches)

    def __iter__(self):
        return iter(self.matches)


def order_matches(matches: list[MatchResult]) -> list[MatchResult]:
    """Drop records repeating an earlier span and sort by position."""
    seen: set[tuple[int, int]] = set()
    unique: list[MatchResult] = []
    for match in matches:
        key = (match.location.start, match.location.end)
        if key in seen:
            continue
        seen.add(key)
        unique.append(match)
    return sorted(unique, key=lambda m: (m.location.start, m.location.end))


# =============================================================================
# Matcher interface
# =============================================================================


class PatternMatcher(ABC):
    """
    Base class for source scanners.

    Subclasses implement :meth:`_scan`; this class handles option
    validation, scope limiting, deduplication and ordering. Matchers keep
    no state between calls.
    """

    name: ClassVar[str] = "PatternMatcher"
    scope: ClassVar[MatchScope]

    def get_name(self) -> str:
        return self.name

    @staticmethod
    def resolve_options(options: MatcherOptions | dict | None) -> MatcherOptions:
        if options is None:
            return MatcherOptions()
        if isinstance(options, MatcherOptions):
            return options
        return MatcherOptions(**options)

    def match(
        self, source: str, options: MatcherOptions | dict | None = None
    ) -> list[MatchResult]:
        """Return the ordered match records for ``source``."""
        return self.scan(source, options).matches

    def scan(self, source: str, options: MatcherOptions | dict | None = None) -> ScanResult:
        """Like :meth:`match` but also returns diagnostics."""
        options = self.resolve_options(options)
        if not options.allows_scope(self.scope):
            return ScanResult()

        diagnostics: list[Diagnostic] = []
        matches = self._scan(source, options, diagnostics)
        return ScanResult(matches=order_matches(matches), diagnostics=diagnostics)

    @abstractmethod
    def _scan(
        self, source: str, options: MatcherOptions, diagnostics: list[Diagnostic]
    ) -> list[MatchResult]:
        """Collect raw matches; ordering and deduplication happen in :meth:`scan`."""

    def _build_result(
        self,
        source: str,
        start: int,
        end: int,
        *,
        category: TokenCategory,
        property_name: str,
        anchor: int,
        options: MatcherOptions,
        path: tuple[str, ...],
        details: ValueDetails,
    ) -> MatchResult:
        context = None
        if options.include_context:
            context = MatchContext(
                line=get_full_line(source, start),
                element=find_element_name(source, anchor),
                snippet=get_context(source, start, end, options.context_size),
            )
        return MatchResult(
            category=category,
            value=source[start:end],
            property=property_name,
            scope=self.scope,
            location=create_match_location(source, start, end),
            context=context,
            path=path,
            details=details,
        )
