"""Replacement analysis for component sources.

This module composes the pattern matchers with a token registry: each
matched style value is resolved to its best design token, producing a list
of replacement candidates. It does not rewrite the source.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

from loguru import logger

from .config import MatcherOptions, TokenMatchOptions
from .matchers import InlineStyleMatcher, PatternMatcher, UtilityClassMatcher
from .matchers.base import MatchResult, order_matches

if TYPE_CHECKING:
    from .registry import TokenMatch, TokenRegistry


@dataclass(frozen=True)
class ReplacementCandidate:
    """A matched style value and the token it resolves to.

    Attributes
    ----------
    match : MatchResult
        The value found in the source.
    token_match : TokenMatch or None
        Best token for the value, None when nothing qualifies.
    """

    match: MatchResult
    token_match: TokenMatch | None = None

    @property
    def resolved(self) -> bool:
        return self.token_match is not None

    @property
    def confidence(self) -> float:
        return self.token_match.confidence if self.token_match else 0.0

    @property
    def suggested_reference(self) -> str | None:
        """``var(--token)`` for resolved candidates."""
        if self.token_match is None:
            return None
        return f"var({self.token_match.token.css_variable})"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "match": self.match.to_dict(),
            "tokenMatch": self.token_match.to_dict() if self.token_match else None,
            "suggestedReference": self.suggested_reference,
        }


def default_matchers() -> list[PatternMatcher]:
    return [UtilityClassMatcher(), InlineStyleMatcher()]


def find_replacement_candidates(
    source: str,
    registry: TokenRegistry,
    matchers: Sequence[PatternMatcher] | None = None,
    matcher_options: MatcherOptions | dict | None = None,
    match_options: TokenMatchOptions | None = None,
    include_unmatched: bool = False,
) -> list[ReplacementCandidate]:
    """
    Resolve every style value in ``source`` against ``registry``.

    Parameters
    ----------
    source : str
        Component source text.
    registry : TokenRegistry
        An initialized registry.
    matchers : sequence of PatternMatcher, optional
        Defaults to the utility-class matcher followed by the inline-style
        matcher.
    matcher_options : MatcherOptions or dict, optional
        Passed to every matcher.
    match_options : TokenMatchOptions, optional
        Passed to ``registry.find_best_match``.
    include_unmatched : bool, default False
        Keep candidates whose value resolved to no token.

    Returns
    -------
    list[ReplacementCandidate]
        In source order.
    """
    matchers = list(matchers) if matchers is not None else default_matchers()

    found: list[MatchResult] = []
    for matcher in matchers:
        found.extend(matcher.match(source, matcher_options))

    candidates: list[ReplacementCandidate] = []
    for match in order_matches(found):
        token_match = registry.find_best_match(match.value, match.category, match_options)
        if token_match is None and not include_unmatched:
            continue
        candidates.append(ReplacementCandidate(match=match, token_match=token_match))

    resolved = sum(1 for c in candidates if c.resolved)
    logger.debug(f"Resolved {resolved} of {len(found)} matched values to tokens")
    return candidates
