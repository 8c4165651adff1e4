"""
Keyword Coverage Matcher

A listing matches when enough query keywords occur inside its name.
A keyword is covered when at least one name token contains it as a
substring ("bottl" is covered by "bottle", "12" by "1200ml"). The
listing matches when

    covered >= ceil(len(keywords) * min_match_ratio)

Duplicate keywords are counted once per occurrence in the query.
An empty query matches nothing. Output keeps catalog order.
"""

import math
from typing import Iterable, Sequence

from bottlematch.config import DEFAULT_MIN_MATCH_RATIO
from bottlematch.models import IndexedEntry, NormalizedQuery


def required_matches(keyword_count: int, min_match_ratio: float) -> int:
    """Covered keywords needed for a match (ceiling of count * ratio)."""
    return math.ceil(keyword_count * min_match_ratio)


def covered_keywords(keywords: Sequence[str], tokens: Sequence[str]) -> list[str]:
    """Keywords contained in at least one token, in query order."""
    return [kw for kw in keywords if any(kw in token for token in tokens)]


class Matcher:
    """Filters an indexed catalog by keyword coverage."""

    def __init__(self, min_match_ratio: float = DEFAULT_MIN_MATCH_RATIO):
        if not 0.0 < min_match_ratio <= 1.0:
            raise ValueError(f"min_match_ratio must be in (0, 1], got {min_match_ratio}")
        self.min_match_ratio = min_match_ratio

    def threshold(self, query: NormalizedQuery) -> int:
        return required_matches(len(query.keywords), self.min_match_ratio)

    def is_match(self, query: NormalizedQuery, entry: IndexedEntry) -> bool:
        if query.is_empty:
            return False
        covered = covered_keywords(query.keywords, entry.tokens)
        return len(covered) >= self.threshold(query)

    def match(
        self,
        query: NormalizedQuery,
        catalog: Iterable[IndexedEntry],
    ) -> list[IndexedEntry]:
        """Return the catalog entries that cover enough keywords, in catalog order."""
        if query.is_empty:
            return []
        needed = self.threshold(query)
        return [
            entry
            for entry in catalog
            if len(covered_keywords(query.keywords, entry.tokens)) >= needed
        ]


def match(
    query: NormalizedQuery,
    catalog: Iterable[IndexedEntry],
    min_match_ratio: float = DEFAULT_MIN_MATCH_RATIO,
) -> list[IndexedEntry]:
    """Match with a one-off Matcher."""
    return Matcher(min_match_ratio).match(query, catalog)
