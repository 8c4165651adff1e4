"""
Product Name Normalizer

Turns a scraped product heading into the keyword sequence used for matching.

Steps:
- hyphens and underscores become spaces
- everything that is not a word character or whitespace is removed
  (currency symbols, punctuation, parentheses)
- whitespace runs collapse to one space, ends are trimmed
- lowercase, split, keep the first `max_keywords` tokens

Examples:
    "Blue-Bottle Rum (700ml) $49.99" → ["blue", "bottle", "rum", "700ml", "4999"]
    "   " → []
"""

import re

from bottlematch.config import DEFAULT_MAX_KEYWORDS
from bottlematch.errors import EmptyQuery
from bottlematch.models import NormalizedQuery


_SEPARATORS = re.compile(r"[-_]")
_NON_WORD = re.compile(r"[^\w\s]", flags=re.UNICODE)
_WHITESPACE = re.compile(r"\s+")


def clean_name(raw_name: str) -> str:
    """Apply the character-level cleanup and return the cleaned (cased) name."""
    if not raw_name:
        return ""
    text = _SEPARATORS.sub(" ", raw_name)
    text = _NON_WORD.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


class Normalizer:
    """Keyword extractor bound to a maximum keyword count."""

    def __init__(self, max_keywords: int = DEFAULT_MAX_KEYWORDS):
        if max_keywords < 1:
            raise ValueError(f"max_keywords must be >= 1, got {max_keywords}")
        self.max_keywords = max_keywords

    def normalize(self, raw_name: str, strict: bool = False) -> NormalizedQuery:
        """
        Normalize a product name into a query.

        Args:
            raw_name: Product heading as scraped, may be empty
            strict: Raise EmptyQuery instead of returning an empty query

        Returns:
            NormalizedQuery with at most `max_keywords` keywords
        """
        tokens = clean_name(raw_name).lower().split()
        query = NormalizedQuery(keywords=tuple(tokens[: self.max_keywords]))
        if strict and query.is_empty:
            raise EmptyQuery(raw_name)
        return query


def normalize(raw_name: str, max_keywords: int = DEFAULT_MAX_KEYWORDS) -> NormalizedQuery:
    """Normalize with a one-off Normalizer."""
    return Normalizer(max_keywords).normalize(raw_name)
