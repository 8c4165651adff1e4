"""
Comparison Errors

Custom exceptions raised by the matching and comparison engine.
Empty queries and empty catalogs are normal outcomes; these classes
cover the caller contract violations.
"""

from typing import Any, Optional


class ComparisonError(Exception):
    """Base error for the comparison engine."""
    pass


class EmptyQuery(ComparisonError):
    """Product name has no usable keywords after normalization."""

    def __init__(self, raw_name: str = ""):
        self.raw_name = raw_name
        super().__init__(f"No usable keywords in product name: {raw_name!r}")


class InvalidPrice(ComparisonError):
    """Reference price is not a positive finite number."""

    def __init__(self, price: Any):
        self.price = price
        super().__init__(f"Reference price must be positive, got {price!r}")


class MalformedCatalogEntry(ComparisonError):
    """Catalog record is missing a name or a usable price."""

    def __init__(self, position: int, reason: str, entry_id: Optional[str] = None):
        self.position = position
        self.reason = reason
        self.entry_id = entry_id
        label = f"#{position}" if entry_id is None else f"#{position} (id={entry_id})"
        super().__init__(f"Malformed catalog entry {label}: {reason}")
