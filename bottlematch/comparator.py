"""
Savings Comparator

Computes how a listing price compares with the scraped price:

    delta      = current_price - catalog_price
    percentage = delta / current_price * 100

A positive delta means the listing is cheaper.
"""

import math
from typing import Any, Optional

from bottlematch.errors import InvalidPrice
from bottlematch.models import SavingsOutcome, SavingsSign


def validate_price(price: Any) -> float:
    """Return the price as float, or raise InvalidPrice if it is not positive and finite."""
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise InvalidPrice(price)
    if not math.isfinite(price) or price <= 0:
        raise InvalidPrice(price)
    return float(price)


def savings_sign(delta: float) -> SavingsSign:
    if delta > 0:
        return SavingsSign.CHEAPER
    if delta < 0:
        return SavingsSign.MORE_EXPENSIVE
    return SavingsSign.EQUAL


def compare(current_price: Optional[float], catalog_price: float) -> Optional[SavingsOutcome]:
    """
    Compare a listing price against the scraped price.

    Returns None when no current price was scraped.
    Raises InvalidPrice when the current price is zero, negative or not finite.
    """
    if current_price is None:
        return None
    current = validate_price(current_price)
    delta = current - catalog_price
    return SavingsOutcome(
        delta=delta,
        percentage=(delta / current) * 100,
        sign=savings_sign(delta),
    )
