"""
Bottle price matching and comparison engine.

Compares one scraped product (name, price) with a catalog of listings
and returns the listings that plausibly are the same product, annotated
with price deltas.
"""

from .comparator import compare
from .config import MatchConfig
from .errors import ComparisonError, EmptyQuery, InvalidPrice, MalformedCatalogEntry
from .indexer import IndexedCatalog, index_catalog
from .matcher import Matcher, match
from .models import (
    ComparisonResult,
    ComparisonStatus,
    IndexedEntry,
    MatchResult,
    NormalizedQuery,
    RawProduct,
    SavingsOutcome,
    SavingsSign,
)
from .normalizer import Normalizer, normalize
from .pipeline import PriceComparisonPipeline, PriceScraper, compare_product

__all__ = [
    'compare',
    'compare_product',
    'index_catalog',
    'match',
    'normalize',
    'ComparisonError',
    'ComparisonResult',
    'ComparisonStatus',
    'EmptyQuery',
    'IndexedCatalog',
    'IndexedEntry',
    'InvalidPrice',
    'MalformedCatalogEntry',
    'MatchConfig',
    'MatchResult',
    'Matcher',
    'NormalizedQuery',
    'Normalizer',
    'PriceComparisonPipeline',
    'PriceScraper',
    'RawProduct',
    'SavingsOutcome',
    'SavingsSign',
]
