"""
Compare Service

Wrapper around PriceComparisonPipeline for use in FastAPI.
Applies per-request threshold overrides, guards catalog size and
runs the (CPU-bound) comparison off the event loop.
"""

import asyncio
from time import perf_counter
from typing import Any, Optional

from backend.core.config import Settings, settings
from bottlematch.config import MatchConfig
from bottlematch.errors import ComparisonError
from bottlematch.logging_config import get_logger
from bottlematch.models import ComparisonResult, RawProduct
from bottlematch.pipeline import PriceComparisonPipeline

logger = get_logger(__name__)


class CatalogTooLarge(ComparisonError):
    """Catalog payload exceeds MAX_CATALOG_SIZE."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Catalog has {size} listings, limit is {limit}")


class CompareService:
    """
    Service wrapper for the comparison pipeline.

    Keeps one pipeline for the configured thresholds and builds a
    throwaway one when a request overrides them.
    """

    def __init__(self, app_settings: Optional[Settings] = None):
        self._settings = app_settings or settings
        self._config: MatchConfig = self._settings.match_config()
        self._pipeline = PriceComparisonPipeline(self._config)
        self._served = 0

    @property
    def config(self) -> MatchConfig:
        return self._config

    @property
    def served(self) -> int:
        return self._served

    def pipeline_for(
        self,
        min_match_ratio: Optional[float] = None,
        max_keywords: Optional[int] = None,
    ) -> PriceComparisonPipeline:
        if min_match_ratio is None and max_keywords is None:
            return self._pipeline
        config = self._config.with_overrides(
            min_match_ratio=min_match_ratio,
            max_keywords=max_keywords,
        )
        return PriceComparisonPipeline(config)

    async def compare(
        self,
        product: RawProduct,
        catalog: list[dict[str, Any]],
        min_match_ratio: Optional[float] = None,
        max_keywords: Optional[int] = None,
    ) -> tuple[ComparisonResult, int]:
        """
        Run one comparison.

        Returns:
            (result, took_ms)

        Raises:
            CatalogTooLarge, InvalidPrice, MalformedCatalogEntry
        """
        limit = self._settings.max_catalog_size
        if len(catalog) > limit:
            raise CatalogTooLarge(len(catalog), limit)

        pipeline = self.pipeline_for(min_match_ratio, max_keywords)
        start = perf_counter()
        with logger.span("compare", product=product.name, catalog=len(catalog)):
            result = await asyncio.to_thread(pipeline.run, product, catalog)
        took_ms = int((perf_counter() - start) * 1000)

        self._served += 1
        logger.info(
            "Comparison finished",
            status=result.status.value,
            matches=len(result.matches),
            took_ms=took_ms,
        )
        return result, took_ms

    async def health_check(self) -> dict:
        """Run a tiny comparison to prove the pipeline works."""
        try:
            probe = await asyncio.to_thread(
                self._pipeline.run,
                RawProduct(name="health probe", price=1.0),
                [{"id": "probe", "name": "Health Probe", "price": 1.0}],
            )
            status = "ok" if len(probe.matches) == 1 else "error"
        except Exception as e:
            logger.error("Health probe failed", error=e)
            status = "error"
        return {
            "status": status,
            "min_match_ratio": self._config.min_match_ratio,
            "max_keywords": self._config.max_keywords,
            "comparisons_served": self._served,
        }


# Global service instance
_compare_service: Optional[CompareService] = None


def get_compare_service() -> CompareService:
    """Get or create the compare service instance."""
    global _compare_service
    if _compare_service is None:
        _compare_service = CompareService()
    return _compare_service
