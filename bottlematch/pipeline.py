"""
Price Comparison Pipeline

Runs one comparison: Normalizer → Indexer → Matcher → Comparator.

The scraped product and the catalog payload are supplied by the host
(browser extension, HTTP client, CLI); this module never fetches anything.
"""

from typing import Any, Iterable, Optional, Protocol, Union

from bottlematch.comparator import compare, validate_price
from bottlematch.config import DEFAULT_CONFIG, MatchConfig
from bottlematch.indexer import index_catalog
from bottlematch.matcher import Matcher
from bottlematch.models import (
    ComparisonResult,
    ComparisonStatus,
    MatchResult,
    RawProduct,
)
from bottlematch.normalizer import Normalizer
from bottlematch.pipeline_logger import (
    log_comparison_request,
    log_latency_summary,
    log_match,
    log_normalize,
    log_savings,
    trace_comparison,
    trace_stage,
)


class PriceScraper(Protocol):
    """Host capability that reads the product name and price off a page."""

    def scrape(self, page_handle: Any) -> RawProduct:
        ...


class PriceComparisonPipeline:
    """Compares a scraped product with a catalog using one MatchConfig."""

    def __init__(self, config: Optional[MatchConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.normalizer = Normalizer(self.config.max_keywords)
        self.matcher = Matcher(self.config.min_match_ratio)

    def product_url(self, entry_id: str) -> str:
        return f"{self.config.product_url_base}{entry_id}"

    def run(
        self,
        product: Union[RawProduct, dict],
        raw_catalog: Iterable[Any],
    ) -> ComparisonResult:
        """
        Compare one product against a catalog payload.

        Args:
            product: Scraped name/price (RawProduct or a mapping)
            raw_catalog: Already-deserialized catalog records

        Returns:
            ComparisonResult with matches in catalog name order

        Raises:
            InvalidPrice: scraped price present but not positive
            MalformedCatalogEntry: only when config.strict_catalog is set
        """
        if not isinstance(product, RawProduct):
            product = RawProduct.model_validate(product)
        records = list(raw_catalog or [])

        with trace_comparison(product.name, product.price) as trace:
            log_comparison_request(product.name, product.price, len(records))

            current_price = None
            if product.price is not None:
                current_price = validate_price(product.price)

            with trace_stage("NORMALIZE", "Extracting keywords"):
                query = self.normalizer.normalize(product.name)
                log_normalize("Keywords extracted", {"keywords": list(query.keywords)})

            with trace_stage("INDEX", "Indexing catalog"):
                catalog = index_catalog(
                    records,
                    strict=self.config.strict_catalog,
                    no_image=self.config.no_image,
                )

            result = ComparisonResult(
                product=product,
                query=query,
                catalog_size=len(catalog),
                skipped_count=catalog.skipped_count,
            )

            if query.is_empty:
                result.status = ComparisonStatus.EMPTY_QUERY
                result.stage_ms = trace.stage_timings()
                return result

            with trace_stage("MATCH", "Filtering catalog by keyword coverage"):
                entries = self.matcher.match(query, catalog)
                log_match("Catalog filtered", {
                    "threshold": self.matcher.threshold(query),
                    "matches": len(entries),
                })

            with trace_stage("SAVINGS", "Annotating matches"):
                result.matches = [
                    MatchResult(
                        entry=entry,
                        current_price=current_price,
                        savings=compare(current_price, entry.price),
                        product_url=self.product_url(entry.id),
                    )
                    for entry in entries
                ]
                cheaper = sum(
                    1 for m in result.matches
                    if m.savings is not None and m.savings.delta > 0
                )
                log_savings("Savings computed", {"cheaper_listings": cheaper})

            if not result.matches:
                result.status = ComparisonStatus.NO_MATCHES
            result.stage_ms = trace.stage_timings()

            log_latency_summary(
                "COMPARE",
                "pipeline",
                trace.elapsed_ms(),
                breakdown_ms=result.stage_ms,
                meta={"matches": len(result.matches), "catalog": result.catalog_size},
            )
            return result


def compare_product(
    product: Union[RawProduct, dict],
    raw_catalog: Iterable[Any],
    config: Optional[MatchConfig] = None,
) -> ComparisonResult:
    """Run a one-off comparison."""
    return PriceComparisonPipeline(config).run(product, raw_catalog)
