"""
Pydantic Schemas for API Request/Response

Defines the data models used in API endpoints.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from bottlematch.models import ComparisonResult, MatchResult, SavingsSign


# =============================================================================
# Request Schemas
# =============================================================================


class ProductInput(BaseModel):
    """Product as scraped from the shop page."""

    name: str = Field(
        default="",
        max_length=1000,
        description="Product heading (may be empty)",
        examples=["Blue Bottle Rum 700ml"],
    )
    price: Optional[float | str] = Field(
        default=None,
        description="Current price, number or scraped text such as '$49.99'",
        examples=[49.99, "$1,299.99"],
    )


class CompareRequest(BaseModel):
    """Request body for the compare endpoint."""

    product: ProductInput
    catalog: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Catalog listings: {id, name, price, imageUrl} or search hits",
    )
    min_match_ratio: Optional[float] = Field(
        default=None, gt=0.0, le=1.0, description="Override of MIN_MATCH_RATIO"
    )
    max_keywords: Optional[int] = Field(
        default=None, ge=1, le=20, description="Override of MAX_KEYWORDS"
    )


# =============================================================================
# Response Schemas
# =============================================================================


class SavingsInfo(BaseModel):
    """Price difference against the scraped price, rounded to cents."""

    delta: float = Field(..., description="current price - listing price")
    percentage: float = Field(..., description="delta as % of current price")
    sign: SavingsSign


class MatchInfo(BaseModel):
    """A matched catalog listing."""

    id: str = Field(..., description="Listing ID")
    name: str = Field(..., description="Lowercase listing name")
    price: float = Field(..., description="Listing price")
    image: str = Field(..., description="Image URL or the no-image marker")
    product_url: str = Field(..., description="Link to the listing page")
    savings: Optional[SavingsInfo] = Field(
        None, description="Present only when the product price was known"
    )

    @classmethod
    def from_match(cls, match: MatchResult) -> "MatchInfo":
        savings = None
        if match.savings is not None:
            rounded = match.savings.rounded(2)
            savings = SavingsInfo(
                delta=rounded.delta,
                percentage=rounded.percentage,
                sign=rounded.sign,
            )
        return cls(
            id=match.entry.id,
            name=match.entry.name,
            price=match.entry.price,
            image=match.entry.image,
            product_url=match.product_url,
            savings=savings,
        )


class CompareMetadata(BaseModel):
    """Metadata about the comparison run."""

    took_ms: int = Field(..., description="Processing time in milliseconds")
    total_catalog: int = Field(..., description="Listings indexed")
    total_matches: int = Field(..., description="Listings matched")
    skipped_entries: int = Field(0, description="Malformed listings skipped")
    stage_ms: dict[str, int] = Field(default_factory=dict)


class CompareResponse(BaseModel):
    """Response body for the compare endpoint."""

    success: bool = Field(..., description="Whether the request was successful")
    query: str = Field(..., description="Normalized keywords joined by spaces")
    keywords: list[str] = Field(default_factory=list)
    status: str = Field(..., description="ok, no_matches or empty_query")
    current_price: Optional[float] = None
    matches: list[MatchInfo] = Field(default_factory=list)
    metadata: CompareMetadata

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "query": "blue bottle rum 700ml",
                "keywords": ["blue", "bottle", "rum", "700ml"],
                "status": "ok",
                "current_price": 100.0,
                "matches": [
                    {
                        "id": "abc123",
                        "name": "blue bottle rum 700ml",
                        "price": 80.0,
                        "image": "https://example.com/image.jpg",
                        "product_url": "https://www.baxus.co/asset/abc123",
                        "savings": {"delta": 20.0, "percentage": 20.0, "sign": "cheaper"},
                    }
                ],
                "metadata": {
                    "took_ms": 3,
                    "total_catalog": 1480,
                    "total_matches": 1,
                    "skipped_entries": 0,
                },
            }
        }
    )

    @classmethod
    def from_result(cls, result: ComparisonResult, took_ms: int) -> "CompareResponse":
        return cls(
            success=True,
            query=result.query.text,
            keywords=list(result.query.keywords),
            status=result.status.value,
            current_price=result.product.price,
            matches=[MatchInfo.from_match(m) for m in result.matches],
            metadata=CompareMetadata(
                took_ms=took_ms,
                total_catalog=result.catalog_size,
                total_matches=len(result.matches),
                skipped_entries=result.skipped_count,
                stage_ms=result.stage_ms,
            ),
        )


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = Field(default=False)
    error: str = Field(..., description="Error type")
    detail: Optional[str] = Field(None, description="Detailed error info")


# =============================================================================
# Health Check Schemas
# =============================================================================


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(..., description="healthy or unhealthy")
    min_match_ratio: float
    max_keywords: int
    comparisons_served: int = 0
    timestamp: datetime
