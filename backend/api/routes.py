"""
API Routes

Defines all HTTP endpoints for the price comparison service.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends

from backend.api.schemas import (
    CompareRequest,
    CompareResponse,
    ErrorResponse,
    HealthResponse,
)
from backend.core.config import settings
from backend.services.compare_service import CompareService, get_compare_service
from bottlematch.logging_config import get_logger
from bottlematch.models import RawProduct


# =============================================================================
# Router Setup
# =============================================================================

router = APIRouter()
logger = get_logger(__name__)


# =============================================================================
# Compare Endpoint
# =============================================================================


@router.post(
    "/compare",
    response_model=CompareResponse,
    responses={
        200: {"description": "Successful comparison (possibly zero matches)"},
        413: {"model": ErrorResponse, "description": "Catalog too large"},
        422: {"model": ErrorResponse, "description": "Invalid price or malformed catalog"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Compare a product with a catalog",
    description="Match a scraped product against catalog listings and annotate each match with savings.",
)
async def compare(
    request: CompareRequest,
    service: Annotated[CompareService, Depends(get_compare_service)],
) -> CompareResponse:
    """
    Compare one product against the supplied catalog.

    - Empty or punctuation-only names give status "empty_query" and no matches
    - Savings are present only when a product price was supplied
    """
    product = RawProduct(name=request.product.name, price=request.product.price)
    with logger.request_span("compare", catalog=len(request.catalog)):
        result, took_ms = await service.compare(
            product=product,
            catalog=request.catalog,
            min_match_ratio=request.min_match_ratio,
            max_keywords=request.max_keywords,
        )
    return CompareResponse.from_result(result, took_ms)


# =============================================================================
# Health Check Endpoint
# =============================================================================


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Run a probe comparison and report the active thresholds.",
)
async def health_check(
    service: Annotated[CompareService, Depends(get_compare_service)],
) -> HealthResponse:
    health = await service.health_check()
    return HealthResponse(
        status="healthy" if health["status"] == "ok" else "unhealthy",
        min_match_ratio=health["min_match_ratio"],
        max_keywords=health["max_keywords"],
        comparisons_served=health["comparisons_served"],
        timestamp=datetime.now(),
    )


# =============================================================================
# Root Endpoint
# =============================================================================


@router.get(
    "/",
    summary="API Root",
    description="Basic endpoint to verify API is running.",
)
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "docs": "/docs",
    }
