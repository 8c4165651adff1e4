"""
Bottle Price Compare - FastAPI Backend

Main entry point for the backend API server.
Lets the browser extension (or any client) post a scraped product and
a catalog payload and get back annotated matches.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from backend.api.routes import router
from backend.api.schemas import ErrorResponse
from backend.core.config import settings
from backend.services.compare_service import CatalogTooLarge, get_compare_service
from bottlematch.errors import ComparisonError, InvalidPrice, MalformedCatalogEntry
from bottlematch.logging_config import get_logger, setup_logging

DEBUG_LOG = os.environ.get("DEBUG_LOG", os.environ.get("DEBUG_MODE", "false")).lower() in (
    "true",
    "1",
    "yes",
    "on",
)
setup_logging(
    service_name=os.environ.get("LOGFIRE_SERVICE_NAME", "bottlematch-backend"),
    level="DEBUG" if DEBUG_LOG else "INFO",
)
logger = get_logger(__name__)


# =============================================================================
# Lifespan Manager
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the active thresholds on startup."""
    service = get_compare_service()
    logger.info("Starting Bottle Price Compare backend")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(
        "Matching thresholds",
        min_match_ratio=service.config.min_match_ratio,
        max_keywords=service.config.max_keywords,
    )

    yield

    logger.info("Shutting down backend")


# =============================================================================
# FastAPI App
# =============================================================================


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
## 🍾 Bottle Price Compare API

Compares a product scraped from a shop page with marketplace listings.

### Endpoints:
- `POST /api/compare` - Match a product against a catalog payload
- `GET /api/health` - Check service health
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(router, prefix="/api", tags=["API"])


# =============================================================================
# Error Handlers
# =============================================================================


def error_status(exc: ComparisonError) -> int:
    """HTTP status for an engine error."""
    if isinstance(exc, CatalogTooLarge):
        return 413
    if isinstance(exc, (InvalidPrice, MalformedCatalogEntry)):
        return 422
    return 400


@app.exception_handler(ComparisonError)
async def comparison_error_handler(request: Request, exc: ComparisonError) -> JSONResponse:
    logger.warning(f"Comparison rejected: {exc}", path=request.url.path)
    body = ErrorResponse(error=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=error_status(exc), content=body.model_dump())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", error=exc, path=request.url.path)
    body = ErrorResponse(error="InternalServerError", detail=str(exc)[:200])
    return JSONResponse(status_code=500, content=body.model_dump())


@app.get("/", include_in_schema=False)
async def root_redirect():
    """Redirect root to API docs."""
    return RedirectResponse(url="/docs")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
