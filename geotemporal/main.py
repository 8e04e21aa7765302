"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from geotemporal.dependencies import close_geocoding_client, settings
from geotemporal.exceptions import (
    ApiError,
    GeocodingError,
    HeaderError,
    InvalidCoordinateError,
    InvalidWeightError,
    NoDataError,
    ParsingError,
    UrlError,
)
from geotemporal.routers import geocoding

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses."""

    async def dispatch(self, request: Request, call_next):
        """Log request and response details."""
        request_id = id(request)

        start_time = time.time()
        logger.info(
            "Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None
            }
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            duration = time.time() - start_time
            logger.error(
                "Request failed",
                exc_info=True,
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": round(duration * 1000, 2),
                    "error_type": type(exc).__name__,
                    "error_message": str(exc)
                }
            )
            # Re-raise to let exception handlers deal with it
            raise

        duration = time.time() - start_time
        logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration * 1000, 2)
            }
        )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    logger.info(f"Application started: {settings.app_name}")
    logger.info(f"Geocoding provider: {settings.nominatim_url}")

    yield

    await close_geocoding_client()
    logger.info(f"Application shutdown: {settings.app_name}")


app = FastAPI(
    title=settings.app_name,
    description="""
    Geotemporal API

    Geocoding of structured addresses through Nominatim and weighted
    averaging of locations:

    * **Geocoding**: Structured address to coordinates, one or many at a time
    * **Reverse geocoding**: Coordinates to place name and country
    * **Geotemporal averaging**: Weighted mean of several addresses, optionally
      resolved to a place name

    ## Error Handling

    All errors return consistent JSON responses with:
    - `detail`: Human-readable error message
    - `error_code`: Machine-readable error code

    Common HTTP status codes:
    - `200`: Success
    - `400`: Nothing to average or invalid weight
    - `422`: Validation error or invalid coordinate
    - `429`: Geocoding provider rate limit exceeded
    - `502`: Geocoding provider error or unexpected response
    - `503`: Geocoding provider unavailable
    - `504`: Geocoding provider timeout
    """,
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "geocoding",
            "description": "Geocoding operations. Convert between addresses, coordinates and place names.",
        },
    ],
)

# Add logging middleware
app.add_middleware(LoggingMiddleware)


@app.get("/")
async def root() -> dict:
    """Root endpoint returning API information."""
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "operational",
        "docs": "/api/docs"
    }


# Include routers
app.include_router(geocoding.router, tags=["geocoding"])


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app_name": settings.app_name
    }


def _error_status(exc: GeocodingError) -> tuple:
    """Map a geocoding error to an HTTP status code and error code."""
    if isinstance(exc, InvalidCoordinateError):
        return 422, "INVALID_COORDINATE"
    if isinstance(exc, NoDataError):
        return 400, "NO_DATA"
    if isinstance(exc, InvalidWeightError):
        return 400, "INVALID_WEIGHT"
    if isinstance(exc, ParsingError):
        return 502, "UPSTREAM_PARSING"
    if isinstance(exc, ApiError):
        if exc.status_code == 429:
            return 429, "UPSTREAM_RATE_LIMITED"
        if exc.timeout:
            return 504, "UPSTREAM_TIMEOUT"
        if exc.status_code is None:
            return 503, "UPSTREAM_UNAVAILABLE"
        return 502, "UPSTREAM_ERROR"
    if isinstance(exc, (UrlError, HeaderError)):
        return 500, "CONFIGURATION_ERROR"
    return 500, "GEOCODING_ERROR"


# Global exception handlers

@app.exception_handler(GeocodingError)
async def geocoding_exception_handler(request: Request, exc: GeocodingError) -> JSONResponse:
    """Handle geocoding errors raised by the core."""
    status_code, error_code = _error_status(exc)

    if status_code >= 500:
        logger.error(f"Geocoding error {status_code}: {request.url.path} - {exc.message}")
    else:
        logger.info(f"Geocoding error {status_code}: {request.url.path} - {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "error_code": error_code
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    logger.error(
        f"Unhandled exception: {request.url.path}",
        exc_info=True,
        extra={
            "method": request.method,
            "url": str(request.url),
            "client": request.client.host if request.client else None
        }
    )

    if settings.debug:
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "error_code": "INTERNAL_ERROR",
                "error_type": type(exc).__name__,
                "error_message": str(exc)
            }
        )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_code": "INTERNAL_ERROR"
        }
    )
