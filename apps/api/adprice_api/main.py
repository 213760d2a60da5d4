"""Auction Price Crypter API - FastAPI Application Entry Point."""

import logging
import os
import uuid

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from adprice_api import __version__
from adprice_api.config import ConfigError
from adprice_api.context import request_id_var
from adprice_api.crypto.price_crypter import CrypterError
from adprice_api.macros import MacroResolutionError
from adprice_api.routers import creatives, health, prices
from adprice_api.schemas import ProblemDetail
from adprice_api.utils import PriceError, configure_json_logging

PROBLEM_BASE_URL = "https://adprice.example.com/problems"

app = FastAPI(
    title="Auction Price Crypter API",
    description="Encrypted auction-price macros for creative markup",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Set ADPRICE_JSON_LOGS=false to disable (defaults to true for production)
logger = logging.getLogger(__name__)
if os.getenv("ADPRICE_JSON_LOGS", "true").lower() != "false":
    configure_json_logging(log_level=os.getenv("LOG_LEVEL", "INFO"))
    logger.info("Structured JSON logging enabled")


# ============================================================================
# Request ID Middleware
# ============================================================================


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Generate and propagate request_id for observability.

    - Accepts X-Request-ID header from client (optional)
    - Generates new UUID if not provided
    - Sets context variable for logging
    - Returns X-Request-ID in response headers
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request_id_var.set(request_id)

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    return response


# ============================================================================
# RFC 9457 Global Exception Handlers
# ============================================================================


def _problem_response(
    request: Request, status_code: int, problem_type: str, title: str, detail
) -> JSONResponse:
    problem = ProblemDetail(
        type=f"{PROBLEM_BASE_URL}/{problem_type}",
        title=title,
        status=status_code,
        detail=detail,
        instance=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(exclude_none=True),
        media_type="application/problem+json",
    )


@app.exception_handler(MacroResolutionError)
async def macro_resolution_handler(request: Request, exc: MacroResolutionError) -> JSONResponse:
    """Handle creatives whose prices cannot be encrypted.

    Returns 422 with the failing macro and price as structured detail.
    """
    return _problem_response(
        request,
        422,
        "price-not-encodable",
        "Price Not Encodable",
        {"macro": exc.macro, "price": str(exc.price), "error": str(exc.__cause__ or exc)},
    )


@app.exception_handler(PriceError)
async def price_error_handler(request: Request, exc: PriceError) -> JSONResponse:
    """Handle prices that cannot be truncated or parsed."""
    return _problem_response(
        request,
        422,
        "price-not-encodable",
        "Price Not Encodable",
        str(exc),
    )


@app.exception_handler(CrypterError)
async def crypter_error_handler(request: Request, exc: CrypterError) -> JSONResponse:
    """Handle malformed encrypted prices and plaintext that cannot be encrypted."""
    return _problem_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "malformed-price-blob",
        "Malformed Encrypted Price",
        str(exc),
    )


@app.exception_handler(ConfigError)
async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
    """Handle requests that need key pairs which could not be loaded."""
    logger.error(f"Key pairs unavailable: {exc}")

    return _problem_response(
        request,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "keys-unavailable",
        "Service Unavailable",
        "Price key pairs are not configured.",
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with RFC 9457 Problem Details format.

    Preserves dict detail fields for structured error responses.
    """
    detail_value = exc.detail if exc.detail is not None else _get_title_for_status(exc.status_code)

    return _problem_response(
        request,
        exc.status_code,
        f"http-{exc.status_code}",
        _get_title_for_status(exc.status_code),
        detail_value,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors with RFC 9457 Problem Details format.

    Returns 400 Bad Request with application/problem+json.
    """
    first_error = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(loc) for loc in first_error.get("loc", []))
    msg = first_error.get("msg", "Validation error")

    return _problem_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "validation-error",
        "Request Validation Failed",
        f"Invalid field '{field}': {msg}",
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with RFC 9457 Problem Details format."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return _problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal-error",
        "Internal Server Error",
        "An unexpected error occurred. Please try again later.",
    )


def _get_title_for_status(status_code: int) -> str:
    """Get human-readable title for HTTP status code."""
    titles = {
        400: "Bad Request",
        404: "Not Found",
        405: "Method Not Allowed",
        422: "Unprocessable Entity",
        500: "Internal Server Error",
        503: "Service Unavailable",
    }
    return titles.get(status_code, f"HTTP {status_code}")


# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(creatives.router)
app.include_router(prices.router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Auction Price Crypter API",
        "version": __version__,
        "status": "running",
    }
