"""Health check endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from adprice_api import __version__
from adprice_api.config import ConfigError, get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    services: dict[str, str]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns service status.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        services={"api": "up"},
    )


@router.get("/readyz", response_model=HealthResponse)
async def readiness_check() -> HealthResponse:
    """
    Readiness check endpoint.

    Ready once both key pairs are loaded; reports their fingerprints.
    """
    try:
        settings = get_settings()
    except ConfigError:
        return HealthResponse(
            status="not_ready",
            version=__version__,
            services={"api": "up", "external_keys": "invalid", "internal_keys": "invalid"},
        )

    return HealthResponse(
        status="ready",
        version=__version__,
        services={
            "api": "up",
            "external_keys": settings.external_keys.fingerprint(),
            "internal_keys": settings.internal_keys.fingerprint(),
        },
    )
