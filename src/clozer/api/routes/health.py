"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/osrm", status_code=status.HTTP_200_OK)
def health_osrm() -> dict:
    """Report whether road distances are available or the haversine fallback is in use."""
    from ...services.routing.osrm_client import check_health

    if not settings.osrm_base_url:
        return {"service": "osrm", "configured": False, "healthy": False, "fallback": "haversine"}
    healthy = check_health()
    return {
        "service": "osrm",
        "configured": True,
        "healthy": healthy,
        "fallback": None if healthy else "haversine",
    }
