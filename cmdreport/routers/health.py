"""Health-check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from cmdreport import __version__
from cmdreport.models.responses import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def service_health() -> HealthResponse:
    """Liveness check, reachable without an API key."""
    return HealthResponse(status="ok", version=__version__)
