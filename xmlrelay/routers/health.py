"""Health check API router."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Schema describing the health check payload."""

    ok: bool
    service: str


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Service health status")
def read_health(request: Request) -> HealthResponse:
    """Return a simple payload naming the service that answered."""

    return HealthResponse(ok=True, service=request.app.state.service_name)


__all__ = ["router", "HealthResponse", "read_health"]
