"""
Health Check Route

Simple health check endpoint for liveness probes.
"""

from fastapi import APIRouter, Depends

from api.deps import get_runtime_config
from api.models.responses import HealthResponse
from core.config.runtime import RuntimeConfig


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(config: RuntimeConfig = Depends(get_runtime_config)) -> HealthResponse:
    """
    Health check endpoint.

    Does not contact the storage backend.
    """
    return HealthResponse(ok=True, storage_backend=config.storage.backend)


@router.get("/", response_model=HealthResponse)
def root(config: RuntimeConfig = Depends(get_runtime_config)) -> HealthResponse:
    """Root endpoint - same as health check."""
    return HealthResponse(ok=True, storage_backend=config.storage.backend)
