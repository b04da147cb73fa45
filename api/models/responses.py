"""
API Response Models

Pydantic models for API response serialization. Stage receipts and the
raw content models are served as-is from core.schemas.records.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "provenance-anchor-api"
    version: str = "v1"
    storage_backend: str | None = None


class CommitVerifyResponse(BaseModel):
    """Response for POST /api/v1/ai/verify."""

    valid: bool = Field(..., description="True iff both reveal and commit hashes match")
    batch_id: str
    reveal_hash: str = Field(..., description="Reveal hash recomputed from the payload")


class ErrorDetail(BaseModel):
    """Error detail in error responses."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail
