"""
API Request Models

Pydantic models for request validation. Stage endpoints take the stage
payload models from core.schemas.stages directly.
"""

from typing import Any

from pydantic import BaseModel, Field

from core.schemas.stages import AiScoreRequest


class IpfsUploadRequest(BaseModel):
    """Request body for POST /api/v1/ipfs/upload."""

    data: Any = Field(..., description="JSON value to store")
    pin: bool = Field(default=True, description="Pin the content after upload")


class CommitVerifyRequest(BaseModel):
    """Request body for POST /api/v1/ai/verify."""

    payload: AiScoreRequest = Field(..., description="The revealed score payload")
    nonce: str = Field(..., min_length=1)
    reveal_hash: str = Field(..., min_length=1)
    commit_hash: str = Field(..., min_length=1)
