"""API request and response models."""

from api.models.requests import CommitVerifyRequest, IpfsUploadRequest
from api.models.responses import (
    CommitVerifyResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    "CommitVerifyRequest",
    "IpfsUploadRequest",
    "CommitVerifyResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
]
