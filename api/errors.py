"""
API Error Handling

Standardized error handling for the API. Pipeline exceptions carry a
stable code; the HTTP status is derived from it here.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.models.responses import ErrorDetail, ErrorResponse
from core.schemas.errors import AnchorException, ErrorCodes


logger = logging.getLogger(__name__)


STATUS_BY_CODE: dict[str, int] = {
    ErrorCodes.VALIDATION_ERROR: 400,
    ErrorCodes.NOT_FOUND: 404,
    ErrorCodes.CONTENT_FORMAT_ERROR: 422,
    ErrorCodes.STORAGE_UNAVAILABLE: 503,
    ErrorCodes.PIN_FAILED: 503,
    ErrorCodes.SERIALIZATION_ERROR: 500,
    ErrorCodes.ENVELOPE_STATE_ERROR: 500,
    ErrorCodes.INTERNAL_ERROR: 500,
}

GENERIC_MESSAGE = "An unexpected error occurred"


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code=ErrorCodes.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details=details,
        )


def _error_json(status_code: int, code: str, message: str, details: dict[str, Any] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(code=code, message=message, details=details or {}),
        ).model_dump(mode="json"),
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


async def anchor_error_handler(request: Request, exc: AnchorException) -> JSONResponse:
    """
    Handle pipeline exceptions.

    Client-facing failures keep their message and details. Internal ones
    (serialization, envelope state) are logged in full and answered with a
    generic message.
    """
    status_code = STATUS_BY_CODE.get(exc.code, 500)

    if status_code >= 500 and not exc.retryable:
        logger.error(
            f"Internal error on {request.method} {request.url.path}: {exc.code}: {exc.message}",
            exc_info=exc,
        )
        return _error_json(status_code, exc.code, GENERIC_MESSAGE)

    if status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    return _error_json(status_code, exc.code, exc.message, exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request-body validation failures as VALIDATION_ERROR (400)."""
    errors = [
        {
            "loc": ".".join(str(part) for part in error.get("loc", ())),
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    return _error_json(
        400,
        ErrorCodes.VALIDATION_ERROR,
        f"Invalid request: {len(errors)} error(s)",
        {"errors": errors},
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return _error_json(
        500,
        ErrorCodes.INTERNAL_ERROR,
        GENERIC_MESSAGE,
        {"type": type(exc).__name__},
    )
