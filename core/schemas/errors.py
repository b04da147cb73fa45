"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy across the anchoring pipeline.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the pipeline."""

    # Input errors (never retried)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Storage errors (transient, retryable by the caller)
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    PIN_FAILED = "PIN_FAILED"
    NOT_FOUND = "NOT_FOUND"
    CONTENT_FORMAT_ERROR = "CONTENT_FORMAT_ERROR"

    # Programming defects
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"
    ENVELOPE_STATE_ERROR = "ENVELOPE_STATE_ERROR"

    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class AnchorError(BaseModel):
    """
    Base error model for structured error communication.

    Used for passing errors between layers without exceptions,
    enabling structured error handling and serialization.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.VALIDATION_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "AnchorException":
        """Convert this error model to a raised exception."""
        return AnchorException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class AnchorException(Exception):
    """
    Base exception for all anchoring errors.

    Carries structured error information and can be converted
    to/from AnchorError models.
    """

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> AnchorError:
        """Convert this exception to an AnchorError model."""
        return AnchorError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class PayloadValidationException(AnchorException):
    """Malformed or missing stage input. Raised before any side effect."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.VALIDATION_ERROR,
            details=full_details,
            retryable=False,
        )


class StorageUnavailableException(AnchorException):
    """Upload, fetch or pin request could not be completed by the storage backend."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if operation:
            full_details["operation"] = operation
        super().__init__(
            message=message,
            code=ErrorCodes.STORAGE_UNAVAILABLE,
            details=full_details,
            retryable=True,
        )


class PinFailedException(AnchorException):
    """
    Content was persisted but the durability pin failed.

    The content address is carried so callers can retry the pin alone;
    re-uploading is unnecessary.
    """

    def __init__(
        self,
        message: str,
        cid: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["cid"] = cid
        super().__init__(
            message=message,
            code=ErrorCodes.PIN_FAILED,
            details=full_details,
            retryable=True,
        )
        self.cid = cid


class ContentNotFoundException(AnchorException):
    """Fetch of an address the storage backend does not know."""

    def __init__(
        self,
        message: str,
        cid: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if cid:
            full_details["cid"] = cid
        super().__init__(
            message=message,
            code=ErrorCodes.NOT_FOUND,
            details=full_details,
            retryable=False,
        )


class ContentFormatException(AnchorException):
    """Stored content exists but does not decode as expected. Re-fetching returns the same bytes."""

    def __init__(
        self,
        message: str,
        cid: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["cid"] = cid
        super().__init__(
            message=message,
            code=ErrorCodes.CONTENT_FORMAT_ERROR,
            details=full_details,
            retryable=False,
        )
        self.cid = cid


class SerializationException(AnchorException):
    """Raised when canonical serialization fails (indicates a programming defect)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.SERIALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class EnvelopeStateException(AnchorException):
    """Raised on an illegal record envelope transition (e.g. re-binding its address)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.ENVELOPE_STATE_ERROR,
            details=details,
            retryable=False,
        )
