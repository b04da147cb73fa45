"""
Module 01 - Schemas & Canonicalization

Stage payloads, record envelope, receipts, error taxonomy and canonical
serialization.
"""

from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    dumps_canonical_bytes,
    ensure_serializable,
    ensure_utc,
    format_datetime_canonical,
)
from .errors import (
    AnchorError,
    AnchorException,
    ContentFormatException,
    ContentNotFoundException,
    EnvelopeStateException,
    ErrorCodes,
    PayloadValidationException,
    PinFailedException,
    SerializationException,
    StorageUnavailableException,
)
from .stages import (
    AiScoreRequest,
    CreateSkuRequest,
    FarmerRegistrationRequest,
    FpoPurchaseRequest,
    GpsCoordinates,
    LogisticsMilestoneRequest,
    MilestoneType,
    PestInspection,
    ProcessBatchRequest,
    ProcessingParameters,
    ProcessingType,
    ShockEvent,
    StageKind,
    WarehouseUpdateRequest,
)
from .records import (
    RECORD_SCHEMA_VERSION,
    AiScoreReceipt,
    ContentRecord,
    CreateSkuReceipt,
    FarmerRegistrationReceipt,
    FpoPurchaseReceipt,
    LogisticsMilestoneReceipt,
    PinStatus,
    ProcessBatchReceipt,
    RecordEnvelope,
    StageReceipt,
    UploadReceipt,
    WarehouseUpdateReceipt,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    "dumps_canonical_bytes",
    "ensure_serializable",
    "ensure_utc",
    "format_datetime_canonical",
    # Errors
    "AnchorError",
    "AnchorException",
    "ContentFormatException",
    "ContentNotFoundException",
    "EnvelopeStateException",
    "ErrorCodes",
    "PayloadValidationException",
    "PinFailedException",
    "SerializationException",
    "StorageUnavailableException",
    # Stage payloads
    "AiScoreRequest",
    "CreateSkuRequest",
    "FarmerRegistrationRequest",
    "FpoPurchaseRequest",
    "GpsCoordinates",
    "LogisticsMilestoneRequest",
    "MilestoneType",
    "PestInspection",
    "ProcessBatchRequest",
    "ProcessingParameters",
    "ProcessingType",
    "ShockEvent",
    "StageKind",
    "WarehouseUpdateRequest",
    # Records
    "RECORD_SCHEMA_VERSION",
    "AiScoreReceipt",
    "ContentRecord",
    "CreateSkuReceipt",
    "FarmerRegistrationReceipt",
    "FpoPurchaseReceipt",
    "LogisticsMilestoneReceipt",
    "PinStatus",
    "ProcessBatchReceipt",
    "RecordEnvelope",
    "StageReceipt",
    "UploadReceipt",
    "WarehouseUpdateReceipt",
]
