"""
Module 01 - Schemas & Canonicalization
File: records.py

Purpose: The record envelope persisted for each stage, and the receipts
returned to callers.

Envelope invariants:
- content_address is bound exactly once, after the upload succeeded
- a hash that depends on the content address cannot be derived before
  the address is bound (require_content_address raises)
- the persisted document never contains the content address (the address
  is a function of the document)

Receipts are frozen: once built they are never mutated, and they are only
built on the success path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import EnvelopeStateException
from .stages import StageKind


RECORD_SCHEMA_VERSION = "v1"


# =============================================================================
# Record Envelope (runtime, per request)
# =============================================================================

@dataclass
class RecordEnvelope:
    """
    Wraps a validated stage payload with its derived fields.

    Created, populated and handed to storage within one pipeline
    invocation; there is no update-in-place after that.
    """

    stage: StageKind
    payload: BaseModel
    created_at: datetime
    identifiers: dict[str, str] = field(default_factory=dict)
    derived_hashes: dict[str, Any] = field(default_factory=dict)
    _content_address: Optional[str] = field(default=None, init=False, repr=False)

    @property
    def content_address(self) -> Optional[str]:
        return self._content_address

    @property
    def is_persisted(self) -> bool:
        return self._content_address is not None

    def bind_content_address(self, cid: str) -> None:
        """Record the storage address. Allowed once."""
        if not cid:
            raise EnvelopeStateException(
                "Cannot bind an empty content address",
                details={"stage": self.stage.value},
            )
        if self._content_address is not None:
            raise EnvelopeStateException(
                "Content address already bound",
                details={
                    "stage": self.stage.value,
                    "bound": self._content_address,
                    "attempted": cid,
                },
            )
        self._content_address = cid

    def require_content_address(self) -> str:
        if self._content_address is None:
            raise EnvelopeStateException(
                "Content address requested before the record was persisted",
                details={"stage": self.stage.value},
            )
        return self._content_address

    def add_hashes(self, hashes: dict[str, Any]) -> None:
        for name in hashes:
            if name in self.derived_hashes:
                raise EnvelopeStateException(
                    f"Derived hash '{name}' already set",
                    details={"stage": self.stage.value},
                )
        self.derived_hashes.update(hashes)

    def to_document(self) -> dict[str, Any]:
        """The envelope-so-far, as persisted to storage."""
        return {
            "schema_version": RECORD_SCHEMA_VERSION,
            "stage": self.stage,
            "identifiers": dict(self.identifiers),
            "payload": self.payload,
            "created_at": self.created_at,
            "derived_hashes": dict(self.derived_hashes),
        }


# =============================================================================
# Stage Receipts (externally visible)
# =============================================================================

_RECEIPT_CONFIG = ConfigDict(extra="forbid", frozen=True)


class StageReceipt(BaseModel):
    """Common receipt fields. Digests are 0x-prefixed hex strings."""

    model_config = _RECEIPT_CONFIG

    stage: StageKind
    ipfs_cid: str = Field(..., min_length=1, description="Content address of the persisted record")


class FarmerRegistrationReceipt(StageReceipt):
    farmer_did: str
    crop_id_hash: str
    registered_at: datetime


class FpoPurchaseReceipt(StageReceipt):
    batch_id: str
    batch_hash: str
    purchased_at: datetime


class WarehouseUpdateReceipt(StageReceipt):
    warehouse_id: str
    batch_id: str
    state_hash: str
    updated_at: datetime


class LogisticsMilestoneReceipt(StageReceipt):
    shipment_id: str
    location_hash: str
    recorded_at: datetime


class ProcessBatchReceipt(StageReceipt):
    input_batch_id: str
    input_batch_hash: str
    transform_hash: str
    output_batch_hashes: list[str]
    processed_at: datetime


class CreateSkuReceipt(StageReceipt):
    sku_id: str
    parent_batch_hash: str
    merkle_root: str
    packaged_at: datetime


class AiScoreReceipt(StageReceipt):
    batch_id: str
    batch_hash: str
    commit_hash: str
    reveal_hash: str
    nonce: str
    scored_at: datetime


# =============================================================================
# Raw content passthrough
# =============================================================================

class UploadReceipt(BaseModel):
    model_config = _RECEIPT_CONFIG

    cid: str
    size: int = Field(..., ge=0)
    pinned: bool


class ContentRecord(BaseModel):
    model_config = _RECEIPT_CONFIG

    cid: str
    data: Any


class PinStatus(BaseModel):
    model_config = _RECEIPT_CONFIG

    cid: str
    pinned: bool
