"""
Raw Content Passthrough

Upload, fetch and pin operations for content that is not tied to a stage.
JSON values are stored in canonical form, so equal values upload as equal
bytes.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from core.schemas.canonical import dumps_canonical_bytes, ensure_serializable
from core.schemas.errors import (
    ContentFormatException,
    PinFailedException,
    StorageUnavailableException,
)
from core.schemas.records import ContentRecord, PinStatus, UploadReceipt
from core.storage.gateway import StorageGateway


logger = logging.getLogger(__name__)


class ContentService:
    """Passthrough operations over the shared storage gateway."""

    def __init__(self, gateway: StorageGateway) -> None:
        self.gateway = gateway

    def upload(self, data: Any, *, pin: bool = True) -> UploadReceipt:
        """
        Upload a JSON value, optionally pinning it.

        Raises:
            PayloadValidationException: value holds NaN, Infinity or an unsupported type
            StorageUnavailableException: upload failed
            PinFailedException: uploaded but pin failed
        """
        ensure_serializable(data, "upload data")
        result = self.gateway.upload(dumps_canonical_bytes(data))
        logger.info(f"Data uploaded to storage: {result.cid}")

        pinned = False
        if pin:
            try:
                pinned = self.gateway.pin(result.cid).pinned
            except StorageUnavailableException as e:
                raise PinFailedException(
                    f"Content stored at {result.cid} but pinning failed: {e.message}",
                    cid=result.cid,
                ) from e

        return UploadReceipt(cid=result.cid, size=result.size, pinned=pinned)

    def fetch(self, cid: str) -> ContentRecord:
        """
        Fetch content and decode it as JSON.

        Raises:
            ContentNotFoundException: unknown address
            StorageUnavailableException: backend error
            ContentFormatException: stored bytes are not JSON
        """
        raw = self.gateway.fetch(cid)
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise ContentFormatException(f"Content at {cid} is not valid JSON", cid=cid) from e
        return ContentRecord(cid=cid, data=data)

    def pin(self, cid: str) -> PinStatus:
        result = self.gateway.pin(cid)
        return PinStatus(cid=result.cid, pinned=result.pinned)

    def unpin(self, cid: str) -> PinStatus:
        result = self.gateway.unpin(cid)
        return PinStatus(cid=result.cid, pinned=result.pinned)

    def pin_status(self, cid: str) -> PinStatus:
        return PinStatus(cid=cid, pinned=self.gateway.is_pinned(cid))
