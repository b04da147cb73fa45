"""
In-Memory Storage Gateway

Process-local StorageGateway for tests and local development. Addresses
are "mem-" followed by the sha256 of the content. Not allowed in production
(see RuntimeConfig).
"""

from __future__ import annotations

import hashlib
import threading

from core.schemas.errors import ContentNotFoundException, StorageUnavailableException

from .gateway import PinResult, UploadResult


class MemoryStorageGateway:
    """Thread-safe dict-backed content store."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._blobs: dict[str, bytes] = {}
        self._pinned: set[str] = set()

    @staticmethod
    def address_for(data: bytes) -> str:
        return "mem-" + hashlib.sha256(data).hexdigest()

    def upload(self, data: bytes) -> UploadResult:
        cid = self.address_for(data)
        with self._lock:
            self._blobs[cid] = bytes(data)
        return UploadResult(cid=cid, size=len(data))

    def fetch(self, cid: str) -> bytes:
        with self._lock:
            data = self._blobs.get(cid)
        if data is None:
            raise ContentNotFoundException(f"Content not found: {cid}", cid=cid)
        return data

    def pin(self, cid: str) -> PinResult:
        with self._lock:
            if cid not in self._blobs:
                raise StorageUnavailableException(
                    f"Cannot pin unknown content: {cid}",
                    operation="pin",
                )
            self._pinned.add(cid)
        return PinResult(cid=cid, pinned=True)

    def unpin(self, cid: str) -> PinResult:
        with self._lock:
            self._pinned.discard(cid)
        return PinResult(cid=cid, pinned=False)

    def is_pinned(self, cid: str) -> bool:
        with self._lock:
            return cid in self._pinned

    def __len__(self) -> int:
        with self._lock:
            return len(self._blobs)

    def close(self) -> None:
        pass
