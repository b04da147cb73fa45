"""
Storage Gateway Interface

The narrow contract through which the pipeline reaches content-addressed
storage. Implementations must be safe to share between concurrently running
pipeline invocations.

Error contract:
- transport failures, timeouts and backend errors raise
  StorageUnavailableException (retryable)
- fetch of an unknown address raises ContentNotFoundException
- callers must not assume that uploading identical bytes twice yields the
  same address
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class UploadResult:
    """Address and stored size of uploaded content."""
    cid: str
    size: int


@dataclass(frozen=True)
class PinResult:
    cid: str
    pinned: bool


@runtime_checkable
class StorageGateway(Protocol):
    """Content-addressed storage operations consumed by the pipeline."""

    def upload(self, data: bytes) -> UploadResult:
        """Store bytes and return their content address."""
        ...

    def fetch(self, cid: str) -> bytes:
        """Return the bytes stored under an address."""
        ...

    def pin(self, cid: str) -> PinResult:
        """Protect content from garbage collection. Re-pinning is harmless."""
        ...

    def unpin(self, cid: str) -> PinResult:
        ...

    def is_pinned(self, cid: str) -> bool:
        ...

    def close(self) -> None:
        ...
