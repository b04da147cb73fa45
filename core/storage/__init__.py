"""
Storage Module

Content-addressed storage collaborator: interface, IPFS adapter and an
in-memory backend.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .gateway import PinResult, StorageGateway, UploadResult
from .ipfs import IpfsStorageGateway
from .memory import MemoryStorageGateway

if TYPE_CHECKING:
    from core.config.runtime import RuntimeConfig


def build_storage_gateway(config: "RuntimeConfig") -> StorageGateway:
    """Create the gateway selected by config.storage.backend."""
    if config.storage.backend == "memory":
        return MemoryStorageGateway()
    return IpfsStorageGateway.from_config(config.storage, proxy=config.proxy)


__all__ = [
    "PinResult",
    "StorageGateway",
    "UploadResult",
    "IpfsStorageGateway",
    "MemoryStorageGateway",
    "build_storage_gateway",
]
