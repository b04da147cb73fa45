"""
In-Memory Storage Gateway Unit Tests
Tests for core/storage/memory.py and build_storage_gateway()
"""
import hashlib

import pytest

from core.config.runtime import RuntimeConfig
from core.schemas.errors import ContentNotFoundException, StorageUnavailableException
from core.storage import (
    IpfsStorageGateway,
    MemoryStorageGateway,
    StorageGateway,
    build_storage_gateway,
)


class TestMemoryStorageGateway:

    def test_content_addressed(self):
        gateway = MemoryStorageGateway()
        result = gateway.upload(b"hello")
        assert result.cid == "mem-" + hashlib.sha256(b"hello").hexdigest()
        assert result.size == 5
        assert gateway.upload(b"hello").cid == result.cid
        assert len(gateway) == 1

    def test_fetch(self):
        gateway = MemoryStorageGateway()
        cid = gateway.upload(b"hello").cid
        assert gateway.fetch(cid) == b"hello"
        with pytest.raises(ContentNotFoundException):
            gateway.fetch("mem-unknown")

    def test_pin_lifecycle(self):
        gateway = MemoryStorageGateway()
        cid = gateway.upload(b"hello").cid
        assert not gateway.is_pinned(cid)
        assert gateway.pin(cid).pinned
        assert gateway.is_pinned(cid)
        assert not gateway.unpin(cid).pinned
        assert not gateway.is_pinned(cid)

    def test_pin_unknown(self):
        with pytest.raises(StorageUnavailableException):
            MemoryStorageGateway().pin("mem-unknown")

    def test_satisfies_protocol(self):
        assert isinstance(MemoryStorageGateway(), StorageGateway)


class TestBuildStorageGateway:

    def test_memory(self):
        config = RuntimeConfig.from_dict({"storage": {"backend": "memory"}})
        assert isinstance(build_storage_gateway(config), MemoryStorageGateway)

    def test_ipfs(self):
        config = RuntimeConfig.from_dict({"storage": {"backend": "ipfs", "max_retries": 0}})
        gateway = build_storage_gateway(config)
        assert isinstance(gateway, IpfsStorageGateway)
        assert isinstance(gateway, StorageGateway)
        assert gateway.max_retries == 0
