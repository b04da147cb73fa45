"""
Content Passthrough Unit Tests
Tests for orchestrator/content.py
"""
import pytest

from core.schemas.canonical import dumps_canonical_bytes
from core.schemas.errors import (
    ContentFormatException,
    ContentNotFoundException,
    PayloadValidationException,
    PinFailedException,
)
from orchestrator.content import ContentService

from fixtures import RecordingGateway, make_failing_pin_gateway


class TestUpload:

    def test_upload_and_pin(self, memory_gateway):
        service = ContentService(memory_gateway)
        receipt = service.upload({"b": 1, "a": [1, 2]})
        assert receipt.pinned
        assert memory_gateway.uploaded == [b'{"a":[1,2],"b":1}']
        assert receipt.size == len(memory_gateway.uploaded[0])

    def test_upload_without_pin(self, memory_gateway):
        receipt = ContentService(memory_gateway).upload("plain", pin=False)
        assert not receipt.pinned
        assert memory_gateway.operations() == ["upload"]

    def test_equal_values_share_address(self, memory_gateway):
        service = ContentService(memory_gateway)
        assert service.upload({"a": 1, "b": 2}).cid == service.upload({"b": 2, "a": 1}).cid

    def test_pin_failure(self):
        gateway = make_failing_pin_gateway()
        with pytest.raises(PinFailedException) as exc:
            ContentService(gateway).upload({"a": 1})
        assert exc.value.cid == gateway.address_for(b'{"a":1}')

    def test_non_finite_rejected(self, memory_gateway):
        with pytest.raises(PayloadValidationException) as exc:
            ContentService(memory_gateway).upload({"readings": [1.0, float("inf")]})
        assert exc.value.details["field_path"] == "readings[1]"
        assert not exc.value.retryable
        assert memory_gateway.calls == []


class TestFetch:

    def test_round_trip(self, memory_gateway):
        service = ContentService(memory_gateway)
        cid = service.upload({"hello": "world"}).cid
        record = service.fetch(cid)
        assert record.cid == cid
        assert record.data == {"hello": "world"}

    def test_unknown(self, memory_gateway):
        with pytest.raises(ContentNotFoundException):
            ContentService(memory_gateway).fetch("mem-missing")

    def test_non_json_content(self):
        gateway = RecordingGateway()
        cid = gateway.upload(b"\x00not json").cid
        with pytest.raises(ContentFormatException) as exc:
            ContentService(gateway).fetch(cid)
        assert exc.value.cid == cid
        assert exc.value.code == "CONTENT_FORMAT_ERROR"
        assert not exc.value.retryable


class TestPinning:

    def test_pin_unpin_status(self, memory_gateway):
        service = ContentService(memory_gateway)
        cid = memory_gateway.upload(dumps_canonical_bytes({"a": 1})).cid
        assert not service.pin_status(cid).pinned
        assert service.pin(cid).pinned
        assert service.pin_status(cid).pinned
        assert not service.unpin(cid).pinned
        assert not service.pin_status(cid).pinned
