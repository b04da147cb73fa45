"""
Stage Pipeline Unit Tests
Tests for orchestrator/pipeline.py

Tests:
- Receipts for every stage over the in-memory gateway
- Determinism with a fixed clock and DID factory
- Fail-closed ordering: no pin after a failed upload, no receipt after a failed pin
- Validation before any side effect
- Concurrent runs over one shared gateway
"""
import json
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from core.crypto.commit_reveal import CommitRevealPair, verify
from core.crypto.hashing import solidity_hash
from core.schemas.errors import (
    PayloadValidationException,
    PinFailedException,
    StorageUnavailableException,
)
from core.schemas.records import (
    AiScoreReceipt,
    FarmerRegistrationReceipt,
    FpoPurchaseReceipt,
    WarehouseUpdateReceipt,
)
from core.schemas.stages import AiScoreRequest, FpoPurchaseRequest, StageKind
from orchestrator.pipeline import StagePipeline, create_pipeline, create_test_pipeline
from orchestrator.stages import WarehouseStage

from fixtures import (
    FIXED_DID,
    FIXED_TIME,
    PAYLOAD_FACTORIES,
    RecordingGateway,
    fixed_clock,
    fixed_did,
    make_ai_score_payload,
    make_failing_pin_gateway,
    make_failing_upload_gateway,
    make_purchase_payload,
    make_registration_payload,
    make_warehouse_payload,
    sequential_dids,
)


def _pipeline(gateway) -> StagePipeline:
    return StagePipeline(gateway, clock=fixed_clock(), did_factory=fixed_did())


class TestHappyPath:

    @pytest.mark.parametrize("stage", sorted(PAYLOAD_FACTORIES))
    def test_every_stage_anchors(self, pipeline, memory_gateway, stage):
        receipt = pipeline.run(stage, PAYLOAD_FACTORIES[stage]())
        assert receipt.stage == StageKind(stage)
        assert memory_gateway.is_pinned(receipt.ipfs_cid)
        assert memory_gateway.operations() == ["upload", "pin"]

    def test_registration_receipt(self, pipeline):
        receipt = pipeline.run("registration", make_registration_payload())
        assert isinstance(receipt, FarmerRegistrationReceipt)
        assert receipt.farmer_did == FIXED_DID
        assert receipt.registered_at == FIXED_TIME
        assert receipt.crop_id_hash == solidity_hash(f"{FIXED_DID}-rice-2026-03-01 08:00:05.250 UTC")

    def test_accepts_model_instance(self, pipeline):
        payload = FpoPurchaseRequest.model_validate(make_purchase_payload())
        receipt = pipeline.run(StageKind.PURCHASE, payload)
        assert isinstance(receipt, FpoPurchaseReceipt)
        assert receipt.batch_id == "BATCH-001"

    def test_warehouse_state_hash_uses_bound_address(self, pipeline):
        receipt = pipeline.run("warehouse", make_warehouse_payload())
        assert isinstance(receipt, WarehouseUpdateReceipt)
        expected = solidity_hash(f"WH-7-BATCH-001-Some(22.0)-Some(55.5)-{receipt.ipfs_cid}")
        assert receipt.state_hash == expected

    def test_step_trace(self, pipeline):
        result = pipeline.execute("purchase", make_purchase_payload())
        assert [name for name, _, _ in result.step_results] == [
            "validate", "pre_hash", "persist", "post_hash", "pin", "receipt",
        ]
        assert all(ok for _, ok, _ in result.step_results)
        assert result.to_dict()["cid"] == result.receipt.ipfs_cid


class TestDeterminism:

    def test_same_input_same_receipt(self):
        first = _pipeline(RecordingGateway()).run("purchase", make_purchase_payload())
        second = _pipeline(RecordingGateway()).run("purchase", make_purchase_payload())
        assert first == second

    def test_registration_hash_repeatable(self):
        first = _pipeline(RecordingGateway()).run("registration", make_registration_payload())
        second = _pipeline(RecordingGateway()).run("registration", make_registration_payload())
        assert first.crop_id_hash == second.crop_id_hash
        assert first.ipfs_cid == second.ipfs_cid

    def test_registration_dids_are_fresh(self, memory_gateway):
        pipeline = StagePipeline(memory_gateway, clock=fixed_clock(), did_factory=sequential_dids())
        first = pipeline.run("registration", make_registration_payload())
        second = pipeline.run("registration", make_registration_payload())
        assert first.farmer_did != second.farmer_did
        assert first.crop_id_hash != second.crop_id_hash

    def test_default_did_method(self, memory_gateway):
        receipt = StagePipeline(memory_gateway).run("registration", make_registration_payload())
        assert receipt.farmer_did.startswith("did:farmer:")


class TestPersistedDocument:

    def test_document_excludes_content_address(self, pipeline, memory_gateway):
        receipt = pipeline.run("warehouse", make_warehouse_payload())
        document = json.loads(memory_gateway.fetch(receipt.ipfs_cid))
        assert document["stage"] == "warehouse"
        assert document["created_at"] == "2026-03-01T08:00:05.250000Z"
        assert receipt.ipfs_cid not in json.dumps(document)
        assert "state_hash" not in document["derived_hashes"]

    def test_ai_nonce_persisted(self, pipeline, memory_gateway):
        receipt = pipeline.run("ai_score", make_ai_score_payload())
        document = json.loads(memory_gateway.fetch(receipt.ipfs_cid))
        assert document["derived_hashes"]["nonce"] == receipt.nonce
        assert document["derived_hashes"]["commit_hash"] == receipt.commit_hash


class TestFailures:

    def test_upload_failure_stops_before_post_hash_and_pin(self):
        gateway = make_failing_upload_gateway()
        with patch.object(WarehouseStage, "post_hash") as post_hash:
            with pytest.raises(StorageUnavailableException):
                _pipeline(gateway).run("warehouse", make_warehouse_payload())
        post_hash.assert_not_called()
        assert gateway.operations() == ["upload"]

    def test_foreign_upload_error_wrapped(self):
        gateway = RecordingGateway(fail_upload=ConnectionError("reset by peer"))
        with pytest.raises(StorageUnavailableException) as exc:
            _pipeline(gateway).run("purchase", make_purchase_payload())
        assert exc.value.details["operation"] == "upload"
        assert isinstance(exc.value.__cause__, ConnectionError)

    def test_pin_failure_carries_address(self):
        gateway = make_failing_pin_gateway()
        with pytest.raises(PinFailedException) as exc:
            _pipeline(gateway).run("purchase", make_purchase_payload())
        assert exc.value.cid == gateway.address_for(gateway.uploaded[0])
        assert exc.value.details["cid"] == exc.value.cid
        assert exc.value.details["operation"] == "pin"
        assert exc.value.retryable

    def test_unconfirmed_pin(self):
        gateway = RecordingGateway(confirm_pin=False)
        with pytest.raises(PinFailedException):
            _pipeline(gateway).run("logistics", PAYLOAD_FACTORIES["logistics"]())

    def test_invalid_payload_has_no_side_effects(self, pipeline, memory_gateway):
        raw = make_purchase_payload()
        del raw["batch_id"]
        with pytest.raises(PayloadValidationException) as exc:
            pipeline.run("purchase", raw)
        assert exc.value.details["errors"][0]["loc"] == "batch_id"
        assert memory_gateway.calls == []

    def test_extra_field_rejected(self, pipeline):
        with pytest.raises(PayloadValidationException):
            pipeline.run("purchase", make_purchase_payload(surprise=True))

    def test_non_mapping_rejected(self, pipeline):
        with pytest.raises(PayloadValidationException):
            pipeline.run("purchase", ["not", "an", "object"])

    def test_non_finite_free_form_value(self, pipeline, memory_gateway):
        raw = make_ai_score_payload(features={"moisture": float("nan")})
        with pytest.raises(PayloadValidationException) as exc:
            pipeline.run("ai_score", raw)
        assert exc.value.details["field_path"] == "features.moisture"
        assert memory_gateway.calls == []

    def test_unknown_stage(self, pipeline):
        with pytest.raises(PayloadValidationException) as exc:
            pipeline.run("harvest", {})
        assert exc.value.details["field_path"] == "stage"


class TestAiVerification:

    def test_receipt_verifies_against_payload(self, pipeline):
        receipt = pipeline.run("ai_score", make_ai_score_payload())
        assert isinstance(receipt, AiScoreReceipt)
        pair = CommitRevealPair(
            nonce=receipt.nonce,
            reveal_hash=receipt.reveal_hash,
            commit_hash=receipt.commit_hash,
        )
        assert verify(pair, AiScoreRequest.model_validate(make_ai_score_payload()))
        assert not verify(pair, AiScoreRequest.model_validate(make_ai_score_payload(quality_score=10.0)))


class TestConcurrentRuns:

    def test_shared_gateway_keeps_runs_apart(self):
        gateway = RecordingGateway()
        pipeline = _pipeline(gateway)
        batch_ids = [f"BATCH-{i:03d}" for i in range(24)]

        def anchor(batch_id):
            return pipeline.run("purchase", make_purchase_payload(batch_id=batch_id))

        with ThreadPoolExecutor(max_workers=8) as pool:
            receipts = list(pool.map(anchor, batch_ids))

        for batch_id, receipt in zip(batch_ids, receipts):
            assert receipt.batch_id == batch_id
            assert receipt == _pipeline(RecordingGateway()).run(
                "purchase", make_purchase_payload(batch_id=batch_id)
            )
            document = json.loads(gateway.fetch(receipt.ipfs_cid))
            assert document["identifiers"]["batch_id"] == batch_id
            assert document["derived_hashes"]["batch_hash"] == receipt.batch_hash

        addresses = {gateway.address_for(data) for data in gateway.uploaded}
        assert addresses == {receipt.ipfs_cid for receipt in receipts}
        assert all(gateway.is_pinned(address) for address in addresses)
        assert gateway.operations().count("pin") == len(batch_ids)


class TestFactories:

    def test_create_test_pipeline(self):
        receipt = create_test_pipeline(clock=fixed_clock()).run("purchase", make_purchase_payload())
        assert receipt.purchased_at == FIXED_TIME

    def test_create_pipeline_uses_given_gateway(self, memory_config, memory_gateway):
        pipeline = create_pipeline(memory_config, memory_gateway)
        assert pipeline.gateway is memory_gateway
        assert pipeline.config is memory_config.pipeline
