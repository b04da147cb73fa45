"""
Stage Variants

One StageSpec per record type. Each variant declares:
- payload_model / receipt_model
- identifiers: ids assigned or copied into the envelope
- pre_hash:  digests computable from the payload alone
- post_hash: digests that need the content address (warehouse only)
- build_receipt: the receipt assembled from the finished envelope

Hash inputs join fields with "-" in the order written below. The order and
the display form of each field are fixed: changing either changes every
digest already anchored for that stage.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar

from pydantic import BaseModel

from core.crypto.commit_reveal import commit
from core.crypto.formatting import (
    format_number,
    format_optional_reading,
    format_timestamp,
    format_variant,
    join_fields,
)
from core.crypto.hashing import solidity_hash
from core.merkle import build_merkle_root
from core.schemas.records import (
    AiScoreReceipt,
    CreateSkuReceipt,
    FarmerRegistrationReceipt,
    FpoPurchaseReceipt,
    LogisticsMilestoneReceipt,
    ProcessBatchReceipt,
    RecordEnvelope,
    StageReceipt,
    WarehouseUpdateReceipt,
)
from core.schemas.stages import (
    AiScoreRequest,
    CreateSkuRequest,
    FarmerRegistrationRequest,
    FpoPurchaseRequest,
    LogisticsMilestoneRequest,
    ProcessBatchRequest,
    StageKind,
    WarehouseUpdateRequest,
)


DidFactory = Callable[[], str]


class StageSpec(ABC):
    """Base class for stage variants."""

    kind: ClassVar[StageKind]
    payload_model: ClassVar[type[BaseModel]]
    receipt_model: ClassVar[type[StageReceipt]]

    def identifiers(self, payload: Any, new_did: DidFactory) -> dict[str, str]:
        """Identifiers recorded in the envelope. Most stages copy them from the payload."""
        return {}

    def pre_hash(self, envelope: RecordEnvelope) -> dict[str, Any]:
        return {}

    def post_hash(self, envelope: RecordEnvelope) -> dict[str, Any]:
        return {}

    @abstractmethod
    def build_receipt(self, envelope: RecordEnvelope) -> StageReceipt:
        ...

    def describe(self, payload: Any) -> str:
        """Short subject used in log lines."""
        return self.kind.value

    def _receipt_base(self, envelope: RecordEnvelope) -> dict[str, Any]:
        return {"stage": self.kind, "ipfs_cid": envelope.require_content_address()}


class RegistrationStage(StageSpec):
    kind = StageKind.REGISTRATION
    payload_model = FarmerRegistrationRequest
    receipt_model = FarmerRegistrationReceipt

    def identifiers(self, payload: FarmerRegistrationRequest, new_did: DidFactory) -> dict[str, str]:
        return {"farmer_did": new_did()}

    def pre_hash(self, envelope: RecordEnvelope) -> dict[str, Any]:
        payload: FarmerRegistrationRequest = envelope.payload
        data = join_fields(
            envelope.identifiers["farmer_did"],
            payload.crop_type,
            format_timestamp(envelope.created_at),
        )
        return {"crop_id_hash": solidity_hash(data)}

    def build_receipt(self, envelope: RecordEnvelope) -> FarmerRegistrationReceipt:
        return self.receipt_model(
            **self._receipt_base(envelope),
            farmer_did=envelope.identifiers["farmer_did"],
            crop_id_hash=envelope.derived_hashes["crop_id_hash"],
            registered_at=envelope.created_at,
        )

    def describe(self, payload: FarmerRegistrationRequest) -> str:
        return f"farmer {payload.farmer_name}"


class PurchaseStage(StageSpec):
    kind = StageKind.PURCHASE
    payload_model = FpoPurchaseRequest
    receipt_model = FpoPurchaseReceipt

    def identifiers(self, payload: FpoPurchaseRequest, new_did: DidFactory) -> dict[str, str]:
        return {"farmer_did": payload.farmer_did, "batch_id": payload.batch_id}

    def pre_hash(self, envelope: RecordEnvelope) -> dict[str, Any]:
        payload: FpoPurchaseRequest = envelope.payload
        data = join_fields(
            payload.farmer_did,
            payload.batch_id,
            format_number(payload.quantity_kg),
            payload.fpo_name,
        )
        return {"batch_hash": solidity_hash(data)}

    def build_receipt(self, envelope: RecordEnvelope) -> FpoPurchaseReceipt:
        return self.receipt_model(
            **self._receipt_base(envelope),
            batch_id=envelope.identifiers["batch_id"],
            batch_hash=envelope.derived_hashes["batch_hash"],
            purchased_at=envelope.created_at,
        )

    def describe(self, payload: FpoPurchaseRequest) -> str:
        return f"batch {payload.batch_id}"


class WarehouseStage(StageSpec):
    """The state hash covers the content address, so it is derived after upload."""

    kind = StageKind.WAREHOUSE
    payload_model = WarehouseUpdateRequest
    receipt_model = WarehouseUpdateReceipt

    def identifiers(self, payload: WarehouseUpdateRequest, new_did: DidFactory) -> dict[str, str]:
        return {"warehouse_id": payload.warehouse_id, "batch_id": payload.batch_id}

    def post_hash(self, envelope: RecordEnvelope) -> dict[str, Any]:
        payload: WarehouseUpdateRequest = envelope.payload
        data = join_fields(
            payload.warehouse_id,
            payload.batch_id,
            format_optional_reading(payload.temperature_celsius),
            format_optional_reading(payload.humidity_percentage),
            envelope.require_content_address(),
        )
        return {"state_hash": solidity_hash(data)}

    def build_receipt(self, envelope: RecordEnvelope) -> WarehouseUpdateReceipt:
        return self.receipt_model(
            **self._receipt_base(envelope),
            warehouse_id=envelope.identifiers["warehouse_id"],
            batch_id=envelope.identifiers["batch_id"],
            state_hash=envelope.derived_hashes["state_hash"],
            updated_at=envelope.created_at,
        )

    def describe(self, payload: WarehouseUpdateRequest) -> str:
        return f"warehouse {payload.warehouse_id}"


class LogisticsStage(StageSpec):
    kind = StageKind.LOGISTICS
    payload_model = LogisticsMilestoneRequest
    receipt_model = LogisticsMilestoneReceipt

    def identifiers(self, payload: LogisticsMilestoneRequest, new_did: DidFactory) -> dict[str, str]:
        return {"shipment_id": payload.shipment_id}

    def pre_hash(self, envelope: RecordEnvelope) -> dict[str, Any]:
        payload: LogisticsMilestoneRequest = envelope.payload
        data = join_fields(
            payload.shipment_id,
            payload.current_location,
            format_number(payload.gps_coordinates.latitude),
            format_number(payload.gps_coordinates.longitude),
        )
        return {"location_hash": solidity_hash(data)}

    def build_receipt(self, envelope: RecordEnvelope) -> LogisticsMilestoneReceipt:
        return self.receipt_model(
            **self._receipt_base(envelope),
            shipment_id=envelope.identifiers["shipment_id"],
            location_hash=envelope.derived_hashes["location_hash"],
            recorded_at=envelope.created_at,
        )

    def describe(self, payload: LogisticsMilestoneRequest) -> str:
        return f"shipment {payload.shipment_id}"


class ProcessingStage(StageSpec):
    """
    Three independent hash families per call:
    input batch, one hash per output batch, and the transformation itself.
    """

    kind = StageKind.PROCESSING
    payload_model = ProcessBatchRequest
    receipt_model = ProcessBatchReceipt

    def identifiers(self, payload: ProcessBatchRequest, new_did: DidFactory) -> dict[str, str]:
        return {"input_batch_id": payload.input_batch_id}

    def pre_hash(self, envelope: RecordEnvelope) -> dict[str, Any]:
        payload: ProcessBatchRequest = envelope.payload
        input_hash = solidity_hash(join_fields(
            payload.input_batch_id,
            payload.processor_name,
            format_number(payload.input_quantity_kg),
        ))
        output_hashes = [
            solidity_hash(join_fields(output_id, format_number(payload.output_quantity_kg)))
            for output_id in payload.output_batch_ids
        ]
        transform_hash = solidity_hash(join_fields(
            format_variant(payload.processing_type),
            format_number(payload.yield_percentage),
            format_number(payload.waste_percentage),
        ))
        return {
            "input_batch_hash": input_hash,
            "output_batch_hashes": output_hashes,
            "transform_hash": transform_hash,
        }

    def build_receipt(self, envelope: RecordEnvelope) -> ProcessBatchReceipt:
        hashes = envelope.derived_hashes
        return self.receipt_model(
            **self._receipt_base(envelope),
            input_batch_id=envelope.identifiers["input_batch_id"],
            input_batch_hash=hashes["input_batch_hash"],
            transform_hash=hashes["transform_hash"],
            output_batch_hashes=list(hashes["output_batch_hashes"]),
            processed_at=envelope.created_at,
        )

    def describe(self, payload: ProcessBatchRequest) -> str:
        return f"batch {payload.input_batch_id}"


class PackagingStage(StageSpec):
    kind = StageKind.PACKAGING
    payload_model = CreateSkuRequest
    receipt_model = CreateSkuReceipt

    def identifiers(self, payload: CreateSkuRequest, new_did: DidFactory) -> dict[str, str]:
        return {"sku_id": payload.sku_id, "parent_batch_id": payload.parent_batch_id}

    @staticmethod
    def merkle_leaves(payload: CreateSkuRequest) -> list[str]:
        """Supplied proof leaves, else the SKU id as the only leaf."""
        if payload.merkle_proof is not None:
            return list(payload.merkle_proof)
        return [payload.sku_id]

    def pre_hash(self, envelope: RecordEnvelope) -> dict[str, Any]:
        payload: CreateSkuRequest = envelope.payload
        parent_hash = solidity_hash(join_fields(payload.parent_batch_id, payload.product_name))
        return {
            "parent_batch_hash": parent_hash,
            "merkle_root": build_merkle_root(self.merkle_leaves(payload)),
        }

    def build_receipt(self, envelope: RecordEnvelope) -> CreateSkuReceipt:
        return self.receipt_model(
            **self._receipt_base(envelope),
            sku_id=envelope.identifiers["sku_id"],
            parent_batch_hash=envelope.derived_hashes["parent_batch_hash"],
            merkle_root=envelope.derived_hashes["merkle_root"],
            packaged_at=envelope.created_at,
        )

    def describe(self, payload: CreateSkuRequest) -> str:
        return f"SKU {payload.sku_id}"


class AiScoreStage(StageSpec):
    """Plain identifier hash plus a commit-reveal pair over the whole payload."""

    kind = StageKind.AI_SCORE
    payload_model = AiScoreRequest
    receipt_model = AiScoreReceipt

    def identifiers(self, payload: AiScoreRequest, new_did: DidFactory) -> dict[str, str]:
        return {"batch_id": payload.batch_id}

    def pre_hash(self, envelope: RecordEnvelope) -> dict[str, Any]:
        payload: AiScoreRequest = envelope.payload
        pair = commit(payload)
        return {
            "batch_hash": solidity_hash(join_fields(payload.batch_id, payload.model_name)),
            "reveal_hash": pair.reveal_hash,
            "commit_hash": pair.commit_hash,
            "nonce": pair.nonce,
        }

    def build_receipt(self, envelope: RecordEnvelope) -> AiScoreReceipt:
        hashes = envelope.derived_hashes
        return self.receipt_model(
            **self._receipt_base(envelope),
            batch_id=envelope.identifiers["batch_id"],
            batch_hash=hashes["batch_hash"],
            commit_hash=hashes["commit_hash"],
            reveal_hash=hashes["reveal_hash"],
            nonce=hashes["nonce"],
            scored_at=envelope.created_at,
        )

    def describe(self, payload: AiScoreRequest) -> str:
        return f"batch {payload.batch_id}"


STAGES: dict[StageKind, StageSpec] = {
    spec.kind: spec
    for spec in (
        RegistrationStage(),
        PurchaseStage(),
        WarehouseStage(),
        LogisticsStage(),
        ProcessingStage(),
        PackagingStage(),
        AiScoreStage(),
    )
}


def get_stage(stage: StageKind | str) -> StageSpec:
    """Look up a stage variant by kind or its string value."""
    try:
        return STAGES[StageKind(stage)]
    except ValueError as e:
        raise KeyError(f"Unknown stage: {stage}") from e
