"""
Stage Pipeline

Runs one custody-chain stage end to end:

    validate -> envelope + pre-hash -> persist -> bind address
             -> post-hash -> pin -> receipt

Key features:
- One shared storage gateway passed in by reference; the pipeline holds no
  per-invocation state, so concurrent run() calls need no coordination
- Fail closed: any step failure propagates and no receipt is built
- Injectable clock and DID factory for deterministic runs
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from core.config.runtime import PipelineConfig, RuntimeConfig
from core.schemas.canonical import dumps_canonical_bytes, ensure_serializable
from core.schemas.errors import (
    AnchorException,
    PayloadValidationException,
    PinFailedException,
    StorageUnavailableException,
)
from core.schemas.records import RecordEnvelope, StageReceipt
from core.schemas.stages import StageKind
from core.storage import MemoryStorageGateway, StorageGateway, build_storage_gateway

from orchestrator.stages import StageSpec, get_stage
from orchestrator.step_executor import StageState, StepExecutor, make_step


logger = logging.getLogger(__name__)


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _validation_details(error: ValidationError) -> list[dict[str, str]]:
    return [
        {
            "loc": ".".join(str(part) for part in item["loc"]),
            "msg": item["msg"],
            "type": item["type"],
        }
        for item in error.errors()
    ]


# =============================================================================
# Run Result
# =============================================================================

@dataclass
class RunResult:
    """Receipt of a successful run plus the executed step trace."""
    receipt: StageReceipt
    step_results: list[tuple[str, bool, Optional[str]]] = field(default_factory=list)

    @property
    def stage(self) -> StageKind:
        return self.receipt.stage

    @property
    def cid(self) -> str:
        return self.receipt.ipfs_cid

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": self.stage.value,
            "cid": self.cid,
            "steps": [name for name, _, _ in self.step_results],
        }


# =============================================================================
# Pipeline Class
# =============================================================================

class StagePipeline:
    """
    Pipeline runner for custody-chain stages.

    Usage:
        pipeline = StagePipeline(gateway)
        receipt = pipeline.run("purchase", {...})
    """

    def __init__(
        self,
        gateway: StorageGateway,
        *,
        config: Optional[PipelineConfig] = None,
        clock: Optional[Clock] = None,
        did_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.gateway = gateway
        self.config = config or PipelineConfig()
        self._clock = clock or utc_now
        self._did_factory = did_factory or self._default_did

    def _default_did(self) -> str:
        return f"did:{self.config.did_method}:{uuid.uuid4()}"

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def run(self, stage: Union[StageKind, str], payload: Union[Mapping[str, Any], BaseModel]) -> StageReceipt:
        """
        Anchor one stage record.

        Raises:
            PayloadValidationException: unknown stage or invalid payload
            StorageUnavailableException: upload failed
            PinFailedException: content stored, durability pin failed
            SerializationException: record could not be canonicalized
        """
        return self.execute(stage, payload).receipt

    def execute(self, stage: Union[StageKind, str], payload: Union[Mapping[str, Any], BaseModel]) -> RunResult:
        """Like run(), also returning the step trace."""
        spec = self._resolve_stage(stage)
        state = StageState(spec=spec, raw_payload=payload)

        executor = StepExecutor()
        state = executor.execute(self._build_steps(), state)

        if state.receipt is None:
            raise AnchorException(f"Stage {spec.kind.value} finished without a receipt")
        return RunResult(receipt=state.receipt, step_results=executor.step_results)

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _build_steps(self) -> list:
        return [
            make_step("validate", self._step_validate),
            make_step("pre_hash", self._step_pre_hash),
            make_step("persist", self._step_persist),
            make_step("post_hash", self._step_post_hash),
            make_step("pin", self._step_pin),
            make_step("receipt", self._step_receipt),
        ]

    @staticmethod
    def _resolve_stage(stage: Union[StageKind, str]) -> StageSpec:
        try:
            return get_stage(stage)
        except KeyError as e:
            raise PayloadValidationException(
                f"Unknown stage: {stage}",
                field_path="stage",
                details={"allowed": [kind.value for kind in StageKind]},
            ) from e

    def _step_validate(self, state: StageState) -> StageState:
        """Step 1: Parse the payload into the stage's frozen model."""
        model = state.spec.payload_model
        raw = state.raw_payload

        if isinstance(raw, model):
            payload = raw
        else:
            if isinstance(raw, BaseModel):
                raw = raw.model_dump()
            if not isinstance(raw, Mapping):
                raise PayloadValidationException(
                    f"Payload for stage {state.spec.kind.value} must be an object",
                    details={"type": type(raw).__name__},
                )
            try:
                payload = model.model_validate(dict(raw))
            except ValidationError as e:
                raise PayloadValidationException(
                    f"Invalid {state.spec.kind.value} payload: {e.error_count()} error(s)",
                    details={"errors": _validation_details(e)},
                ) from e

        # Free-form fields (AI features/predictions) may still hold NaN or Infinity
        ensure_serializable(payload, f"{state.spec.kind.value} payload")

        state.payload = payload
        return state

    def _step_pre_hash(self, state: StageState) -> StageState:
        """Step 2: Build the envelope and derive payload-only digests."""
        spec = state.spec
        envelope = RecordEnvelope(
            stage=spec.kind,
            payload=state.payload,
            created_at=self._clock(),
            identifiers=spec.identifiers(state.payload, self._did_factory),
        )
        envelope.add_hashes(spec.pre_hash(envelope))
        state.envelope = envelope

        logger.info(f"Anchoring {spec.kind.value} record for {spec.describe(state.payload)}")
        return state

    def _step_persist(self, state: StageState) -> StageState:
        """Step 3: Upload the canonical envelope and bind its address."""
        envelope = state.envelope
        data = dumps_canonical_bytes(envelope.to_document())

        try:
            upload = self.gateway.upload(data)
        except AnchorException:
            raise
        except Exception as e:
            raise StorageUnavailableException(
                f"Upload failed: {e}",
                operation="upload",
            ) from e

        envelope.bind_content_address(upload.cid)
        state.upload = upload
        logger.info(f"{envelope.stage.value} record stored at {upload.cid} ({upload.size} bytes)")
        return state

    def _step_post_hash(self, state: StageState) -> StageState:
        """Step 4: Derive digests that cover the content address."""
        state.envelope.add_hashes(state.spec.post_hash(state.envelope))
        return state

    def _step_pin(self, state: StageState) -> StageState:
        """Step 5: Pin. A failure here is distinct from a failed upload."""
        cid = state.envelope.require_content_address()
        try:
            result = self.gateway.pin(cid)
        except Exception as e:
            logger.warning(f"Pin failed for {cid}: {e}")
            details = e.details if isinstance(e, AnchorException) else {}
            raise PinFailedException(
                f"Record stored at {cid} but pinning failed: {e}",
                cid=cid,
                details=dict(details),
            ) from e

        if not result.pinned:
            raise PinFailedException(f"Storage did not confirm pin for {cid}", cid=cid)
        state.pinned = True
        return state

    def _step_receipt(self, state: StageState) -> StageState:
        """Step 6: Assemble the receipt (sole success path)."""
        state.receipt = state.spec.build_receipt(state.envelope)
        return state


# =============================================================================
# Factory Functions
# =============================================================================

def create_pipeline(
    config: Optional[RuntimeConfig] = None,
    gateway: Optional[StorageGateway] = None,
    **kwargs: Any,
) -> StagePipeline:
    """
    Create a pipeline from runtime configuration.

    The gateway is built from config.storage unless one is supplied; pass
    the same gateway to every pipeline that should share a connection pool.
    """
    config = config or RuntimeConfig()
    if gateway is None:
        gateway = build_storage_gateway(config)
    return StagePipeline(gateway, config=config.pipeline, **kwargs)


def create_test_pipeline(**kwargs: Any) -> StagePipeline:
    """Pipeline over a fresh in-memory gateway."""
    return StagePipeline(MemoryStorageGateway(), **kwargs)
