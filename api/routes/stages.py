"""
Stage Routes

One endpoint per custody-chain stage. Each validates the body against the
stage payload model, runs the pipeline and returns the receipt with 201.

Handlers are plain `def` so FastAPI runs them in its threadpool; the
storage calls block and concurrent requests must not serialize.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from api.deps import get_pipeline
from core.schemas.records import (
    AiScoreReceipt,
    CreateSkuReceipt,
    FarmerRegistrationReceipt,
    FpoPurchaseReceipt,
    LogisticsMilestoneReceipt,
    ProcessBatchReceipt,
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
from orchestrator.pipeline import StagePipeline


router = APIRouter(prefix="/api/v1", tags=["stages"])


@router.post(
    "/farmer/register",
    response_model=FarmerRegistrationReceipt,
    status_code=status.HTTP_201_CREATED,
)
def register_farmer(
    body: FarmerRegistrationRequest,
    pipeline: StagePipeline = Depends(get_pipeline),
):
    return pipeline.run(StageKind.REGISTRATION, body)


@router.post(
    "/fpo/purchase",
    response_model=FpoPurchaseReceipt,
    status_code=status.HTTP_201_CREATED,
)
def fpo_purchase(
    body: FpoPurchaseRequest,
    pipeline: StagePipeline = Depends(get_pipeline),
):
    return pipeline.run(StageKind.PURCHASE, body)


@router.post(
    "/warehouse/update",
    response_model=WarehouseUpdateReceipt,
    status_code=status.HTTP_201_CREATED,
)
def warehouse_update(
    body: WarehouseUpdateRequest,
    pipeline: StagePipeline = Depends(get_pipeline),
):
    return pipeline.run(StageKind.WAREHOUSE, body)


@router.post(
    "/logistics/milestone",
    response_model=LogisticsMilestoneReceipt,
    status_code=status.HTTP_201_CREATED,
)
def logistics_milestone(
    body: LogisticsMilestoneRequest,
    pipeline: StagePipeline = Depends(get_pipeline),
):
    return pipeline.run(StageKind.LOGISTICS, body)


@router.post(
    "/processing/batch",
    response_model=ProcessBatchReceipt,
    status_code=status.HTTP_201_CREATED,
)
def process_batch(
    body: ProcessBatchRequest,
    pipeline: StagePipeline = Depends(get_pipeline),
):
    return pipeline.run(StageKind.PROCESSING, body)


@router.post(
    "/packaging/sku",
    response_model=CreateSkuReceipt,
    status_code=status.HTTP_201_CREATED,
)
def create_sku(
    body: CreateSkuRequest,
    pipeline: StagePipeline = Depends(get_pipeline),
):
    return pipeline.run(StageKind.PACKAGING, body)


@router.post(
    "/ai/score",
    response_model=AiScoreReceipt,
    status_code=status.HTTP_201_CREATED,
)
def ai_score(
    body: AiScoreRequest,
    pipeline: StagePipeline = Depends(get_pipeline),
):
    return pipeline.run(StageKind.AI_SCORE, body)
