"""
Stage Pipeline (In-Process Runtime Wiring)

Composes hashing, merkle aggregation, commit-reveal and the storage gateway
into the per-stage anchoring flow.

Public API:
- StagePipeline: Main pipeline runner class
- RunResult: Receipt plus executed step trace
- StageSpec / STAGES: Per-stage hash composition
- ContentService: Raw upload/fetch/pin passthrough
- StepExecutor: Step executor for composable pipeline steps
- StageState: State container for one stage invocation
"""

from orchestrator.content import ContentService
from orchestrator.pipeline import (
    RunResult,
    StagePipeline,
    create_pipeline,
    create_test_pipeline,
)
from orchestrator.stages import (
    STAGES,
    AiScoreStage,
    LogisticsStage,
    PackagingStage,
    ProcessingStage,
    PurchaseStage,
    RegistrationStage,
    StageSpec,
    WarehouseStage,
    get_stage,
)
from orchestrator.step_executor import (
    FunctionStep,
    StageState,
    StageStep,
    StepExecutor,
    make_step,
)


__all__ = [
    # Main pipeline
    "StagePipeline",
    "RunResult",
    "create_pipeline",
    "create_test_pipeline",
    # Stages
    "STAGES",
    "StageSpec",
    "RegistrationStage",
    "PurchaseStage",
    "WarehouseStage",
    "LogisticsStage",
    "ProcessingStage",
    "PackagingStage",
    "AiScoreStage",
    "get_stage",
    # Content passthrough
    "ContentService",
    # Step executor
    "StepExecutor",
    "StageStep",
    "FunctionStep",
    "StageState",
    "make_step",
]
