"""
Step Executor

Purpose: Keep pipeline steps composable and testable with minimal abstraction.

Provides:
- StageStep: Protocol for individual pipeline steps
- StageState: Dataclass holding one invocation's artifacts incrementally
- StepExecutor: Runner that executes steps in sequence

Unlike a best-effort runner, the executor re-raises the first failure:
a stage invocation either reaches the receipt step or surfaces an error,
there is no partially populated result handed back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol

from pydantic import BaseModel

from core.schemas.records import RecordEnvelope, StageReceipt
from core.storage.gateway import UploadResult

if TYPE_CHECKING:
    from orchestrator.stages import StageSpec


logger = logging.getLogger(__name__)


@dataclass
class StageState:
    """
    Holds artifacts incrementally as one stage invocation progresses.

    Each step may read from and write to this state. Fields are Optional
    to allow incremental population.
    """

    spec: "StageSpec"
    raw_payload: Any

    # Step 1: validate
    payload: Optional[BaseModel] = None

    # Step 2: envelope + pre-hash
    envelope: Optional[RecordEnvelope] = None

    # Step 3: persist
    upload: Optional[UploadResult] = None

    # Step 5: pin
    pinned: bool = False

    # Step 6: receipt
    receipt: Optional[StageReceipt] = None


class StageStep(Protocol):
    """
    Protocol for a single pipeline step.

    Each step has a name and a run method that transforms state.
    """

    @property
    def name(self) -> str:
        """Unique name for this step."""
        ...

    def run(self, state: StageState) -> StageState:
        ...


@dataclass
class FunctionStep:
    """
    Adapter to create a StageStep from a plain function.

    Example:
        step = FunctionStep("persist", lambda s: persist(s))
    """

    _name: str
    _func: Callable[[StageState], StageState]

    @property
    def name(self) -> str:
        return self._name

    def run(self, state: StageState) -> StageState:
        return self._func(state)


class StepExecutor:
    """
    Executor that runs a sequence of StageSteps.

    Records (step_name, success, error_message) for every step that ran,
    then re-raises the first exception unchanged.
    """

    def __init__(self) -> None:
        self._step_results: list[tuple[str, bool, Optional[str]]] = []

    def execute(self, steps: list[StageStep], state: StageState) -> StageState:
        """
        Execute all steps in sequence.

        Raises:
            Whatever the failing step raised; later steps are not run.
        """
        self._step_results = []

        for step in steps:
            try:
                state = step.run(state)
            except Exception as e:
                self._step_results.append((step.name, False, str(e)))
                logger.debug(f"Step '{step.name}' failed: {e}")
                raise
            self._step_results.append((step.name, True, None))

        return state

    @property
    def step_results(self) -> list[tuple[str, bool, Optional[str]]]:
        """
        Get results of each step execution.

        Returns:
            List of (step_name, success, error_message) tuples
        """
        return self._step_results.copy()


def make_step(name: str, func: Callable[[StageState], StageState]) -> StageStep:
    """Convenience function to create a step from a function."""
    return FunctionStep(name, func)
