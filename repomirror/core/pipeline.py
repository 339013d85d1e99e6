"""
Step pipeline for multi-step mirror operations.

Every mirror operation is a short ordered sequence of fallible steps
(prepare, probe, update; or sync, query, parse). A step only starts
once the previous one has produced its output, and the first failure
stops the run and is raised to the caller exactly once.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class StepStatus(Enum):
    """Status of a pipeline step."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class StepResult:
    """Result from a single step execution."""

    step_name: str
    status: StepStatus
    started_at: datetime
    completed_at: Optional[datetime] = None
    output: Any = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "step_name": self.step_name,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "error": self.error,
        }


@dataclass
class PipelineState:
    """
    State of one pipeline run.

    `data` maps each completed step name to its output, so later steps
    can read what earlier ones produced.
    """

    name: str
    step_results: Dict[str, StepResult] = field(default_factory=dict)
    current_step: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    def get_step_status(self, step_name: str) -> StepStatus:
        """Get the status of a specific step."""
        if step_name in self.step_results:
            return self.step_results[step_name].status
        return StepStatus.PENDING

    def record_step_start(self, step_name: str) -> None:
        """Record that a step has started."""
        self.current_step = step_name
        self.step_results[step_name] = StepResult(
            step_name=step_name,
            status=StepStatus.RUNNING,
            started_at=datetime.now(),
        )

    def record_step_completion(self, step_name: str, output: Any) -> None:
        """Record that a step has completed successfully."""
        result = self.step_results[step_name]
        result.status = StepStatus.COMPLETED
        result.completed_at = datetime.now()
        result.output = output
        self.data[step_name] = output

    def record_step_failure(self, step_name: str, error: str) -> None:
        """Record that a step has failed."""
        result = self.step_results[step_name]
        result.status = StepStatus.FAILED
        result.completed_at = datetime.now()
        result.error = error

    @property
    def output(self) -> Any:
        """Output of the last completed step."""
        completed = [
            result for result in self.step_results.values()
            if result.status == StepStatus.COMPLETED
        ]
        return completed[-1].output if completed else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to dictionary for serialization."""
        return {
            "name": self.name,
            "current_step": self.current_step,
            "step_results": {
                name: result.to_dict()
                for name, result in self.step_results.items()
            },
        }


Step = Callable[[PipelineState], Any]


class Pipeline:
    """
    Ordered sequence of named steps.

    Example:
        pipeline = Pipeline("tags")
        pipeline.add_step("sync", lambda state: engine.sync(descriptor))
        pipeline.add_step("query", lambda state: git.run(["tag"], cwd=path))
        tags = pipeline.run().output
    """

    def __init__(self, name: str):
        self.name = name
        self.steps: List[Tuple[str, Step]] = []
        self.logger = logging.getLogger(__name__)

    def add_step(self, step_name: str, step: Step) -> "Pipeline":
        """Append a step; returns the pipeline for chaining."""
        if any(existing == step_name for existing, _ in self.steps):
            raise ValueError(f"Duplicate step: {step_name}")
        self.steps.append((step_name, step))
        return self

    def run(self) -> PipelineState:
        """
        Execute all steps in order.

        Returns:
            Final state; `state.output` holds the last step's output.

        Raises:
            Exception: Whatever the first failing step raised. No later
                step is executed.
        """
        state = PipelineState(name=self.name)

        for step_name, step in self.steps:
            state.record_step_start(step_name)
            self.logger.debug(f"[{self.name}] running step: {step_name}")

            try:
                output = step(state)
            except Exception as e:
                state.record_step_failure(step_name, str(e))
                self.logger.error(f"[{self.name}] step {step_name} failed: {e}")
                self.logger.debug(f"[{self.name}] state: {state.to_dict()}")
                raise

            state.record_step_completion(step_name, output)

        return state
