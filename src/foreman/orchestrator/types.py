"""Plan data model.

AgentTask, Step and Plan are what the planner produces; they double as the
structured-output schema. They reject unknown fields and never coerce a
value of the wrong type, so "true" or 1 is not accepted as a boolean.
TaskWithResult, StepResult and PlanResult record what the workers produced.
Every type is immutable: PlanResult transitions return new values and leave
the old one intact.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr

from foreman.core.errors import PlanStateError
from foreman.orchestrator.formatter import format_step_summary


class AgentTask(BaseModel):
    """One unit of work for exactly one named agent."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    description: StrictStr = Field(
        description="Clear description of the task that an LLM can execute"
    )
    agent: StrictStr = Field(description="Name of the agent that runs the task")


class Step(BaseModel):
    """A plan step whose tasks are independent of each other."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    description: StrictStr = Field(description="Description of the step")
    tasks: tuple[AgentTask, ...] = Field(description="Independent tasks that can run in parallel")


class Plan(BaseModel):
    """A plan returned by the planner for one iteration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    steps: tuple[Step, ...] = Field(description="Sequential steps still needed")
    is_complete: StrictBool = Field(description="True when previous results achieve the objective")

    @property
    def task_count(self) -> int:
        return sum(len(step.tasks) for step in self.steps)


@dataclass(frozen=True, slots=True)
class TaskWithResult:
    """A task description paired with the text its agent produced."""

    description: str
    result: str


@dataclass(frozen=True, slots=True)
class StepResult:
    """A fully executed step.

    ``result`` is the rendering of the step description and its task results,
    computed on construction; it cannot be passed in.
    Construction fails unless every task in the step has a result.
    """

    step: Step
    task_results: tuple[TaskWithResult, ...]
    result: str = field(init=False)

    def __post_init__(self) -> None:
        if len(self.task_results) != len(self.step.tasks):
            raise PlanStateError(
                f"Step '{self.step.description}' has {len(self.step.tasks)} task(s) "
                f"but {len(self.task_results)} result(s)"
            )
        object.__setattr__(self, "result", format_step_summary(self.step, self.task_results))


@dataclass(frozen=True, slots=True)
class PlanResult:
    """Accumulated state of one orchestrator run.

    Attributes:
        objective: The goal of the run, fixed at creation.
        step_results: Executed steps, oldest first. Only ever appended to.
        is_complete: Set once the planner declares the objective satisfied.
        final_result: Synthesized answer, set once after completion.
        plan: The most recent plan received from the planner.
    """

    objective: str
    step_results: tuple[StepResult, ...] = ()
    is_complete: bool = False
    final_result: str | None = None
    plan: Plan | None = None

    def _require_incomplete(self, transition: str) -> None:
        if self.is_complete:
            raise PlanStateError(f"Cannot apply {transition} to a complete plan result")

    def with_plan(self, plan: Plan) -> PlanResult:
        """Record the latest plan."""
        self._require_incomplete("with_plan")
        return dataclasses.replace(self, plan=plan)

    def with_added_step_result(self, step_result: StepResult) -> PlanResult:
        """Append an executed step."""
        self._require_incomplete("with_added_step_result")
        return dataclasses.replace(self, step_results=(*self.step_results, step_result))

    def with_completion(self) -> PlanResult:
        """Mark the objective as satisfied."""
        self._require_incomplete("with_completion")
        return dataclasses.replace(self, is_complete=True)

    def with_final_result(self, final_result: str) -> PlanResult:
        """Record the synthesized answer of a complete run."""
        if not self.is_complete:
            raise PlanStateError("Final result can only be set on a complete plan result")
        if self.final_result is not None:
            raise PlanStateError("Final result has already been set")
        return dataclasses.replace(self, final_result=final_result)
