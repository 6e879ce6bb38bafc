"""Orchestrator/workers loop.

Plans an objective into steps, dispatches each step's tasks to named worker
agents, folds their results back into context and synthesizes the answer.
"""

from foreman.orchestrator.events import (
    EventEmitter,
    EventListener,
    OrchestratorEvent,
    OrchestratorEventData,
)
from foreman.orchestrator.executor import Orchestrator, RequestParams
from foreman.orchestrator.formatter import (
    NO_STEPS_MARKER,
    RenderedPlanSummary,
    format_plan_result,
    format_step_summary,
    format_step_result,
    format_task_result,
    summarize_rendered_plan,
)
from foreman.orchestrator.planner import LLMPlanner, PlanningCollaborator, parse_plan
from foreman.orchestrator.types import (
    AgentTask,
    Plan,
    PlanResult,
    Step,
    StepResult,
    TaskWithResult,
)

__all__ = [
    "NO_STEPS_MARKER",
    "AgentTask",
    "EventEmitter",
    "EventListener",
    "LLMPlanner",
    "Orchestrator",
    "OrchestratorEvent",
    "OrchestratorEventData",
    "Plan",
    "PlanResult",
    "PlanningCollaborator",
    "RenderedPlanSummary",
    "RequestParams",
    "Step",
    "StepResult",
    "TaskWithResult",
    "format_plan_result",
    "format_step_summary",
    "format_step_result",
    "format_task_result",
    "parse_plan",
    "summarize_rendered_plan",
]
