"""Render accumulated plan state as prompt context.

The rendering is the only way prior progress reaches the planner and the
workers, so it includes everything in a PlanResult and nothing else.

Every continuation line of free text (objective, step and task text) is
indented, which keeps the column-0 lines (section headers, step headers,
status line) unambiguous.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from foreman.orchestrator.types import PlanResult, Step, StepResult, TaskWithResult

NO_STEPS_MARKER = "No steps executed yet"
STATUS_COMPLETE = "Complete"
STATUS_IN_PROGRESS = "In Progress"

TASK_RESULT_TEMPLATE = "Task: {description}\nResult: {result}"
STEP_SUMMARY_TEMPLATE = "Step: {description}\nTasks:\n{tasks}"
STEP_RESULT_TEMPLATE = "Step: {description}\nResult: {result}\nTasks:\n{tasks}"
PLAN_RESULT_TEMPLATE = (
    "Plan Objective: {objective}\n\nSteps:\n{steps}\n\nStatus: {status}\nResult: {result}"
)

_TASK_BULLET = "  - "
_CONTINUATION = "    "


def _indent_continuation(text: str) -> str:
    return text.replace("\n", "\n" + _CONTINUATION)


def _dedent_continuation(text: str) -> str:
    return text.replace("\n" + _CONTINUATION, "\n")


def _task_lines(task_results: Sequence[TaskWithResult]) -> list[str]:
    return [
        _TASK_BULLET + _indent_continuation(format_task_result(task)) for task in task_results
    ]


def format_task_result(task_result: TaskWithResult) -> str:
    """Format a task result for display to planners."""
    return TASK_RESULT_TEMPLATE.format(
        description=task_result.description,
        result=task_result.result,
    )


def format_step_summary(step: Step, task_results: Sequence[TaskWithResult]) -> str:
    """Render a step description with its task results.

    This is the composite text stored as ``StepResult.result``.
    """
    return STEP_SUMMARY_TEMPLATE.format(
        description=_indent_continuation(step.description),
        tasks="\n".join(_task_lines(task_results)),
    )


def format_step_result(step_result: StepResult) -> str:
    """Format a step result: description, composite result, task list."""
    tasks = "".join(line + "\n" for line in _task_lines(step_result.task_results))
    return STEP_RESULT_TEMPLATE.format(
        description=_indent_continuation(step_result.step.description),
        result=_indent_continuation(step_result.result),
        tasks=tasks,
    )


def format_plan_result(plan_result: PlanResult) -> str:
    """Format the full plan execution state for display to planners."""
    if plan_result.step_results:
        steps = "\n\n".join(
            f"{index}:\n{format_step_result(step_result)}"
            for index, step_result in enumerate(plan_result.step_results, start=1)
        )
    else:
        steps = NO_STEPS_MARKER

    if plan_result.is_complete and plan_result.final_result is not None:
        result = plan_result.final_result
    else:
        result = STATUS_IN_PROGRESS

    return PLAN_RESULT_TEMPLATE.format(
        objective=_indent_continuation(plan_result.objective),
        steps=steps,
        status=STATUS_COMPLETE if plan_result.is_complete else STATUS_IN_PROGRESS,
        result=result,
    )


@dataclass(frozen=True)
class RenderedPlanSummary:
    """Values recovered from a rendered plan result."""

    objective: str
    is_complete: bool
    step_count: int


_OBJECTIVE_RE = re.compile(r"\APlan Objective: (?P<objective>.*?)\n\nSteps:\n", re.DOTALL)
_STEP_HEADER_RE = re.compile(r"^\d+:\nStep: ", re.MULTILINE)
_STATUS_RE = re.compile(r"\n\nStatus: (?P<status>Complete|In Progress)\nResult: ")


def summarize_rendered_plan(text: str) -> RenderedPlanSummary:
    """Recover objective, completion and step count from a rendering.

    The objective is read up to the first steps header. Its continuation
    lines are indented in the rendering, so that header cannot occur inside
    it. The first status line after it closes the steps block; anything
    after that is the final result and is not inspected.

    Raises:
        ValueError: If the text is not a plan result rendering.
    """
    objective_match = _OBJECTIVE_RE.search(text)
    if objective_match is None:
        msg = "Text is not a rendered plan result: missing objective"
        raise ValueError(msg)

    status_match = _STATUS_RE.search(text, objective_match.end())
    if status_match is None:
        msg = "Text is not a rendered plan result: missing status"
        raise ValueError(msg)

    steps_block = text[objective_match.end() : status_match.start()]
    return RenderedPlanSummary(
        objective=_dedent_continuation(objective_match.group("objective")),
        is_complete=status_match.group("status") == STATUS_COMPLETE,
        step_count=len(_STEP_HEADER_RE.findall(steps_block)),
    )
