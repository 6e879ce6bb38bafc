"""The orchestrator/workers control loop.

Each iteration asks the planner for a fresh plan given everything produced
so far:
1. Planning: render progress and the agent catalog into a planning prompt
2. Completion: if the plan says the objective is met, synthesize and return
3. Execution: run the plan's steps in order, the tasks of each step
   concurrently, and append every finished step to the plan result

The run fails with IterationLimitError if the planner never declares
completion within max_iterations rounds.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from foreman.agents.registry import AgentRegistry
from foreman.core.errors import (
    ConfigurationError,
    IterationLimitError,
    PlanningError,
    PlanningSchemaError,
    TaskExecutionError,
)
from foreman.observability import (
    bind_context,
    get_logger,
    orchestrator_span,
    record_failure,
    record_success,
    unbind_context,
)
from foreman.orchestrator.events import EventEmitter, EventListener, OrchestratorEvent
from foreman.orchestrator.formatter import format_plan_result
from foreman.orchestrator.prompts import (
    format_agent_catalog,
    format_plan_prompt,
    format_synthesize_plan_prompt,
    format_task_prompt,
)
from foreman.orchestrator.types import PlanResult, StepResult, TaskWithResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from foreman.agents.registry import Agent
    from foreman.core.config import OrchestratorSettings
    from foreman.orchestrator.planner import PlanningCollaborator
    from foreman.orchestrator.types import AgentTask, Plan, Step

logger = get_logger(__name__)


@dataclass(frozen=True)
class RequestParams:
    """Limits for one orchestrator run.

    Attributes:
        max_iterations: Planning rounds allowed before the run fails.
        max_tokens: Response ceiling passed to every model call.
    """

    max_iterations: int = 30
    max_tokens: int = 16384

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            msg = "max_iterations must be greater than 0"
            raise ConfigurationError(msg)
        if self.max_tokens < 1:
            msg = "max_tokens must be greater than 0"
            raise ConfigurationError(msg)

    @classmethod
    def from_settings(cls, settings: OrchestratorSettings) -> RequestParams:
        """Create run parameters from orchestrator settings."""
        return cls(max_iterations=settings.max_iterations, max_tokens=settings.max_tokens)


class Orchestrator:
    """Drives a planner and a set of worker agents toward an objective.

    Example:
        orchestrator = Orchestrator(LLMPlanner(provider), [searcher, writer])
        result = await orchestrator.execute(
            "Write a report on quantum error correction",
            RequestParams(max_iterations=5),
        )
        print(result.final_result)
    """

    def __init__(
        self,
        planner: PlanningCollaborator,
        agents: AgentRegistry | Iterable[Agent],
        *,
        planning_retries: int = 2,
        task_concurrency: int = 4,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            planner: Collaborator producing plans and the final synthesis.
            agents: Registry, or agents to build one from.
            planning_retries: Re-prompts allowed after a malformed plan.
            task_concurrency: Tasks of one step that may run at once.

        Raises:
            ConfigurationError: On invalid limits or duplicate agent names.
        """
        if planning_retries < 0:
            msg = "planning_retries must not be negative"
            raise ConfigurationError(msg)
        if task_concurrency < 1:
            msg = "task_concurrency must be greater than 0"
            raise ConfigurationError(msg)

        self._planner = planner
        self._registry = agents if isinstance(agents, AgentRegistry) else AgentRegistry(agents)
        self._planning_retries = planning_retries
        self._task_concurrency = task_concurrency
        self._events = EventEmitter()

    @classmethod
    def from_settings(
        cls,
        planner: PlanningCollaborator,
        agents: AgentRegistry | Iterable[Agent],
        settings: OrchestratorSettings,
    ) -> Orchestrator:
        """Create an orchestrator using limits from settings."""
        return cls(
            planner,
            agents,
            planning_retries=settings.planning_retries,
            task_concurrency=settings.task_concurrency,
        )

    @property
    def registry(self) -> AgentRegistry:
        return self._registry

    def on(self, event: OrchestratorEvent, listener: EventListener) -> None:
        """Register an event listener."""
        self._events.on(event, listener)

    def on_all(self, listener: EventListener) -> None:
        """Register a listener for every event."""
        self._events.on_all(listener)

    def off(self, event: OrchestratorEvent, listener: EventListener) -> None:
        """Unregister an event listener."""
        self._events.off(event, listener)

    async def execute(self, objective: str, params: RequestParams | None = None) -> PlanResult:
        """Run the plan/execute loop until the planner declares completion.

        Args:
            objective: The goal to achieve.
            params: Run limits. Defaults to RequestParams().

        Returns:
            The complete plan result, including the synthesized final result.

        Raises:
            AgentNotFoundError: If a planned task names an unknown agent.
            PlanningError: If the planner keeps returning malformed plans.
            TaskExecutionError: If a worker fails on a task.
            IterationLimitError: If max_iterations rounds pass without completion.
        """
        params = params or RequestParams()
        run_id = uuid4()
        bind_context(run_id=str(run_id))

        try:
            with orchestrator_span(
                "orchestrator.run",
                run_id=str(run_id),
                max_iterations=params.max_iterations,
                max_tokens=params.max_tokens,
            ) as span:
                try:
                    result = await self._run(objective, params, run_id)
                except Exception as e:
                    record_failure(span, e)
                    logger.error("run_failed", error=str(e), error_type=type(e).__name__)
                    raise
                record_success(span, steps=len(result.step_results))
                return result
        finally:
            unbind_context("run_id")

    async def _run(self, objective: str, params: RequestParams, run_id: UUID) -> PlanResult:
        plan_result = PlanResult(objective=objective)

        for iteration in range(1, params.max_iterations + 1):
            with orchestrator_span("orchestrator.iteration", iteration=iteration):
                plan = await self._generate_plan(plan_result, params)
                plan_result = plan_result.with_plan(plan)

                logger.info(
                    "plan_generated",
                    iteration=iteration,
                    is_complete=plan.is_complete,
                    steps=len(plan.steps),
                    tasks=plan.task_count,
                )
                await self._events.emit(
                    OrchestratorEvent.PLAN_GENERATED,
                    run_id,
                    {
                        "iteration": iteration,
                        "is_complete": plan.is_complete,
                        "step_count": len(plan.steps),
                        "task_count": plan.task_count,
                    },
                )

                if plan.is_complete:
                    plan_result = plan_result.with_completion()
                    final_result = await self._synthesize(plan_result, params)
                    plan_result = plan_result.with_final_result(final_result)

                    logger.info(
                        "run_completed",
                        iterations=iteration,
                        steps=len(plan_result.step_results),
                    )
                    await self._events.emit(
                        OrchestratorEvent.RUN_COMPLETED,
                        run_id,
                        {
                            "iterations": iteration,
                            "step_count": len(plan_result.step_results),
                        },
                    )
                    return plan_result

                # Unknown agents anywhere in the plan fail the run before
                # any of its tasks reach a worker.
                self._registry.validate_plan(plan)

                for step_index, step in enumerate(plan.steps, start=1):
                    logger.info(
                        "step_started",
                        iteration=iteration,
                        step=f"{step_index}/{len(plan.steps)}",
                        description=step.description,
                    )
                    await self._events.emit(
                        OrchestratorEvent.STEP_STARTED,
                        run_id,
                        {
                            "iteration": iteration,
                            "step_index": step_index,
                            "step_count": len(plan.steps),
                            "description": step.description,
                        },
                    )

                    step_result = await self._execute_step(step, plan_result, params, run_id)
                    plan_result = plan_result.with_added_step_result(step_result)

                    await self._events.emit(
                        OrchestratorEvent.STEP_COMPLETED,
                        run_id,
                        {
                            "iteration": iteration,
                            "step_index": step_index,
                            "task_count": len(step_result.task_results),
                        },
                    )

        raise IterationLimitError(params.max_iterations)

    async def _generate_plan(self, plan_result: PlanResult, params: RequestParams) -> Plan:
        """Request a plan, re-prompting on malformed responses."""
        prompt = format_plan_prompt(
            plan_result.objective,
            format_plan_result(plan_result),
            format_agent_catalog(self._registry),
        )

        attempts = self._planning_retries + 1
        last_error: PlanningSchemaError | None = None
        for attempt in range(1, attempts + 1):
            try:
                return await self._planner.plan(prompt, max_tokens=params.max_tokens)
            except PlanningSchemaError as e:
                last_error = e
                logger.warning(
                    "plan_rejected",
                    attempt=attempt,
                    attempts=attempts,
                    error=str(e),
                )

        raise PlanningError(attempts) from last_error

    async def _execute_step(
        self,
        step: Step,
        plan_result: PlanResult,
        params: RequestParams,
        run_id: UUID,
    ) -> StepResult:
        """Run a step's tasks concurrently and assemble them in declared order.

        Every dispatched task is awaited even if another one fails; the first
        failure in declared order is then raised and no StepResult is built.
        """
        context = format_plan_result(plan_result)
        semaphore = asyncio.Semaphore(self._task_concurrency)

        with orchestrator_span(
            "orchestrator.step",
            description=step.description,
            tasks=len(step.tasks),
        ) as span:
            outcomes = await asyncio.gather(
                *(
                    self._run_task(
                        task,
                        self._registry.get(task.agent),
                        format_task_prompt(plan_result.objective, task.description, context),
                        params,
                        semaphore,
                        run_id,
                        task_index,
                    )
                    for task_index, task in enumerate(step.tasks, start=1)
                ),
                return_exceptions=True,
            )

            task_results: list[TaskWithResult] = []
            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    record_failure(span, outcome)
                    raise outcome
                task_results.append(outcome)

            return StepResult(step=step, task_results=tuple(task_results))

    async def _run_task(
        self,
        task: AgentTask,
        agent: Agent,
        prompt: str,
        params: RequestParams,
        semaphore: asyncio.Semaphore,
        run_id: UUID,
        task_index: int,
    ) -> TaskWithResult:
        async with semaphore:
            with orchestrator_span(
                "orchestrator.task",
                agent=agent.name,
                description=task.description,
            ) as span:
                logger.debug("task_dispatched", agent=agent.name, task=task.description)
                try:
                    text = await agent.worker.run(prompt, max_tokens=params.max_tokens)
                except Exception as e:
                    record_failure(span, e)
                    raise TaskExecutionError(agent.name, task.description, e) from e

        await self._events.emit(
            OrchestratorEvent.TASK_COMPLETED,
            run_id,
            {
                "task_index": task_index,
                "agent": agent.name,
                "description": task.description,
            },
        )
        return TaskWithResult(description=task.description, result=text)

    async def _synthesize(self, plan_result: PlanResult, params: RequestParams) -> str:
        prompt = format_synthesize_plan_prompt(format_plan_result(plan_result))
        with orchestrator_span("orchestrator.synthesis"):
            return await self._planner.generate(prompt, max_tokens=params.max_tokens)
