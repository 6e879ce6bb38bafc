"""Tests for the plan data model."""

from __future__ import annotations

import dataclasses

import pytest
from pydantic import ValidationError

from foreman.core import PlanStateError
from foreman.orchestrator import AgentTask, Plan, PlanResult, Step, StepResult, TaskWithResult
from helpers import make_plan


def _step_result(description: str = "Research", results: tuple[str, ...] = ("a", "b")) -> StepResult:
    step = Step(
        description=description,
        tasks=tuple(AgentTask(description=f"task {r}", agent="searcher") for r in results),
    )
    return StepResult(
        step=step,
        task_results=tuple(TaskWithResult(description=f"task {r}", result=r) for r in results),
    )


class TestPlanModels:
    """Tests for AgentTask, Step and Plan."""

    def test_structural_equality(self) -> None:
        """Plans with the same content are equal."""
        first = make_plan([("Search", [("find sources", "searcher")])])
        second = make_plan([("Search", [("find sources", "searcher")])])
        assert first == second
        assert hash(first) == hash(second)

    def test_frozen(self) -> None:
        """Plan models cannot be modified."""
        task = AgentTask(description="find sources", agent="searcher")
        with pytest.raises(ValidationError):
            task.agent = "writer"  # type: ignore[misc]

    def test_rejects_extra_fields(self) -> None:
        """Unknown fields are a schema violation."""
        with pytest.raises(ValidationError):
            AgentTask(description="x", agent="y", priority=1)  # type: ignore[call-arg]

    @pytest.mark.parametrize("value", ["true", 1, "yes"])
    def test_is_complete_not_coerced(self, value: object) -> None:
        """Only a real boolean is accepted for is_complete."""
        with pytest.raises(ValidationError):
            Plan(steps=(), is_complete=value)  # type: ignore[arg-type]

    def test_task_count(self) -> None:
        """task_count sums tasks across steps."""
        plan = make_plan(
            [
                ("one", [("a", "x"), ("b", "y")]),
                ("two", [("c", "x")]),
            ]
        )
        assert plan.task_count == 3

    def test_complete_plan_without_steps(self) -> None:
        """A complete plan may carry no steps."""
        plan = Plan(steps=(), is_complete=True)
        assert plan.is_complete
        assert plan.steps == ()


class TestStepResult:
    """Tests for StepResult."""

    def test_result_is_derived(self) -> None:
        """result renders the step description and its task results in order."""
        step_result = _step_result("Gather sources", results=("first", "second"))
        assert step_result.result == (
            "Step: Gather sources\n"
            "Tasks:\n"
            "  - Task: task first\n"
            "    Result: first\n"
            "  - Task: task second\n"
            "    Result: second"
        )

    def test_result_not_settable(self) -> None:
        """result is not a constructor argument."""
        step = Step(description="s", tasks=())
        with pytest.raises(TypeError):
            StepResult(step=step, task_results=(), result="x")  # type: ignore[call-arg]

    def test_partial_results_rejected(self) -> None:
        """A step cannot be recorded with fewer results than tasks."""
        step = Step(
            description="s",
            tasks=(
                AgentTask(description="a", agent="x"),
                AgentTask(description="b", agent="x"),
            ),
        )
        with pytest.raises(PlanStateError, match="2 task"):
            StepResult(step=step, task_results=(TaskWithResult(description="a", result="r"),))

    def test_immutable(self) -> None:
        """StepResult is frozen."""
        step_result = _step_result()
        with pytest.raises(dataclasses.FrozenInstanceError):
            step_result.task_results = ()  # type: ignore[misc]


class TestPlanResult:
    """Tests for PlanResult transitions."""

    def test_initial_state(self) -> None:
        """A new plan result is empty and incomplete."""
        result = PlanResult(objective="X")
        assert result.objective == "X"
        assert result.step_results == ()
        assert result.is_complete is False
        assert result.final_result is None
        assert result.plan is None

    def test_with_plan(self) -> None:
        """with_plan records the plan on a new value."""
        original = PlanResult(objective="X")
        plan = make_plan()
        updated = original.with_plan(plan)
        assert updated.plan == plan
        assert original.plan is None

    def test_append_only(self) -> None:
        """Appending keeps the prior step results as the same objects."""
        first = _step_result("one")
        second = _step_result("two")
        before = PlanResult(objective="X").with_added_step_result(first)
        after = before.with_added_step_result(second)

        assert before.step_results == (first,)
        assert after.step_results[0] is first
        assert after.step_results[1] is second
        assert after.step_results[: len(before.step_results)] == before.step_results

    def test_completion_and_final_result(self) -> None:
        """Completion then final result produces a finished value."""
        result = PlanResult(objective="X").with_completion().with_final_result("done")
        assert result.is_complete is True
        assert result.final_result == "done"

    def test_final_result_requires_completion(self) -> None:
        """The final result cannot be set on an incomplete run."""
        with pytest.raises(PlanStateError):
            PlanResult(objective="X").with_final_result("done")

    def test_final_result_set_once(self) -> None:
        """The final result cannot be overwritten."""
        result = PlanResult(objective="X").with_completion().with_final_result("done")
        with pytest.raises(PlanStateError):
            result.with_final_result("again")

    @pytest.mark.parametrize(
        "transition",
        [
            lambda r: r.with_completion(),
            lambda r: r.with_plan(make_plan()),
            lambda r: r.with_added_step_result(_step_result()),
        ],
    )
    def test_complete_result_rejects_transitions(self, transition) -> None:
        """Only the final result may be set once complete."""
        complete = PlanResult(objective="X").with_completion()
        with pytest.raises(PlanStateError):
            transition(complete)
