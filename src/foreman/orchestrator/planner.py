"""The planning collaborator.

The orchestrator asks a planner for two things: a Plan for the next round,
and a free-text synthesis once the objective is met. Plans must match the
Plan schema exactly; anything else is reported as PlanningSchemaError so the
loop can decide whether to re-prompt.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from instructor.core import InstructorRetryException
from pydantic import ValidationError

from foreman.core.errors import PlanningSchemaError
from foreman.llm.client import ChatMessage, TextCompletion
from foreman.orchestrator.prompts import PLANNER_SYSTEM_PROMPT
from foreman.orchestrator.types import Plan

if TYPE_CHECKING:
    from foreman.llm.client import LLMProvider


@runtime_checkable
class PlanningCollaborator(Protocol):
    """Protocol for planners driving the orchestrator loop."""

    @abstractmethod
    async def plan(self, prompt: str, *, max_tokens: int | None = None) -> Plan:
        """Return the next plan.

        Raises:
            PlanningSchemaError: If the response does not match the Plan shape.
        """
        ...

    @abstractmethod
    async def generate(self, prompt: str, *, max_tokens: int | None = None) -> str:
        """Return free text for a prompt."""
        ...


def parse_plan(text: str) -> Plan:
    """Parse a planner response that must be a bare JSON Plan.

    Code fences, surrounding prose, missing fields and unknown fields are
    all rejected; no attempt is made to recover a plan from them.

    Raises:
        PlanningSchemaError: If the text is not a valid Plan document.
    """
    try:
        return Plan.model_validate_json(text)
    except ValidationError as e:
        msg = f"Planner response is not a valid plan: {e.error_count()} error(s)"
        raise PlanningSchemaError(msg, raw=text) from e


class LLMPlanner:
    """Planning collaborator backed by an LLM provider.

    Plans are requested as structured output with the Plan schema by
    default. With ``structured=False`` the plan is requested as plain text
    and parsed with ``parse_plan``, for models without structured output
    support; the planning prompt already demands bare JSON. Synthesis is
    always plain text. Every call uses the planner system prompt.
    """

    def __init__(
        self,
        provider: LLMProvider,
        *,
        system_prompt: str = PLANNER_SYSTEM_PROMPT,
        structured: bool = True,
    ) -> None:
        self._provider = provider
        self._system_prompt = system_prompt
        self._structured = structured

    async def plan(self, prompt: str, *, max_tokens: int | None = None) -> Plan:
        if not self._structured:
            return parse_plan(await self.generate(prompt, max_tokens=max_tokens))

        try:
            result = await self._provider.complete_async(
                [ChatMessage(role="user", content=prompt)],
                Plan,
                system_prompt=self._system_prompt,
                max_tokens=max_tokens,
            )
        except ValidationError as e:
            msg = f"Planner response is not a valid plan: {e.error_count()} error(s)"
            raise PlanningSchemaError(msg) from e
        except InstructorRetryException as e:
            msg = f"Planner response failed validation after {e.n_attempts} attempt(s)"
            raise PlanningSchemaError(msg) from e

        plan = result.content
        if not isinstance(plan, Plan):
            msg = f"Planner returned {type(plan).__name__} instead of a plan"
            raise PlanningSchemaError(msg)
        return plan

    async def generate(self, prompt: str, *, max_tokens: int | None = None) -> str:
        result = await self._provider.complete_async(
            [ChatMessage(role="user", content=prompt)],
            TextCompletion,
            system_prompt=self._system_prompt,
            max_tokens=max_tokens,
        )
        completion: TextCompletion = result.content
        return completion.content
