"""Fakes shared by the orchestrator tests."""

from __future__ import annotations

import asyncio

from foreman.agents import Agent, Worker
from foreman.orchestrator import AgentTask, Plan, Step, parse_plan


def make_plan(
    steps: list[tuple[str, list[tuple[str, str]]]] | None = None,
    *,
    complete: bool = False,
) -> Plan:
    """Build a plan from (step description, [(task description, agent)]) pairs."""
    return Plan(
        steps=tuple(
            Step(
                description=description,
                tasks=tuple(AgentTask(description=task, agent=agent) for task, agent in tasks),
            )
            for description, tasks in steps or []
        ),
        is_complete=complete,
    )


class FakePlanner:
    """Planner returning queued plans; the last one repeats forever.

    Queue entries may be Plan objects, raw JSON strings (parsed strictly) or
    exceptions to raise.
    """

    def __init__(
        self,
        plans: list[Plan | str | BaseException],
        synthesis: str = "Final answer",
    ) -> None:
        self._plans = list(plans)
        self.synthesis = synthesis
        self.plan_prompts: list[str] = []
        self.generate_prompts: list[str] = []
        self.max_tokens: list[int | None] = []

    async def plan(self, prompt: str, *, max_tokens: int | None = None) -> Plan:
        self.plan_prompts.append(prompt)
        self.max_tokens.append(max_tokens)
        item = self._plans.pop(0) if len(self._plans) > 1 else self._plans[0]
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, str):
            return parse_plan(item)
        return item

    async def generate(self, prompt: str, *, max_tokens: int | None = None) -> str:
        self.generate_prompts.append(prompt)
        self.max_tokens.append(max_tokens)
        return self.synthesis


class RecordingWorker:
    """Worker that records prompts and replies after an optional delay."""

    def __init__(
        self,
        reply: str | None = None,
        *,
        error: BaseException | None = None,
        delay: float = 0.0,
    ) -> None:
        self.reply = reply
        self.error = error
        self.delay = delay
        self.prompts: list[str] = []
        self.max_tokens: list[int | None] = []
        self.active = 0
        self.peak_active = 0

    async def run(self, prompt: str, *, max_tokens: int | None = None) -> str:
        self.prompts.append(prompt)
        self.max_tokens.append(max_tokens)
        self.active += 1
        self.peak_active = max(self.peak_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
            return self.reply if self.reply is not None else f"result #{len(self.prompts)}"
        finally:
            self.active -= 1


def make_agent(
    name: str,
    worker: Worker | None = None,
    servers: tuple[str, ...] = ("fetch",),
) -> Agent:
    return Agent(
        name=name,
        instruction=f"You are the {name}.",
        server_names=servers,
        worker=worker or RecordingWorker(),
    )
