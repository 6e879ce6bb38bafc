"""Agent registry.

Maps unique agent names to their role, capability set and execution handle.
The registry is filled once at construction and is read-only afterwards, so
concurrent tasks can look agents up without coordination.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from foreman.agents.worker import LLMWorker
from foreman.core.errors import AgentNotFoundError, DuplicateAgentError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from foreman.agents.worker import Worker
    from foreman.llm.client import LLMProvider
    from foreman.orchestrator.types import Plan


@dataclass(frozen=True, slots=True)
class Agent:
    """A named worker agent.

    Attributes:
        name: Unique name used by planned tasks to address the agent.
        instruction: Role description shown to the planner and the agent.
        server_names: Tool servers the agent may use, in declared order.
        worker: Execution handle bound to exactly those servers.
    """

    name: str
    instruction: str
    server_names: tuple[str, ...]
    worker: Worker

    @classmethod
    def create(
        cls,
        name: str,
        instruction: str,
        server_names: Sequence[str],
        provider: LLMProvider,
    ) -> Agent:
        """Create an agent answered by an LLM provider.

        Args:
            name: Unique agent name.
            instruction: Role description.
            server_names: Tool servers the provider is scoped to.
            provider: Provider configured with those servers' tools.
        """
        servers = tuple(server_names)
        return cls(
            name=name,
            instruction=instruction,
            server_names=servers,
            worker=LLMWorker(provider, instruction=instruction, server_names=servers),
        )


class AgentRegistry:
    """Registry of worker agents keyed by name.

    Example:
        registry = AgentRegistry([
            Agent.create("searcher", "You are a web researcher.", ["fetch"], provider),
            Agent.create("writer", "You write reports.", ["filesystem"], provider),
        ])
        agent = registry.get("writer")
    """

    def __init__(self, agents: Iterable[Agent]) -> None:
        """Build the registry.

        Raises:
            DuplicateAgentError: If two agents share a name.
        """
        agents_by_name: dict[str, Agent] = {}
        for agent in agents:
            if agent.name in agents_by_name:
                raise DuplicateAgentError(agent.name)
            agents_by_name[agent.name] = agent
        self._agents = MappingProxyType(agents_by_name)

    def get(self, name: str) -> Agent:
        """Get an agent by name.

        Raises:
            AgentNotFoundError: If no agent has that name.
        """
        agent = self._agents.get(name)
        if agent is None:
            raise AgentNotFoundError(name, list(self._agents))
        return agent

    def validate_plan(self, plan: Plan) -> None:
        """Check that every task in a plan names a registered agent.

        Raises:
            AgentNotFoundError: For the first task with an unknown agent.
        """
        for step in plan.steps:
            for task in step.tasks:
                self.get(task.agent)

    def names(self) -> list[str]:
        """List agent names in registration order."""
        return list(self._agents)

    def __iter__(self) -> Iterator[Agent]:
        return iter(self._agents.values())

    def __len__(self) -> int:
        return len(self._agents)

    def __contains__(self, name: object) -> bool:
        return name in self._agents
