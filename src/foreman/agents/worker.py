"""Execution handles for worker agents.

A worker turns a task prompt into text. The handle is bound when the agent
is built and never reconfigured per call; tool access is whatever the
provider it wraps was set up with.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from foreman.llm.client import ChatMessage, TextCompletion

if TYPE_CHECKING:
    from foreman.llm.client import LLMProvider

# Async function taking (prompt, max_tokens) and returning text
WorkerFunction = Callable[[str, int | None], Awaitable[str]]


@runtime_checkable
class Worker(Protocol):
    """Protocol for agent execution handles."""

    @abstractmethod
    async def run(self, prompt: str, *, max_tokens: int | None = None) -> str:
        """Execute a task prompt and return the agent's text output."""
        ...


class FunctionWorker:
    """Worker backed by a plain async function."""

    def __init__(self, func: WorkerFunction) -> None:
        self._func = func

    async def run(self, prompt: str, *, max_tokens: int | None = None) -> str:
        return await self._func(prompt, max_tokens)


class LLMWorker:
    """Worker that answers task prompts with an LLM provider.

    The agent's instruction becomes the system prompt, followed by the list
    of tool servers the provider exposes to this agent.
    """

    def __init__(
        self,
        provider: LLMProvider,
        *,
        instruction: str,
        server_names: Sequence[str] = (),
    ) -> None:
        """Bind a provider to one agent's role and capability set.

        Args:
            provider: Provider already scoped to the agent's tool servers.
            instruction: Role description used as the system prompt.
            server_names: Tool servers the agent may use.
        """
        self._provider = provider
        self._server_names = tuple(server_names)
        self._system_prompt = build_system_prompt(instruction, self._server_names)

    @property
    def server_names(self) -> tuple[str, ...]:
        return self._server_names

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    async def run(self, prompt: str, *, max_tokens: int | None = None) -> str:
        result = await self._provider.complete_async(
            [ChatMessage(role="user", content=prompt)],
            TextCompletion,
            system_prompt=self._system_prompt,
            max_tokens=max_tokens,
        )
        completion: TextCompletion = result.content
        return completion.content


def build_system_prompt(instruction: str, server_names: Sequence[str]) -> str:
    """Build a worker system prompt from its instruction and servers."""
    prompt = instruction.strip()
    if server_names:
        prompt += "\n\nYou can use tools from these servers: " + ", ".join(server_names)
    return prompt
