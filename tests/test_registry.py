"""Tests for the agent registry and worker handles."""

from __future__ import annotations

import pytest

from foreman.agents import Agent, AgentRegistry, FunctionWorker, LLMWorker, build_system_prompt
from foreman.core import AgentNotFoundError, ConfigurationError, DuplicateAgentError
from foreman.llm import ScriptedProvider, TextCompletion
from helpers import make_agent, make_plan


class TestAgentRegistry:
    """Tests for AgentRegistry."""

    def test_lookup(self) -> None:
        """Agents are found by name."""
        searcher = make_agent("searcher")
        writer = make_agent("writer")
        registry = AgentRegistry([searcher, writer])

        assert registry.get("writer") is writer
        assert "searcher" in registry
        assert "editor" not in registry
        assert len(registry) == 2
        assert registry.names() == ["searcher", "writer"]
        assert list(registry) == [searcher, writer]

    def test_duplicate_name_rejected(self) -> None:
        """Two agents with the same name fail construction."""
        with pytest.raises(DuplicateAgentError, match="searcher") as exc_info:
            AgentRegistry([make_agent("searcher"), make_agent("searcher")])
        assert exc_info.value.name == "searcher"
        assert isinstance(exc_info.value, ConfigurationError)

    def test_unknown_name(self) -> None:
        """Unknown names raise AgentNotFoundError listing what exists."""
        registry = AgentRegistry([make_agent("searcher")])
        with pytest.raises(AgentNotFoundError, match="editor") as exc_info:
            registry.get("editor")
        assert exc_info.value.available == ["searcher"]

    def test_validate_plan(self) -> None:
        """validate_plan reports the first unknown agent."""
        registry = AgentRegistry([make_agent("searcher")])
        registry.validate_plan(make_plan([("s", [("a", "searcher")])]))

        with pytest.raises(AgentNotFoundError, match="ghost"):
            registry.validate_plan(make_plan([("s", [("a", "searcher"), ("b", "ghost")])]))

    def test_empty_registry(self) -> None:
        """An empty registry is allowed."""
        registry = AgentRegistry([])
        assert len(registry) == 0
        assert registry.names() == []


class TestWorkers:
    """Tests for worker handles."""

    @pytest.mark.asyncio
    async def test_function_worker(self) -> None:
        """FunctionWorker calls the wrapped function."""

        async def answer(prompt: str, max_tokens: int | None) -> str:
            return f"{prompt}:{max_tokens}"

        worker = FunctionWorker(answer)
        assert await worker.run("hi", max_tokens=10) == "hi:10"

    @pytest.mark.asyncio
    async def test_llm_worker_uses_instruction(self) -> None:
        """LLMWorker sends the prompt with the agent's system prompt."""
        provider = ScriptedProvider(responses=["found it"])
        worker = LLMWorker(provider, instruction="You search.", server_names=["fetch", "brave"])

        assert await worker.run("find x", max_tokens=50) == "found it"
        call = provider.calls[0]
        assert call.prompt == "find x"
        assert call.output_schema is TextCompletion
        assert call.max_tokens == 50
        assert call.system_prompt == "You search.\n\nYou can use tools from these servers: fetch, brave"

    def test_system_prompt_without_servers(self) -> None:
        """No server line is added for agents without servers."""
        assert build_system_prompt("  You write.  ", []) == "You write."

    def test_agent_create_binds_worker(self) -> None:
        """Agent.create binds an LLMWorker scoped to the agent's servers."""
        provider = ScriptedProvider()
        agent = Agent.create("searcher", "You search.", ["fetch"], provider)

        assert agent.server_names == ("fetch",)
        assert isinstance(agent.worker, LLMWorker)
        assert agent.worker.server_names == ("fetch",)
