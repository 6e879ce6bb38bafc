"""Tests for prompt templates."""

from __future__ import annotations

from foreman.orchestrator.prompts import (
    format_agent_catalog,
    format_agent_info,
    format_plan_prompt,
    format_synthesize_plan_prompt,
    format_task_prompt,
)
from helpers import make_agent


class TestAgentCatalog:
    """Tests for agent catalog formatting."""

    def test_agent_info(self) -> None:
        """Agent info lists name, instruction and servers."""
        agent = make_agent("searcher", servers=("brave", "fetch"))
        assert format_agent_info(agent) == (
            "Agent Name: searcher\n"
            "Description: You are the searcher.\n"
            "Servers in Agent:\n"
            "- Server Name: brave\n"
            "- Server Name: fetch"
        )

    def test_agent_without_servers(self) -> None:
        """Agents without servers say so."""
        agent = make_agent("thinker", servers=())
        assert format_agent_info(agent).endswith("Servers in Agent:\n- (none)")

    def test_catalog_numbered_from_one(self) -> None:
        """Catalog entries are numbered 1, 2, ..."""
        catalog = format_agent_catalog([make_agent("searcher"), make_agent("writer")])
        assert catalog.startswith("1. Agent Name: searcher")
        assert "\n2. Agent Name: writer" in catalog


class TestTemplates:
    """Tests for the prompt templates."""

    def test_plan_prompt(self) -> None:
        """The planning prompt carries objective, context, agents and shape."""
        prompt = format_plan_prompt("Write a report", "CONTEXT", "1. Agent Name: writer")

        assert "Objective: Write a report" in prompt
        assert "CONTEXT" in prompt
        assert "Agents:\n1. Agent Name: writer" in prompt
        assert '"is_complete": false' in prompt
        assert '"agent": "agent_name"' in prompt
        assert "valid JSON only" in prompt
        assert "{{" not in prompt

    def test_task_prompt(self) -> None:
        """The task prompt carries objective, task and context."""
        prompt = format_task_prompt("Write a report", "Find sources", "CONTEXT")
        assert prompt.startswith(
            "You are part of a larger workflow to achieve the objective: Write a report.\n"
            "Your job is to accomplish only the following task: Find sources.\n"
        )
        assert prompt.endswith("Results so far that may provide helpful context:\nCONTEXT\n")

    def test_synthesis_prompt(self) -> None:
        """The synthesis prompt wraps the rendered plan result."""
        prompt = format_synthesize_plan_prompt("RENDERED")
        assert prompt.endswith("cohesive result:\nRENDERED")
