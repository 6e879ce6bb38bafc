"""Prompt templates for planning, task execution and synthesis.

All functions here are pure string formatting.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from foreman.agents.registry import Agent

PLANNER_SYSTEM_PROMPT = """\
You are an expert planner. Given an objective task and a list of MCP servers (which are \
collections of tools) or Agents (which are collections of servers), your job is to break down \
the objective into a series of steps, which can be performed by LLMs with access to the \
servers or agents."""

PLAN_PROMPT_TEMPLATE = """\
You are tasked with orchestrating a plan to complete an objective.
You can analyze results from the previous steps already executed to decide if the objective \
is complete.
Your plan must be structured in sequential steps (up to 3 steps), with each step containing \
independent parallel subtasks (up to 4 subtasks).

Objective: {objective}

{context}

If the previous results achieve the objective, return is_complete=true.
Otherwise, generate remaining steps needed.

You have access to the following MCP Servers (which are collections of tools/functions),
and Agents (which are collections of servers):

Agents:
{agents}

Generate a plan with all remaining steps needed.
Steps are sequential, but each Step can have parallel subtasks.
For each Step, specify a description of the step and independent subtasks that can run in \
parallel.
For each subtask specify:
    1. Clear description of the task that an LLM can execute
    2. Name of 1 Agent to use for the task

Return your response in the following JSON structure:
    {{
        "steps": [
            {{
                "description": "Description of step 1",
                "tasks": [
                    {{
                        "description": "Description of task 1",
                        "agent": "agent_name"
                    }},
                    {{
                        "description": "Description of task 2",
                        "agent": "agent_name2"
                    }}
                ]
            }}
        ],
        "is_complete": false
    }}

You must respond with valid JSON only, with no triple backticks. No markdown formatting.
No extra text. Do not wrap in ```json code fences."""

TASK_PROMPT_TEMPLATE = """\
You are part of a larger workflow to achieve the objective: {objective}.
Your job is to accomplish only the following task: {task}.

Results so far that may provide helpful context:
{context}
"""

SYNTHESIZE_PLAN_PROMPT_TEMPLATE = """\
Synthesize the results of executing all steps in the plan into a cohesive result:
{plan_result}"""


def format_server_info(server_name: str) -> str:
    """Format one tool server for the planner."""
    return f"Server Name: {server_name}"


def format_agent_info(agent: Agent) -> str:
    """Format one agent: name, role and the servers it can reach."""
    servers = "\n".join(f"- {format_server_info(name)}" for name in agent.server_names)
    return (
        f"Agent Name: {agent.name}\n"
        f"Description: {agent.instruction.strip()}\n"
        f"Servers in Agent:\n{servers or '- (none)'}"
    )


def format_agent_catalog(agents: Iterable[Agent]) -> str:
    """Number every agent from 1 and join their descriptions."""
    return "\n".join(
        f"{index}. {format_agent_info(agent)}" for index, agent in enumerate(agents, start=1)
    )


def format_plan_prompt(objective: str, context: str, agents: str) -> str:
    return PLAN_PROMPT_TEMPLATE.format(objective=objective, context=context, agents=agents)


def format_task_prompt(objective: str, task: str, context: str) -> str:
    return TASK_PROMPT_TEMPLATE.format(objective=objective, task=task, context=context)


def format_synthesize_plan_prompt(plan_result: str) -> str:
    return SYNTHESIZE_PLAN_PROMPT_TEMPLATE.format(plan_result=plan_result)
