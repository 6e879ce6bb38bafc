"""Worker agents and the registry the orchestrator routes tasks through."""

from foreman.agents.registry import Agent, AgentRegistry
from foreman.agents.worker import (
    FunctionWorker,
    LLMWorker,
    Worker,
    WorkerFunction,
    build_system_prompt,
)

__all__ = [
    "Agent",
    "AgentRegistry",
    "FunctionWorker",
    "LLMWorker",
    "Worker",
    "WorkerFunction",
    "build_system_prompt",
]
