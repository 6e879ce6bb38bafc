"""Foreman: an orchestrator/workers loop for LLM agents.

A planner breaks an objective into steps of independent tasks, named worker
agents carry the tasks out, and the planner re-plans from the accumulated
results until it declares the objective met and synthesizes the answer.
"""

from foreman.agents import Agent, AgentRegistry, FunctionWorker, LLMWorker
from foreman.core import (
    AgentNotFoundError,
    ConfigurationError,
    DuplicateAgentError,
    ForemanError,
    IterationLimitError,
    PlanningError,
    PlanningSchemaError,
    PlanStateError,
    Settings,
    TaskExecutionError,
    get_settings,
)
from foreman.orchestrator import (
    AgentTask,
    LLMPlanner,
    Orchestrator,
    OrchestratorEvent,
    Plan,
    PlanResult,
    RequestParams,
    Step,
    StepResult,
    TaskWithResult,
)

__version__ = "0.1.0"

__all__ = [
    "Agent",
    "AgentNotFoundError",
    "AgentRegistry",
    "AgentTask",
    "ConfigurationError",
    "DuplicateAgentError",
    "ForemanError",
    "FunctionWorker",
    "IterationLimitError",
    "LLMPlanner",
    "LLMWorker",
    "Orchestrator",
    "OrchestratorEvent",
    "Plan",
    "PlanResult",
    "PlanStateError",
    "PlanningError",
    "PlanningSchemaError",
    "RequestParams",
    "Settings",
    "Step",
    "StepResult",
    "TaskExecutionError",
    "TaskWithResult",
    "__version__",
    "get_settings",
]
