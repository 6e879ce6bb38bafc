"""Exception hierarchy for the orchestrator.

Configuration errors are caller bugs and are never retried. Planning schema
errors are the only recoverable kind; the loop re-prompts a bounded number of
times before giving up with PlanningError.
"""

from __future__ import annotations


class ForemanError(Exception):
    """Base exception for all orchestrator errors."""


class ConfigurationError(ForemanError, ValueError):
    """Raised for setup mistakes: bad run parameters, agent wiring."""


class DuplicateAgentError(ConfigurationError):
    """Raised when two agents are registered under the same name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Agent already registered: {name}")


class AgentNotFoundError(ConfigurationError):
    """Raised when a task references an agent that is not registered."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = available or []
        super().__init__(f"Agent not found: {name}. Available: {sorted(self.available)}")


class PlanningSchemaError(ForemanError):
    """Raised when the planner's response does not match the Plan shape."""

    def __init__(self, message: str, raw: str | None = None) -> None:
        self.raw = raw
        super().__init__(message)


class PlanningError(ForemanError):
    """Raised when planning keeps failing after all retries."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Planner returned an invalid plan {attempts} time(s) in a row")


class TaskExecutionError(ForemanError):
    """Raised when a worker agent fails to produce a result for a task."""

    def __init__(self, agent: str, description: str, cause: BaseException) -> None:
        self.agent = agent
        self.description = description
        self.cause = cause
        super().__init__(f"Agent '{agent}' failed on task '{description}': {cause}")


class IterationLimitError(ForemanError):
    """Raised when the objective is not complete after max_iterations plans."""

    def __init__(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations
        super().__init__(
            f"Max iterations ({max_iterations}) reached without completing the plan"
        )


class PlanStateError(ForemanError):
    """Raised on an illegal PlanResult transition."""
