"""Configuration and error types shared across the package."""

from foreman.core.config import (
    GeneralSettings,
    LLMSettings,
    OrchestratorSettings,
    Settings,
    TracingSettings,
    clear_settings_cache,
    get_settings,
)
from foreman.core.errors import (
    AgentNotFoundError,
    ConfigurationError,
    DuplicateAgentError,
    ForemanError,
    IterationLimitError,
    PlanningError,
    PlanningSchemaError,
    PlanStateError,
    TaskExecutionError,
)

__all__ = [
    "AgentNotFoundError",
    "ConfigurationError",
    "DuplicateAgentError",
    "ForemanError",
    "GeneralSettings",
    "IterationLimitError",
    "LLMSettings",
    "OrchestratorSettings",
    "PlanStateError",
    "PlanningError",
    "PlanningSchemaError",
    "Settings",
    "TaskExecutionError",
    "TracingSettings",
    "clear_settings_cache",
    "get_settings",
]
