"""Logging and tracing."""

from foreman.observability.logging import (
    bind_context,
    clear_context,
    get_logger,
    reset_logging,
    setup_logging,
    unbind_context,
)
from foreman.observability.tracing import (
    get_tracer,
    orchestrator_span,
    record_failure,
    record_success,
    reset_tracing,
    setup_tracing,
)

__all__ = [
    "bind_context",
    "clear_context",
    "get_logger",
    "get_tracer",
    "orchestrator_span",
    "record_failure",
    "record_success",
    "reset_logging",
    "reset_tracing",
    "setup_logging",
    "setup_tracing",
    "unbind_context",
]
