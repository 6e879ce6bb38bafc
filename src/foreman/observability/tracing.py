"""OpenTelemetry tracing for Foreman.

Spans follow the shape of an orchestrator run:
- run (one per execute call)
- iteration (one per planning round)
- step and task (one per executed step and dispatched task)
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Status, StatusCode, Tracer

if TYPE_CHECKING:
    from collections.abc import Generator

    from foreman.core.config import TracingSettings

_TRACER_NAME = "foreman"
_TRACER_VERSION = "0.1.0"

# Module-level tracer
_tracer: Tracer | None = None
_initialized: bool = False


def setup_tracing(settings: TracingSettings) -> None:
    """Initialize OpenTelemetry tracing.

    Args:
        settings: Tracing configuration settings.
    """
    global _tracer, _initialized  # noqa: PLW0603

    if _initialized:
        return

    if not settings.enabled:
        _initialized = True
        return

    resource = Resource.create(
        {
            "service.name": settings.service_name,
            "service.version": _TRACER_VERSION,
        }
    )
    provider = TracerProvider(resource=resource)

    if settings.otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
                OTLPSpanExporter,
            )

            otlp_exporter = OTLPSpanExporter(endpoint=settings.otlp_endpoint)
            provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
        except ImportError:
            # The OTLP exporter is an optional extra
            provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    else:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)

    _tracer = trace.get_tracer(_TRACER_NAME, _TRACER_VERSION)
    _initialized = True


def get_tracer() -> Tracer:
    """Get the configured tracer.

    Returns:
        The OpenTelemetry tracer instance, or a no-op tracer when tracing
        has not been set up.
    """
    if _tracer is None:
        return trace.get_tracer(_TRACER_NAME, _TRACER_VERSION)
    return _tracer


def reset_tracing() -> None:
    """Reset tracing state. Useful for testing."""
    global _tracer, _initialized  # noqa: PLW0603
    _tracer = None
    _initialized = False


@contextmanager
def orchestrator_span(name: str, **attributes: Any) -> Generator[trace.Span, None, None]:
    """Open a span for one phase of an orchestrator run.

    Attribute keys are prefixed with ``foreman.``; ``None`` values are dropped.

    Args:
        name: Span name, e.g. "orchestrator.step".
        **attributes: Span attributes.

    Yields:
        The active span.
    """
    tracer = get_tracer()
    attrs = {f"foreman.{key}": value for key, value in attributes.items() if value is not None}

    with tracer.start_as_current_span(name, attributes=attrs) as span:
        yield span


def record_success(span: trace.Span, **attributes: Any) -> None:
    """Mark a span as successful, attaching result attributes."""
    for key, value in attributes.items():
        span.set_attribute(f"foreman.{key}", value)
    span.set_status(Status(StatusCode.OK))


def record_failure(span: trace.Span, error: BaseException) -> None:
    """Mark a span as failed with the given error."""
    span.set_attribute("foreman.error.type", type(error).__name__)
    span.set_attribute("foreman.error.message", str(error))
    span.set_status(Status(StatusCode.ERROR, str(error)))
