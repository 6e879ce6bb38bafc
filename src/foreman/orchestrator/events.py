"""Lifecycle events emitted by the orchestrator.

Listeners are async callables registered per event. The orchestrator awaits
them in registration order; a failing listener is logged and skipped so that
observers can never change the outcome of a run. Events are not logged
here; the loop writes its own structured log entries for the same progress.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from foreman.observability import get_logger


class OrchestratorEvent(Enum):
    """Events emitted during an orchestrator run."""

    PLAN_GENERATED = "plan.generated"
    STEP_STARTED = "step.started"
    TASK_COMPLETED = "task.completed"
    STEP_COMPLETED = "step.completed"
    RUN_COMPLETED = "run.completed"


@dataclass
class OrchestratorEventData:
    """Data associated with an orchestrator event."""

    event: OrchestratorEvent
    run_id: UUID
    timestamp: datetime
    data: dict[str, Any] = field(default_factory=dict)


# Type alias for event listeners
EventListener = Callable[[OrchestratorEventData], Awaitable[None]]


@dataclass
class EventEmitter:
    """Holds listeners and dispatches events to them."""

    _listeners: dict[OrchestratorEvent, list[EventListener]] = field(default_factory=dict)

    def on(self, event: OrchestratorEvent, listener: EventListener) -> None:
        """Register an event listener."""
        self._listeners.setdefault(event, []).append(listener)

    def on_all(self, listener: EventListener) -> None:
        """Register a listener for every event."""
        for event in OrchestratorEvent:
            self.on(event, listener)

    def off(self, event: OrchestratorEvent, listener: EventListener) -> None:
        """Unregister an event listener."""
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    async def emit(
        self,
        event: OrchestratorEvent,
        run_id: UUID,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Emit an event to all listeners."""
        listeners = self._listeners.get(event)
        if not listeners:
            return

        event_data = OrchestratorEventData(
            event=event,
            run_id=run_id,
            timestamp=datetime.now(UTC),
            data=data or {},
        )

        for listener in list(listeners):
            try:
                await listener(event_data)
            except Exception:
                get_logger(__name__).exception(
                    "listener_failed",
                    event=event.value,
                    listener=getattr(listener, "__name__", repr(listener)),
                )
