# src/bulkgraph/core/events.py
"""Event bus for submission observability.

A synchronous event bus the sequencer emits domain events to. Because the
pipeline runs on the submission's worker thread, handlers are called on
that thread; handlers touching shared state must synchronize themselves.
"""

from collections.abc import Callable
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class EventBusProtocol(Protocol):
    """Protocol for event bus implementations.

    Lets EventBus and NullEventBus satisfy the interface without
    inheritance.
    """

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """Subscribe a handler to an event type."""
        ...

    def emit(self, event: T) -> None:
        """Emit an event to all subscribers."""
        ...


class EventBus:
    """Simple synchronous event bus.

    Handler exceptions propagate to the emitter. A failing handler fails
    the phase that emitted the event, and with it the submission.

    Example:
        bus = EventBus()
        bus.subscribe(PhaseStarted, lambda e: print(f"[{e.phase}] {e.target}"))
        computer = GraphComputer(settings, ..., event_bus=bus)
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[Callable[[Any], None]]] = {}

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """Subscribe a handler to an event type.

        Args:
            event_type: The event class to subscribe to
            handler: Callable that receives the event instance
        """
        self._subscribers.setdefault(event_type, []).append(handler)

    def emit(self, event: T) -> None:
        """Emit an event to all subscribers, in subscription order.

        Events with no subscribers are ignored.
        """
        for handler in self._subscribers.get(type(event), []):
            handler(event)


class NullEventBus:
    """No-op event bus for callers that do not observe submissions.

    Does NOT inherit from EventBus: subscribing to it is a no-op, and
    inheritance would hide that from someone expecting callbacks.
    """

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """No-op subscription - handler will never be called."""
        pass

    def emit(self, event: T) -> None:
        """No-op emission."""
        pass
