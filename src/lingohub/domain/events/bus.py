"""Event bus used to notify the host about localization changes.

The coordinator publishes events (a new artifact was installed, the artifact
was purged, the workflow changed state) and the host subscribes to the ones
it cares about without the SDK knowing anything about the host.

Event Handler Contract:
    Event handlers MUST be synchronous (non-async) functions. This is enforced
    at subscription time. Handlers should be fast; a handler that needs async
    work schedules it with asyncio.create_task().
"""

import asyncio
import threading
from typing import Callable, Type, TypeVar

from lingohub.logger import get_logger

from .types import Event

logger = get_logger("lingohub.events.bus")

T = TypeVar("T", bound=Event)

# Type alias for event handlers - must be synchronous
EventHandler = Callable[[Event], None]


class EventBus:
    """Event bus for publishing and subscribing to events.

    Example:
        ```python
        bus = EventBus()

        def on_update(event: LocalizationUpdated):
            print(f"Release {event.artifact_id} installed, refresh the UI")

        bus.subscribe(LocalizationUpdated, on_update)
        bus.publish(LocalizationUpdated(artifact_id="r-1", app_version="1.0.0"))
        ```

    Thread safety:
        The handler registry is guarded by a lock because hosts may subscribe
        from any thread. Handlers run on the publishing thread, outside the lock.
    """

    def __init__(self):
        """Initialize the event bus."""
        self._handlers: dict[Type[Event], list[Callable[[Event], None]]] = {}
        """Registry of event handlers by event type."""
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """
        Subscribe to events of a specific type.

        Args:
            event_type: The type of event to subscribe to (e.g., LocalizationUpdated)
            handler: Callback invoked with the event instance. MUST be synchronous.

        Raises:
            TypeError: If handler is an async function (coroutine function)
        """
        if asyncio.iscoroutinefunction(handler):
            raise TypeError(
                f"Event handlers must be synchronous functions. "
                f"Handler {getattr(handler, '__name__', handler)!r} is an async function (coroutine function). "
                f"To perform async work, schedule it using asyncio.create_task() instead."
            )

        with self._lock:
            handlers = self._handlers.setdefault(event_type, [])
            # Avoid duplicate subscriptions of the same handler
            if handler in handlers:
                logger.debug(f"Handler already subscribed for {event_type.__name__}, skipping")
                return
            handlers.append(handler)
        logger.debug(f"Subscribed handler for {event_type.__name__}")

    def unsubscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """
        Unsubscribe a handler from events of a specific type.

        Note:
            If the handler was not subscribed, this is a no-op.
        """
        with self._lock:
            try:
                self._handlers.get(event_type, []).remove(handler)
            except ValueError:
                logger.debug(f"Handler not found in subscriptions for {event_type.__name__}")
                return
        logger.debug(f"Unsubscribed handler for {event_type.__name__}")

    def publish(self, event: Event) -> None:
        """
        Publish an event to all subscribed handlers.

        Handlers are called synchronously in subscription order. If a handler
        raises, the error is logged and the remaining handlers still run.
        """
        event_type = type(event)
        with self._lock:
            handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug(f"No handlers subscribed for {event_type.__name__}")
            return

        logger.debug(f"Publishing {event_type.__name__} to {len(handlers)} handler(s)")

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.opt(exception=True).error(f"Error in event handler for {event_type.__name__}: {e}")

    def clear(self) -> None:
        """Clear all event subscriptions."""
        with self._lock:
            self._handlers.clear()
        logger.debug("Event bus cleared")

    def has_subscribers(self, event_type: Type[Event]) -> bool:
        """Check if there are any subscribers for a specific event type."""
        with self._lock:
            return bool(self._handlers.get(event_type))
