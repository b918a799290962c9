"""
Event Bus - synchronous pub/sub for simulation events.

Handlers are called in subscription order, on the publisher's stack, with the
same event object. A handler that raises is logged and skipped; delivery to
the remaining handlers continues.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .state import EventType, SimulationEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[SimulationEvent], None]


@dataclass
class Subscription:
    """A subscription to events."""

    id: str
    handler: EventHandler
    event_types: set[str] | None = None  # None = every type
    filter_execution: str | None = None  # Only events for this execution
    filter_agent: str | None = None  # Only events for this agent


class EventBus:
    """
    Ordered event delivery plus a bounded history of published events.

    Example:
        bus = EventBus()

        def on_complete(event: SimulationEvent):
            print(f"Execution {event.workflow_execution_id} finished")

        sub_id = bus.subscribe(on_complete, event_types=["workflow_complete"])
        ...
        bus.unsubscribe(sub_id)
    """

    def __init__(self, max_history: int = 1000):
        self._subscriptions: dict[str, Subscription] = {}
        self._history: list[SimulationEvent] = []
        self._max_history = max_history
        self._subscription_counter = 0

    def subscribe(
        self,
        handler: EventHandler,
        event_types: Iterable[EventType] | None = None,
        execution_id: str | None = None,
        agent_id: str | None = None,
    ) -> str:
        """Register a handler and return its subscription id (use to unsubscribe)."""
        self._subscription_counter += 1
        sub_id = f"sub_{self._subscription_counter}"

        self._subscriptions[sub_id] = Subscription(
            id=sub_id,
            handler=handler,
            event_types=set(event_types) if event_types is not None else None,
            filter_execution=execution_id,
            filter_agent=agent_id,
        )
        logger.debug("Subscription %s registered", sub_id)
        return sub_id

    def unsubscribe(self, subscription_id: str) -> bool:
        """Remove a subscription. Returns True if it existed."""
        if subscription_id in self._subscriptions:
            del self._subscriptions[subscription_id]
            logger.debug("Subscription %s removed", subscription_id)
            return True
        return False

    def find_subscription(self, handler: EventHandler) -> str | None:
        """Return the id of the first subscription registered for ``handler``."""
        for subscription in self._subscriptions.values():
            if subscription.handler == handler:
                return subscription.id
        return None

    def publish(self, event: SimulationEvent) -> None:
        """Append the event to history and deliver it to matching subscribers."""
        self._history.append(event)
        if len(self._history) > self._max_history:
            # [-0:] would keep everything
            self._history = self._history[-self._max_history :] if self._max_history > 0 else []

        # Snapshot so handlers may (un)subscribe while being called
        for subscription in list(self._subscriptions.values()):
            if not self._matches(subscription, event):
                continue
            try:
                subscription.handler(event)
            except Exception:
                logger.exception(
                    "Handler %s failed for %s event %s", subscription.id, event.type, event.id
                )

    def history(self, limit: int | None = None) -> list[SimulationEvent]:
        """Return published events, oldest first."""
        if limit is None:
            return list(self._history)
        if limit <= 0:
            return []
        return self._history[-limit:]

    def clear(self) -> None:
        self._history = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def _matches(self, subscription: Subscription, event: SimulationEvent) -> bool:
        if subscription.event_types is not None and event.type not in subscription.event_types:
            return False

        if subscription.filter_execution and subscription.filter_execution != event.workflow_execution_id:
            return False

        if subscription.filter_agent and subscription.filter_agent != event.agent_id:
            return False

        return True
