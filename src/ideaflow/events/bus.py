"""Async event bus for idea lifecycle events."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Coroutine
from typing import Any

from ideaflow.events.types import PAYLOAD_TYPES, EventPayload, EventType

logger = logging.getLogger(__name__)

Listener = Callable[[EventType, EventPayload], Coroutine[Any, Any, None]]


class EventBus:
    """Pub/sub bus delivering typed payloads for idea events.

    Listeners for one event type run in registration order, followed by the
    listeners registered with ``on_all``.
    """

    def __init__(self) -> None:
        self._listeners: dict[EventType, list[Listener]] = defaultdict(list)
        self._global_listeners: list[Listener] = []

    def on(self, event_type: EventType, listener: Listener) -> None:
        self._listeners[event_type].append(listener)

    def on_all(self, listener: Listener) -> None:
        self._global_listeners.append(listener)

    def off(self, event_type: EventType, listener: Listener) -> None:
        if listener in self._listeners[event_type]:
            self._listeners[event_type].remove(listener)

    async def emit(self, event_type: EventType, payload: EventPayload) -> int:
        """Deliver ``payload`` to the listeners of ``event_type``.

        Returns the number of listeners that handled the event without error.
        A failing listener is logged and does not stop the others.

        Raises:
            TypeError: If ``payload`` is not the model registered for ``event_type``
        """
        expected = PAYLOAD_TYPES[event_type]
        if not isinstance(payload, expected):
            raise TypeError(
                f"{event_type} expects {expected.__name__}, got {type(payload).__name__}"
            )

        delivered = 0
        for listener in self._listeners.get(event_type, []) + self._global_listeners:
            try:
                await listener(event_type, payload)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Listener failed for %s on idea %s", event_type, payload.idea_id)
            else:
                delivered += 1

        logger.debug("Delivered %s for idea %s to %d listeners", event_type, payload.idea_id, delivered)
        return delivered
