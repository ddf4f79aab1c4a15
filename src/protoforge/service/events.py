"""Publish/subscribe bus for version lifecycle notifications.

One bus is created per :class:`~protoforge.service.container.ServiceContainer`;
nothing here is module-level state.  Handlers may be plain callables or
coroutine functions.  A bounded history per topic lets pull consumers
(tests, background jobs) drain what happened without subscribing up front.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
import uuid
from collections import defaultdict, deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger("protoforge.events")

ARTIFACT_CREATED = "artifact.created"
ARTIFACT_DELETED = "artifact.deleted"
VERSION_APPENDED = "version.appended"
VERSION_REVERTED = "version.reverted"
POINTER_RECONCILED = "pointer.reconciled"


@dataclass(frozen=True)
class Event:
    topic: str
    payload: dict[str, Any]
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    ts: datetime = field(default_factory=lambda: datetime.now(UTC))


Handler = Callable[[Event], Awaitable[None] | None]


class EventBus:
    """Topic-keyed bus with push subscribers and a pull history."""

    def __init__(self, history_size: int = 100) -> None:
        self._lock = threading.RLock()
        self._handlers: defaultdict[str, list[Handler]] = defaultdict(list)
        self._history: defaultdict[str, deque[Event]] = defaultdict(
            lambda: deque(maxlen=history_size)
        )

    def subscribe(self, topic: str, handler: Handler) -> Callable[[], None]:
        """Register *handler* for *topic*; returns a callable that unsubscribes it."""
        with self._lock:
            self._handlers[topic].append(handler)

        def _unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers[topic]:
                    self._handlers[topic].remove(handler)

        return _unsubscribe

    async def publish(self, topic: str, payload: dict[str, Any]) -> Event:
        event = Event(topic=topic, payload=payload)
        with self._lock:
            self._history[topic].append(event)
            handlers = list(self._handlers[topic])
        for handler in handlers:
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception:
                # The write being announced has already committed.
                logger.exception("Event handler failed for topic %s", topic)
        return event

    def drain(self, topic: str, limit: int = 32) -> list[Event]:
        out: list[Event] = []
        with self._lock:
            q = self._history[topic]
            for _ in range(min(limit, len(q))):
                out.append(q.popleft())
        return out

    def history(self, topic: str) -> list[Event]:
        with self._lock:
            return list(self._history[topic])

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._handlers[topic])
