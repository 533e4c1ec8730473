"""
Explorer Event Bus.

Async pub/sub between the graph engine and whatever renders or records its
output. Handlers run as tasks; ``drain()`` lets callers (and tests) wait for
every dispatched handler before inspecting their effects.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any, Awaitable, Callable, TypeAlias

from mc_explorer.utils.logging import get_logger, log_error

EventPayload: TypeAlias = dict[str, Any]
EventHandler: TypeAlias = Callable[[EventPayload], Awaitable[None]]

logger = get_logger("core.event_bus")


class EventBus:
    """Topic-keyed pub/sub hub for graph events."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventHandler]] = defaultdict(list)
        self._pending: set[asyncio.Task[None]] = set()
        # asyncio.Lock binds to the loop it is first awaited on; one per loop
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    def _subscription_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def subscribe(self, topic: str, handler: EventHandler) -> None:
        """Register ``handler`` for ``topic``; registering twice is a no-op."""
        async with self._subscription_lock():
            handlers = self._subscribers[topic]
            if handler not in handlers:
                handlers.append(handler)

    async def unsubscribe(self, topic: str, handler: EventHandler) -> None:
        async with self._subscription_lock():
            handlers = self._subscribers.get(topic)
            if handlers and handler in handlers:
                handlers.remove(handler)

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    async def publish(self, topic: str, payload: EventPayload) -> int:
        """Schedule every handler of ``topic`` with ``payload``.

        Returns:
            Number of handlers scheduled
        """
        async with self._subscription_lock():
            handlers = list(self._subscribers.get(topic, ()))

        for handler in handlers:
            task = asyncio.create_task(self._dispatch(topic, handler, payload))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        logger.debug(f"Published '{topic}' to {len(handlers)} handler(s)")
        return len(handlers)

    async def drain(self) -> None:
        """Wait until every dispatched handler has finished, including ones they publish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _dispatch(
        self,
        topic: str,
        handler: EventHandler,
        payload: EventPayload,
    ) -> None:
        try:
            await handler(payload)
        except Exception as e:
            # One failing subscriber must not starve the others
            log_error(
                logger,
                "event handler",
                e,
                topic=topic,
                handler=getattr(handler, "__qualname__", repr(handler)),
            )

    def clear(self) -> None:
        """Remove all subscriptions."""
        self._subscribers.clear()
