"""In-process event bus used to decouple producers from notification creation.

Handlers are registered per event name and invoked in registration order
every time that name is published. Plain functions run inline; coroutine
functions are scheduled on the running loop and are not awaited by the
publisher, so their side effects may land after ``publish`` returns.

Example:
    bus = EventBus()

    async def on_task_assigned(payload):
        ...

    bus.subscribe(EventTypes.Task.ASSIGNED, on_task_assigned)
    bus.publish(EventTypes.Task.ASSIGNED, {"taskId": "t1", ...})

    # Tests can wait for scheduled handlers to settle.
    await bus.drain()
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import Any, Callable

from anyio import from_thread

logger = logging.getLogger(__name__)

EventPayload = Mapping[str, Any]
EventHandler = Callable[[EventPayload], "Awaitable[None] | None"]


@dataclass(eq=False)
class _Subscription:
    handler: EventHandler
    once: bool = False


class EventBus:
    """Single-process publish/subscribe channel keyed by event name.

    A failing handler is logged and never affects its siblings or the
    publisher. There is no persistence and no retry.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[_Subscription]] = {}
        self._pending: set[asyncio.Future[Any]] = set()
        self._event_count = 0

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Run ``handler`` on every future publish of ``event_name``."""

        self._handlers.setdefault(event_name, []).append(_Subscription(handler))
        logger.debug("Subscribed %s to %s", _handler_name(handler), event_name)

    def subscribe_once(self, event_name: str, handler: EventHandler) -> None:
        """Run ``handler`` on the next publish of ``event_name`` only."""

        self._handlers.setdefault(event_name, []).append(_Subscription(handler, once=True))
        logger.debug("Subscribed %s once to %s", _handler_name(handler), event_name)

    def unsubscribe(self, event_name: str, handler: EventHandler) -> bool:
        """Remove the earliest registration of ``handler`` for ``event_name``.

        Returns:
            True if a registration was found and removed, False otherwise.
        """

        subscriptions = self._handlers.get(event_name)
        if not subscriptions:
            return False
        for subscription in subscriptions:
            if subscription.handler == handler:
                self._remove(event_name, subscription)
                return True
        return False

    def publish(self, event_name: str, payload: EventPayload) -> None:
        """Invoke every handler registered for ``event_name`` with ``payload``."""

        self._event_count += 1
        subscriptions = list(self._handlers.get(event_name, ()))
        if not subscriptions:
            logger.debug("No handlers for event %s", event_name)
            return

        logger.debug("Publishing %s to %d handlers", event_name, len(subscriptions))
        for subscription in subscriptions:
            if subscription.once:
                self._remove(event_name, subscription)
        for subscription in subscriptions:
            self._invoke(event_name, subscription.handler, payload)

    def handler_count(self, event_name: str) -> int:
        return len(self._handlers.get(event_name, ()))

    @property
    def pending_count(self) -> int:
        """Number of scheduled coroutine handlers that have not finished yet."""

        return len(self._pending)

    async def drain(self) -> None:
        """Wait until every scheduled handler, including ones they spawn, is done."""

        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def clear(self) -> None:
        """Remove all subscriptions."""

        self._handlers.clear()
        logger.debug("EventBus cleared all subscriptions")

    def get_stats(self) -> dict[str, Any]:
        return {
            "event_names": sorted(self._handlers),
            "total_handlers": sum(len(subs) for subs in self._handlers.values()),
            "events_published": self._event_count,
            "pending_handlers": len(self._pending),
        }

    def _remove(self, event_name: str, subscription: _Subscription) -> None:
        subscriptions = self._handlers.get(event_name)
        if not subscriptions:
            return
        try:
            subscriptions.remove(subscription)
        except ValueError:
            return
        if not subscriptions:
            del self._handlers[event_name]

    def _invoke(self, event_name: str, handler: EventHandler, payload: EventPayload) -> None:
        try:
            result = handler(payload)
        except Exception:
            logger.error(
                "Handler %s failed for event %s",
                _handler_name(handler),
                event_name,
                exc_info=True,
            )
            return
        if inspect.isawaitable(result):
            self._schedule(event_name, handler, result)

    def _schedule(self, event_name: str, handler: EventHandler, awaitable: Awaitable[Any]) -> None:
        guarded = self._guard(event_name, handler, awaitable)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Published from a worker thread (sync route); hop onto the loop
            # that owns the thread just long enough to schedule the handler.
            try:
                from_thread.run(self._spawn, guarded)
            except RuntimeError:
                guarded.close()
                if inspect.iscoroutine(awaitable):
                    awaitable.close()
                logger.error(
                    "No event loop available to run %s for event %s",
                    _handler_name(handler),
                    event_name,
                )
        else:
            self._track(loop.create_task(guarded))

    async def _spawn(self, coroutine: Awaitable[None]) -> None:
        self._track(asyncio.ensure_future(coroutine))

    def _track(self, task: asyncio.Future[Any]) -> None:
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @staticmethod
    async def _guard(event_name: str, handler: EventHandler, awaitable: Awaitable[Any]) -> None:
        try:
            await awaitable
        except Exception:
            logger.error(
                "Handler %s failed for event %s",
                _handler_name(handler),
                event_name,
                exc_info=True,
            )


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


__all__ = ["EventBus", "EventHandler", "EventPayload"]
