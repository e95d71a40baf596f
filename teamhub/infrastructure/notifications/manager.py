"""Connection management helpers for notification websockets."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Protocol, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class RealtimeTransport(Protocol):
    """Anything able to emit an event to every member of a named group."""

    async def emit(self, group: str, event: str, payload: dict[str, Any]) -> None: ...


def user_group(user_id: str) -> str:
    """Return the group holding every socket of ``user_id``."""

    return f"user:{user_id}"


class NotificationConnectionManager:
    """Manage active websocket connections grouped by name."""

    def __init__(self) -> None:
        self._groups: DefaultDict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, user_id: str, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it for ``user_id``."""

        await websocket.accept()
        self.join(user_group(user_id), websocket)

    def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        """Remove ``websocket`` from the group of ``user_id``."""

        self.leave(user_group(user_id), websocket)

    def join(self, group: str, websocket: WebSocket) -> None:
        self._groups[group].add(websocket)

    def leave(self, group: str, websocket: WebSocket) -> None:
        connections = self._groups.get(group)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            self._groups.pop(group, None)

    def connection_count(self, group: str) -> int:
        return len(self._groups.get(group, ()))

    async def emit(self, group: str, event: str, payload: dict[str, Any]) -> None:
        """Send ``payload`` as ``event`` to every active connection in ``group``."""

        message = {"type": event, "data": payload}
        for connection in list(self._groups.get(group, set())):
            try:
                await connection.send_json(message)
            except Exception:
                logger.warning("Dropping broken websocket in %s", group, exc_info=True)
                self.leave(group, connection)


__all__ = ["NotificationConnectionManager", "RealtimeTransport", "user_group"]
