"""In-process event bus carrying domain events to notification translators."""

from .bus import EventBus, EventHandler, EventPayload

__all__ = ["EventBus", "EventHandler", "EventPayload"]
