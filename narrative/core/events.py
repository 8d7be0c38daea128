"""
Typed event bus for decoupled communication between the core and its hosts.

Event types are Enums so subscribers never match on magic strings.

Usage:
    bus = EventBus()
    bus.subscribe(DialogueEvent.ENDED, on_dialogue_ended)
    bus.publish(DialogueEvent.ENDED, dialogue_id="base.intro")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


class DialogueEvent(Enum):
    """Dialogue playback events."""
    STARTED = auto()
    LINE_STARTED = auto()
    LINE_COMPLETED = auto()
    ENDED = auto()


class QuizEvent(Enum):
    """Quiz lifecycle events."""
    STARTED = auto()
    MARKUP_CHANGED = auto()
    ANSWERED = auto()
    CLEARED = auto()


class ProgressEvent(Enum):
    """Player progress events (first insertion only)."""
    DIALOGUE_COMPLETED = auto()
    INTERACTABLE_COMPLETED = auto()
    WORD_UNLOCKED = auto()
    ATTEMPT_RECORDED = auto()


class SaveEvent(Enum):
    """Save slot events."""
    SAVE_COMPLETED = auto()
    SAVE_FAILED = auto()
    LOAD_COMPLETED = auto()
    LOAD_FAILED = auto()
    DELETED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Event-specific keyword data
        consumed: Whether a handler stopped propagation
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Stop delivery to lower-priority handlers."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Publish/subscribe hub.

    Features:
    - Enum-typed events
    - Priority ordering (higher first)
    - Optional weak references to handlers
    - One-shot handlers
    - Consumption stops propagation
    - Events published from inside a handler are queued, not nested
    """

    def __init__(self):
        # event type -> [(priority, handler_ref, one_shot)]
        self._handlers: dict[Enum, list[tuple[int, Any, bool]]] = {}
        self._queue: list[Event] = []
        self._dispatching = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback receiving the Event
            priority: Higher priority handlers are called first
            one_shot: Remove the handler after its first call
            weak: Hold the handler weakly (dropped once garbage collected)
        """
        if weak:
            handler_ref = WeakMethod(handler) if hasattr(handler, '__self__') else ref(handler)
        else:
            handler_ref = handler

        handlers = self._handlers.setdefault(event_type, [])
        index = len(handlers)
        for i, (p, _, _) in enumerate(handlers):
            if priority > p:
                index = i
                break
        handlers.insert(index, (priority, handler_ref, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove a handler from an event type."""
        if event_type not in self._handlers:
            return
        self._handlers[event_type] = [
            entry for entry in self._handlers[event_type]
            if self._resolve(entry[1]) != handler
        ]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)
        if self._dispatching:
            self._queue.append(event)
        else:
            self._dispatch(event)
        return event

    def clear(self, event_type: Enum | None = None) -> None:
        """Drop handlers for one event type, or all of them."""
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def handler_count(self, event_type: Enum) -> int:
        return len(self._handlers.get(event_type, []))

    def _dispatch(self, event: Event) -> None:
        handlers = self._handlers.get(event.type)
        if handlers:
            self._dispatching = True
            stale = []
            try:
                for i, (_, handler_ref, one_shot) in enumerate(list(handlers)):
                    handler = self._resolve(handler_ref)
                    if handler is None:
                        stale.append(handler_ref)
                        continue

                    try:
                        handler(event)
                    except Exception:
                        logger.exception("Error in event handler for %s", event.type)

                    if one_shot:
                        stale.append(handler_ref)
                    if event.consumed:
                        break
            finally:
                self._dispatching = False

            if stale:
                self._handlers[event.type] = [
                    entry for entry in handlers if entry[1] not in stale
                ]

        while self._queue:
            self._dispatch(self._queue.pop(0))

    @staticmethod
    def _resolve(handler_ref: Any) -> EventHandler | None:
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
