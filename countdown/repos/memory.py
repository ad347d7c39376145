"""In-memory repositories for countdown events and notifications."""

from __future__ import annotations

import logging
from datetime import datetime

from countdown.domain.bus import EventBus
from countdown.domain.events import EventAdded, EventRemoved, EventSelected
from countdown.domain.models import CountdownEvent, ScheduledNotification, StoreState

logger = logging.getLogger(__name__)


class EventStore:
    """Ordered list of countdown events with a single selected position.

    Invalid input (empty name, out-of-range index) is ignored: the call
    returns ``None`` and nothing changes.  Successful mutations are announced
    on *bus* so that collaborators such as the notification scheduler can
    react.
    """

    def __init__(self, bus: EventBus | None = None) -> None:
        self._bus = bus
        self._events: list[CountdownEvent] = []
        self._selected_index: int = 0

    @property
    def selected_index(self) -> int:
        return self._selected_index

    def __len__(self) -> int:
        return len(self._events)

    def _in_bounds(self, index: int) -> bool:
        return 0 <= index < len(self._events)

    def add(self, name: str, target: datetime) -> CountdownEvent | None:
        if not name:
            logger.debug("Ignoring add with empty name")
            return None

        event = CountdownEvent(name=name, target=target)
        self._events.append(event)
        self._selected_index = len(self._events) - 1
        logger.info("Added event %r (%s) due %s", event.name, event.id, event.target.isoformat())

        self._publish(EventAdded(event_id=event.id, index=self._selected_index))
        return event

    def remove(self, index: int) -> CountdownEvent | None:
        if not self._in_bounds(index):
            logger.debug("Ignoring remove of out-of-range index %d", index)
            return None

        event = self._events.pop(index)
        if not self._events:
            self._selected_index = 0
        elif self._selected_index >= index:
            self._selected_index = max(0, self._selected_index - 1)
        logger.info("Removed event %r (%s)", event.name, event.id)

        self._publish(
            EventRemoved(
                event_id=event.id, index=index, selected_index=self._selected_index
            )
        )
        return event

    def select(self, index: int) -> CountdownEvent | None:
        if not self._in_bounds(index):
            logger.debug("Ignoring select of out-of-range index %d", index)
            return None

        self._selected_index = index
        event = self._events[index]
        self._publish(EventSelected(event_id=event.id, index=index))
        return event

    def selected_event(self) -> CountdownEvent | None:
        if not self._events:
            return None
        return self._events[self._selected_index]

    def get(self, event_id: str) -> CountdownEvent | None:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def list_all(self) -> list[CountdownEvent]:
        return list(self._events)

    def snapshot(self) -> StoreState:
        return StoreState(
            events=self.list_all(),
            selected_index=self._selected_index,
            selected_event=self.selected_event(),
        )

    def clear(self) -> None:
        """Remove every event, last first, cancelling each reminder."""
        while self._events:
            self.remove(len(self._events) - 1)

    def _publish(self, event) -> None:
        if self._bus is not None:
            self._bus.publish(event)


class PendingNotificationRepository:
    """Dict-backed store of armed notifications, keyed by notification key."""

    def __init__(self) -> None:
        self._store: dict[str, ScheduledNotification] = {}

    def put(self, notification: ScheduledNotification) -> None:
        self._store[notification.key] = notification

    def get(self, key: str) -> ScheduledNotification | None:
        return self._store.get(key)

    def pop(self, key: str) -> ScheduledNotification | None:
        return self._store.pop(key, None)

    def list_all(self) -> list[ScheduledNotification]:
        return sorted(self._store.values(), key=lambda n: n.fire_at)

    def list_due(self, now: datetime) -> list[ScheduledNotification]:
        return [n for n in self.list_all() if n.fire_at <= now]
