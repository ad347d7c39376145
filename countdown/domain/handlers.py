"""Domain event handlers — wired up at application startup."""

from __future__ import annotations

from countdown.domain.bus import EventBus
from countdown.domain.events import (
    ClockTicked,
    EventAdded,
    EventRemoved,
    NotificationDelivered,
)
from countdown.repos.memory import EventStore
from countdown.services.notifications import (
    DEFAULT_TITLE,
    LocalNotificationCenter,
    schedule_event_reminder,
)


class HandlerRegistry:
    """Wires domain-event handlers to the bus with access to the store and scheduler."""

    def __init__(
        self,
        bus: EventBus,
        event_store: EventStore,
        notification_center: LocalNotificationCenter,
        notification_title: str = DEFAULT_TITLE,
    ) -> None:
        self.bus = bus
        self.event_store = event_store
        self.notification_center = notification_center
        self.notification_title = notification_title
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(EventAdded, self.on_event_added)
        self.bus.subscribe(EventRemoved, self.on_event_removed)
        self.bus.subscribe(ClockTicked, self.on_clock_ticked)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_event_added(self, event: EventAdded) -> None:
        stored = self.event_store.get(event.event_id)
        if stored is None:
            return

        schedule_event_reminder(
            self.notification_center, stored, title=self.notification_title
        )

    def on_event_removed(self, event: EventRemoved) -> None:
        self.notification_center.cancel(event.event_id)

    def on_clock_ticked(self, event: ClockTicked) -> None:
        for notification in self.notification_center.deliver_due(event.now):
            self.bus.publish(
                NotificationDelivered(key=notification.key, delivered_at=event.now)
            )
