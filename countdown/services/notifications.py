"""Service for arming, cancelling and firing one-shot event reminders."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol

from countdown.domain.models import (
    CountdownEvent,
    NotificationAuthorization,
    ScheduledNotification,
    as_utc,
)
from countdown.repos.memory import PendingNotificationRepository

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Event Reminder"


def reminder_body(event: CountdownEvent) -> str:
    return f"{event.name} event has started!"


class NotificationScheduler(Protocol):
    """Local-notification service keyed by event id.

    At most one alert is armed per key: scheduling again replaces it.
    Cancelling a key with nothing armed is a no-op.
    """

    def request_authorization(self) -> NotificationAuthorization: ...

    def schedule_one_shot(
        self, key: str, fire_at: datetime, title: str, body: str
    ) -> ScheduledNotification: ...

    def cancel(self, key: str) -> None: ...


class LocalNotificationCenter:
    """In-process notification scheduler.

    Armed alerts wait in *pending_repo* until :meth:`deliver_due` sees their
    fire time.  If the user denied authorization, due alerts are discarded
    without being shown; callers are never told either way.
    """

    def __init__(
        self,
        pending_repo: PendingNotificationRepository,
        allow: bool = True,
    ) -> None:
        self.pending_repo = pending_repo
        self._allow = allow
        self.authorization = NotificationAuthorization.NOT_DETERMINED

    def request_authorization(self) -> NotificationAuthorization:
        if self.authorization == NotificationAuthorization.NOT_DETERMINED:
            self.authorization = (
                NotificationAuthorization.GRANTED
                if self._allow
                else NotificationAuthorization.DENIED
            )
            logger.info("Notification authorization: %s", self.authorization)
        return self.authorization

    def schedule_one_shot(
        self, key: str, fire_at: datetime, title: str, body: str
    ) -> ScheduledNotification:
        notification = ScheduledNotification(
            key=key, fire_at=as_utc(fire_at), title=title, body=body
        )
        if self.pending_repo.get(key) is not None:
            logger.info("Replacing notification %s", key)
        self.pending_repo.put(notification)
        logger.info("Scheduled notification %s for %s", key, notification.fire_at.isoformat())
        return notification

    def cancel(self, key: str) -> None:
        if self.pending_repo.pop(key) is not None:
            logger.info("Cancelled notification %s", key)

    def deliver_due(self, now: datetime) -> list[ScheduledNotification]:
        """Fire every pending alert whose time has come.

        Returns the alerts actually shown (empty when authorization was
        denied).
        """
        delivered: list[ScheduledNotification] = []
        for notification in self.pending_repo.list_due(as_utc(now)):
            if self.pending_repo.pop(notification.key) is None:
                continue
            if self.authorization != NotificationAuthorization.GRANTED:
                logger.debug("Dropping notification %s: not authorized", notification.key)
                continue
            delivered.append(notification)
            logger.info("%s: %s", notification.title, notification.body)
        return delivered


def schedule_event_reminder(
    scheduler: NotificationScheduler,
    event: CountdownEvent,
    title: str = DEFAULT_TITLE,
) -> ScheduledNotification:
    """Arm the single start-time reminder for *event*, keyed by its id."""
    return scheduler.schedule_one_shot(
        key=event.id,
        fire_at=event.target,
        title=title,
        body=reminder_body(event),
    )
