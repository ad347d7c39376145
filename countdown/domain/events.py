"""Domain events emitted as the store changes and the clock ticks."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class EventAdded(BaseModel):
    """Fired after a new CountdownEvent is appended to the store."""

    event_id: str
    index: int


class EventRemoved(BaseModel):
    """Fired after an event is removed; carries the id for notification cleanup."""

    event_id: str
    index: int
    selected_index: int


class EventSelected(BaseModel):
    """Fired when the user switches the displayed event."""

    event_id: str
    index: int


class ClockTicked(BaseModel):
    """Fired once per tick of the clock source."""

    now: datetime


class NotificationDelivered(BaseModel):
    """Fired when a scheduled alert reaches its fire time and is shown."""

    key: str
    delivered_at: datetime
