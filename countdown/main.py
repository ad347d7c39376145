"""FastAPI application — entry point for the countdown service."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

from fastapi import FastAPI

from countdown.config import configure_logging, load_settings
from countdown.domain.bus import EventBus
from countdown.domain.events import ClockTicked, NotificationDelivered
from countdown.domain.handlers import HandlerRegistry
from countdown.domain.models import (
    AddEventRequest,
    CountdownResponse,
    FormDefaults,
    ScheduledNotification,
    StoreState,
    TickResponse,
    TimeRemaining,
    as_utc,
)
from countdown.repos.memory import EventStore, PendingNotificationRepository
from countdown.services.clock import Ticker
from countdown.services.countdown import default_target, time_remaining
from countdown.services.notifications import LocalNotificationCenter

settings = load_settings()
configure_logging(settings.log_level)

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
event_store = EventStore(bus=event_bus)
pending_notification_repo = PendingNotificationRepository()
notification_center = LocalNotificationCenter(
    pending_repo=pending_notification_repo,
    allow=settings.notifications_allowed,
)

handler_registry = HandlerRegistry(
    bus=event_bus,
    event_store=event_store,
    notification_center=notification_center,
    notification_title=settings.notification_title,
)


def _publish_tick(now: datetime) -> None:
    event_bus.publish(ClockTicked(now=now))


ticker = Ticker(_publish_tick, interval=settings.tick_interval)


@asynccontextmanager
async def lifespan(_: FastAPI):
    notification_center.request_authorization()
    ticker.start()
    try:
        yield
    finally:
        await ticker.stop()


app = FastAPI(title="Countdown Service", lifespan=lifespan)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _default_lead() -> timedelta:
    return timedelta(minutes=settings.default_lead_minutes)


# ── Routes ────────────────────────────────────────────────────────────
# Coroutines, so requests run on the event loop alongside the ticker and
# never interleave with a tick.


@app.get("/events", response_model=StoreState)
async def list_events() -> StoreState:
    """Return all events and the current selection."""
    return event_store.snapshot()


@app.post("/events", response_model=StoreState)
async def add_event(payload: AddEventRequest) -> StoreState:
    """Append a new event and select it.  An empty name changes nothing."""
    target = payload.target or default_target(_utcnow(), _default_lead())
    event_store.add(payload.name, target)
    return event_store.snapshot()


@app.delete("/events/{index}", response_model=StoreState)
async def remove_event(index: int) -> StoreState:
    """Remove the event at *index* and cancel its reminder."""
    event_store.remove(index)
    return event_store.snapshot()


@app.post("/events/{index}/select", response_model=StoreState)
async def select_event(index: int) -> StoreState:
    """Make the event at *index* the one shown in the countdown."""
    event_store.select(index)
    return event_store.snapshot()


@app.get("/countdown", response_model=CountdownResponse)
async def get_countdown(now: datetime | None = None) -> CountdownResponse:
    """Time left until the selected event, as of *now* or the last clock tick."""
    current_time = as_utc(now) if now else ticker.now
    event = event_store.selected_event()
    remaining = (
        time_remaining(event.target, current_time) if event else TimeRemaining()
    )
    return CountdownResponse(
        event=event, remaining=remaining, units=remaining.units(), now=current_time
    )


@app.get("/form-defaults", response_model=FormDefaults)
async def form_defaults() -> FormDefaults:
    """Bounds and pre-filled value for the add-event date picker."""
    now = _utcnow()
    return FormDefaults(
        min_target=now, default_target=default_target(now, _default_lead())
    )


@app.get("/notifications", response_model=list[ScheduledNotification])
async def list_notifications() -> list[ScheduledNotification]:
    """Return the armed reminders, soonest first."""
    return pending_notification_repo.list_all()


@app.post("/tick", response_model=TickResponse)
async def tick(now: datetime | None = None) -> TickResponse:
    """Advance the clock by one tick and fire any due reminders.

    Pass *now* as a query param to control the simulated clock.
    Defaults to ``datetime.now(timezone.utc)`` when omitted.
    """
    delivered: list[str] = []

    def _collect(event: NotificationDelivered) -> None:
        delivered.append(event.key)

    event_bus.subscribe(NotificationDelivered, _collect)
    try:
        current_time = ticker.tick(as_utc(now) if now else None)
    finally:
        event_bus.unsubscribe(NotificationDelivered, _collect)
    return TickResponse(time=current_time, notifications_delivered=delivered)
