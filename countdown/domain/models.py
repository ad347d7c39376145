"""Domain models for the countdown service."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

try:
    from enum import StrEnum
except ImportError:  # pragma: no cover - fallback for older Python runtimes

    class StrEnum(str, Enum):
        pass


class NotificationAuthorization(StrEnum):
    NOT_DETERMINED = "not_determined"
    GRANTED = "granted"
    DENIED = "denied"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def as_utc(value: datetime) -> datetime:
    """Return *value* as an aware datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class CountdownEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    name: str = Field(min_length=1)
    target: datetime
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("target")
    @classmethod
    def _aware_target(cls, value: datetime) -> datetime:
        return as_utc(value)


_UNIT_LABELS = ("DAYS", "HRS", "MIN", "SEC")


class TimeUnit(BaseModel):
    label: str
    value: str


class TimeRemaining(BaseModel):
    """Non-negative time left until a target, split into display units."""

    model_config = ConfigDict(frozen=True)

    days: int = Field(default=0, ge=0)
    hours: int = Field(default=0, ge=0, lt=24)
    minutes: int = Field(default=0, ge=0, lt=60)
    seconds: int = Field(default=0, ge=0, lt=60)

    @property
    def is_zero(self) -> bool:
        return not (self.days or self.hours or self.minutes or self.seconds)

    def units(self) -> list[TimeUnit]:
        values = (self.days, self.hours, self.minutes, self.seconds)
        return [
            TimeUnit(label=label, value=f"{value:02d}")
            for label, value in zip(_UNIT_LABELS, values)
        ]


class ScheduledNotification(BaseModel):
    key: str
    fire_at: datetime
    title: str
    body: str
    sound: bool = True
    scheduled_at: datetime = Field(default_factory=_utcnow)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class AddEventRequest(BaseModel):
    # Empty names are accepted here and ignored by the store.
    name: str = ""
    target: datetime | None = None


class StoreState(BaseModel):
    events: list[CountdownEvent]
    selected_index: int
    selected_event: CountdownEvent | None = None


class CountdownResponse(BaseModel):
    event: CountdownEvent | None = None
    remaining: TimeRemaining
    units: list[TimeUnit]
    now: datetime


class FormDefaults(BaseModel):
    min_target: datetime
    default_target: datetime


class TickResponse(BaseModel):
    time: datetime
    notifications_delivered: list[str]
