"""Service for computing the time left until an event."""

from __future__ import annotations

from datetime import datetime, timedelta

from countdown.domain.models import TimeRemaining, as_utc

_SECONDS_PER_DAY = 86400
_SECONDS_PER_HOUR = 3600
_SECONDS_PER_MINUTE = 60

DEFAULT_LEAD = timedelta(hours=1)


def time_remaining(target: datetime, now: datetime) -> TimeRemaining:
    """Return the non-negative time from *now* until *target*.

    Fractional seconds are truncated.  Once *target* has passed every field
    is zero; there is no overdue display.
    """
    diff = max(int((as_utc(target) - as_utc(now)).total_seconds()), 0)
    return TimeRemaining(
        days=diff // _SECONDS_PER_DAY,
        hours=diff // _SECONDS_PER_HOUR % 24,
        minutes=diff // _SECONDS_PER_MINUTE % 60,
        seconds=diff % 60,
    )


def default_target(now: datetime, lead: timedelta = DEFAULT_LEAD) -> datetime:
    """Target pre-filled in the add-event form."""
    return as_utc(now) + lead
