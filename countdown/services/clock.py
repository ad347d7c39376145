"""Clock tick source driving countdown refresh and reminder delivery."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Ticker:
    """Repeating timer that calls *callback* with the current instant.

    Runs as a background task on the running asyncio loop.  Ticks only
    serialize with request handling when the handlers are coroutines on that
    same loop.  ``now`` always holds the instant of the most recent tick.
    """

    def __init__(
        self,
        callback: Callable[[datetime], None],
        interval: float = 1.0,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._callback = callback
        self.interval = interval
        self._clock = clock
        self.now: datetime = clock()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self, now: datetime | None = None) -> datetime:
        """Run one tick immediately, using *now* if given."""
        self.now = now or self._clock()
        self._callback(self.now)
        return self.now

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Ticker started (interval: %ss)", self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Ticker stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.tick()
            except Exception:
                # Keep ticking after a failed callback.
                logger.exception("Error in tick callback")
