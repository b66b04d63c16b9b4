"""Time capabilities used by the issuer and the publish loop.

Both are protocols so tests can drive token ageing and pacing without
real sleeps.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Protocol

from pyiotcore.exceptions import IotCorePublishInterruptedError


class Clock(Protocol):
    """Wall-clock source returning timezone-aware UTC datetimes."""

    def now(self) -> datetime: ...


class Sleeper(Protocol):
    """Suspends the calling task between publishes."""

    async def pause(self, seconds: float) -> None: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(UTC)


class EventSleeper:
    """``asyncio`` sleeper that wakes up early when *cancel_event* is set.

    An early wake-up raises :class:`IotCorePublishInterruptedError` so the
    run aborts instead of silently skipping the pacing delay.
    """

    def __init__(self, cancel_event: asyncio.Event | None = None) -> None:
        self._cancel_event = cancel_event

    async def pause(self, seconds: float) -> None:
        if self._cancel_event is None:
            await asyncio.sleep(seconds)
            return
        try:
            await asyncio.wait_for(self._cancel_event.wait(), timeout=seconds)
        except TimeoutError:
            return
        raise IotCorePublishInterruptedError("Pacing delay interrupted by cancellation")
