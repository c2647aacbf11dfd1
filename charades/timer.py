"""
Countdown timer for guessing turns.

Handles:
- Periodic "seconds remaining" ticks
- A single expiry notification
- Clean cancellation

The timer never sleeps or blocks. It arms one callback at a time on a
scheduler; an asyncio event loop is a valid scheduler, so by default every
tick and the expiry run on the loop's own thread.
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Protocol

from charades.errors import InvalidInput, InvalidState

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    """Anything that can run a callback later and return a cancellable handle."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Any:
        ...


def resolve_scheduler(scheduler: Optional[Scheduler] = None) -> Scheduler:
    """Return the given scheduler, else the running event loop."""
    if scheduler is not None:
        return scheduler
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        raise InvalidState("No scheduler given and no event loop is running") from None


def check_tick_interval(tick_interval_ms: int) -> None:
    if tick_interval_ms <= 0:
        raise InvalidInput("Tick interval must be positive")


class CountdownTimer:
    """
    Counts down a whole number of seconds.

    Ticks report the seconds remaining (rounded up) from the full duration
    down to 0 inclusive, then on_expire fires exactly once.
    """

    def __init__(self, duration_seconds: int, scheduler: Optional[Scheduler] = None):
        if duration_seconds < 0:
            raise InvalidInput("Countdown duration cannot be negative")
        self.duration = int(duration_seconds)
        self._scheduler = scheduler

        self._active_scheduler: Optional[Scheduler] = None
        self._handle: Any = None
        self._active = False
        self._generation = 0
        self._expired = False
        self._remaining_ms = self.duration * 1000
        self._pending_ms = 0
        self._tick_interval_ms = 1000
        self._on_tick: Optional[Callable[[int], None]] = None
        self._on_expire: Optional[Callable[[], None]] = None

    @property
    def is_running(self) -> bool:
        """Check if timer is currently running."""
        return self._active

    @property
    def expired(self) -> bool:
        return self._expired

    @property
    def remaining(self) -> int:
        """Get remaining seconds."""
        return -(-self._remaining_ms // 1000)

    def start(
        self,
        tick_interval_ms: int = 1000,
        on_tick: Optional[Callable[[int], None]] = None,
        on_expire: Optional[Callable[[], None]] = None,
    ) -> None:
        """Start (or restart) the countdown. The first tick is delivered asynchronously."""
        check_tick_interval(tick_interval_ms)
        scheduler = resolve_scheduler(self._scheduler)

        self.cancel()

        self._generation += 1
        self._active_scheduler = scheduler
        self._tick_interval_ms = int(tick_interval_ms)
        self._remaining_ms = self.duration * 1000
        self._pending_ms = 0
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._expired = False
        self._active = True

        logger.debug("Countdown started: %ss, tick every %sms", self.duration, tick_interval_ms)
        self._schedule(0)

    def cancel(self) -> None:
        """Cancel the timer. Safe to call when not running."""
        if self._active:
            logger.debug("Countdown cancelled with %ss left", self.remaining)
        self._active = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self, delay_ms: int) -> None:
        generation = self._generation
        self._handle = self._active_scheduler.call_later(
            delay_ms / 1000, lambda: self._step(generation)
        )

    def _step(self, generation: int) -> None:
        # A step queued before cancel() or a restart must not reach the callbacks
        if not self._active or generation != self._generation:
            return
        self._handle = None
        self._remaining_ms -= self._pending_ms
        self._pending_ms = 0

        if self._on_tick:
            self._on_tick(self.remaining)
        if not self._active or generation != self._generation:
            return

        if self._remaining_ms <= 0:
            self._active = False
            self._expired = True
            logger.debug("Countdown expired")
            if self._on_expire:
                self._on_expire()
            return

        self._pending_ms = min(self._tick_interval_ms, self._remaining_ms)
        self._schedule(self._pending_ms)
