"""
Tickers drive the update loop.

A ticker blocks until either the next tick is due or the stop event is set,
whichever comes first.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional


class Ticker(ABC):
    """Abstract tick source."""

    @abstractmethod
    async def wait(self, stop_event: asyncio.Event) -> bool:
        """
        Wait for the next tick.

        Args:
            stop_event: Event signalling that the loop should stop.

        Returns:
            True on a tick, False if the stop event was set first.
        """
        pass


class IntervalTicker(Ticker):
    """
    Fixed-interval ticker.

    Ticks that fall due while the caller is busy collapse into a single
    immediate tick, so a slow sweep never causes a burst of sweeps.
    """

    def __init__(
        self, interval: float, clock: Callable[[], float] = time.monotonic
    ):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self._clock = clock
        self._deadline: Optional[float] = None

    async def wait(self, stop_event: asyncio.Event) -> bool:
        if stop_event.is_set():
            return False

        now = self._clock()
        if self._deadline is None:
            self._deadline = now + self.interval

        delay = self._deadline - now
        if delay > 0:
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=delay)
                return False
            except asyncio.TimeoutError:
                pass

        now = self._clock()
        while self._deadline <= now:
            self._deadline += self.interval
        return True
