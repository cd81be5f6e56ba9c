"""PriceScheduler: Runs aggregation cycles on a fixed interval.

The delay is measured from the end of one cycle to the start of the next, so
cycles never overlap and there is a single writer to PublishedState. The loop
runs as an asyncio task with an explicit start/stop lifecycle; run_once()
executes a single cycle without waiting on the interval.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import logging
from typing import TYPE_CHECKING

from .fetchers import BaseFetcher

if TYPE_CHECKING:
    from .AggregationCycle import AggregationCycle
    from .PublishedState import CycleResult

logger = logging.getLogger(__name__)

# Seconds between the end of one cycle and the start of the next.
DEFAULT_INTERVAL = 120.0


class SchedulerState(enum.Enum):
    """Lifecycle states of the scheduler loop."""

    IDLE = "idle"
    RUNNING = "running"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


class PriceScheduler:
    """Drives an AggregationCycle forever.

    :ivar cycle: The cycle to run.
    :ivar interval: Seconds to sleep between cycles.
    :ivar state: Current lifecycle state.
    :ivar cycles_run: Number of cycles started.
    """

    def __init__(self, cycle: AggregationCycle, interval: float = DEFAULT_INTERVAL) -> None:
        """Initialize the scheduler.

        :param cycle: Aggregation cycle to run.
        :param interval: Seconds between cycles (default: 120).
        :raises ValueError: If interval is not positive.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.cycle = cycle
        self.interval = interval
        self.state = SchedulerState.IDLE
        self.cycles_run = 0
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        """Check if the loop task is alive."""
        return self._task is not None and not self._task.done()

    async def run_once(self) -> CycleResult | None:
        """Run a single cycle, never raising.

        :returns: The published result, or None if nothing was published.
        """
        self.cycles_run += 1
        try:
            return await self.cycle.run_cycle()
        except Exception:
            logger.exception(f"Cycle {self.cycles_run} failed")
            return None

    async def run(self) -> None:
        """Run cycles until stop() is called."""
        logger.info(
            f"Starting price loop: {len(self.cycle.fetchers)} sources, "
            f"interval {self.interval}s"
        )
        if self._stop_event is None:
            self._stop_event = asyncio.Event()
        stop_event = self._stop_event
        try:
            while not stop_event.is_set():
                self.state = SchedulerState.RUNNING
                await self.run_once()

                self.state = SchedulerState.SLEEPING
                with contextlib.suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
        finally:
            self.state = SchedulerState.STOPPED
            # Clean up shared HTTP client
            await BaseFetcher.close_shared_client()
            logger.info(f"Price loop stopped after {self.cycles_run} cycles")

    def start(self) -> asyncio.Task:
        """Start the loop as a background task on the running event loop.

        :returns: The loop task.
        :raises RuntimeError: If the loop is already running.
        """
        if self.is_running:
            raise RuntimeError("Scheduler already running")
        # asyncio.Event binds to the loop that first waits on it
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self.run(), name="price-scheduler")
        return self._task

    async def stop(self) -> None:
        """Stop the loop.

        A sleeping loop exits at once; an in-flight cycle is cancelled.
        """
        if self._stop_event is not None:
            self._stop_event.set()
        task = self._task
        if task is None:
            self.state = SchedulerState.STOPPED
            return

        if self.state is SchedulerState.RUNNING:
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._task = None
