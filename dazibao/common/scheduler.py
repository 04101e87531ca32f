"""
Interval Scheduler for Block Polling

ScheduledLoop fires an async callback on a fixed grid of deadlines
(start, start + interval, start + 2*interval, ...) measured on the
monotonic clock. A tick that overruns its interval does not cause a burst
of catch-up ticks: the deadlines it missed are dropped and counted.

Usage:
    async def refresh_uptime():
        ...

    loop = ScheduledLoop(5.0, refresh_uptime, name="block-0:Uptime")
    await loop.start()
    ...
    await loop.wait_stopped()
"""

import asyncio
import time
from typing import Awaitable, Callable

from .logging_setup import get_service_logger

logger = get_service_logger("scheduler")

TickCallback = Callable[[], Awaitable[object]]


class ScheduledLoop:
    """
    Runs one callback on a fixed interval in its own task.

    Callback exceptions are logged and counted; they never end the loop.
    Cancellation (stop) interrupts an in-flight callback at its current
    await point.
    """

    def __init__(
        self,
        interval_seconds: float,
        callback: TickCallback,
        name: str = "unnamed",
        run_immediately: bool = True,
    ):
        """
        Args:
            interval_seconds: Seconds between deadlines (sub-second allowed)
            callback: Coroutine function run at every deadline
            name: Task name, also used in logs and stats
            run_immediately: First deadline is start time instead of start + interval
        """
        if interval_seconds <= 0:
            raise ValueError(f"Scheduler '{name}' interval must be positive, got {interval_seconds}")

        self.interval = interval_seconds
        self.callback = callback
        self.name = name
        self.run_immediately = run_immediately

        self._task: asyncio.Task | None = None
        self._deadline = 0.0

        self._ticks = 0
        self._failures = 0
        self._missed = 0
        self._lateness_total = 0.0
        self._lateness_last = 0.0
        self._tick_duration = 0.0

    async def start(self) -> None:
        """Spawn the loop task (no-op if already running)."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._loop(), name=f"scheduler:{self.name}")

    def stop(self) -> None:
        """Cancel the loop task without waiting for it."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()

    async def wait_stopped(self, task: asyncio.Task | None = None) -> None:
        """Cancel the loop task and wait until it has unwound."""
        task = task or self._task
        self.stop()
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _loop(self) -> None:
        self._deadline = time.monotonic()
        if not self.run_immediately:
            self._deadline += self.interval

        while True:
            delay = self._deadline - time.monotonic()
            if delay > 0:
                await asyncio.sleep(delay)

            lateness = time.monotonic() - self._deadline
            self._lateness_last = lateness
            self._lateness_total += max(0.0, lateness)

            await self._tick()
            self._advance_deadline()

    async def _tick(self) -> None:
        started = time.monotonic()
        try:
            await self.callback()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._failures += 1
            logger.error(f"Scheduled callback '{self.name}' error: {e}", exc_info=True)
        else:
            self._ticks += 1
        finally:
            self._tick_duration = time.monotonic() - started

    def _advance_deadline(self) -> None:
        """Move to the first deadline still in the future, counting the ones dropped."""
        now = time.monotonic()
        self._deadline += self.interval
        dropped = 0
        while self._deadline <= now:
            self._deadline += self.interval
            dropped += 1

        if dropped:
            self._missed += dropped
            logger.warning(
                f"Scheduler '{self.name}' skipped {dropped} intervals "
                f"(execution took {self._tick_duration:.3f}s)"
            )

    @property
    def skipped_count(self) -> int:
        """Deadlines dropped because a tick overran."""
        return self._missed

    @property
    def execution_count(self) -> int:
        """Ticks whose callback returned normally."""
        return self._ticks

    @property
    def error_count(self) -> int:
        """Ticks whose callback raised."""
        return self._failures

    def get_stats(self) -> dict:
        return {
            "name": self.name,
            "interval_s": self.interval,
            "running": self.is_running,
            "execution_count": self._ticks,
            "error_count": self._failures,
            "drift_total_s": round(self._lateness_total, 3),
            "drift_last_ms": round(self._lateness_last * 1000, 1),
            "skipped_count": self._missed,
            "last_execution_s": round(self._tick_duration, 3),
        }


class SchedulerGroup:
    """Named collection of loops started and stopped together."""

    def __init__(self):
        self._loops: dict[str, ScheduledLoop] = {}

    def add(self, name: str, interval_seconds: float, callback: TickCallback) -> ScheduledLoop:
        if name in self._loops:
            raise ValueError(f"Scheduler '{name}' already registered")
        loop = ScheduledLoop(interval_seconds, callback, name)
        self._loops[name] = loop
        return loop

    async def start_all(self) -> None:
        for loop in self._loops.values():
            await loop.start()

    async def stop_all(self) -> None:
        """Cancel every loop, then wait for all of them to unwind."""
        await asyncio.gather(*(loop.wait_stopped() for loop in self._loops.values()))

    def get_stats(self) -> dict:
        return {name: loop.get_stats() for name, loop in self._loops.items()}

    def get(self, name: str) -> ScheduledLoop | None:
        return self._loops.get(name)

    def __len__(self) -> int:
        return len(self._loops)
