import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from rangefetch.constants import REPORT_INTERVAL
from rangefetch.utils import ThroughputMonitor, average_speed, format_status_line

logger = logging.getLogger(__name__)


class ProgressReporter:
    """Print the rolling average speed on a fixed period until stopped."""

    def __init__(
        self,
        monitor: ThroughputMonitor,
        interval: float = REPORT_INTERVAL,
        emit: Callable[[str], None] = print,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.monitor = monitor
        self.interval = interval
        self.emit = emit
        self.now = now
        self._stop = asyncio.Event()
        self._task: asyncio.Task | None = None

    async def tick(self) -> str:
        """Read the monitor once and emit a status line."""
        snapshot = await self.monitor.snapshot()
        line = format_status_line(average_speed(snapshot.recent_windows), self.now())
        self.emit(line)
        return line

    async def run(self):
        # The stop flag is only checked between ticks, so a started tick always completes
        while not self._stop.is_set():
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                await self.tick()

    def start(self) -> asyncio.Task:
        self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self):
        """
        Signal the loop to exit and wait for it.

        A failed tick is logged rather than raised, so it never masks the
        error that ended the download.
        """
        self._stop.set()
        if self._task is None:
            return

        task, self._task = self._task, None
        try:
            await task
        except Exception:
            logger.exception("Progress reporter failed")
