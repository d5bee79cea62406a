import asyncio
import time
from collections import deque
from collections.abc import Callable, Iterable
from datetime import datetime
from rangefetch.constants import KB, MB, TIMESTAMP_FORMAT, WINDOW_CAPACITY, WINDOW_SECONDS
from rangefetch.structs import ByteRange, ThroughputSnapshot


class ThroughputMonitor:
    """Track received bytes in one-second windows behind a single lock."""

    def __init__(
        self,
        window_seconds: float = WINDOW_SECONDS,
        window_capacity: int = WINDOW_CAPACITY,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the monitor.

        Args:
            window_seconds: Minimum age of the open window before it is closed
            window_capacity: Number of closed windows kept for the average
            clock: Monotonic time source in seconds
        """
        self.window_seconds = window_seconds
        self.clock = clock
        self.bytes_in_current_window = 0
        self.recent_windows: deque[int] = deque(maxlen=window_capacity)
        self.window_start = clock()
        self.total_bytes = 0
        self.lock = asyncio.Lock()

    def start(self):
        """Open the first window. Only the orchestrator calls this, before any worker runs."""
        self.window_start = self.clock()

    async def record(self, n: int):
        """
        Account for a received chunk.

        The open window is closed only when a call observes that it has been
        open for at least ``window_seconds``; there is no timer, so windows
        can span more than one second when chunks arrive sparsely.

        Args:
            n: Length of the chunk in bytes
        """
        async with self.lock:
            self.total_bytes += n

            now = self.clock()
            if now - self.window_start >= self.window_seconds:
                # deque(maxlen=...) evicts the oldest entry on overflow
                self.recent_windows.append(self.bytes_in_current_window)
                self.bytes_in_current_window = 0
                self.window_start = now

            self.bytes_in_current_window += n

    async def snapshot(self) -> ThroughputSnapshot:
        """Return a consistent copy of the counters."""
        async with self.lock:
            return ThroughputSnapshot(
                recent_windows=tuple(self.recent_windows),
                total_bytes=self.total_bytes,
                bytes_in_current_window=self.bytes_in_current_window,
            )


def average_speed(windows: Iterable[int]) -> int:
    """Integer average of closed window sums, 0 when there are none."""
    windows = list(windows)
    return sum(windows) // max(len(windows), 1)


def calculate_ranges(content_length: int, workers: int) -> list[ByteRange]:
    """
    Split a resource into one contiguous range per worker.

    Every range but the last is ``content_length // workers`` bytes long.
    The last range is open-ended and absorbs the remainder.

    Args:
        content_length: Total size of the resource in bytes
        workers: Number of workers

    Returns:
        List of ByteRange, ordered by start offset
    """
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    if content_length <= 0:
        return []

    # Never hand out empty ranges
    workers = min(workers, content_length)
    chunk_size = content_length // workers

    ranges = []
    for i in range(workers):
        start = i * chunk_size
        end = None if i == workers - 1 else (i + 1) * chunk_size - 1
        ranges.append(ByteRange(start, end))

    return ranges


def format_size(size: int) -> str:
    """
    Format size in bytes to human-readable format.

    Args:
        size: Size in bytes

    Returns:
        Formatted size string
    """
    units = ["B", "KB", "MB", "GB", "TB"]
    unit_index = 0

    while size >= 1024 and unit_index < len(units) - 1:
        size /= 1024
        unit_index += 1

    return f"{size:.2f} {units[unit_index]}"


def format_speed_units(speed: int) -> str:
    """Render a byte rate as B/s, KB/s and MB/s using integer division."""
    return f"{speed} B/s, {speed // KB} KB/s, {speed // MB} MB/s"


def format_status_line(speed: int, now: datetime) -> str:
    return f"[{now.strftime(TIMESTAMP_FORMAT)}] Average speed: {format_speed_units(speed)}"


def format_summary_line(total_bytes: int, speed: int) -> str:
    return (
        f"Download completed: {total_bytes} bytes downloaded "
        f"at an average speed of {format_speed_units(speed)}"
    )
