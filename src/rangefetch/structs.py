from typing import NamedTuple


class ByteRange(NamedTuple):
    start: int
    end: int | None = None  # inclusive; None means "to the end of the resource"

    @property
    def header(self) -> str:
        if self.end is None:
            return f"bytes={self.start}-"
        return f"bytes={self.start}-{self.end}"

    @property
    def size(self) -> int | None:
        if self.end is None:
            return None
        return self.end - self.start + 1


class ThroughputSnapshot(NamedTuple):
    recent_windows: tuple[int, ...]
    total_bytes: int
    bytes_in_current_window: int = 0


class PartDownloadResult(NamedTuple):
    part_number: int
    byte_range: ByteRange
    bytes_transferred: int
    time_taken: float


class SummaryStats(NamedTuple):
    total_bytes: int
    total_time: float
    average_speed: int
    total_parts: int
