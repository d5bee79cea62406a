#!/usr/bin/env python3
"""
rangefetch

Download a single HTTP resource over several concurrent range requests and
report a smoothed throughput estimate while the transfer runs.
"""

import logging
import os
import re
import time
from collections.abc import Callable
import httpx

from rangefetch.constants import REPORT_INTERVAL
from rangefetch.download import AsyncDownloader
from rangefetch.errors import SizeUnavailable, TransferError
from rangefetch.reporter import ProgressReporter
from rangefetch.structs import SummaryStats
from rangefetch.utils import (
    ThroughputMonitor,
    average_speed,
    calculate_ranges,
    format_size,
    format_summary_line,
)

logger = logging.getLogger(__name__)


def create_client() -> httpx.AsyncClient:
    """Create the streaming client shared by the metadata request and all workers."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(None),
        follow_redirects=True,
        headers={"Accept-Encoding": "identity"},
    )


def default_worker_count() -> int:
    return os.cpu_count() or 1


def parse_content_length(value: str | None) -> int:
    """
    Validate a Content-Length header value.

    Args:
        value: Raw header value, or None if the header was absent

    Returns:
        Content length in bytes

    Raises:
        SizeUnavailable: If the value is missing or not a non-negative integer
    """
    if value is None:
        raise SizeUnavailable("Server did not report a Content-Length")

    if not re.fullmatch(r"[0-9]+", value.strip()):
        raise SizeUnavailable(f"Invalid Content-Length: {value!r}")

    return int(value.strip())


async def get_content_length(client: httpx.AsyncClient, url: str) -> int:
    """
    Issue a GET for the resource and read its Content-Length.

    The body is never read; the response is closed once headers arrive.
    """
    try:
        async with client.stream("GET", url) as response:
            response.raise_for_status()
            return parse_content_length(response.headers.get("Content-Length"))
    except httpx.HTTPError as exc:
        raise TransferError(f"Error requesting {url}: {exc}") from exc


async def run_download(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    workers: int | None = None,
    clock: Callable[[], float] = time.monotonic,
    emit: Callable[[str], None] = print,
    report_interval: float = REPORT_INTERVAL,
) -> SummaryStats:
    """
    Download ``url`` in parallel ranges and print the final summary.

    Args:
        url: Resource URL
        client: Optional httpx.AsyncClient; it is left open if given
        workers: Worker count, defaults to the number of CPUs
        clock: Monotonic time source for the throughput monitor
        emit: Sink for status and summary lines
        report_interval: Seconds between status lines

    Returns:
        SummaryStats for the transfer
    """
    owns_client = client is None
    if owns_client:
        client = create_client()

    try:
        return await _run_download(
            client,
            url,
            workers=workers or default_worker_count(),
            clock=clock,
            emit=emit,
            report_interval=report_interval,
        )
    finally:
        if owns_client:
            await client.aclose()


async def _run_download(client, url, *, workers, clock, emit, report_interval):
    start_time = time.monotonic()

    content_length = await get_content_length(client, url)
    logger.info("Content length: %s (%d bytes)", format_size(content_length), content_length)

    ranges = calculate_ranges(content_length, workers)
    logger.info("Downloading in %d parts", len(ranges))
    for i, byte_range in enumerate(ranges):
        logger.debug("Part %d assigned %s", i, byte_range.header)

    # The first window opens here and nowhere else
    monitor = ThroughputMonitor(clock=clock)
    monitor.start()

    reporter = ProgressReporter(monitor, interval=report_interval, emit=emit)
    reporter.start()

    downloader = AsyncDownloader(client, monitor, content_length=content_length)
    try:
        results = await downloader.download_all(url, ranges)
    finally:
        await reporter.stop()

    for result in results:
        logger.info(
            "Part %d %s: %s in %.2f seconds",
            result.part_number,
            result.byte_range.header,
            format_size(result.bytes_transferred),
            result.time_taken,
        )

    snapshot = await monitor.snapshot()
    summary_stats = SummaryStats(
        total_bytes=snapshot.total_bytes,
        total_time=time.monotonic() - start_time,
        average_speed=average_speed(snapshot.recent_windows),
        total_parts=len(ranges),
    )
    print_summary(summary_stats, emit)

    return summary_stats


def print_summary(summary_stats: SummaryStats, emit: Callable[[str], None] = print):
    emit(format_summary_line(summary_stats.total_bytes, summary_stats.average_speed))
    logger.debug(
        "%d parts finished in %.2f seconds",
        summary_stats.total_parts,
        summary_stats.total_time,
    )
