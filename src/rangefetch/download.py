import asyncio
import logging
import time
import httpx

from rangefetch.constants import STREAM_CHUNK_SIZE
from rangefetch.errors import TransferError
from rangefetch.structs import ByteRange, PartDownloadResult
from rangefetch.utils import ThroughputMonitor

logger = logging.getLogger(__name__)


class AsyncDownloader:
    """Download byte ranges of one URL in parallel using asyncio and httpx."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        monitor: ThroughputMonitor,
        content_length: int | None = None,
    ):
        """
        Initialize with a shared client and throughput monitor.

        Args:
            client: httpx.AsyncClient shared by every worker
            monitor: ThroughputMonitor that receives every chunk length
            content_length: Size of the resource, used to check open-ended ranges
        """
        self.client = client
        self.monitor = monitor
        self.content_length = content_length

    def expected_size(self, byte_range: ByteRange) -> int | None:
        if byte_range.end is None and self.content_length is not None:
            return self.content_length - byte_range.start
        return byte_range.size

    async def download_range(
        self, url: str, byte_range: ByteRange, part_number: int
    ) -> PartDownloadResult:
        """
        Stream a single range, recording each chunk as it arrives.

        Args:
            url: Resource URL
            byte_range: Range owned by this worker
            part_number: Part number for tracking

        Returns:
            PartDownloadResult with transfer metrics

        Raises:
            TransferError: If the request, the response or the stream fails
        """
        start_time = time.monotonic()
        total_bytes = 0
        headers = {"Range": byte_range.header}
        logger.debug("Part %d: requesting %s", part_number, byte_range.header)

        try:
            async with self.client.stream("GET", url, headers=headers) as response:
                response.raise_for_status()

                async for chunk in response.aiter_bytes(chunk_size=STREAM_CHUNK_SIZE):
                    total_bytes += len(chunk)
                    await self.monitor.record(len(chunk))

        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise TransferError(
                f"Error downloading part {part_number} ({byte_range.header}): {exc}"
            ) from exc

        expected = self.expected_size(byte_range)
        if expected is not None and total_bytes != expected:
            raise TransferError(
                f"Error downloading part {part_number} ({byte_range.header}): "
                f"expected {expected} bytes, received {total_bytes}"
            )

        time_taken = time.monotonic() - start_time
        logger.debug(
            "Part %d: %d bytes in %.2f seconds", part_number, total_bytes, time_taken
        )

        return PartDownloadResult(
            part_number=part_number,
            byte_range=byte_range,
            bytes_transferred=total_bytes,
            time_taken=time_taken,
        )

    async def download_all(
        self, url: str, ranges: list[ByteRange]
    ) -> list[PartDownloadResult]:
        """
        Download all ranges concurrently, failing on the first error.

        Workers still running when one fails are cancelled before the
        error is re-raised.

        Args:
            url: Resource URL
            ranges: One ByteRange per worker

        Returns:
            List of download results, in range order
        """
        tasks = [
            asyncio.create_task(self.download_range(url, byte_range, i))
            for i, byte_range in enumerate(ranges)
        ]

        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
