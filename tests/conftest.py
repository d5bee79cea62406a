"""
Shared test fixtures and helpers.
"""

import re

import httpx
import pytest


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


async def _unsized_body(data: bytes):
    yield data


def range_handler(data: bytes, requests: list | None = None, metadata_headers: dict | None = None):
    """
    Build a MockTransport handler serving ``data`` with Range support.

    Requests without a Range header get the full body. When
    ``metadata_headers`` is given, that response carries exactly those
    headers and no Content-Length of its own.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)

        range_header = request.headers.get("Range")
        if range_header is None:
            if metadata_headers is not None:
                return httpx.Response(200, headers=metadata_headers, content=_unsized_body(data))
            return httpx.Response(200, headers={"Content-Length": str(len(data))}, content=data)

        match = re.fullmatch(r"bytes=(\d+)-(\d*)", range_header)
        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) else len(data) - 1
        return httpx.Response(206, content=data[start : end + 1])

    return handler


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def payload() -> bytes:
    """Deterministic 1 MB body."""
    return bytes(i % 251 for i in range(1_000_000))
