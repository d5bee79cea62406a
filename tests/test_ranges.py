"""
Tests for splitting a resource into per-worker byte ranges.
"""

import pytest

from rangefetch.structs import ByteRange
from rangefetch.utils import calculate_ranges


class TestCalculateRanges:
    def test_four_workers_one_megabyte(self):
        ranges = calculate_ranges(1_000_000, 4)
        assert ranges == [
            ByteRange(0, 249_999),
            ByteRange(250_000, 499_999),
            ByteRange(500_000, 749_999),
            ByteRange(750_000, None),
        ]

    def test_remainder_goes_to_last_worker(self):
        ranges = calculate_ranges(10, 3)
        assert ranges == [ByteRange(0, 2), ByteRange(3, 5), ByteRange(6, None)]

    def test_single_worker_is_open_ended(self):
        assert calculate_ranges(123, 1) == [ByteRange(0, None)]

    @pytest.mark.parametrize("length", [1, 2, 7, 64, 999, 1_000_000, 1_000_003])
    @pytest.mark.parametrize("workers", [1, 2, 3, 4, 8, 16, 33])
    def test_partition_is_exact(self, length, workers):
        ranges = calculate_ranges(length, workers)

        assert ranges[0].start == 0
        assert all(r.end is not None for r in ranges[:-1])
        assert ranges[-1].end is None

        for previous, current in zip(ranges, ranges[1:]):
            assert current.start == previous.end + 1

        covered = sum(r.size for r in ranges[:-1]) + (length - ranges[-1].start)
        assert covered == length
        assert all((r.size or length - r.start) > 0 for r in ranges)

    def test_more_workers_than_bytes(self):
        ranges = calculate_ranges(3, 8)
        assert ranges == [ByteRange(0, 0), ByteRange(1, 1), ByteRange(2, None)]

    def test_empty_resource_has_no_ranges(self):
        assert calculate_ranges(0, 4) == []

    def test_zero_workers_rejected(self):
        with pytest.raises(ValueError):
            calculate_ranges(100, 0)


class TestByteRange:
    def test_bounded_header(self):
        assert ByteRange(0, 249_999).header == "bytes=0-249999"
        assert ByteRange(0, 249_999).size == 250_000

    def test_open_ended_header(self):
        assert ByteRange(750_000).header == "bytes=750000-"
        assert ByteRange(750_000).size is None
