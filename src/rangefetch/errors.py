class RangeFetchError(Exception):
    """Base class for every fatal rangefetch failure."""


class ArgumentError(RangeFetchError):
    """Required input is missing or cannot be parsed."""


class SizeUnavailable(RangeFetchError):
    """The server did not report a usable Content-Length."""


class TransferError(RangeFetchError):
    """A request, response or body stream failed."""
