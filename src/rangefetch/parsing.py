import argparse
from urllib.parse import urlparse

from rangefetch.errors import ArgumentError


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises ArgumentError instead of exiting."""

    def error(self, message):
        raise ArgumentError(message)


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = ArgumentParser(
        prog="rangefetch",
        description="Download a file over parallel HTTP range requests and report throughput.",
    )

    parser.add_argument("url", help="URL of the resource to download")

    parser.add_argument("--debug", action="store_true", help="Enable debug output")

    args = parser.parse_args(argv)
    args.url = parse_url(args.url)

    return args


def parse_url(url: str) -> str:
    """
    Check that a URL is an absolute http(s) URL.

    Args:
        url: URL string

    Returns:
        The URL, unchanged

    Raises:
        ArgumentError: If the URL format is invalid
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ArgumentError(
            f"Invalid URL: {url}. Expected an absolute http:// or https:// URL"
        )

    return url
