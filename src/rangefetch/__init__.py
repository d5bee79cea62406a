"""Parallel HTTP range downloader with live throughput reporting."""

import asyncio
import sys

from rangefetch.cli import cli


def main():
    try:
        asyncio.run(cli())
    except KeyboardInterrupt:
        print("\nDownload interrupted by user.")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)
