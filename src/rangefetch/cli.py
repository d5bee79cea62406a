import logging

from rangefetch.main import run_download
from rangefetch.parsing import parse_arguments


async def cli(argv=None):
    """Main entry point for the download tool."""
    # Parse command line arguments
    args = parse_arguments(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    await run_download(args.url)
