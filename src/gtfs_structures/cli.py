import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

from gtfs_structures.data.config import get_config
from gtfs_structures.data.gtfs_loader import GTFSLoader
from gtfs_structures.errors import GTFSError
from gtfs_structures.models.feed import Gtfs

logger = logging.getLogger(__name__)


def parse_start_date(value: str):
    """argparse type for YYYYMMDD dates."""
    try:
        return datetime.strptime(value, "%Y%m%d").date()
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYYMMDD") from e


def print_stats(gtfs: Gtfs) -> None:
    """Print the number of loaded records per collection."""
    print("GTFS data:")
    print(f"  Read in {gtfs.read_duration:,} ms")
    for name, count in gtfs.counts().items():
        print(f"  {name}: {count:,}")


def load_feed(gtfs_path: Path | None, url: str | None) -> Gtfs:
    """Load a feed from a local path or, when no path is given, from a URL."""
    loader = GTFSLoader()
    if gtfs_path is not None:
        return loader.load(gtfs_path)
    url = url or get_config().feed_url
    if not url:
        raise GTFSError("No GTFS path or URL given (use --url or set GTFS_FEED_URL)")
    return asyncio.run(loader.load_url(url))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gtfs-structures",
        description="Load and inspect GTFS bundles",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # stats command
    stats_parser = subparsers.add_parser(
        "stats",
        help="Load a GTFS bundle and print record counts",
    )
    stats_parser.add_argument(
        "gtfs_path",
        type=Path,
        nargs="?",
        help="Path to GTFS directory or ZIP file",
    )
    stats_parser.add_argument(
        "--url",
        help="Download the ZIP bundle from this URL (default: GTFS_FEED_URL env var)",
    )

    # trip-days command
    days_parser = subparsers.add_parser(
        "trip-days",
        help="Print the day offsets on which a service runs",
    )
    days_parser.add_argument(
        "gtfs_path",
        type=Path,
        help="Path to GTFS directory or ZIP file",
    )
    days_parser.add_argument("service_id", help="Service id from calendar.txt or calendar_dates.txt")
    days_parser.add_argument(
        "start_date",
        type=parse_start_date,
        help="Day with offset 0 (YYYYMMDD)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.command == "stats":
            gtfs = load_feed(args.gtfs_path, args.url)
            print_stats(gtfs)
        else:
            gtfs = load_feed(args.gtfs_path, None)
            days = gtfs.trip_days(args.service_id, args.start_date)
            print(" ".join(str(day) for day in days))
    except GTFSError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
