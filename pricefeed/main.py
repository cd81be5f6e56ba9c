#!/usr/bin/env python3
"""BTC/USD Price Feed.

Fetches the BTC/USD price from multiple exchanges every interval, averages
the valid prices and serves the latest average over HTTP.

Start with ``python -m pricefeed.main`` or the ``pricefeed`` console script.
"""

import argparse
import logging
import os
import sys

import uvicorn

from .src.AggregationCycle import AggregationCycle
from .src.api import create_app
from .src.fetchers import get_available_fetchers, get_fetcher
from .src.PriceScheduler import DEFAULT_INTERVAL, PriceScheduler
from .src.PublishedState import PublishedState
from .src.SourceStats import SourceStats

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def env_flag(name: str) -> bool:
    """Read a boolean flag from the environment.

    :param name: Environment variable name.
    :returns: True for "1", "true", "yes" or "on" (case-insensitive).
    """
    return (os.environ.get(name) or "").strip().lower() in ("1", "true", "yes", "on")


def parse_sources(sources_str: str | None, available: list[str]) -> list[str]:
    """Parse a comma-separated source list.

    An empty value selects every available source.

    :param sources_str: Comma-separated source names.
    :param available: Registered source names.
    :returns: Lowercased source names without duplicates, in input order.
    """
    if not sources_str:
        return list(available)
    sources: list[str] = []
    for item in sources_str.split(","):
        item = item.strip().lower()
        if item and item not in sources:
            sources.append(item)
    return sources


def build_parser(available_sources: list[str]) -> argparse.ArgumentParser:
    """Build the command-line parser with environment fallbacks."""
    parser = argparse.ArgumentParser(
        description="BTC/USD Price Feed: average price across exchanges",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Available price sources:
  {', '.join(available_sources)}

Examples:
  # All sources, default 2 minute interval
  python -m pricefeed.main

  # A subset of sources, fetched one after another every 30 seconds
  python -m pricefeed.main --sources coinbase,kraken,bitfinex \\
      --interval 30 --sequential

Environment variables (CLI args take precedence):
  SOURCES, CYCLE_INTERVAL, FETCH_TIMEOUT, SEQUENTIAL_FETCH, HOST, PORT
""",
    )

    parser.add_argument(
        "--sources",
        type=str,
        help=f"Comma-separated price sources (default: all). Available: {', '.join(available_sources)}",
        default=os.environ.get("SOURCES"),
    )

    parser.add_argument(
        "--interval",
        type=float,
        help=f"Seconds between the end of one cycle and the next (default: {DEFAULT_INTERVAL:g})",
        default=float(os.environ.get("CYCLE_INTERVAL") or DEFAULT_INTERVAL),
    )

    parser.add_argument(
        "--fetch-timeout",
        dest="fetch_timeout",
        type=float,
        help="Timeout for individual fetch requests in seconds (default: 10.0)",
        default=float(os.environ.get("FETCH_TIMEOUT") or "10.0"),
    )

    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Fetch sources one after another instead of concurrently",
        default=env_flag("SEQUENTIAL_FETCH"),
    )

    parser.add_argument(
        "--host",
        type=str,
        help="Address to serve the HTTP API on (default: 0.0.0.0)",
        default=os.environ.get("HOST") or "0.0.0.0",
    )

    parser.add_argument(
        "--port",
        type=int,
        help="Port to serve the HTTP API on (default: 8080)",
        default=int(os.environ.get("PORT") or "8080"),
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    return parser


def main() -> None:
    """Main entry point for the price feed CLI."""
    available_sources = get_available_fetchers()
    parser = build_parser(available_sources)
    args = parser.parse_args()

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Validate arguments
    if args.interval < 1:
        parser.error("--interval must be at least 1 second")

    if args.fetch_timeout <= 0:
        parser.error("--fetch-timeout must be positive")

    sources = parse_sources(args.sources, available_sources)
    if not sources:
        parser.error("At least one source must be specified")

    invalid_sources = [s for s in sources if s not in available_sources]
    if invalid_sources:
        parser.error(
            f"Unknown sources: {invalid_sources}. "
            f"Available: {', '.join(available_sources)}"
        )

    # Log configuration
    logger.info("=" * 60)
    logger.info("BTC/USD Price Feed")
    logger.info("=" * 60)
    logger.info(f"Sources:           {', '.join(sources)}")
    logger.info(f"Interval:          {args.interval:g}s")
    logger.info(f"Fetch Timeout:     {args.fetch_timeout:g}s")
    logger.info(f"Fetch Mode:        {'sequential' if args.sequential else 'concurrent'}")
    logger.info(f"Listen:            {args.host}:{args.port}")
    logger.info("=" * 60)

    state = PublishedState()
    stats = SourceStats(sources)
    cycle = AggregationCycle(
        fetchers={s: get_fetcher(s, timeout=args.fetch_timeout) for s in sources},
        state=state,
        stats=stats,
        fetch_timeout=args.fetch_timeout,
        concurrent=not args.sequential,
    )
    scheduler = PriceScheduler(cycle, interval=args.interval)
    app = create_app(state, stats=stats, scheduler=scheduler)

    try:
        uvicorn.run(
            app,
            host=args.host,
            port=args.port,
            log_level="debug" if args.verbose else "info",
        )
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
