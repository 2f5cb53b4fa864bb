"""
Command-line interface for the crawler.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from sitecrawler import __version__
from sitecrawler.core import CrawlConfig, CrawlStats, crawl
from sitecrawler.fetcher import DEFAULT_TIMEOUT, FetchError
from sitecrawler.output import (
    DEFAULT_JSON_FILE,
    DEFAULT_TEXT_FILE,
    OutputFormat,
    OutputTarget,
    write_result,
)

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "SITECRAWLER_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_USER_AGENT = f"SiteCrawler/{__version__}"


class _OutputAction(argparse.Action):
    """Store (format, path) so the last output flag given wins."""
    output_format = OutputFormat.TEXT
    default_name = DEFAULT_TEXT_FILE

    def __init__(self, option_strings, dest, **kwargs):
        super().__init__(option_strings, dest, nargs="?", metavar="NAME", **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, OutputTarget(self.output_format, Path(values or self.default_name)))


class _JsonOutputAction(_OutputAction):
    output_format = OutputFormat.JSON
    default_name = DEFAULT_JSON_FILE


def _depth(value: str) -> int:
    depth = int(value)
    if depth < 0:
        raise argparse.ArgumentTypeError(f"depth must be >= 0, got {depth}")
    return depth


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="site-crawler",
        description="Crawl the internal links of a website starting from a URL and report the URLs reached.",
        epilog=(
            "Give the URL before a bare -f/-fj, otherwise it is read as the file name. "
            f"The default report is logged at INFO; setting {LOG_LEVEL_ENV} above INFO hides it."
        ),
    )
    parser.add_argument("url", help="Root URL (e.g. https://example.com/)")
    parser.add_argument(
        "-d", "--depth", type=_depth, default=0,
        help="Stop expanding pages whose path has exactly N segments (default: 0, unlimited)",
    )
    parser.add_argument(
        "-f", "--file", dest="output", action=_OutputAction,
        help=f"Write visited URLs as plain text, one per line (default name: {DEFAULT_TEXT_FILE})",
    )
    parser.add_argument(
        "-fj", "--file-json", dest="output", action=_JsonOutputAction,
        help=f"Write visited URLs as JSON (default name: {DEFAULT_JSON_FILE})",
    )
    parser.add_argument(
        "-e", "--request-error", dest="include_errors", action="store_true",
        help="Include URLs that failed to fetch in the output",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each URL as it is processed")
    parser.add_argument(
        "--timeout", type=float, default=DEFAULT_TIMEOUT,
        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.set_defaults(output=OutputTarget())
    return parser


def build_config(args: argparse.Namespace) -> CrawlConfig:
    return CrawlConfig(
        root=args.url,
        depth=args.depth,
        verbose=args.verbose,
        include_errors=args.include_errors,
        output=args.output,
        timeout=args.timeout,
        user_agent=args.user_agent,
    )


def setup_logging() -> None:
    """
    Configure root logging from SITECRAWLER_LOG_LEVEL (default INFO).

    The default log report of visited URLs is emitted at INFO, so a level
    above INFO suppresses it.
    """
    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def print_summary(stats: CrawlStats, visited: int) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("CRAWL SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"URLs reported:          {visited}\n")
    sys.stderr.write(f"Pages fetched:          {stats.pages_fetched}\n")
    sys.stderr.write(f"Layers:                 {stats.layers}\n")
    sys.stderr.write(f"Depth cutoffs:          {stats.depth_cutoffs}\n")
    sys.stderr.write(f"Off-domain URLs:        {stats.off_domain}\n\n")

    if stats.error_counts:
        sys.stderr.write("Errors by type:\n")
        for error_type, count in sorted(stats.error_counts.items()):
            label = f"HTTP {error_type}" if error_type.isdigit() else error_type.capitalize()
            sys.stderr.write(f"  {label}: {count}\n")
    else:
        sys.stderr.write("No errors encountered.\n")

    sys.stderr.write("\n")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the crawler CLI."""
    args = build_parser().parse_args(argv)
    config = build_config(args)
    setup_logging()

    try:
        result = crawl(config)
    except FetchError as e:
        logger.error("Could not fetch root URL: %s", e)
        return 1

    if config.verbose:
        print_summary(result.stats, len(result.visited))

    try:
        write_result(result, config.output)
    except OSError as e:
        logger.error("Could not write output: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
