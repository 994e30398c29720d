"""Google Play batch search — main entry point.

Flow:
  1. Read the input file line by line (search terms or categories)
  2. For each non-blank line, fetch the requested number of apps page by page
  3. Drop apps already collected from an earlier page or line
  4. Write everything collected to a single CSV
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Sequence

from playsearch.config import (
    DEFAULT_HOST,
    DEFAULT_INPUT,
    DEFAULT_NUM_APPS,
    DEFAULT_OUTPUT,
    LOG_DIR,
    RunConfig,
)
from playsearch.fetcher import PlaySearchError
from playsearch.models import ResultSet, RunType
from playsearch.paginator import collect_apps
from playsearch.sink import write_csv

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Initial logging setup."""
    LOG_DIR.mkdir(exist_ok=True)
    log_file = LOG_DIR / f"playsearch_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def _non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    # -h is the API host, so help is only available as --help
    parser = argparse.ArgumentParser(
        prog="playsearch",
        description="Collect Google Play apps for a list of search terms or categories",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="show this help message and exit")
    parser.add_argument("-t", "--type", dest="run_type", help="type of run: [search, top]")
    parser.add_argument(
        "-i", "--input", default=DEFAULT_INPUT,
        help="a file with search terms or categories to process, one per line",
    )
    parser.add_argument(
        "-o", "--output", default=DEFAULT_OUTPUT,
        help="a csv that will contain the results",
    )
    parser.add_argument(
        "-h", "--host", default=DEFAULT_HOST,
        help="the host:port running google-play-scraper",
    )
    parser.add_argument(
        "-n", "--num", type=_non_negative_int, default=DEFAULT_NUM_APPS,
        help="the number of apps to return from each search",
    )
    return parser


def collect(
    config: RunConfig, sleep: Callable[[float], None] = time.sleep
) -> ResultSet:
    """Run every non-blank input line through the paginator.

    Raises:
        OSError: the input file cannot be read.
        PlaySearchError: a page could not be fetched or decoded.
    """
    results = ResultSet()
    logger.info("processing file [%s]", config.input_path)

    with open(config.input_path, encoding="utf-8") as f:
        for line in f:
            text = line.strip()
            if not text:
                continue
            added = collect_apps(
                config.run_type,
                text,
                config.num_apps,
                config.endpoint,
                results,
                config.retry,
                sleep,
            )
            logger.info("[%s] %d new apps", text, added)

    return results


def run(config: RunConfig, sleep: Callable[[float], None] = time.sleep) -> ResultSet:
    """Main processing: collect, then write the CSV if anything was found."""
    start_time = time.time()
    results = collect(config, sleep)

    if results:
        write_csv(results, config.output_path)
        logger.info("Written output to [%s]", config.output_path)
    else:
        logger.warning("No apps collected. Nothing written.")

    logger.info("%d apps, elapsed %.1f seconds", len(results), time.time() - start_time)
    return results


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        run_type = RunType(args.run_type)
    except ValueError:
        parser.print_usage()
        return 0

    config = RunConfig(
        run_type=run_type,
        input_path=Path(args.input),
        output_path=Path(args.output),
        host=args.host,
        num_apps=args.num,
    )

    try:
        setup_logging()
        run(config)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("I/O error: %s", e)
        return 1
    except PlaySearchError as e:
        logger.error("Get apps err: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
