"""Page-by-page collection of apps for a single search term or category."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterator

from playsearch.config import MAX_APPS_PER_CALL, RetryPolicy
from playsearch.dates import normalize_updated
from playsearch.fetcher import fetch_apps
from playsearch.models import ResultSet, RunType, SearchQuery

logger = logging.getLogger(__name__)


def page_plan(count: int, page_size: int = MAX_APPS_PER_CALL) -> Iterator[tuple[int, int]]:
    """Yield the (start, num) pair of every page needed for ``count`` apps.

    >>> list(page_plan(120))
    [(0, 50), (50, 50), (100, 20)]
    """
    start = 0
    num = min(count, page_size)
    while start < count:
        yield start, num
        start += num
        num = min(count - start, page_size)


def collect_apps(
    run_type: RunType,
    text: str,
    count: int,
    endpoint: str,
    results: ResultSet,
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Fetch up to ``count`` apps for one line and merge them into ``results``.

    Records whose app_id is already in ``results`` are dropped.
    FetchError and DecodeError propagate and end the whole run.

    Returns:
        Number of records newly added.
    """
    query = SearchQuery(run_type=run_type, text=text, count=count)
    added = 0

    for start, num in page_plan(count):
        query.start = start
        query.num = num
        page = fetch_apps(endpoint, query.to_params(), policy, sleep)

        for record in page:
            if record.app_id in results:
                continue
            normalize_updated(record)
            results.add(record)
            added += 1

        logger.info(
            "%s [%s] start=%d num=%d: %d apps returned, %d total",
            run_type.value, text, start, num, len(page), len(results),
        )

    return added
