"""CSV output of the collected apps."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable

from playsearch.models import AppRecord

logger = logging.getLogger(__name__)

FIELDNAMES = [
    "genre",
    "genreId",
    "appId",
    "title",
    "summary",
    "developerEmail",
    "developerWebsite",
    "developerAddress",
    "minInstalls",
    "maxInstalls",
    "score",
    "updated",
    "adSupported",
    "price",
    "offersIAP",
]


def write_csv(records: Iterable[AppRecord], path: Path) -> int:
    """Write a header row and one row per record, replacing any existing file.

    Returns:
        Number of rows written.
    """
    rows = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for record in records:
            writer.writerow(record.to_row())
            rows += 1
    logger.info("%d rows written to %s", rows, path)
    return rows
