"""Conversion of the API's long-form ``updated`` dates to YYYY-MM-DD."""

from __future__ import annotations

import logging

from playsearch.models import AppRecord

logger = logging.getLogger(__name__)

_LONG_MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


class DateFormatError(ValueError):
    """The text does not look like "<Month> <Day>, <Year>"."""


class InvalidMonthError(DateFormatError):
    """The first token is not an English month name."""


def convert_date(text: str) -> str:
    """Convert "January 5, 2023" to "2023-01-05".

    The character following the day (normally a comma) is dropped.

    Raises:
        InvalidMonthError: unknown month name.
        DateFormatError: wrong token count, or a non-numeric day/year.
    """
    tokens = text.split(" ")
    if len(tokens) != 3:
        raise DateFormatError(f"expected 3 tokens, got {len(tokens)}: {text!r}")
    month_name, day_token, year_token = tokens

    try:
        month = _LONG_MONTH_NAMES.index(month_name) + 1
    except ValueError:
        raise InvalidMonthError(f"Month invalid: {month_name!r}") from None

    try:
        day = int(day_token[:-1])
        year = int(year_token)
    except ValueError as e:
        raise DateFormatError(f"cannot parse {text!r}: {e}") from e

    return f"{year:04d}-{month:02d}-{day:02d}"


def normalize_updated(record: AppRecord) -> None:
    """Rewrite record.updated in place; keep the raw value if it cannot be parsed."""
    try:
        record.updated = convert_date(record.updated)
    except DateFormatError as e:
        logger.warning("convertDate [%s] err: %s", record.updated, e)
