"""HTTP access to the google-play-scraper ``/api/apps`` endpoint.

Retry strategy:
  - an attempt succeeds only on a connection AND HTTP 200
  - any other outcome waits ``policy.delay`` seconds and retries, up to
    ``policy.max_retries`` times
  - a body that cannot be decoded is never retried
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping

import requests

from playsearch.config import REQUEST_TIMEOUT, RetryPolicy
from playsearch.models import AppRecord

logger = logging.getLogger(__name__)


class PlaySearchError(Exception):
    """Base class for errors that abort a batch run."""


class FetchError(PlaySearchError):
    """Every attempt failed at the transport or HTTP status level."""

    def __init__(self, url: str, attempts: int, reason: str) -> None:
        super().__init__(f"GET {url} failed after {attempts} attempt(s): {reason}")
        self.url = url
        self.attempts = attempts
        self.reason = reason


class DecodeError(PlaySearchError):
    """A 200 response whose body is not the expected JSON envelope."""


def build_url(endpoint: str, params: Mapping[str, str]) -> str:
    """Merge the endpoint with its encoded query string."""
    return requests.Request("GET", endpoint, params=dict(params)).prepare().url


def is_api_error(resp: requests.Response | None, exc: Exception | None) -> str | None:
    """Return why an attempt failed, or None if it succeeded."""
    if exc is not None:
        return str(exc)
    if resp is None:
        return "no response"
    if resp.status_code != 200:
        return f"HTTP response status [{resp.status_code} {resp.reason}]"
    return None


def fetch_apps(
    endpoint: str,
    params: Mapping[str, str],
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> list[AppRecord]:
    """Fetch one page of apps.

    Args:
        endpoint: e.g. "http://localhost:3000/api/apps"
        params: query parameters (fullDetail, start, num, q | category)
        policy: retry policy; defaults to 3 retries with a 10 second delay
        sleep: called with the delay between attempts

    Returns:
        The records of the page, in API order.

    Raises:
        FetchError: all attempts failed.
        DecodeError: the response body is not a valid envelope.
    """
    policy = policy or RetryPolicy()
    url = build_url(endpoint, params)

    reason = ""
    last_exc: Exception | None = None
    for attempt in range(1, policy.max_attempts + 1):
        logger.info("calling google play api [%s]", url)
        resp = None
        exc = None
        try:
            resp = requests.get(url, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            exc = e

        reason = is_api_error(resp, exc)
        if reason is None:
            return decode_page(resp)

        last_exc = exc
        if attempt < policy.max_attempts:
            logger.warning(
                "request failed [%s] (attempt %d/%d) ... retrying in %g seconds",
                reason, attempt, policy.max_attempts, policy.delay,
            )
            sleep(policy.delay)
        else:
            logger.error(
                "request failed [%s] (attempt %d/%d) ... giving up",
                reason, attempt, policy.max_attempts,
            )

    raise FetchError(url, policy.max_attempts, reason) from last_exc


def decode_page(resp: requests.Response) -> list[AppRecord]:
    """Decode a ``{"results": [...]}`` envelope into records."""
    try:
        payload: Any = resp.json()
    except ValueError as e:
        raise DecodeError(f"response is not JSON: {e}") from e

    if not isinstance(payload, dict):
        raise DecodeError(f"expected a JSON object, got {type(payload).__name__}")

    results = payload.get("results")
    if results is None:
        return []
    if not isinstance(results, list):
        raise DecodeError(f"'results' is not an array: {type(results).__name__}")

    records: list[AppRecord] = []
    for item in results:
        if not isinstance(item, dict):
            raise DecodeError(f"result entry is not an object: {item!r}")
        try:
            records.append(AppRecord.from_dict(item))
        except (TypeError, ValueError) as e:
            raise DecodeError(f"cannot decode result entry: {e}") from e
    return records
