# _utils/retry.py

import random
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx


def retry_delay(
    response: httpx.Response,
    attempt: int,
    *,
    base: float,
    cap: float,
) -> float:
    """
    Seconds to wait before retrying a rate-limited or unavailable request.

    A ``Retry-After`` header, given either as seconds or as an HTTP date,
    is honoured up to ``cap``. Without one the delay doubles from ``base``
    per attempt, capped, and is drawn from its upper half so concurrent
    requests in a batch do not retry in lockstep.

    Args:
        response: The response that triggered the retry.
        attempt: Zero-based index of the failed attempt.
        base: Delay before the first retry when the server gives no hint.
        cap: Longest delay ever returned.

    Returns:
        float: Non-negative delay in seconds.
    """
    hinted = parse_retry_after(response.headers.get("Retry-After"))
    if hinted is not None:
        return min(hinted, cap)

    ceiling = min(base * 2**attempt, cap)
    return random.uniform(ceiling / 2, ceiling)


def parse_retry_after(value: str | None) -> float | None:
    """
    Read a ``Retry-After`` header value.

    Args:
        value: Raw header value, or None when absent.

    Returns:
        float | None: Seconds to wait (never negative), or None when the
            value is missing or unreadable.
    """
    if not value:
        return None

    try:
        seconds = float(value)
    except ValueError:
        seconds = _seconds_until(value.strip())

    return None if seconds is None else max(0.0, seconds)


def _seconds_until(value: str) -> float | None:
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None

    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    return (when - datetime.now(UTC)).total_seconds()
