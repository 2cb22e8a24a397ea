from __future__ import annotations

import logging
from typing import Any

import httpx

from app.services.clock import Clock

_LOG = logging.getLogger("app.retry")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_MS = 1000


def backoff_delay_ms(attempt_index: int, base_delay_ms: int = DEFAULT_BASE_DELAY_MS) -> int:
    return int(base_delay_ms) * (2 ** int(attempt_index))


async def fetch_with_retry(
    client: httpx.AsyncClient,
    url: str,
    *,
    clock: Clock,
    method: str = "POST",
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS,
    **request_kwargs: Any,
) -> httpx.Response:
    """Send one request, retrying only transport failures with exponential backoff.

    Any HTTP response, 4xx and 5xx included, is returned as is. After
    ``max_attempts`` consecutive transport failures the last one propagates.
    """
    if int(max_attempts) < 1:
        raise ValueError("max_attempts must be >= 1")

    for attempt in range(int(max_attempts)):
        try:
            return await client.request(method, url, **request_kwargs)
        except httpx.TransportError as exc:
            if attempt == int(max_attempts) - 1:
                _LOG.warning("%s %s failed after %s attempts: %s", method, url, max_attempts, exc)
                raise
            delay = backoff_delay_ms(attempt, base_delay_ms)
            _LOG.warning(
                "%s %s attempt=%s/%s failed: %s; retrying in %sms",
                method,
                url,
                attempt + 1,
                max_attempts,
                exc,
                delay,
            )
            await clock.sleep_ms(delay)
    raise AssertionError("unreachable")
