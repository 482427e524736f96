"""HTTP fetcher for the district status page.

Every request carries a cache-busting query parameter and no-cache headers so
intermediaries never hand back a stale copy; the service keeps its own cache.
The body is streamed and rejected as soon as it crosses the size ceiling.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

import httpx

from closurewatch.log import get_logger
from closurewatch.scraper.models import RawPage

logger = get_logger("closurewatch.scraper.fetcher")

_NO_CACHE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Cache-Control": "no-cache, no-store, max-age=0",
    "Pragma": "no-cache",
}


class FetchError(Exception):
    """The status page could not be retrieved (HTTP error, network failure, timeout)."""


class ResponseTooLargeError(FetchError):
    """The status page body exceeded the configured size ceiling."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Response too large (limit {limit} bytes)")
        self.limit = limit


def _read_bounded(response: httpx.Response, max_bytes: int, deadline: float, timeout: float) -> bytes:
    """Return the body of a streamed *response*, refusing more than *max_bytes*.

    The read is abandoned once the monotonic clock passes *deadline*, so an
    upstream trickling small chunks cannot outlast the request timeout.
    """
    declared = response.headers.get("Content-Length", "")
    if declared.isdigit() and int(declared) > max_bytes:
        raise ResponseTooLargeError(max_bytes)

    body = bytearray()
    for chunk in response.iter_bytes():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise ResponseTooLargeError(max_bytes)
        if time.monotonic() > deadline:
            raise FetchError(f"Request timed out after {timeout:g}s")
    return bytes(body)


def fetch_status_page(
    url: str,
    *,
    timeout: float,
    max_bytes: int,
    user_agent: str,
    client: httpx.Client | None = None,
    now: datetime | None = None,
) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    A body of exactly *max_bytes* is accepted; one byte more is rejected.
    *timeout* caps the whole request, body download included.

    Raises:
        ResponseTooLargeError: If the body exceeds *max_bytes*.
        FetchError: On a non-2xx status, a network failure or a timeout.
    """
    fetched_at = now or datetime.now(timezone.utc)
    params = {"_": str(int(fetched_at.timestamp() * 1000))}
    headers = {**_NO_CACHE_HEADERS, "User-Agent": user_agent}

    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=timeout, follow_redirects=True)

    logger.info("Fetching status page %s", url)
    # httpx timeouts bound each connect/read; this bounds the whole request.
    deadline = time.monotonic() + timeout
    try:
        with client.stream("GET", url, params=params, headers=headers, timeout=timeout) as response:
            if not response.is_success:
                raise FetchError(f"HTTP error! status: {response.status_code}")
            body = _read_bounded(response, max_bytes, deadline, timeout)
            encoding = response.encoding or "utf-8"
            status_code = response.status_code
    except httpx.TimeoutException as exc:
        raise FetchError(f"Request timed out after {timeout:g}s") from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"Network error: {exc}") from exc
    finally:
        if owns_client:
            client.close()

    logger.info("Fetched status page: HTTP %s, %d bytes", status_code, len(body))
    return RawPage(
        url=url,
        html=body.decode(encoding, errors="replace"),
        status_code=status_code,
        size=len(body),
        fetched_at=fetched_at,
    )
