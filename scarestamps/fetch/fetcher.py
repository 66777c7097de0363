import asyncio
import logging
from typing import Mapping, Optional

import httpx

from scarestamps.core.config import settings
from scarestamps.core.errors import FetchTimeoutError, FetchTransportError
from scarestamps.fetch.base import FetchOutcome

logger = logging.getLogger(__name__)

HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
JSON_ACCEPT = "application/json,text/plain;q=0.9,*/*;q=0.8"

def browser_headers(accept: str = HTML_ACCEPT) -> dict[str, str]:
    return {
        "User-Agent": settings.USER_AGENT,
        "Accept": accept,
        "Accept-Language": settings.ACCEPT_LANGUAGE,
        "Cache-Control": "no-cache",
    }

async def fetch_document(
    url: str,
    *,
    accept: str = HTML_ACCEPT,
    extra_headers: Optional[Mapping[str, str]] = None,
    timeout_ms: Optional[int] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FetchOutcome:
    """
    GET url with browser-like headers under a hard deadline.

    Non-2xx responses come back as FetchOutcome(ok=False, body="").
    Raises FetchTimeoutError when the deadline expires and
    FetchTransportError for any other network-level failure.
    """
    timeout_ms = settings.FETCH_TIMEOUT_MS if timeout_ms is None else timeout_ms
    timeout_sec = timeout_ms / 1000
    headers = browser_headers(accept)
    if extra_headers:
        headers.update(extra_headers)

    deadline = asyncio.timeout(timeout_sec)
    try:
        async with deadline:
            async with httpx.AsyncClient(
                timeout=timeout_sec,
                headers=headers,
                follow_redirects=True,
                transport=transport,
            ) as client:
                response = await client.get(url)
                if not response.is_success:
                    return FetchOutcome(ok=False, status=response.status_code, body="", url=str(response.url))
                return FetchOutcome(ok=True, status=response.status_code, body=response.text, url=str(response.url))
    except TimeoutError:
        if deadline.expired():
            logger.warning("Fetch deadline of %sms expired for %s", timeout_ms, url)
            raise FetchTimeoutError(f"Timeout while fetching {url}") from None
        raise
    except httpx.TimeoutException as e:
        logger.warning("HTTP timeout for %s: %s", url, e)
        raise FetchTimeoutError(f"Timeout while fetching {url}") from e
    except httpx.TransportError as e:
        logger.warning("Transport failure for %s: %s", url, e)
        raise FetchTransportError(f"Failed to fetch {url}: {e}") from e

async def fetch_json(
    url: str,
    *,
    api_key: Optional[str] = None,
    api_key_header: Optional[str] = None,
    timeout_ms: Optional[int] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FetchOutcome:
    """fetch_document for structured APIs; the key is sent only when both parts are set."""
    extra = {api_key_header: api_key} if api_key and api_key_header else None
    return await fetch_document(
        url,
        accept=JSON_ACCEPT,
        extra_headers=extra,
        timeout_ms=timeout_ms,
        transport=transport,
    )
