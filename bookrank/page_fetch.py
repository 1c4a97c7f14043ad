from __future__ import annotations

from typing import Optional

import httpx
from loguru import logger

from .config import (
    HTTP_CONNECT_TIMEOUT,
    HTTP_READ_TIMEOUT,
    HTTP_MAX_REDIRECTS,
    HTTP_MAX_BYTES,
    HTTP_USER_AGENT,
)
from .listing_page import ListingPage


def http_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": HTTP_USER_AGENT},
        follow_redirects=True,
        timeout=httpx.Timeout(HTTP_READ_TIMEOUT, connect=HTTP_CONNECT_TIMEOUT),
        max_redirects=HTTP_MAX_REDIRECTS,
        transport=transport,
    )


async def fetch_page(client: httpx.AsyncClient, url: str) -> ListingPage | None:
    """
    Fetch one listing page and parse it.

    Returns None on HTTP >= 400, transport errors, oversized or empty
    bodies. An unexpected content type or a page without the usual
    listing markup is only logged; extraction is still attempted.
    """
    logger.info("Fetching listing page: {}", url)
    try:
        r = await client.get(url)
    except httpx.TimeoutException:
        logger.warning("Page fetch timeout for {}", url)
        return None
    except httpx.HTTPError as e:
        logger.warning("Page fetch error for {}: {}", url, e)
        return None

    if r.status_code >= 400:
        logger.warning("Page fetch: HTTP {} for {}", r.status_code, url)
        return None

    if len(r.content) > HTTP_MAX_BYTES:
        logger.warning("Page fetch aborted: {} bytes > {} limit", len(r.content), HTTP_MAX_BYTES)
        return None

    content_type = r.headers.get("content-type", "")
    if "text/html" not in content_type:
        logger.warning("Page {} has unexpected Content-Type: {!r}", url, content_type)

    try:
        html = r.text
    except (UnicodeDecodeError, LookupError) as e:
        logger.warning("Could not decode body of {}: {}", url, e)
        return None
    if not html.strip():
        logger.warning("Empty body for {}", url)
        return None

    try:
        page = ListingPage.from_html(html, url=str(r.url))
    except Exception as e:
        logger.warning("Could not parse body of {}: {}", url, e)
        return None
    if not page.looks_like_listing():
        logger.warning("Page {} does not look like a book listing; trying anyway", url)
    return page


async def fetch_page_with_retry(
    client: httpx.AsyncClient,
    url: str,
    retries: int = 0,
) -> ListingPage | None:
    """``fetch_page`` with up to ``retries`` extra attempts (0 = single attempt)."""
    for attempt in range(retries + 1):
        page = await fetch_page(client, url)
        if page is not None:
            return page
        if attempt < retries:
            logger.info("Retrying {} ({}/{})", url, attempt + 1, retries)
    return None
