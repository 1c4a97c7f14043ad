from __future__ import annotations

"""
Sequential pagination over a book listing.

The walker starts from an already-loaded page (page 1), follows next-page
links one request at a time and stops on whichever comes first:

* no next-page link
* the page ceiling (config.max_pages, counting page 1)
* the bounded target reached
* a failed fetch or a page with zero usable rows (early stop)
* an optional cancel hook (early stop)

In bounded mode the aggregate is trimmed to exactly the target, keeping
first-fetched order. Nothing here raises when zero records come back; the
caller treats that as "nothing to rank".
"""

import asyncio
from typing import Awaitable, Callable, List, Optional

from loguru import logger

from .config import RankConfig
from .extract import extract_records
from .listing_page import ListingPage
from .pipeline_types import Bounded, FetchSession, ProgressUpdate, RawRecord, Target

FetchFn = Callable[[str], Awaitable[Optional[ListingPage]]]
NextUrlFn = Callable[[ListingPage], Optional[str]]
ExtractFn = Callable[[ListingPage], List[RawRecord]]
SleepFn = Callable[[float], Awaitable[None]]
ProgressFn = Callable[[ProgressUpdate], None]


def _target_reached(target: Target, count: int) -> bool:
    return isinstance(target, Bounded) and count >= target.n


def _emit(on_progress: Optional[ProgressFn], session: FetchSession, config: RankConfig) -> None:
    if on_progress is None:
        return
    on_progress(
        ProgressUpdate(
            fetched=session.record_count,
            target=session.target,
            page=session.pages_fetched,
            max_pages=config.max_pages,
        )
    )


def default_next_url(page: ListingPage) -> Optional[str]:
    return page.next_page_url()


async def walk_pages(
    start_page: ListingPage,
    fetch_page: FetchFn,
    target: Target,
    config: Optional[RankConfig] = None,
    next_url: NextUrlFn = default_next_url,
    extract: ExtractFn = extract_records,
    sleep: SleepFn = asyncio.sleep,
    on_progress: Optional[ProgressFn] = None,
    should_stop: Optional[Callable[[], bool]] = None,
) -> FetchSession:
    config = config or RankConfig()
    session = FetchSession(target=target)

    logger.info("Processing initial page (page 1): {}", start_page.url)
    session.pages_fetched = 1
    initial = extract(start_page)
    if initial:
        session.records.extend(initial)
        logger.info("Found {} books on initial page", len(initial))
    else:
        logger.info("No valid books found on initial page")
    session.next_url = next_url(start_page)
    _emit(on_progress, session, config)

    while (
        session.next_url
        and session.pages_fetched < config.max_pages
        and not _target_reached(target, session.record_count)
    ):
        if should_stop is not None and should_stop():
            logger.info("Walk cancelled after {} pages", session.pages_fetched)
            session.stopped_early = True
            break

        url = session.next_url
        page_no = session.pages_fetched + 1
        page = await fetch_page(url)
        if page is None:
            logger.warning("Failed to fetch page {} ({}); stopping", page_no, url)
            session.next_url = None
            session.stopped_early = True
            break

        session.pages_fetched = page_no
        books = extract(page)
        if not books:
            # a zero-row page is read as end of listing, even when a next link exists
            logger.warning("Page {} contained 0 valid books; stopping", page_no)
            session.next_url = None
            session.stopped_early = True
            break

        session.records.extend(books)
        session.next_url = next_url(page)
        logger.info(
            "Fetched page {}. Books: {}. Total: {}. Next URL: {}",
            page_no, len(books), session.record_count, session.next_url or "None",
        )
        _emit(on_progress, session, config)

        if _target_reached(target, session.record_count):
            logger.info("Reached target book count ({}); stopping", target.n)
            break

        if session.next_url and session.pages_fetched < config.max_pages:
            await sleep(config.fetch_delay_seconds)

    session.total_fetched = session.record_count
    logger.info(
        "Fetch loop finished. Pages: {}. Fetched: {}. Stopped early: {}",
        session.pages_fetched, session.total_fetched, session.stopped_early,
    )

    if isinstance(target, Bounded) and session.record_count > target.n:
        logger.info("Trimming book list from {} to {}", session.record_count, target.n)
        del session.records[target.n:]

    return session
