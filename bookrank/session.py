from __future__ import annotations

import asyncio
from typing import Callable, Optional

import httpx
from loguru import logger

from .assemble import RankResult, assemble_result, empty_result
from .config import RankConfig
from .listing_page import ListingPage
from .page_fetch import fetch_page_with_retry, http_client
from .paginate import FetchFn, ProgressFn, SleepFn, walk_pages
from .pipeline_types import Target
from .rank import rank_records
from .scoring import score_records
from .smoothing import estimate_smoothing


async def rank_page(
    start_page: ListingPage,
    fetch: FetchFn,
    target: Target,
    config: Optional[RankConfig] = None,
    sleep: SleepFn = asyncio.sleep,
    on_progress: Optional[ProgressFn] = None,
    should_stop: Optional[Callable[[], bool]] = None,
) -> RankResult:
    """
    Full pipeline for an already-loaded first page:
    walk -> estimate M -> score -> rank -> assemble.
    """
    config = config or RankConfig()
    session = await walk_pages(
        start_page,
        fetch,
        target,
        config=config,
        sleep=sleep,
        on_progress=on_progress,
        should_stop=should_stop,
    )

    params = estimate_smoothing(session.records, config)
    scored, mean = score_records(session.records, params)
    ranked = rank_records(scored)
    result = assemble_result(session, params, ranked, mean, config)

    if result.is_empty:
        logger.warning("No valid books were found or fetched; nothing to rank")
    else:
        logger.info(
            "Ranked {} books (of {} fetched over {} pages)",
            result.summary.processed_count, result.summary.total_fetched, result.summary.pages_fetched,
        )
    return result


async def run_session(
    start_url: str,
    target: Target,
    config: Optional[RankConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
    sleep: SleepFn = asyncio.sleep,
    on_progress: Optional[ProgressFn] = None,
    should_stop: Optional[Callable[[], bool]] = None,
) -> RankResult:
    """
    One user-initiated session starting from a listing URL.

    Pages are fetched strictly one after another through a single client.
    A starting page that cannot be loaded yields the empty outcome.
    """
    config = config or RankConfig()
    own_client = client is None
    client = client or http_client()

    async def fetch(url: str) -> Optional[ListingPage]:
        return await fetch_page_with_retry(client, url, retries=config.fetch_retries)

    try:
        start_page = await fetch(start_url)
        if start_page is None:
            logger.warning("Could not load starting page {}; nothing to rank", start_url)
            return empty_result(target, estimate_smoothing([], config), config)

        return await rank_page(
            start_page,
            fetch,
            target,
            config=config,
            sleep=sleep,
            on_progress=on_progress,
            should_stop=should_stop,
        )
    finally:
        if own_client:
            await client.aclose()
