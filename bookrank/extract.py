from __future__ import annotations

import math
import re
from typing import List, Tuple

from loguru import logger

from .listing_page import ListingPage
from .pipeline_types import RawRecord

NAN = float("nan")

_RATING_RE = re.compile(r"(\d+(?:[.,]\d+)?)\s+avg rating", re.I)
_REVIEWS_RE = re.compile(r"(?:—|-|–)\s*([\d,]+)\s+ratings?", re.I)


def parse_rating_info(text: str | None) -> Tuple[float, float]:
    """
    Parse a free-text rating blob into ``(rating, review_count)``.

      '4.12 avg rating — 1,234,567 ratings' -> (4.12, 1234567.0)
      '4,5 avg rating — 1,234 ratings'      -> (4.5, 1234.0)

    Either part that cannot be parsed comes back as NaN.
    """
    if not text:
        return NAN, NAN

    rating = NAN
    m = _RATING_RE.search(text)
    if m:
        try:
            rating = float(m.group(1).replace(",", ".", 1))
        except ValueError:
            rating = NAN

    reviews = NAN
    m = _REVIEWS_RE.search(text)
    if m:
        digits = m.group(1).replace(",", "")
        if digits.isdigit():
            try:
                reviews = float(int(digits))
            except (ValueError, OverflowError):
                # absurdly long digit runs: beyond float range or the int-string limit
                reviews = NAN

    return rating, reviews


def _usable(value: float) -> bool:
    return math.isfinite(value) and value >= 0


def extract_records(page: ListingPage) -> List[RawRecord]:
    """
    Extract book records from one listing page, in document order.

    Rows whose rating or review count does not parse are dropped; that is
    ordinary data-quality filtering, never an error.
    """
    items = page.find_book_items()
    logger.debug("Found {} potential book rows on {}", len(items), page.url)

    records: List[RawRecord] = []
    for idx, item in enumerate(items):
        title = page.title_text(item) or f"Unknown Title {idx}"
        rating, reviews = parse_rating_info(page.rating_info_text(item))

        if not (_usable(rating) and _usable(reviews)):
            logger.debug("Skipping '{}': invalid rating/reviews ({}, {})", title, rating, reviews)
            continue

        records.append(
            RawRecord(
                title=title,
                rating=rating,
                review_count=int(reviews),
                author=page.author_name(item),
                cover_url=page.cover_url(item),
                book_url=page.book_url(item),
            )
        )

    logger.debug("Extracted {} valid books from {}", len(records), page.url)
    return records
