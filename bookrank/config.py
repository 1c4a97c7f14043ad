from __future__ import annotations

import os
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field


# ---------------------------
# Pagination controls
# ---------------------------

MAX_PAGES = 100
BOOKS_PER_PAGE = 20  # display estimates only
PRESET_TARGETS: List[int] = [50, 100, 500, 1000]
DEFAULT_TARGET = 100

DEFAULT_FETCH_DELAY_MS = 250
FETCH_DELAY_MS = int(os.getenv("BOOKRANK_FETCH_DELAY_MS", str(DEFAULT_FETCH_DELAY_MS)))

# 0 = one attempt per page, stop on failure
FETCH_RETRIES = int(os.getenv("BOOKRANK_FETCH_RETRIES", "0"))


# ---------------------------
# Smoothing constant (M)
# ---------------------------

M_DYNAMIC_BASELINE = 500
M_MINIMUM_VALUE = 50
M_PERCENTILE = 0.75

USE_FIXED_M = os.getenv("BOOKRANK_USE_FIXED_M", "0") == "1"
M_FIXED_VALUE = 1000


# ---------------------------
# HTTP hardening
# ---------------------------

HTTP_CONNECT_TIMEOUT = 3.0
HTTP_READ_TIMEOUT = 10.0
HTTP_MAX_REDIRECTS = 3
HTTP_MAX_BYTES = 3_000_000  # listing pages are heavy

HTTP_USER_AGENT = (
    "bookrank/1.0 (+https://example.com; contact=bookrank@placeholder.com)"
)


# ---------------------------
# Listing page selectors
# ---------------------------

BOOK_ITEM_SELECTOR = 'table.tableList tr[itemtype="http://schema.org/Book"]'
TITLE_SELECTORS = ['a.bookTitle span[itemprop="name"]', "a.bookTitle"]
AUTHOR_SELECTORS = ['.authorName span[itemprop="name"]', ".authorName"]
RATING_INFO_SELECTOR = ".minirating"
LISTING_MARKER_SELECTORS = ["table.tableList", ".leftContainer"]
NEXT_REL_SELECTOR = 'link[rel="next"]'
NEXT_ANCHOR_SELECTOR = "a.next_page"

UNKNOWN_AUTHOR = "Unknown Author"


# ---------------------------
# Session configuration
# ---------------------------

class RankConfig(BaseModel):
    """
    Explicit per-session configuration handed to the walker, the
    estimator and the assembler. Defaults mirror the module constants.
    """

    max_pages: int = Field(default=MAX_PAGES, ge=1)
    books_per_page: int = Field(default=BOOKS_PER_PAGE, ge=1)
    fetch_delay_ms: int = Field(default=FETCH_DELAY_MS, ge=0)
    fetch_retries: int = Field(default=FETCH_RETRIES, ge=0)

    use_fixed_m: bool = USE_FIXED_M
    m_fixed_value: float = Field(default=M_FIXED_VALUE, ge=0)
    m_baseline: float = Field(default=M_DYNAMIC_BASELINE, ge=0)
    m_floor: float = Field(default=M_MINIMUM_VALUE, ge=0)
    m_percentile: float = M_PERCENTILE

    @property
    def fetch_delay_seconds(self) -> float:
        return self.fetch_delay_ms / 1000.0

    @property
    def max_books_estimate(self) -> int:
        return self.max_pages * self.books_per_page


# ---------------------------
# Pydantic models for the HTTP API
# ---------------------------

class RankRequest(BaseModel):
    """
    Request body for POST /rank.
    """

    url: str = Field(..., min_length=1)
    target: Union[int, Literal["max"]] = DEFAULT_TARGET
    use_fixed_m: Optional[bool] = None


class ScoredBook(BaseModel):
    rank: int = Field(ge=1)
    title: str
    author: str
    rating: float
    reviews: int = Field(ge=0)
    score: Optional[float]
    cover_url: Optional[str] = None
    url: Optional[str] = None


class SummaryModel(BaseModel):
    total_fetched: int
    processed_count: int
    pages_fetched: int
    average_rating: Optional[float]
    m: float
    m_label: str
    is_fixed: bool
    requested_target: Union[int, Literal["max"]]
    target_label: str
    stopped_early: bool


class RankResponse(BaseModel):
    """
    Response body for POST /rank. ``status`` is "empty" when nothing
    could be ranked.
    """

    status: Literal["ok", "empty"]
    summary: SummaryModel
    books: List[ScoredBook]


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str
