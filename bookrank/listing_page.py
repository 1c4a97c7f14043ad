from __future__ import annotations

"""
Parsed listing page and the queries the ranking core needs from it.

BeautifulSoup is the "parse HTML string to a navigable tree" service. This
module keeps every CSS selector in one place so the extractor and the
walker never touch raw tags:

* ListingPage.find_book_items()       -> book rows in document order
* ListingPage.next_page_url()         -> absolute URL of the next page or None
* title_text / rating_info_text / cover_url / author_name / book_url
    per-row accessors (cover/author/url are presentation-only)
"""

from dataclasses import dataclass
from typing import List, Optional

from bs4 import BeautifulSoup, Tag
from loguru import logger

from .config import (
    AUTHOR_SELECTORS,
    BOOK_ITEM_SELECTOR,
    LISTING_MARKER_SELECTORS,
    NEXT_ANCHOR_SELECTOR,
    NEXT_REL_SELECTOR,
    RATING_INFO_SELECTOR,
    TITLE_SELECTORS,
    UNKNOWN_AUTHOR,
)
from .utils.text_clean import clean_text
from .utils.urls import resolve_url


def _first(el: Tag, selectors: List[str]) -> Optional[Tag]:
    for sel in selectors:
        found = el.select_one(sel)
        if found is not None:
            return found
    return None


@dataclass
class ListingPage:
    """A fetched (or already loaded) listing page."""

    url: str
    soup: BeautifulSoup

    @classmethod
    def from_html(cls, html: str, url: str) -> "ListingPage":
        return cls(url=url, soup=BeautifulSoup(html, "lxml"))

    # ---- page-level queries ----

    def find_book_items(self) -> List[Tag]:
        return list(self.soup.select(BOOK_ITEM_SELECTOR))

    def looks_like_listing(self) -> bool:
        return any(self.soup.select_one(sel) is not None for sel in LISTING_MARKER_SELECTORS)

    def _base_href(self) -> Optional[str]:
        base = self.soup.find("base", href=True)
        return base["href"] if base is not None else None

    def resolve(self, href: Optional[str]) -> Optional[str]:
        return resolve_url(href, self.url, self._base_href())

    def next_page_url(self) -> Optional[str]:
        """
        Canonical <link rel="next"> first, then the "next page" anchor.
        """
        rel = self.soup.select_one(NEXT_REL_SELECTOR)
        if rel is not None:
            nxt = self.resolve(rel.get("href"))
            if nxt:
                logger.debug("Next page via link[rel=next]: {}", nxt)
                return nxt

        anchor = self.soup.select_one(NEXT_ANCHOR_SELECTOR)
        if anchor is not None:
            nxt = self.resolve(anchor.get("href"))
            if nxt:
                logger.debug("Next page via a.next_page: {}", nxt)
                return nxt

        logger.debug("No next page URL found on {}", self.url)
        return None

    # ---- per-item accessors ----

    @staticmethod
    def title_text(item: Tag) -> Optional[str]:
        el = _first(item, TITLE_SELECTORS)
        if el is None:
            return None
        return clean_text(el.get_text(" ", strip=True)) or None

    @staticmethod
    def rating_info_text(item: Tag) -> Optional[str]:
        el = item.select_one(RATING_INFO_SELECTOR)
        if el is None:
            return None
        return clean_text(el.get_text(" ", strip=True))

    @staticmethod
    def author_name(item: Tag) -> str:
        el = _first(item, AUTHOR_SELECTORS)
        if el is None:
            return UNKNOWN_AUTHOR
        return clean_text(el.get_text(" ", strip=True)) or UNKNOWN_AUTHOR

    def cover_url(self, item: Tag) -> Optional[str]:
        img = item.find("img")
        if img is None:
            return None
        return self.resolve(img.get("src"))

    def book_url(self, item: Tag) -> Optional[str]:
        link = item.select_one("a.bookTitle")
        if link is None:
            return None
        return self.resolve(link.get("href"))
