"""
Shared pytest fixtures: synthetic listing pages in the shelf/list markup.
"""
from typing import List, Optional, Tuple

import pytest

from bookrank.listing_page import ListingPage

BASE = "https://books.example.com/list/show/1"


def book_row(title: str, rating_info: str, author: str = "Some Author", href: str = "/book/show/1") -> str:
    return f"""
    <tr itemscope itemtype="http://schema.org/Book">
      <td><img src="/covers/{len(title)}.jpg"></td>
      <td>
        <a class="bookTitle" href="{href}"><span itemprop="name">{title}</span></a>
        <span class="authorName"><span itemprop="name">{author}</span></span>
        <span class="minirating"><span class="stars"></span> {rating_info}</span>
      </td>
    </tr>"""


def listing_html(rows: List[str], next_href: Optional[str] = None, rel_next: bool = True) -> str:
    head = ""
    pager = ""
    if next_href:
        if rel_next:
            head = f'<link rel="next" href="{next_href}">'
        else:
            pager = f'<a class="next_page" href="{next_href}">next »</a>'
    return f"""<html><head>{head}</head><body>
    <div class="leftContainer">
      <table class="tableList">{''.join(rows)}</table>
      {pager}
    </div></body></html>"""


def make_page(books: List[Tuple[str, float, int]], url: str = BASE, next_href: Optional[str] = None) -> ListingPage:
    rows = [book_row(t, f"{r} avg rating — {n:,} ratings") for t, r, n in books]
    return ListingPage.from_html(listing_html(rows, next_href=next_href), url=url)


def numbered_page(page_no: int, per_page: int = 20, has_next: bool = True) -> ListingPage:
    books = [(f"Book {page_no}-{i}", 4.0, 100 + i) for i in range(per_page)]
    nxt = f"{BASE}?page={page_no + 1}" if has_next else None
    return make_page(books, url=f"{BASE}?page={page_no}", next_href=nxt)


class FakeFetcher:
    """Serves numbered pages and records the URLs it was asked for."""

    def __init__(self, per_page: int = 20, last_page: Optional[int] = None, fail_on: Optional[int] = None):
        self.per_page = per_page
        self.last_page = last_page
        self.fail_on = fail_on
        self.calls: List[str] = []

    async def __call__(self, url: str) -> Optional[ListingPage]:
        self.calls.append(url)
        page_no = int(url.rsplit("=", 1)[1])
        if self.fail_on is not None and page_no == self.fail_on:
            return None
        has_next = self.last_page is None or page_no < self.last_page
        return numbered_page(page_no, self.per_page, has_next=has_next)


class SleepRecorder:
    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()
