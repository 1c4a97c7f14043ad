"""Typed containers shared across pipeline modules."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .config import UNKNOWN_AUTHOR

FETCH_MAX_LABEL = "max"


# ---------------------------
# Target count: Bounded(n) | Unbounded
# ---------------------------

@dataclass(frozen=True)
class Bounded:
    """Stop once ``n`` records are aggregated, then trim to exactly ``n``."""

    n: int

    def __post_init__(self) -> None:
        if isinstance(self.n, bool) or not isinstance(self.n, int) or self.n < 1:
            raise ValueError(f"Target count must be a positive integer, got {self.n!r}")


@dataclass(frozen=True)
class Unbounded:
    """No explicit cap: only the page ceiling applies."""


Target = Union[Bounded, Unbounded]


def parse_target(value: Union[int, str, None]) -> Target:
    """
    Turn user input into a target variant.
      'max' / 'unbounded' -> Unbounded(), '500' / 500 -> Bounded(500)
    """
    if isinstance(value, (Bounded, Unbounded)):
        return value
    if value is None:
        raise ValueError("Target count is required")
    if isinstance(value, str):
        s = value.strip().lower().replace(",", "").replace("_", "")
        if s in {FETCH_MAX_LABEL, "unbounded", "all"}:
            return Unbounded()
        if not s.isdigit():
            raise ValueError(f"Invalid target count: {value!r}")
        return Bounded(int(s))
    return Bounded(value)


def target_as_json(target: Target) -> Union[int, str]:
    return target.n if isinstance(target, Bounded) else FETCH_MAX_LABEL


# ---------------------------
# Records
# ---------------------------

@dataclass(frozen=True)
class RawRecord:
    """One book row as extracted from a listing page."""

    title: str
    rating: float
    review_count: int
    # presentation passengers, never used for scoring
    author: str = UNKNOWN_AUTHOR
    cover_url: Optional[str] = None
    book_url: Optional[str] = None

    def is_valid(self) -> bool:
        return (
            _finite_non_negative(self.rating)
            and _finite_non_negative(self.review_count)
        )


@dataclass(frozen=True)
class ScoredRecord:
    record: RawRecord
    score: float

    @property
    def title(self) -> str:
        return self.record.title

    @property
    def rating(self) -> float:
        return self.record.rating

    @property
    def review_count(self) -> int:
        return self.record.review_count


def _finite_non_negative(value) -> bool:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(v) and v >= 0


# ---------------------------
# Session state and outputs
# ---------------------------

@dataclass
class FetchSession:
    """Aggregation state owned by the pagination walker for one session."""

    target: Target
    records: List[RawRecord] = field(default_factory=list)
    pages_fetched: int = 0
    next_url: Optional[str] = None
    stopped_early: bool = False
    total_fetched: int = 0  # before trimming to the target

    @property
    def record_count(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class SmoothingParameters:
    m: float
    is_fixed: bool
    source_percentile: Optional[float] = None


@dataclass(frozen=True)
class SessionSummary:
    total_fetched: int
    processed_count: int
    pages_fetched: int
    average_rating: float
    m: float
    is_fixed: bool
    requested_target: Target
    stopped_early: bool = False
    max_books_estimate: int = 0
    m_baseline: float = 0.0

    @property
    def target_label(self) -> str:
        if isinstance(self.requested_target, Bounded):
            return f"{self.requested_target.n:,}"
        return f"Max (~{self.max_books_estimate:,})"

    @property
    def m_label(self) -> str:
        if self.is_fixed:
            return f"Fixed ({self.m:.0f})"
        return f"Dynamic (75th perc. & base {self.m_baseline:.0f})"


@dataclass(frozen=True)
class ProgressUpdate:
    """Snapshot emitted by the walker after each page."""

    fetched: int
    target: Target
    page: int
    max_pages: int

    @property
    def fraction(self) -> float:
        if isinstance(self.target, Unbounded):
            frac = self.page / self.max_pages if self.max_pages else 0.0
        else:
            frac = self.fetched / self.target.n
        return min(max(frac, 0.0), 1.0)

    @property
    def message(self) -> str:
        if isinstance(self.target, Unbounded):
            return f"Fetched {self.fetched:,} books (Page {self.page}/{self.max_pages})..."
        return f"Fetched {self.fetched:,}/{self.target.n:,} books (Page {self.page})..."
