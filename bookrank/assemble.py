from __future__ import annotations
"""
Packaging of a finished ranking for the presentation layer.

Converts the ordered ScoredRecord list plus session counters into a
RankResult (and from there into the API schema or a pandas frame). No data
values are transformed here beyond formatting.
"""

import math
from dataclasses import dataclass
from typing import List, Literal, Optional

import numpy as np
import pandas as pd

from .config import RankConfig, RankResponse, ScoredBook, SummaryModel
from .pipeline_types import (
    FetchSession,
    ScoredRecord,
    SessionSummary,
    SmoothingParameters,
    Target,
    target_as_json,
)

RESULT_COLUMNS = ["rank", "title", "author", "rating", "reviews", "score", "url"]


@dataclass(frozen=True)
class RankResult:
    status: Literal["ok", "empty"]
    books: List[ScoredRecord]
    summary: SessionSummary

    @property
    def is_empty(self) -> bool:
        return self.status == "empty"


def assemble_result(
    session: FetchSession,
    params: SmoothingParameters,
    ranked: List[ScoredRecord],
    mean: float,
    config: Optional[RankConfig] = None,
) -> RankResult:
    config = config or RankConfig()
    summary = SessionSummary(
        total_fetched=session.total_fetched,
        processed_count=len(ranked),
        pages_fetched=session.pages_fetched,
        average_rating=mean,
        m=params.m,
        is_fixed=params.is_fixed,
        requested_target=session.target,
        stopped_early=session.stopped_early,
        max_books_estimate=config.max_books_estimate,
        m_baseline=config.m_baseline,
    )
    return RankResult(status="ok" if ranked else "empty", books=list(ranked), summary=summary)


def empty_result(target: Target, params: SmoothingParameters, config: Optional[RankConfig] = None) -> RankResult:
    """Outcome for a session whose starting page never loaded."""
    return assemble_result(FetchSession(target=target), params, [], math.nan, config)


def _finite_or_none(x: float) -> Optional[float]:
    return float(x) if x is not None and math.isfinite(x) else None


def summary_lines(summary: SessionSummary) -> List[str]:
    """Text block shown next to the sorted list."""
    avg = f"{summary.average_rating:.2f}" if math.isfinite(summary.average_rating) else "N/A"
    return [
        "Sorted by Bayesian Score",
        f"M = {summary.m:.0f} ({summary.m_label})",
        f"Sample Avg Rating: {avg}",
        f"Target Books: {summary.target_label}",
        f"Processed Books: {summary.processed_count:,} (of {summary.total_fetched:,} fetched)",
    ]


def to_response(result: RankResult) -> RankResponse:
    s = result.summary
    summary = SummaryModel(
        total_fetched=s.total_fetched,
        processed_count=s.processed_count,
        pages_fetched=s.pages_fetched,
        average_rating=_finite_or_none(s.average_rating),
        m=s.m,
        m_label=s.m_label,
        is_fixed=s.is_fixed,
        requested_target=target_as_json(s.requested_target),
        target_label=s.target_label,
        stopped_early=s.stopped_early,
    )
    books = [
        ScoredBook(
            rank=i,
            title=b.title,
            author=b.record.author,
            rating=b.rating,
            reviews=b.review_count,
            score=_finite_or_none(b.score),
            cover_url=b.record.cover_url,
            url=b.record.book_url,
        )
        for i, b in enumerate(result.books, start=1)
    ]
    return RankResponse(status=result.status, summary=summary, books=books)


def results_to_frame(result: RankResult) -> pd.DataFrame:
    rows = [
        {
            "rank": i,
            "title": b.title,
            "author": b.record.author,
            "rating": b.rating,
            "reviews": b.review_count,
            "score": b.score,
            "url": b.record.book_url,
        }
        for i, b in enumerate(result.books, start=1)
    ]
    df = pd.DataFrame(rows, columns=RESULT_COLUMNS)
    if not df.empty:
        df["score"] = df["score"].astype("float64").round(4)
        df["reviews"] = df["reviews"].astype(np.int64)
    return df
