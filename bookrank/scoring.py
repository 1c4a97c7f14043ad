from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from loguru import logger

from .pipeline_types import RawRecord, ScoredRecord, SmoothingParameters


def bayesian_score(rating: float, reviews: float, mean_rating: float, m: float) -> float:
    """
    Shrinkage estimate of a book's rating:

        (v / (v + M)) * R + (M / (v + M)) * C

    With few reviews the score regresses toward the sample mean C; with
    v >> M it approaches the book's own rating R.
    """
    denom = reviews + m
    if denom == 0:
        logger.warning("reviews + M is zero (reviews={}, M={}); returning mean rating", reviews, m)
        return mean_rating
    return (reviews / denom) * rating + (m / denom) * mean_rating


def valid_records(records: Sequence[RawRecord]) -> List[RawRecord]:
    return [r for r in records if r.is_valid()]


def mean_rating(records: Sequence[RawRecord]) -> float:
    """Arithmetic mean over valid records; NaN when there are none."""
    usable = valid_records(records)
    if not usable:
        return math.nan
    return sum(r.rating for r in usable) / len(usable)


def score_records(
    records: Sequence[RawRecord],
    params: SmoothingParameters,
) -> Tuple[List[ScoredRecord], float]:
    """
    Score every valid record against the sample mean.

    Invalid records are dropped *before* the mean is taken, so they
    influence neither the mean nor the output. Input order is kept.
    """
    usable = valid_records(records)
    if len(usable) != len(records):
        logger.info("Dropped {} records with invalid rating/reviews", len(records) - len(usable))
    if not usable:
        return [], math.nan

    mean = mean_rating(usable)
    logger.info(
        "Calculating weighted scores with M={}, AvgRating={:.2f} for {} books",
        params.m, mean, len(usable),
    )
    scored = [
        ScoredRecord(record=r, score=bayesian_score(r.rating, r.review_count, mean, params.m))
        for r in usable
    ]
    return scored, mean
