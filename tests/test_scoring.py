import math

import pytest

from bookrank.pipeline_types import RawRecord, SmoothingParameters
from bookrank.scoring import bayesian_score, mean_rating, score_records


@pytest.mark.parametrize("rating,mean", [(5.0, 3.8), (2.5, 4.1), (4.0, 4.0)])
@pytest.mark.parametrize("reviews", [0, 1, 49, 500, 123_456])
def test_score_lies_between_rating_and_mean(rating, mean, reviews):
    s = bayesian_score(rating, reviews, mean, 500)
    lo, hi = min(rating, mean), max(rating, mean)
    assert lo - 1e-12 <= s <= hi + 1e-12


def test_score_with_zero_reviews_is_mean():
    assert bayesian_score(5.0, 0, 3.9, 500) == pytest.approx(3.9)


def test_score_approaches_rating_for_many_reviews():
    assert bayesian_score(4.4, 10**9, 3.0, 500) == pytest.approx(4.4, abs=1e-5)


def test_zero_denominator_returns_mean():
    assert bayesian_score(5.0, 0, 3.7, 0) == 3.7


def test_popular_book_beats_sparse_perfect_score():
    mean = 4.0
    sparse = bayesian_score(5.0, 2, mean, 500)
    popular = bayesian_score(4.4, 50_000, mean, 500)
    assert popular > sparse


def test_invalid_records_excluded_before_mean():
    records = [
        RawRecord("a", 4.0, 100),
        RawRecord("b", 2.0, 10),
        RawRecord("bad", float("nan"), 10),
        RawRecord("worse", 5.0, float("inf")),
    ]
    assert mean_rating(records) == pytest.approx(3.0)

    scored, mean = score_records(records, SmoothingParameters(m=500, is_fixed=False))
    assert mean == pytest.approx(3.0)
    assert [s.title for s in scored] == ["a", "b"]
    assert scored[0].score == pytest.approx((100 / 600) * 4.0 + (500 / 600) * 3.0)


def test_score_records_empty():
    scored, mean = score_records([], SmoothingParameters(m=500, is_fixed=False))
    assert scored == []
    assert math.isnan(mean)


def test_score_records_mean_matches_mean_rating():
    records = [RawRecord("a", 4.5, 10), RawRecord("b", 3.5, 1000), RawRecord("c", float("nan"), 5)]
    _, mean = score_records(records, SmoothingParameters(m=50, is_fixed=True))
    assert mean == mean_rating(records)
