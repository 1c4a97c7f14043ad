import math

from bookrank.config import RankConfig
from bookrank.pipeline_types import RawRecord
from bookrank.smoothing import estimate_smoothing, percentile


def _records(counts):
    return [RawRecord(title=f"b{i}", rating=4.0, review_count=c) for i, c in enumerate(counts)]


def test_percentile_nearest_rank():
    assert percentile([1, 2, 3, 4, 5, 6, 7, 8], 0.75) == 6
    assert percentile([8, 1, 7, 2, 6, 3, 5, 4], 0.75) == 6


def test_percentile_filters_and_clamps():
    assert percentile([], 0.75) == 0
    assert percentile([0, -5, math.nan, math.inf], 0.5) == 0
    assert percentile([0, 10, 20, math.nan], 0.5) == 10
    assert percentile([3, 1, 2], 5.0) == 3
    assert percentile([3, 1, 2], -1.0) == 1


def test_dynamic_m_uses_baseline_when_percentile_small():
    params = estimate_smoothing(_records([10, 20, 30, 2000]), RankConfig(use_fixed_m=False))
    assert params.m == 500
    assert params.source_percentile == 30
    assert not params.is_fixed


def test_dynamic_m_follows_large_percentile():
    counts = [1_000, 5_000, 20_000, 80_000, 300_000]
    params = estimate_smoothing(_records(counts), RankConfig(use_fixed_m=False))
    assert params.m == 80_000


def test_dynamic_m_floor_wins_over_low_baseline():
    cfg = RankConfig(use_fixed_m=False, m_baseline=0, m_floor=50)
    assert estimate_smoothing(_records([1, 2, 3]), cfg).m == 50
    assert estimate_smoothing([], cfg).m == 50


def test_fixed_m():
    params = estimate_smoothing(_records([10, 20]), RankConfig(use_fixed_m=True, m_fixed_value=1000))
    assert params.m == 1000
    assert params.is_fixed
    assert params.source_percentile is None
