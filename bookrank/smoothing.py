from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

import numpy as np
from loguru import logger

from .config import RankConfig
from .pipeline_types import RawRecord, SmoothingParameters


def percentile(values: Iterable[float], fraction: float) -> float:
    """
    Nearest-rank percentile (no interpolation).

    Only finite, strictly positive values take part. The fraction is
    clamped to [0, 1]; the element at floor(fraction * (n - 1)) of the
    ascending sort is returned. Empty input -> 0.

      percentile([1, 2, 3, 4, 5, 6, 7, 8], 0.75) -> 6
    """
    arr = np.asarray([float(v) for v in values], dtype="float64")
    arr = arr[np.isfinite(arr) & (arr > 0)]
    if arr.size == 0:
        return 0.0

    arr = np.sort(arr)
    frac = min(max(float(fraction), 0.0), 1.0)
    idx = min(arr.size - 1, int(math.floor(frac * (arr.size - 1))))
    return float(arr[idx])


def estimate_smoothing(
    records: Sequence[RawRecord],
    config: Optional[RankConfig] = None,
) -> SmoothingParameters:
    """
    Smoothing constant M for the Bayesian score.

    Fixed mode returns the configured value. Dynamic mode takes the 75th
    percentile of review counts and never goes below the floor or the
    baseline: M = max(floor, baseline, p75).
    """
    config = config or RankConfig()

    if config.use_fixed_m:
        logger.info("Using fixed M value: {}", config.m_fixed_value)
        return SmoothingParameters(m=float(config.m_fixed_value), is_fixed=True)

    p = percentile((r.review_count for r in records), config.m_percentile)
    if p == 0:
        logger.info("No valid review counts to compute the percentile")
    m = max(float(config.m_floor), float(config.m_baseline), p)
    logger.info(
        "Using dynamic M. Baseline: {}, p{:.0f}: {}, Min: {}. Final M: {}",
        config.m_baseline, config.m_percentile * 100, p, config.m_floor, m,
    )
    return SmoothingParameters(m=m, is_fixed=False, source_percentile=p)
