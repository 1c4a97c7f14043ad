# bookrank/rank.py
from __future__ import annotations

import math
from typing import List, Sequence

from .pipeline_types import ScoredRecord


def _sort_key(rec: ScoredRecord) -> float:
    s = rec.score
    try:
        s = float(s)
    except (TypeError, ValueError):
        return -math.inf
    return s if math.isfinite(s) else -math.inf


def rank_records(scored: Sequence[ScoredRecord]) -> List[ScoredRecord]:
    """
    Order by score, best first.

    Non-finite scores sort as -inf (last). ``sorted`` is stable, so equal
    scores keep their input order.
    """
    return sorted(scored, key=_sort_key, reverse=True)
