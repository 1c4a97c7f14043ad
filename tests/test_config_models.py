import pytest
from pydantic import ValidationError

from bookrank.config import HealthResponse, RankConfig, RankRequest
from bookrank.pipeline_types import Bounded, ProgressUpdate, Unbounded, parse_target


def test_rank_config_defaults():
    cfg = RankConfig(use_fixed_m=False)
    assert cfg.max_pages == 100
    assert cfg.m_baseline == 500
    assert cfg.m_floor == 50
    assert cfg.max_books_estimate == 2000


def test_rank_config_rejects_negative_values():
    with pytest.raises(ValidationError):
        RankConfig(fetch_delay_ms=-1)
    with pytest.raises(ValidationError):
        RankConfig(max_pages=0)


def test_parse_target_variants():
    assert parse_target("max") == Unbounded()
    assert parse_target("MAX") == Unbounded()
    assert parse_target("1,000") == Bounded(1000)
    assert parse_target(50) == Bounded(50)
    for bad in ["0", "-5", "many", 0, None]:
        with pytest.raises(ValueError):
            parse_target(bad)


def test_progress_fraction():
    assert ProgressUpdate(fetched=25, target=Bounded(50), page=2, max_pages=100).fraction == 0.5
    assert ProgressUpdate(fetched=90, target=Bounded(50), page=5, max_pages=100).fraction == 1.0
    upd = ProgressUpdate(fetched=200, target=Unbounded(), page=10, max_pages=100)
    assert upd.fraction == 0.1
    assert upd.message == "Fetched 200 books (Page 10/100)..."


def test_request_and_health_models():
    assert RankRequest(url="https://x.example.com").target == 100
    assert RankRequest(url="https://x.example.com", target="max").target == "max"
    assert HealthResponse(status="healthy").status == "healthy"
