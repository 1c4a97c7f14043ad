from __future__ import annotations

"""
FastAPI application for bookrank.

- POST /rank fetches a listing (up to the requested target or the page
  ceiling), scores every book and returns them best-first
- "nothing to rank" is a normal 200 response with status="empty"
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .assemble import to_response
from .config import HealthResponse, RankConfig, RankRequest, RankResponse
from .pipeline_types import parse_target
from .session import run_session
from .utils.urls import is_http_url

app = FastAPI(title="bookrank")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.post("/rank", response_model=RankResponse)
async def rank(req: RankRequest) -> RankResponse:
    url = req.url.strip()
    if not is_http_url(url):
        raise HTTPException(status_code=422, detail="url must be an absolute http(s) URL")
    try:
        target = parse_target(req.target)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    config = RankConfig()
    if req.use_fixed_m is not None:
        config = config.model_copy(update={"use_fixed_m": req.use_fixed_m})

    logger.info("Rank request: url={} target={}", url, req.target)
    result = await run_session(url, target, config=config)
    return to_response(result)
