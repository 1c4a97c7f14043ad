# bookrank/cli.py
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .assemble import RankResult, results_to_frame, summary_lines
from .config import DEFAULT_TARGET, M_FIXED_VALUE, PRESET_TARGETS, RankConfig
from .pipeline_types import ProgressUpdate, parse_target
from .session import run_session


def _progress(update: ProgressUpdate) -> None:
    logger.info("[{:5.1f}%] {}", update.fraction * 100, update.message)


def format_result(result: RankResult, top: int) -> str:
    lines = list(summary_lines(result.summary))
    lines.append("")
    for i, b in enumerate(result.books[:top], start=1):
        lines.append(
            f"{i:>4}. {b.title} by {b.record.author} | "
            f"Rating: {b.rating:.2f} ({b.review_count:,} ratings) | Score: {b.score:.2f}"
        )
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="bookrank",
        description="Fetch a paginated book listing and sort it by Bayesian-adjusted rating.",
    )
    ap.add_argument("url", help="Listing page to start from (page 1)")
    ap.add_argument(
        "--target", default=str(DEFAULT_TARGET),
        help=f"Books to fetch: a positive integer (presets: {', '.join(map(str, PRESET_TARGETS))}) or 'max'",
    )
    ap.add_argument(
        "--fixed-m", nargs="?", type=float, const=float(M_FIXED_VALUE), default=None,
        help=f"Use a fixed smoothing constant instead of the dynamic one (default value {M_FIXED_VALUE})",
    )
    ap.add_argument("--delay-ms", type=int, default=None, help="Delay between page requests")
    ap.add_argument("--retries", type=int, default=None, help="Extra attempts per failed page")
    ap.add_argument("--top", type=int, default=20, help="How many books to print")
    ap.add_argument("--out", type=Path, default=None, help="Write the full ordering as CSV")
    ap.add_argument("--verbose", action="store_true")
    return ap


def _config_from_args(args: argparse.Namespace) -> RankConfig:
    update = {}
    if args.fixed_m is not None:
        update["use_fixed_m"] = True
        update["m_fixed_value"] = args.fixed_m
    if args.delay_ms is not None:
        update["fetch_delay_ms"] = args.delay_ms
    if args.retries is not None:
        update["fetch_retries"] = args.retries
    return RankConfig(**update)


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "INFO")

    try:
        target = parse_target(args.target)
        config = _config_from_args(args)
    except ValueError as e:
        ap.error(str(e))

    result = asyncio.run(run_session(args.url, target, config=config, on_progress=_progress))

    if result.is_empty:
        print("No valid books were found or fetched. Nothing to sort.")
        return 1

    print(format_result(result, args.top))

    if args.out is not None:
        df = results_to_frame(result)
        args.out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(args.out, index=False, encoding="utf-8")
        logger.info("Wrote {} rows to {}", len(df), args.out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
