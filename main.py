#!/usr/bin/env python
"""CLI for asking questions about the tracked organizations."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, field_validator

from orgwatch.config import create_from_config, get_default_config_path, load_config
from orgwatch.data import QueryResponse, Usage
from orgwatch.errors import OrgWatchError, user_message

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    command: Literal["ask", "summarize"]
    question: str | None = None
    orgs: list[str] = []
    article_id: str | None = None
    config: Path
    log: bool = False
    log_dir: str = "logs"

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v


def _log_usage(usage: Usage) -> None:
    logger.info("\n--- Usage Summary ---")
    logger.info(f"API calls: {len(usage.api_calls)}")
    logger.info(f"Input tokens: {usage.input_tokens:,}")
    logger.info(f"Output tokens: {usage.output_tokens:,}")
    if usage.web_searches:
        logger.info(f"Web searches: {usage.web_searches}")
    for name, count in sorted(usage.search_requests.items()):
        logger.info(f"{name} requests: {count}")


def _print_response(response: QueryResponse) -> None:
    print(f"\n{response.answer}\n")
    print(f"Strategy: {response.strategy}  Confidence: {response.confidence:.2f}")
    if response.companies_referenced:
        print(f"Organizations: {', '.join(response.companies_referenced)}")
    if response.evidence:
        print(f"\nEvidence ({len(response.evidence)}):")
        for i, item in enumerate(response.evidence, 1):
            logger.info(f"{i}. [{item.origin}] {item.title} ({item.relevance_score:.2f})")
            if item.url:
                logger.info(f"   URL: {item.url}")
            if item.published_at:
                logger.info(f"   Published: {item.published_at}")


async def run(args: CLIArgs) -> None:
    """Execute one CLI command with the given configuration.

    Args:
        args: Validated CLI arguments.
    """
    config = load_config(args.config)
    pipeline, run_logger = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )

    logger.info(f"Config: {args.config}")
    async with pipeline:
        if args.command == "ask":
            response = await pipeline.process_query(args.question or "", args.orgs or None)
            _print_response(response)
            _log_usage(response.usage)
            logger.info(f"Processed in {response.processing_time:.2f}s")
        else:
            summary = await pipeline.summarize_article(args.article_id or "")
            print(f"\n{summary.original_title}\n\n{summary.summary}\n")
            print(f"Source: {summary.source_url}  Cached: {summary.cached}")
            _log_usage(summary.usage)

    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Ask questions about tracked organizations using news evidence."
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable per-query pipeline logging to JSON file",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ask = subparsers.add_parser("ask", help="Answer a question")
    ask.add_argument("question", help="Natural-language question")
    ask.add_argument(
        "--org",
        action="append",
        default=[],
        dest="orgs",
        help="Organization to focus on (repeatable)",
    )

    summarize = subparsers.add_parser("summarize", help="Summarize a stored article")
    summarize.add_argument("article_id", help="Identifier of the stored article")

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            command=ns.command,
            question=getattr(ns, "question", None),
            orgs=getattr(ns, "orgs", []),
            article_id=getattr(ns, "article_id", None),
            config=config_path,
            log=ns.log,
            log_dir=ns.log_dir,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(run(args))
    except OrgWatchError as e:
        logger.error(user_message(e))
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
