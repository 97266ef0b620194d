#!/usr/bin/env python3
"""
Developer CLI for the ContentLens scoring core.

Usage:
    contentlens score [TEXT] [--json]
    contentlens scan FILE [--url URL] [--min-length N] [--db PATH]

Examples:
    # Score a reply (reads stdin when TEXT is omitted)
    contentlens score "Great point! Thanks for sharing this"

    # Show the feature vector as JSON
    echo "..." | contentlens score --json

    # Run the candidate selector over a saved page as if served from x.com
    contentlens scan saved_thread.html --url https://x.com/someone/status/1
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from contentlens.config import APP_VERSION
from contentlens.contracts.settings import DEFAULT_SETTINGS
from contentlens.dom.document import PageDocument
from contentlens.dom.scanner import CandidateSelector
from contentlens.infrastructure.store import KeyValueStore, MemoryStore, SqliteStore
from contentlens.observability.logging import set_log_level
from contentlens.pipeline.orchestrator import LocalScoringBackend
from contentlens.scoring.features import em_dash_signal, extract_features
from contentlens.scoring.patterns import get_phrase_library
from contentlens.scoring.scorer import CompositeScorer
from contentlens.scoring.text import content_key, normalize_text
from contentlens.storage.durable_cache import DurableScoreCache

PREVIEW_CHARS = 72


def _preview(text: str) -> str:
    if len(text) <= PREVIEW_CHARS:
        return text
    return text[: PREVIEW_CHARS - 3] + "..."


def cmd_score(args: argparse.Namespace) -> int:
    raw = args.text if args.text is not None else sys.stdin.read()
    normalized = normalize_text(raw)
    scorer = CompositeScorer()
    score = scorer.score(normalized)

    if args.json:
        report = {
            "content_key": content_key(raw),
            "score": score,
            "em_dash": em_dash_signal(normalized),
            "features": extract_features(normalized).as_dict(),
            "phrase_categories": get_phrase_library().category_hits(normalized),
        }
        print(json.dumps(report, indent=2))
    else:
        print(score)
    return 0


async def _scan(args: argparse.Namespace) -> int:
    document = PageDocument.from_file(args.file, url=args.url)
    selector = CandidateSelector(min_text_length=args.min_length)
    store: KeyValueStore = SqliteStore(args.db) if args.db else MemoryStore()
    backend = LocalScoringBackend(DurableScoreCache(store))

    blocks = selector.scan(document)
    if not blocks:
        print(f"No scorable blocks found on {document.hostname or args.file}")
        return 0

    for block in blocks:
        score = await backend.score(block)
        print(f"{block.content_key}  {score:>2}  {_preview(block.normalized_text)}")
    print(f"\n{len(blocks)} blocks")
    return 0


def cmd_scan(args: argparse.Namespace) -> int:
    return asyncio.run(_scan(args))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="contentlens", description="AI-likelihood scoring core")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override CONTENTLENS_LOG_LEVEL",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    score = subparsers.add_parser("score", help="Score text given as argument or on stdin")
    score.add_argument("text", nargs="?", help="Text to score (default: read stdin)")
    score.add_argument("--json", action="store_true", help="Print features and phrase hits as JSON")
    score.set_defaults(func=cmd_score)

    scan = subparsers.add_parser("scan", help="Find and score text blocks in an HTML file")
    scan.add_argument("file", help="Path to a saved HTML page")
    scan.add_argument("--url", default="about:blank", help="URL the page was served from")
    scan.add_argument(
        "--min-length",
        type=int,
        default=DEFAULT_SETTINGS.min_text_length,
        help="Minimum text length for generic blocks",
    )
    scan.add_argument("--db", help="SQLite file for the durable score cache (default: in memory)")
    scan.set_defaults(func=cmd_scan)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level:
        set_log_level(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
