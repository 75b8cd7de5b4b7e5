"""CLI entrypoint for the research-paper assistant."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from assistant import ResearchAssistant
from backend import Backend
from errors import OperationError
from gemini_client import GeminiBackend
from models import PaperRef, TextResult
from perplexity_client import PerplexityBackend

BACKENDS = {
    "gemini": GeminiBackend,
    "perplexity": PerplexityBackend,
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Search, analyze, compare and cite research papers")
    parser.add_argument(
        "--backend",
        choices=sorted(BACKENDS),
        default=os.getenv("PAPER_ASSISTANT_BACKEND", "gemini"),
        help="Text-generation backend (default: PAPER_ASSISTANT_BACKEND or gemini)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="Find recent papers for a query")
    search.add_argument("query")

    analyze = sub.add_parser("analyze", help="Summarize one paper")
    analyze.add_argument("paper", type=Path, help="Path to a paper JSON file")
    analyze.add_argument("--focus", default=None, help="Aspect to focus the analysis on")

    compare = sub.add_parser("compare", help="Compare two papers")
    compare.add_argument("papers", type=Path, nargs=2, help="Paths to two paper JSON files")

    cite = sub.add_parser("cite", help="Format citations for one paper")
    cite.add_argument("paper", type=Path, help="Path to a paper JSON file")
    cite.add_argument("--strict", action="store_true", help="Exit non-zero when generation fails")

    return parser.parse_args(argv)


def load_paper(path: Path) -> PaperRef:
    """Read one paper record from a JSON file."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    return PaperRef.from_dict(data)


def build_backend(name: str) -> Backend:
    return BACKENDS[name].from_env()


def format_search_result(result: TextResult) -> str:
    lines = [result.text]
    if result.sources:
        lines.append("")
        lines.append("Sources:")
        for index, source in enumerate(result.sources, 1):
            lines.append(f"  [{index}] {source.title} - {source.uri}")
    return "\n".join(lines)


def run(args: argparse.Namespace, assistant: ResearchAssistant) -> str:
    """Execute one subcommand and return the text to print."""
    if args.command == "search":
        if not args.query.strip():
            raise ValueError("Search query must not be empty")
        return format_search_result(assistant.search(args.query))
    if args.command == "analyze":
        return assistant.analyze_paper(load_paper(args.paper), focus=args.focus)
    if args.command == "compare":
        return assistant.compare_papers([load_paper(path) for path in args.papers])
    if args.command == "cite":
        return assistant.cite(load_paper(args.paper), strict=args.strict)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Load config, build the backend and run one command."""
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        assistant = ResearchAssistant(build_backend(args.backend))
        output = run(args, assistant)
    except OperationError as exc:
        logging.error("%s: %s", exc.tag, exc)
        return 1
    except (RuntimeError, ValueError, OSError) as exc:
        logging.error("%s", exc)
        return 2

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
