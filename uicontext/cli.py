"""CLI entrypoints for uicontext commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List

from .analysis import LiveAnalyzer
from .automation import PageAutomationError
from .config import FOCUS_CHOICES, ConfigError, load_config
from .correlator import VisualCodeCorrelator
from .indexer import ProjectIndexer
from .insights import build_insights
from .logging import configure_logging
from .models import VisualElement
from .reporting import ReportRenderer
from .search import (
    COMPONENT_TYPES,
    SIMILARITY_MODES,
    ComponentNotFoundError,
    IndexSearchEngine,
    SearchQuery,
)
from .stores import IndexStore, NotIndexedError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_project_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-p",
        "--path",
        default=".",
        help="Path to the project root holding the index (defaults to current directory).",
    )


def _add_json_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print machine-readable JSON instead of Markdown.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uicontext",
        description="Index UI components and correlate live pages with their source.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    index_parser = subparsers.add_parser("index", help="Index the components and pages of a project.")
    _add_verbose_option(index_parser, suppress_default=True)
    index_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )

    search_parser = subparsers.add_parser("search", help="Search indexed components.")
    _add_verbose_option(search_parser, suppress_default=True)
    _add_project_option(search_parser)
    _add_json_option(search_parser)
    search_parser.add_argument("text", nargs="?", help="Free text matched against names, docs and source.")
    search_parser.add_argument("--tags", default="", help="Comma-separated tags to boost.")
    search_parser.add_argument("--type", dest="component_type", choices=COMPONENT_TYPES)
    search_parser.add_argument("--has-props", action=argparse.BooleanOptionalAction, default=None)
    search_parser.add_argument("--side-effects", action=argparse.BooleanOptionalAction, default=None)
    search_parser.add_argument("--used-in", default="", help="Comma-separated page ids.")
    search_parser.add_argument("--limit", type=int, default=10, help="Maximum results to print.")

    similar_parser = subparsers.add_parser("similar", help="Find components similar to another.")
    _add_verbose_option(similar_parser, suppress_default=True)
    _add_project_option(similar_parser)
    _add_json_option(similar_parser)
    similar_parser.add_argument("component", help="Component id or name.")
    similar_parser.add_argument("--mode", choices=SIMILARITY_MODES, default="semantic")
    similar_parser.add_argument("--limit", type=int, default=5)

    stats_parser = subparsers.add_parser("stats", help="Show project statistics.")
    _add_verbose_option(stats_parser, suppress_default=True)
    _add_project_option(stats_parser)
    _add_json_option(stats_parser)

    correlate_parser = subparsers.add_parser(
        "correlate",
        help="Correlate page elements captured to a JSON file with indexed components.",
    )
    _add_verbose_option(correlate_parser, suppress_default=True)
    _add_project_option(correlate_parser)
    _add_json_option(correlate_parser)
    correlate_parser.add_argument("elements", help="JSON file holding a list of visual elements.")
    correlate_parser.add_argument("--focus", choices=FOCUS_CHOICES, default="all")

    analyze_parser = subparsers.add_parser("analyze", help="Open a live page and correlate its elements.")
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_project_option(analyze_parser)
    _add_json_option(analyze_parser)
    analyze_parser.add_argument("url", help="Page URL to analyze.")
    analyze_parser.add_argument("--focus", choices=FOCUS_CHOICES, default=None)
    analyze_parser.add_argument("--selector", help="Wait for this selector before each capture.")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for uicontext commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))
    renderer = ReportRenderer()

    try:
        if args.command == "index":
            index = ProjectIndexer(args.path).index_project()
            print(
                f"Indexed {index.metadata.components_count} components and "
                f"{index.metadata.pages_count} pages ({index.metadata.framework})"
            )
        elif args.command == "search":
            engine = IndexSearchEngine(IndexStore(args.path).require())
            query = SearchQuery(
                text=args.text,
                tags=_split_csv(args.tags),
                component_type=args.component_type,
                has_props=args.has_props,
                has_side_effects=args.side_effects,
                used_in=_split_csv(args.used_in),
            )
            results = engine.search(query)[: max(0, args.limit)]
            if args.json:
                _print_json([result.to_dict() for result in results])
            else:
                print(renderer.search(args.text, results), end="")
        elif args.command == "similar":
            engine = IndexSearchEngine(IndexStore(args.path).require())
            target = engine.resolve(args.component)
            results = engine.find_similar(target.id, args.mode, args.limit)
            if args.json:
                _print_json([result.to_dict() for result in results])
            else:
                print(renderer.similar(target, args.mode, results), end="")
        elif args.command == "stats":
            insights = build_insights(IndexStore(args.path).require())
            if args.json:
                _print_json(insights.to_dict())
            else:
                print(renderer.insights(insights), end="")
        elif args.command == "correlate":
            elements = _read_elements(Path(args.elements))
            index = IndexStore(args.path).load()
            report = VisualCodeCorrelator().correlate(elements, index, focus=args.focus)
            if args.json:
                _print_json(report.to_dict())
            else:
                print(renderer.correlation(report), end="")
        elif args.command == "analyze":
            config = load_config(Path(args.path))
            analyzer = LiveAnalyzer(config.correlator)
            result = analyzer.analyze_sync(
                args.url, args.path, focus=args.focus, selector=args.selector
            )
            if args.json:
                _print_json(result.to_dict())
            else:
                print(renderer.correlation(result.report, analysis=result), end="")
        elif args.command == "serve":
            from .service import run_service

            run_service(host=args.host, port=args.port)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (NotIndexedError, ComponentNotFoundError, ConfigError) as exc:
        parser.exit(1, f"{exc}\n")
    except (FileNotFoundError, NotADirectoryError, ValueError) as exc:
        parser.exit(1, f"uicontext {args.command} failed: {exc}\n")
    except PageAutomationError as exc:
        parser.exit(1, f"uicontext {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _read_elements(path: Path) -> List[VisualElement]:
    try:
        payload: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc
    if isinstance(payload, dict):
        payload = payload.get("elements")
    if not isinstance(payload, list):
        raise ValueError(f"{path} must contain a list of elements")
    return [VisualElement.from_dict(item) for item in payload if isinstance(item, dict)]


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main(sys.argv[1:])
