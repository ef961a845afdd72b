"""CLI that indexes an XML corpus and runs one conjunctive query against it."""

# ruff: noqa: T201  # CLI intentionally prints results and timings

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys
import time

import orjson
from pydantic import ValidationError

from cercami.config import Settings
from cercami.domain.model import SearchReport
from cercami.errors import CercamiError, UsageError
from cercami.observability import (
    configure_logging,
    configure_trace_exporter,
    get_metrics,
    init_tracing,
    set_tracing_enabled,
)
from cercami.search.engine import SearchEngine


logger = logging.getLogger(__name__)

_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cercami",
        description="Index an XML document collection in memory and list documents containing every query word",
    )
    parser.add_argument(
        "corpus",
        nargs="?",
        type=Path,
        help="Path to the XML corpus (root element with repeated <doc> entries)",
    )
    parser.add_argument(
        "query",
        nargs="?",
        help="Query words, combined with implicit AND",
    )
    parser.add_argument(
        "--show-documents",
        action="store_true",
        help="Print title, url and text of every matching document",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the search report as JSON instead of plain text",
    )
    parser.add_argument(
        "--backend",
        choices=("bitmap", "sorted-array"),
        help="Postings representation (default: CERCAMI_POSTINGS_BACKEND or bitmap)",
    )
    parser.add_argument(
        "--stemmer",
        choices=("snowball", "porter", "none"),
        help="Stemming algorithm (default: CERCAMI_STEMMER or snowball)",
    )
    parser.add_argument(
        "--log-level",
        choices=_LOG_LEVELS,
        help="Log level for diagnostics written to stderr (default: CERCAMI_LOG_LEVEL or warning)",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Append Prometheus metrics for the run",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Write OpenTelemetry spans for the build and search phases to stderr as JSON",
    )
    return parser


def _validate_args(args: argparse.Namespace) -> None:
    if args.corpus is None:
        raise UsageError("Didn't get a corpus path")
    if args.query is None:
        raise UsageError("Didn't get a query")


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    updates: dict[str, object] = {}
    if args.backend:
        updates["postings_backend"] = args.backend
    if args.stemmer:
        updates["stemmer"] = args.stemmer
    if args.log_level:
        updates["log_level"] = args.log_level
    if args.trace:
        updates["tracing_enabled"] = True
        updates["tracing_exporter"] = "console"
    return settings.model_copy(update=updates) if updates else settings


def run(corpus: Path, query: str, settings: Settings, *, show_documents: bool = False) -> SearchReport:
    """Build the index from ``corpus`` and evaluate ``query`` against it."""
    start = time.perf_counter()
    engine = SearchEngine.from_corpus(corpus, settings)
    build_seconds = time.perf_counter() - start

    start = time.perf_counter()
    doc_ids = engine.search(query)
    search_seconds = time.perf_counter() - start

    return SearchReport(
        query=query,
        terms=engine.query_engine.terms(query),
        doc_ids=doc_ids,
        documents=engine.render(doc_ids) if show_documents else None,
        stats=engine.stats(),
        build_seconds=build_seconds,
        search_seconds=search_seconds,
    )


def _print_report(report: SearchReport, *, json_output: bool) -> None:
    if json_output:
        payload = report.model_dump(mode="json", exclude_none=True)
        payload["result_count"] = report.result_count
        sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")
        return

    print(report.doc_ids)
    for document in report.documents or []:
        print(f"[{document.id}] {document.title}")
        print(f"    {document.url}")
        print(f"    {document.text}")
    print(f"Number of results: {report.result_count}")
    print(f"Total number of indexed tokens: {report.stats.term_count}")
    print(f"Number of indexed documents: {report.stats.document_count}")
    print(f"Indexing: {report.build_seconds:.3f}s")
    print(f"Search: {report.search_seconds * 1_000_000:.0f}μs")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = _apply_overrides(Settings(), args)
    except ValidationError as exc:
        configure_logging()
        logger.error("Invalid configuration: %s", exc)
        return 1

    configure_logging(settings.log_level, settings.log_json)
    set_tracing_enabled(settings.tracing_enabled)
    if settings.tracing_enabled:
        configure_trace_exporter(settings.tracing_exporter, init_tracing(settings.service_name))

    try:
        _validate_args(args)
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        logger.error("Problem parsing arguments: %s", exc)
        return 1

    try:
        report = run(args.corpus, args.query, settings, show_documents=args.show_documents)
    except CercamiError as exc:
        logger.error("Application error: %s", exc)
        return 1

    _print_report(report, json_output=args.json)
    if args.metrics:
        sys.stdout.write(get_metrics().decode("utf-8"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
