"""Command-line interface for the schema_scraper library.

Schemas are read from JSON files::

    # One or more URLs
    schema-scraper scrape https://example.com --schema champion.json

    # A paginated listing, pages 1..12
    schema-scraper paginate "https://example.com/diary/page/{page}/" --pages 12 --schema diary.json

    # Map plain JSON records (a list or a single object)
    schema-scraper map records.json --schema mapping.json

    # Render JavaScript first, write the data to a file
    schema-scraper --backend browser scrape https://example.com --schema s.json --output data.json

Entry point is configured in pyproject.toml as ``schema-scraper = "schema_scraper.cli:main"``.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import io
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, List

from schema_scraper.api import Scraper, paginate
from schema_scraper.exceptions import ConfigError
from schema_scraper.expressions import SYNTAXES
from schema_scraper.mapper import Mapper
from schema_scraper.models import ScrapeResult

__all__ = ["main"]


def _load_json(path: str, what: str) -> Any:
    """Read a JSON file, raising ConfigError with a readable message."""
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read {what} file {path!r}: {exc.strerror}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{what.capitalize()} file {path!r} is not valid JSON: {exc}") from exc


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="schema-scraper",
        description="Scrape structured data by resolving a schema against pages or records",
    )
    parser.add_argument(
        "--backend",
        choices=["http", "browser"],
        default="http",
        help="Acquisition backend (default: http)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Mode")

    schema_help = "JSON file holding the schema"
    output_help = "Write the resolved data to this JSON file instead of stdout"

    # --- scrape ---
    scrape_parser = subparsers.add_parser("scrape", help="Scrape one or more URLs")
    scrape_parser.add_argument("urls", nargs="+", help="URLs to scrape")
    scrape_parser.add_argument("--schema", "-s", required=True, help=schema_help)
    scrape_parser.add_argument("--output", "-o", help=output_help)
    scrape_parser.add_argument(
        "--max-concurrent",
        type=int,
        default=5,
        help="Maximum concurrent requests, HTTP backend only (default: 5)",
    )

    # --- paginate ---
    page_parser = subparsers.add_parser("paginate", help="Scrape pages of a {page} URL template")
    page_parser.add_argument("template", help="URL containing a {page} placeholder")
    page_parser.add_argument("--pages", type=int, required=True, help="Number of pages")
    page_parser.add_argument("--schema", "-s", required=True, help=schema_help)
    page_parser.add_argument("--output", "-o", help=output_help)
    page_parser.add_argument(
        "--max-concurrent",
        type=int,
        default=5,
        help="Maximum concurrent requests, HTTP backend only (default: 5)",
    )

    # --- map ---
    map_parser = subparsers.add_parser("map", help="Map JSON records to a schema")
    map_parser.add_argument("records", help="JSON file with a record or a list of records")
    map_parser.add_argument("--schema", "-s", required=True, help=schema_help)
    map_parser.add_argument("--output", "-o", help=output_help)
    map_parser.add_argument(
        "--syntax",
        choices=sorted(SYNTAXES),
        default="dunder",
        help="Expression syntax in the schema (default: dunder)",
    )

    return parser


@contextlib.contextmanager
def _suppress_crawl4ai_stdout():
    """Redirect stdout to devnull during crawl4ai operations.

    crawl4ai writes progress lines (e.g., '[FETCH]...') directly to stdout,
    polluting JSON output. We yield the real stdout so results can still be
    printed.
    """
    real_stdout = sys.stdout
    sys.stdout = open(os.devnull, "w")
    try:
        yield real_stdout
    finally:
        sys.stdout.close()
        sys.stdout = real_stdout


def _write_output(data: Any, path: str) -> None:
    Path(path).write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")


def _print_result(
    result: ScrapeResult,
    *,
    jsonl: bool = False,
    file: "io.TextIOBase | None" = None,
) -> None:
    """Print a ScrapeResult as JSON.

    Args:
        result: The ScrapeResult to print.
        jsonl: If True, output compact single-line JSON (JSONL format).
               If False, output pretty-printed JSON.
        file: Output stream (defaults to sys.stdout).
    """
    out = file or sys.stdout
    output = result.model_dump()
    if jsonl:
        print(json.dumps(output, default=str), file=out, flush=True)
    else:
        print(json.dumps(output, indent=2, default=str), file=out)


def _emit_results(results: List[ScrapeResult], output: "str | None", file: Any) -> None:
    if output:
        _write_output([r.data for r in results], output)
        return
    if len(results) == 1:
        _print_result(results[0], file=file)
        return
    for result in results:
        _print_result(result, jsonl=True, file=file)


async def _scrape_urls(args: argparse.Namespace, urls: List[str]) -> None:
    schema = _load_json(args.schema, "schema")

    with _suppress_crawl4ai_stdout() as real_stdout:
        async with Scraper(
            backend=args.backend,
            max_concurrent=args.max_concurrent,
            verbose=args.verbose,
        ) as s:
            results = await s.scrape_many(urls, schema)
        _emit_results(results, args.output, real_stdout)


async def _run_scrape(args: argparse.Namespace) -> None:
    """Execute the scrape command."""
    await _scrape_urls(args, args.urls)


async def _run_paginate(args: argparse.Namespace) -> None:
    """Execute the paginate command."""
    await _scrape_urls(args, paginate(args.template, args.pages))


async def _run_map(args: argparse.Namespace) -> None:
    """Execute the map command."""
    schema = _load_json(args.schema, "schema")
    records = _load_json(args.records, "records")

    mapper = Mapper(schema, syntax=SYNTAXES[args.syntax])
    if isinstance(records, list):
        data = await mapper.map_list(records)
    else:
        data = await mapper.map(records)

    if args.output:
        _write_output(data, args.output)
    else:
        print(json.dumps(data, indent=2, default=str))


def main(argv: "List[str] | None" = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    commands = {
        "scrape": _run_scrape,
        "paginate": _run_paginate,
        "map": _run_map,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(handler(args))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
