# main.py

import argparse
import sys
from typing import List, Optional

import structlog

from src.application.index_service import ALL_COLLECTIONS, select_collections
from src.domain.exceptions import SearchError
from src.domain.models import SearchContext
from src.infrastructure.container import Container, build_container
from src.infrastructure.logging_config import configure_logging
from src.infrastructure.settings import get_settings
from src.interface.cli import (
    ask_continue,
    ask_next_page,
    display_error,
    display_export,
    display_info,
    display_results,
    display_sync_report,
    display_welcome_banner,
    prompt_for_collection,
    prompt_for_page_size,
    prompt_for_query,
)


log = structlog.get_logger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    container = build_container(settings)
    try:
        return args.handler(container, args)
    except (SearchError, ValueError) as error:
        log.debug("command.failed", command=args.command, exc_info=error)
        display_error(str(error))
        return 1
    finally:
        container.close()


# ── Commands ──────────────────────────────────────────────────────────────────

def run_index(container: Container, args: argparse.Namespace) -> int:
    collections = select_collections(container.search_service.registry, args.collections)

    display_info("Building search index…")
    reports = container.indexer.sync(collections, truncate=args.truncate)
    display_sync_report(reports)
    return 0


def run_export(container: Container, args: argparse.Namespace) -> int:
    collections = select_collections(container.search_service.registry, args.collections)

    for collection in collections:
        display_export(collection.name, container.search_service.export(collection.record_type))
    return 0


def run_search(container: Container, args: argparse.Namespace) -> int:
    registry = container.search_service.registry
    display_welcome_banner()

    while True:
        collection = registry.by_name(prompt_for_collection(registry.names()))
        query = prompt_for_query()
        page_size = prompt_for_page_size()
        page = 1

        while True:
            try:
                context = SearchContext(collection.record_type, query, page, page_size)
                result = container.search_service.search(context)
            except (SearchError, ValueError) as error:
                display_error(str(error))
                break

            display_results(query, result, page)
            if page * page_size >= result.total_count or not ask_next_page():
                break
            page += 1

        if not ask_continue():
            return 0


# ── Argument parsing ──────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage and query search collections.")
    parser.add_argument("--log-level", help="Overrides TYPESENSE_LOG_LEVEL.")
    commands = parser.add_subparsers(dest="command", required=True)

    index = commands.add_parser("index", help="Build the search index for the given collection(s).")
    _add_collections_option(index)
    index.add_argument(
        "-t", "--truncate",
        action="store_true",
        help="Truncate the given collection(s) before indexing.",
    )
    index.set_defaults(handler=run_index)

    export = commands.add_parser("export", help="Print every document of the given collection(s).")
    _add_collections_option(export)
    export.set_defaults(handler=run_export)

    search = commands.add_parser("search", help="Query collections interactively.")
    search.set_defaults(handler=run_search)

    return parser


def _add_collections_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c", "--collections",
        nargs="+",
        default=[],
        metavar="NAME",
        help=f'Collection name(s), or "{ALL_COLLECTIONS}" (default).',
    )


if __name__ == "__main__":
    sys.exit(main())
