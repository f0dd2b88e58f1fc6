"""
Scrape marketplace search results into the perfume catalog.

Usage:
    # One query, two result pages, plain HTTP
    python scripts/scrape_amazon_catalog.py --query "Dior perfume" --pages 2

    # Several brand queries through the headless browser, window visible
    python scripts/scrape_amazon_catalog.py --brands "Chanel perfume,Creed perfume" \
        --strategy browser --show --dry-run

Without --query or --brands a default list of brand queries is scraped.
"""

import argparse
import os
import sys

# Allow imports from the project root when running as a script
_root_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..")
sys.path.insert(0, _root_dir)

from dotenv import load_dotenv
load_dotenv(os.path.join(_root_dir, ".env"))

from config import settings, configure_logging
from exceptions import AppError
from integrations.page_fetcher import get_page_fetcher, FETCH_STRATEGIES
from services.import_service import CatalogImportService, build_dispatcher_factory
from services.scrape_service import CatalogScrapeService
from scripts.reporting import print_header, print_import_summary

DEFAULT_QUERIES = [
    "Dior perfume",
    "Chanel perfume",
    "YSL perfume",
    "Tom Ford perfume",
    "Creed perfume",
    "Armani perfume",
    "Versace perfume",
    "Gucci perfume",
    "Paco Rabanne perfume",
    "Montblanc perfume",
]

MIN_DELAY_SECONDS = 0.25


def parse_queries(query: str, brands: str) -> list[str]:
    if query:
        return [query]
    queries = [b.strip() for b in brands.split(",") if b.strip()]
    return queries or list(DEFAULT_QUERIES)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scrape marketplace search results into the perfume catalog."
    )
    parser.add_argument("--query", default="", help='Single search query, e.g. "Dior perfume"')
    parser.add_argument(
        "--brands",
        default="",
        help='Comma-separated queries, e.g. "Dior perfume,Chanel perfume"',
    )
    parser.add_argument("--pages", type=int, default=1, help="Result pages per query (default: 1)")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and map only; write nothing",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=settings.request_delay_seconds,
        help=f"Seconds between page requests (default: {settings.request_delay_seconds})",
    )
    parser.add_argument(
        "--strategy",
        choices=FETCH_STRATEGIES,
        default=settings.fetch_strategy,
        help=f"Page fetcher (default: {settings.fetch_strategy})",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the browser window (browser strategy only)",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    queries = parse_queries(args.query, args.brands)
    pages = max(1, args.pages)
    delay = max(MIN_DELAY_SECONDS, args.delay)

    print_header(f"CATALOG SCRAPE -- {args.strategy}")
    print(f"Queries:  {', '.join(queries)}")
    print(f"Pages:    {pages}")
    print(f"Delay:    {delay}s")
    print(f"Dry run:  {args.dry_run}")
    print()

    dispatcher_factory = build_dispatcher_factory()

    try:
        if args.dry_run:
            import_service = CatalogImportService(dispatcher_factory=dispatcher_factory)
        else:
            # Connect before the first page is fetched
            import_service = CatalogImportService(dispatcher=dispatcher_factory())

        with get_page_fetcher(
            args.strategy,
            delay_seconds=delay,
            headless=False if args.show else None,
        ) as fetcher:
            service = CatalogScrapeService(fetcher, import_service, settings.amazon_base_url)
            summary = service.scrape(queries, pages=pages, dry_run=args.dry_run)
    except AppError as e:
        print(f"ERROR: {e.message}")
        return 1

    print_import_summary(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
