"""
Fill in perfume image URLs from marketplace product pages.

Usage:
    # Every perfume without an image
    python scripts/scrape_amazon_images.py --limit 500

    # One perfume by ASIN (matched on the ASIN column or a /dp/<ASIN> URL)
    python scripts/scrape_amazon_images.py B0ABCDEF12
"""

import argparse
import os
import sys

# Allow imports from the project root when running as a script
_root_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..")
sys.path.insert(0, _root_dir)

from dotenv import load_dotenv
load_dotenv(os.path.join(_root_dir, ".env"))

from config import settings, configure_logging, create_supabase_client
from exceptions import AppError
from integrations.page_fetcher import get_page_fetcher, FETCH_STRATEGIES
from services.perfume_service import PerfumeService
from services.image_service import ImageRefreshService
from scripts.reporting import print_header, print_image_summary

DEFAULT_LIMIT = 2000
MIN_DELAY_SECONDS = 0.25


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fetch product images for perfumes that have none."
    )
    parser.add_argument("asin", nargs="?", default="", help="Refresh a single perfume by ASIN")
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_LIMIT,
        help=f"Maximum perfumes to process (default: {DEFAULT_LIMIT})",
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
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    print_header("IMAGE REFRESH -- " + (args.asin or f"missing images (limit {args.limit})"))

    try:
        client = create_supabase_client()
        perfume_service = PerfumeService(client, table=settings.perfumes_table)

        with get_page_fetcher(
            args.strategy,
            delay_seconds=max(MIN_DELAY_SECONDS, args.delay),
        ) as fetcher:
            service = ImageRefreshService(perfume_service, fetcher, settings.amazon_base_url)
            if args.asin:
                summary = service.refresh_asin(args.asin.strip().upper())
            else:
                summary = service.refresh_missing_images(limit=max(1, args.limit))
    except AppError as e:
        print(f"ERROR: {e.message}")
        return 1

    print_image_summary(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
