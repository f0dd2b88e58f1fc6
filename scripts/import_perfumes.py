"""
Import perfumes from a catalog spreadsheet export.

Usage:
    # Preview the mapping, nothing is written
    python scripts/import_perfumes.py --file amazon_web_scrapes/export.xlsx --dry-run

    # Import the newest spreadsheet in SPREADSHEET_DIR, replacing the table
    python scripts/import_perfumes.py --batch 100 --clear
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
from parsers.spreadsheet_parser import find_latest_spreadsheet
from services.import_service import CatalogImportService, build_dispatcher_factory
from scripts.reporting import print_header, print_import_summary

MIN_BATCH_SIZE = 10


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Import perfumes from an .xlsx/.csv export into the catalog."
    )
    parser.add_argument(
        "--file",
        default="",
        help=f"Spreadsheet to import (default: newest file in {settings.spreadsheet_dir}/)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Map and validate only; print a sample and write nothing",
    )
    parser.add_argument(
        "--batch",
        type=int,
        default=settings.import_batch_size,
        help=f"Records per batch (default: {settings.import_batch_size}, minimum {MIN_BATCH_SIZE})",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete existing perfumes before importing (ignored with --dry-run)",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    path = args.file or find_latest_spreadsheet(settings.spreadsheet_dir)
    if not path:
        print(f"ERROR: No spreadsheet found. Provide one with --file or place one under {settings.spreadsheet_dir}/.")
        return 1

    batch_size = max(MIN_BATCH_SIZE, args.batch)

    print_header(f"PERFUME IMPORT -- {os.path.basename(str(path))}")
    print(f"Reading:  {path}")
    print(f"Dry run:  {args.dry_run}")
    print(f"Batch:    {batch_size}")
    if args.clear and not args.dry_run:
        print("Clearing: existing perfumes will be deleted first")
    print()

    dispatcher_factory = build_dispatcher_factory(batch_size=batch_size)

    try:
        if args.dry_run:
            service = CatalogImportService(dispatcher_factory=dispatcher_factory)
        else:
            # Connect before the spreadsheet is read
            service = CatalogImportService(dispatcher=dispatcher_factory())

        summary = service.import_spreadsheet(path, dry_run=args.dry_run, clear=args.clear)
    except AppError as e:
        print(f"ERROR: {e.message}")
        return 1

    print_import_summary(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
