"""
Apply hand-curated image URLs to perfumes matched by brand + name.

The overrides file is a JSON list:
    [{"brand": "Dior", "name": "Sauvage", "image_url": "https://..."}]

Usage:
    python scripts/apply_image_overrides.py --file image_overrides.json
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
from services.perfume_service import PerfumeService
from services.image_service import ImageRefreshService, load_image_overrides
from scripts.reporting import print_header, print_image_summary

DEFAULT_OVERRIDES_FILE = "image_overrides.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Set image URLs from an overrides JSON file."
    )
    parser.add_argument(
        "--file",
        default=DEFAULT_OVERRIDES_FILE,
        help=f"Overrides file (default: {DEFAULT_OVERRIDES_FILE})",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    print_header(f"IMAGE OVERRIDES -- {args.file}")

    try:
        overrides = load_image_overrides(args.file)
        client = create_supabase_client()
        service = ImageRefreshService(PerfumeService(client, table=settings.perfumes_table))
        summary = service.apply_overrides(overrides)
    except AppError as e:
        print(f"ERROR: {e.message}")
        return 1

    print_image_summary(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
