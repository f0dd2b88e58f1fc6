"""
Print the header row and first rows of a catalog spreadsheet.

Used to check which columns an export has before tuning the field
synonym table.

Usage:
    python scripts/examine_spreadsheet.py --file amazon_web_scrapes/export.xlsx --rows 5
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
from parsers.field_extractor import extract_fields
from parsers.spreadsheet_parser import describe_spreadsheet, find_latest_spreadsheet
from scripts.reporting import print_header


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect a catalog spreadsheet.")
    parser.add_argument(
        "--file",
        default="",
        help=f"Spreadsheet to inspect (default: newest file in {settings.spreadsheet_dir}/)",
    )
    parser.add_argument("--rows", type=int, default=3, help="Rows to print (default: 3)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    path = args.file or find_latest_spreadsheet(settings.spreadsheet_dir)
    if not path:
        print(f"ERROR: No spreadsheet found. Provide one with --file or place one under {settings.spreadsheet_dir}/.")
        return 1

    try:
        preview = describe_spreadsheet(path, sample_size=max(1, args.rows))
    except AppError as e:
        print(f"ERROR: {e.message}")
        return 1

    print_header(f"SPREADSHEET -- {os.path.basename(str(path))}")
    print(f"Sheet:    {preview.sheet_name}")
    print(f"Rows:     {preview.row_count}")
    print(f"Headers:  {', '.join(preview.headers)}")

    for number, row in enumerate(preview.sample_rows, start=2):
        print()
        print(f"--- Row {number} ---")
        for header, value in row.items():
            print(f"  {header}: {value}")
        mapped = extract_fields(row)
        print(f"  => mapped: {', '.join(sorted(mapped)) or '(nothing)'}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
