"""
Row and page parsers.

Spreadsheet rows and scraped result tiles both become raw rows
(header/selector name → value) that field_extractor maps onto
PerfumeCandidate.
"""

from parsers.field_extractor import (
    FIELD_SYNONYMS,
    extract_fields,
    build_candidate,
)
from parsers.brand_inference import (
    infer_brand_from_title,
    brand_hint_from_query,
)
from parsers.spreadsheet_parser import (
    read_spreadsheet_rows,
    describe_spreadsheet,
    find_latest_spreadsheet,
)
from parsers.amazon_parser import (
    build_search_url,
    build_product_url,
    extract_asin_from_url,
    parse_search_results,
    parse_product_image,
)

__all__ = [
    "FIELD_SYNONYMS",
    "extract_fields",
    "build_candidate",
    "infer_brand_from_title",
    "brand_hint_from_query",
    "read_spreadsheet_rows",
    "describe_spreadsheet",
    "find_latest_spreadsheet",
    "build_search_url",
    "build_product_url",
    "extract_asin_from_url",
    "parse_search_results",
    "parse_product_image",
]
