"""
Row/field extractor.

Maps a raw import row (spreadsheet columns or scraped selector names)
onto the perfume candidate shape using a static synonym table.
Headers are matched case-insensitively after normalize_header(); fields
whose value cannot be coerced are omitted, never defaulted.
"""

from typing import Any, Callable, Optional
import structlog

from models.perfume import PerfumeCandidate
from parsers.brand_inference import infer_brand_from_title
from utils.text_utils import (
    normalize_header,
    is_blank,
    clean_text,
    parse_price,
    parse_int,
    split_list,
    parse_bool,
    parse_currency,
)

logger = structlog.get_logger(__name__)


# Ordered (canonical field, aliases). Earlier aliases win when a row has several.
FIELD_SYNONYMS: list[tuple[str, list[str]]] = [
    ("name", ["name", "product name", "title"]),
    ("brand", ["brand", "manufacturer", "company"]),
    ("description", ["description", "product description", "details", "about"]),
    ("price", ["price", "cost", "amount", "a-offscreen", "a-price", "a-price-whole"]),
    ("currency", ["currency"]),
    ("amazon_url", [
        "amazon url", "amazon link", "amazon-product-link",
        "product url", "product link", "url", "link",
    ]),
    ("amazon_asin", ["asin", "amazon asin", "product id"]),
    ("image_url", [
        "image url", "image", "image src", "img", "picture", "photo",
        "product-image-source", "s-image src (2)",
    ]),
    ("fragrantica_url", ["fragrantica url", "fragrantica", "fragrantica link"]),
    ("is_available", ["is available", "available", "availability", "in stock"]),
    ("longevity", ["longevity", "longevity rating"]),
    ("sillage", ["sillage", "sillage rating"]),
    ("projection", ["projection", "projection rating"]),
    ("notes", ["notes", "fragrance notes", "scent notes"]),
    ("category", ["category", "fragrance type", "type"]),
    ("season", ["season", "seasons", "best season"]),
    ("occasion", ["occasion", "occasions", "best for"]),
]

# Coercion per canonical field; anything not listed is plain text
FIELD_COERCERS: dict[str, Callable[[Any], Any]] = {
    "price": parse_price,
    "currency": parse_currency,
    "is_available": parse_bool,
    "longevity": parse_int,
    "sillage": parse_int,
    "projection": parse_int,
    "notes": split_list,
    "season": split_list,
    "occasion": split_list,
}


def _index_row(row: dict[Any, Any]) -> dict[str, Any]:
    """Normalized header → first non-blank value under that header."""
    indexed: dict[str, Any] = {}
    for header, value in row.items():
        key = normalize_header(header)
        if not key or is_blank(value) or key in indexed:
            continue
        indexed[key] = value
    return indexed


def extract_fields(
    row: dict[Any, Any],
    synonyms: Optional[list[tuple[str, list[str]]]] = None
) -> dict[str, Any]:
    """
    Extract the fields that could be confidently mapped from a raw row.

    Args:
        row: Header/selector name → raw value (str, number or None)
        synonyms: Synonym table (defaults to FIELD_SYNONYMS)

    Returns:
        Canonical field → coerced value, only for mapped fields
    """
    indexed = _index_row(row)
    fields: dict[str, Any] = {}

    for canonical, aliases in synonyms or FIELD_SYNONYMS:
        coerce = FIELD_COERCERS.get(canonical, clean_text)
        for alias in aliases:
            key = normalize_header(alias)
            if key not in indexed:
                continue
            value = coerce(indexed[key])
            if value is not None:
                fields[canonical] = value
                break
            logger.debug(
                "field_coercion_failed",
                field=canonical,
                header=alias,
                value=str(indexed[key])[:50]
            )

    return fields


def build_candidate(
    row: dict[Any, Any],
    brand_hint: Optional[str] = None,
    synonyms: Optional[list[tuple[str, list[str]]]] = None
) -> PerfumeCandidate:
    """
    Build a candidate record from a raw row.

    When no brand column was mapped, the brand hint (e.g. from a
    "<Brand> perfume" search query) is used, then title inference.

    Args:
        row: Raw import row
        brand_hint: Brand to assume when the row has none
        synonyms: Synonym table override

    Returns:
        PerfumeCandidate with only the mapped fields set
    """
    fields = extract_fields(row, synonyms)

    if "brand" not in fields:
        brand = clean_text(brand_hint) or infer_brand_from_title(fields.get("name"))
        if brand:
            fields["brand"] = brand
            logger.debug(
                "brand_inferred",
                name=fields.get("name"),
                brand=brand,
                from_hint=bool(clean_text(brand_hint))
            )

    return PerfumeCandidate(**fields)
