"""
Amazon search-result and product-page parser.

Produces raw rows keyed by selector name (asin, title, url, image,
price) so scraped items go through the same field extractor as
spreadsheet rows. Several selectors are tried per field, in order; a
field whose selectors all miss is None.
"""

import re
from typing import Any, Optional
from urllib.parse import quote_plus, urljoin

import structlog
from bs4 import BeautifulSoup, Tag

from exceptions import PageParseError

logger = structlog.get_logger(__name__)

# Result tiles, most specific first
RESULT_ITEM_SELECTORS = [
    "div.s-main-slot div.s-result-item[data-asin]",
    "div[data-component-type='s-search-result'][data-asin]",
]

RESULT_CONTAINER_SELECTORS = [
    "div.s-main-slot",
    "div.s-search-results",
]

TITLE_SELECTORS = [
    "h2 a.a-link-normal span",
    "h2 span",
    "[data-cy='title-recipe'] span",
]

LINK_SELECTORS = [
    "h2 a.a-link-normal",
    "a.a-link-normal.s-no-outline",
    "h2 a",
    "[data-cy='title-recipe'] a",
]

IMAGE_SELECTORS = ["img.s-image"]

PRODUCT_IMAGE_SELECTORS = [
    "#landingImage",
    "img#imgBlkFront",
    "img.a-dynamic-image",
    "div.imgTagWrapper img",
]

CAPTCHA_MARKERS = ["validateCaptcha", "Robot Check", "Enter the characters you see below"]

_ASIN_IN_URL = re.compile(r"/(?:dp|gp/product)/([A-Z0-9]{10})")


# ===================
# URL HELPERS
# ===================

def build_search_url(base_url: str, query: str, page: int = 1) -> str:
    """Search results URL for a query and 1-based page number."""
    return f"{base_url.rstrip('/')}/s?k={quote_plus(query)}&page={page}"


def build_product_url(base_url: str, asin: str) -> str:
    """Product detail page URL for an ASIN."""
    return f"{base_url.rstrip('/')}/dp/{asin}"


def extract_asin_from_url(url: Optional[str]) -> Optional[str]:
    """ASIN embedded in a /dp/ or /gp/product/ URL, if any."""
    if not url:
        return None
    match = _ASIN_IN_URL.search(url)
    return match.group(1) if match else None


def to_absolute_url(href: Optional[str], base_url: str) -> Optional[str]:
    if not href:
        return None
    return urljoin(base_url.rstrip("/") + "/", href)


# ===================
# FIELD HELPERS
# ===================

def _first_text(node: Tag, selectors: list[str]) -> Optional[str]:
    for selector in selectors:
        found = node.select_one(selector)
        if found:
            text = " ".join(found.get_text(" ", strip=True).split())
            if text:
                return text
    return None


def _first_attr(node: Tag, selectors: list[str], attrs: list[str]) -> Optional[str]:
    for selector in selectors:
        found = node.select_one(selector)
        if not found:
            continue
        for attr in attrs:
            value = found.get(attr)
            if value:
                return str(value).strip()
    return None


def _extract_price(node: Tag) -> Optional[str]:
    """Price text from whole/fraction spans, else the screen-reader copy."""
    whole_el = node.select_one("span.a-price span.a-price-whole")
    if whole_el:
        whole = re.sub(r"[^0-9]", "", whole_el.get_text())
        frac_el = node.select_one("span.a-price span.a-price-fraction")
        frac = re.sub(r"[^0-9]", "", frac_el.get_text()) if frac_el else ""
        if whole:
            return f"{whole}.{frac or '00'}"

    offscreen = node.select_one("span.a-price span.a-offscreen")
    if offscreen:
        text = offscreen.get_text(strip=True)
        return text or None
    return None


# ===================
# PAGE PARSERS
# ===================

def _is_captcha(html: str) -> bool:
    head = html[:20000]
    return any(marker in head for marker in CAPTCHA_MARKERS)


def parse_search_results(html: str, base_url: str) -> list[dict[str, Any]]:
    """
    Parse a search results page into raw rows.

    Args:
        html: Page markup (plain HTTP response or rendered browser DOM)
        base_url: Marketplace base for resolving relative links

    Returns:
        One dict per result tile with keys asin, title, url, image, price.
        Tiles without an ASIN or title are skipped.

    Raises:
        PageParseError: Captcha page, or no result container at all
    """
    if not html or not html.strip():
        raise PageParseError("empty document")
    if _is_captcha(html):
        raise PageParseError("captcha")

    soup = BeautifulSoup(html, "html.parser")

    nodes: list[Tag] = []
    for selector in RESULT_ITEM_SELECTORS:
        nodes = soup.select(selector)
        if nodes:
            break

    if not nodes and not any(soup.select_one(s) for s in RESULT_CONTAINER_SELECTORS):
        raise PageParseError("result container not found")

    rows: list[dict[str, Any]] = []
    seen: set[str] = set()
    for node in nodes:
        asin = (node.get("data-asin") or "").strip()
        if not asin or asin in seen:
            continue
        title = _first_text(node, TITLE_SELECTORS)
        if not title:
            continue
        seen.add(asin)

        href = _first_attr(node, LINK_SELECTORS, ["href"])
        rows.append({
            "asin": asin,
            "title": title,
            "url": to_absolute_url(href, base_url),
            "image": _first_attr(node, IMAGE_SELECTORS, ["src", "data-src"]),
            "price": _extract_price(node),
        })

    logger.debug("search_results_parsed", items=len(rows), tiles=len(nodes))
    return rows


def parse_product_image(html: str) -> Optional[str]:
    """
    Main image URL from a product detail page.

    Returns:
        Image URL, or None when no known selector matches
    """
    if not html:
        return None
    soup = BeautifulSoup(html, "html.parser")
    return _first_attr(
        soup,
        PRODUCT_IMAGE_SELECTORS,
        ["src", "data-old-hires", "data-src"]
    )
