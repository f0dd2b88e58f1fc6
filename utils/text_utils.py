"""
Text utilities for coercing raw spreadsheet / scraped values.

Every helper returns None when the value cannot be coerced, so callers
can omit the field instead of storing a default.
"""

import math
import re
import unicodedata
from typing import Any, Optional

LIST_DELIMITERS = re.compile(r"[,;|]")

_TRUE_WORDS = {"true", "yes", "y", "1", "in stock", "available"}
_FALSE_WORDS = {"false", "no", "n", "0", "out of stock", "unavailable", "currently unavailable"}


def normalize_header(header: Any) -> str:
    """
    Normalize a column header or selector name for lookup.

    - "  Product_Name " → "product name"
    - "amazon-product-link" → "amazon product link"

    Args:
        header: Raw header (may be non-string, e.g. a numeric column name)

    Returns:
        Lower-case key with '_'/'-' as spaces and collapsed whitespace
    """
    if header is None:
        return ""
    text = unicodedata.normalize("NFKC", str(header))
    text = text.replace("_", " ").replace("-", " ")
    return " ".join(text.lower().split())


def is_blank(value: Any) -> bool:
    """True for None, NaN and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.replace(" ", " ").strip():
        return True
    return False


def clean_text(value: Any) -> Optional[str]:
    """
    Trim a raw value into text.

    Integral floats (pandas reads "123" columns as 123.0) lose the ".0".
    """
    if is_blank(value):
        return None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).replace(" ", " ").strip()
    return text or None


def parse_price(value: Any) -> Optional[float]:
    """
    Parse a price-like value into a number.

    Strips currency symbols, spaces and thousands separators:
    - "R1,250.00" → 1250.0
    - "€ 1.250,50" → 1250.5
    - "R 999" → 999.0

    Returns:
        float, or None when no number can be read
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None

    text = str(value).replace(" ", "").replace(" ", "")
    text = re.sub(r"[^\d.,\-]", "", text)
    if not re.search(r"\d", text):
        return None

    last_comma = text.rfind(",")
    last_dot = text.rfind(".")
    if last_comma > last_dot and re.search(r",\d{1,2}$", text):
        # Decimal comma: dots (if any) are thousands separators
        text = text.replace(".", "").replace(",", ".")
    else:
        text = text.replace(",", "")

    match = re.match(r"-?\d+(?:\.\d+)?", text)
    if not match:
        return None
    number = float(match.group(0))
    return number if math.isfinite(number) else None


def parse_int(value: Any) -> Optional[int]:
    """
    Parse an integer rating.

    Accepts ints, integral floats and numeric strings ("4", "4.0", " 3 ").
    Non-integral or non-numeric values return None.
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def split_list(value: Any) -> Optional[list[str]]:
    """
    Split a delimited value on ',', ';' or '|', dropping empty tokens.

    Already-split lists are trimmed the same way.
    """
    if isinstance(value, (list, tuple)):
        tokens = [clean_text(item) for item in value]
    else:
        text = clean_text(value)
        if text is None:
            return None
        tokens = [token.strip() for token in LIST_DELIMITERS.split(text)]
    tokens = [token for token in tokens if token]
    return tokens or None


def parse_bool(value: Any) -> Optional[bool]:
    """Parse availability-style flags ("yes", "In Stock", 0, True...)."""
    if isinstance(value, bool):
        return value
    text = clean_text(value)
    if text is None:
        return None
    word = " ".join(text.lower().split())
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return None


def parse_currency(value: Any) -> Optional[str]:
    """Three-letter currency code, upper-cased ("zar" → "ZAR")."""
    text = clean_text(value)
    if text is None:
        return None
    code = text.upper()
    return code if re.fullmatch(r"[A-Z]{3}", code) else None
