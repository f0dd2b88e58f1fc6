"""
Brand inference from marketplace product titles.

Heuristic only: it takes the leading words of the title. Titles that lead
with the product line ("Sauvage - Dior"), lower-case brands or
single-word brands followed by a capitalized line name ("Dior Sauvage")
give the wrong answer.
"""

import re
from typing import Optional

# Multi-word brands the capitalization rule would cut short or mangle
KNOWN_MULTI_WORD_BRANDS = [
    "Yves Saint Laurent",
    "Jean Paul Gaultier",
    "Giorgio Armani",
    "Emporio Armani",
    "Carolina Herrera",
    "Dolce & Gabbana",
    "Calvin Klein",
    "Hugo Boss",
    "Marc Jacobs",
    "Thierry Mugler",
    "Issey Miyake",
    "Paco Rabanne",
    "Tom Ford",
    "Maison Francis Kurkdjian",
    "Viktor & Rolf",
    "Ralph Lauren",
    "Elizabeth Arden",
    "Jo Malone",
]

# Title is cut at the earliest of these (case-insensitive, not at index 0)
STOP_TOKENS = [" - ", "–", "—", ",", ":", " for ", " by "]

_CAPITALIZED_WORD = re.compile(r"^[A-Z][a-zA-Z\-'.]*$")


def _match_known_brand(title: str) -> Optional[str]:
    lowered = title.lower()
    for brand in KNOWN_MULTI_WORD_BRANDS:
        key = brand.lower()
        if lowered.startswith(key) and (
            len(lowered) == len(key) or not lowered[len(key)].isalnum()
        ):
            return brand
    return None


def _truncate_at_stop_token(title: str) -> str:
    lowered = title.lower()
    positions = [lowered.find(token) for token in STOP_TOKENS]
    cut = min([p for p in positions if p > 0], default=len(title))
    return title[:cut].strip()


def infer_brand_from_title(title: Optional[str]) -> Optional[str]:
    """
    Guess a brand from the start of a product title.

    - "Tom Ford Oud Wood" → "Tom Ford"
    - "Sauvage - Dior" → "Sauvage"
    - "Versace Eros for Men, 100ml" → "Versace Eros"
    - "Yves Saint Laurent Libre" → "Yves Saint Laurent"

    Args:
        title: Product title

    Returns:
        Brand guess, or None only when the title is empty
    """
    if not title or not title.strip():
        return None

    raw = " ".join(title.split())

    known = _match_known_brand(raw)
    if known:
        return known

    head = _truncate_at_stop_token(raw)
    words = head.split() or raw.split()

    if len(words) >= 2 and _CAPITALIZED_WORD.match(words[0]) and _CAPITALIZED_WORD.match(words[1]):
        return f"{words[0]} {words[1]}"
    return words[0]


def brand_hint_from_query(query: Optional[str]) -> Optional[str]:
    """
    Brand implied by a "<Brand> perfume" search query.

    - "Dior perfume" → "Dior"
    - "perfume for men" → None
    """
    if not query:
        return None
    match = re.match(r"^\s*(.+?)\s+perfumes?\s*$", query, re.IGNORECASE)
    if not match:
        return None
    return match.group(1).strip() or None
