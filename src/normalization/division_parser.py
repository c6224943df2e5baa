"""Free-text division label parsing.

Division labels look like ``"L3 Junior - Flex - D2 - Small"``. These helpers
are only consulted when the structured columns of a result row are empty.
"""

import re
from typing import Optional

from src.models.enums import AgeBracket, SizeCategory
from src.utils.misc_utils import normalize_text

LEVEL_PATTERN = re.compile(r"^\s*l\s*([1-7])(?!\d)", re.IGNORECASE)
D2_PATTERN = re.compile(r"\bd2\b", re.IGNORECASE)
FLEX_PATTERN = re.compile(r"\bflex\b", re.IGNORECASE)

SIZE_TERMS = {
    "x small": SizeCategory.X_SMALL,
    "small": SizeCategory.SMALL,
    "medium": SizeCategory.MEDIUM,
    "large": SizeCategory.LARGE,
    "x large": SizeCategory.X_LARGE,
}
# "x small" contains "small", so the search must try longer terms first.
# Whole words only: "flex small" must not read as "x small".
_SIZE_SEARCH_PATTERNS = [
    (re.compile(rf"\b{re.escape(term)}\b"), SIZE_TERMS[term])
    for term in sorted(SIZE_TERMS, key=len, reverse=True)
]


def parse_level(division: str) -> Optional[str]:
    match = LEVEL_PATTERN.match(division or "")
    if not match:
        return None
    return f"L{match.group(1)}"


def parse_age_bracket(division: str) -> Optional[str]:
    text = normalize_text(division)
    for bracket in AgeBracket:
        if bracket.value.lower() in text:
            return bracket.value
    return None


def parse_d2(division: str) -> bool:
    return bool(D2_PATTERN.search(division or ""))


def parse_flex(division: str) -> bool:
    return bool(FLEX_PATTERN.search(division or ""))


def _size_text(value: str) -> str:
    return normalize_text(str(value or "").replace("-", " "))


def match_size(value: str) -> Optional[SizeCategory]:
    """Exact match of a whole field against the size vocabulary."""
    return SIZE_TERMS.get(_size_text(value))


def parse_size(division: str) -> Optional[SizeCategory]:
    """Size from a division label: exact match first, then embedded substring."""
    exact = match_size(division)
    if exact is not None:
        return exact
    text = _size_text(division)
    for pattern, size in _SIZE_SEARCH_PATTERNS:
        if pattern.search(text):
            return size
    return None
