# src/utils/misc_utils.py
import re
from typing import Any


def keyify(value: Any) -> str:
    """Normalizes a display name into a grouping key.

    Trims, lowercases, folds curly/back quotes to apostrophes, spells out
    ampersands and drops punctuation other than apostrophes.
    """
    text = str(value if value is not None else "").strip().lower()
    text = re.sub(r"[’`]", "'", text)
    text = text.replace("&", "and")
    text = re.sub(r"[^a-z0-9\s']", "", text)
    return re.sub(r"\s+", " ", text).strip()


def clean_label(value: Any) -> str:
    """Trims a display string and collapses internal whitespace."""
    return re.sub(r"\s+", " ", str(value if value is not None else "").strip())


def normalize_text(value: Any) -> str:
    """Lowercased, whitespace-collapsed text used for containment tests."""
    return clean_label(value).lower()
