from typing import List

from src.models.result import SemanticRecord


def classify_track(record: SemanticRecord) -> str:
    """Builds the size-independent track label, e.g. ``"L3 Junior Flex D2"``.

    Only present parts are joined. An empty label means the record cannot be
    grouped and is left out of rankings.
    """
    parts: List[str] = []
    if record.level:
        parts.append(record.level)
    if record.age_bracket:
        parts.append(record.age_bracket)
    if record.is_flex:
        parts.append("Flex")
    if record.is_d2:
        parts.append("D2")
    return " ".join(parts)
