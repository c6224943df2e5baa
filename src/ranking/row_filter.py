from typing import Iterable, List

from src.models.ranking import RankingFilters
from src.models.result import SemanticRecord
from src.utils.misc_utils import normalize_text


def matches_search(record: SemanticRecord, query: str) -> bool:
    """Case-insensitive substring match over event, program, team and division."""
    needle = query.strip().lower()
    if not needle:
        return True
    haystacks = (
        record.event_name,
        record.program_name,
        record.team_name,
        record.division_text,
    )
    return any(needle in (text or "").lower() for text in haystacks)


def matches_row(record: SemanticRecord, filters: RankingFilters) -> bool:
    if filters.weekend_date and record.weekend_date != filters.weekend_date:
        return False

    if filters.level and record.level != filters.level:
        return False

    if filters.age is not None:
        wanted = filters.age.value.lower()
        if record.age_bracket:
            if record.age_bracket.lower() != wanted:
                return False
        elif wanted not in normalize_text(record.division_text):
            return False

    return matches_search(record, filters.search_text)


def filter_records(
    records: Iterable[SemanticRecord], filters: RankingFilters
) -> List[SemanticRecord]:
    """Applies the row-level filters that are also pushed down to the store.

    Re-applying them in memory keeps results correct when the store ignores a
    predicate or when rows are supplied from another source.
    """
    return [r for r in records if matches_row(r, filters)]
