from typing import Dict, Iterable

from loguru import logger

from src.models.ranking import CompetitionScore
from src.models.result import SemanticRecord


def dedupe(records: Iterable[SemanticRecord]) -> Dict[str, CompetitionScore]:
    """Collapses rounds/heats to one best score per competition.

    Args:
        records: Rows belonging to a single team within a single track.

    Returns:
        Mapping of competition identity to its maximum score, in order of
        first appearance. Rows without a finite score or without a
        competition identity never contribute.
    """
    best: Dict[str, CompetitionScore] = {}
    for record in records:
        if record.event_score is None or not record.event_key:
            logger.debug(
                f"Skipping unscored/unidentified row for {record.team_key} at '{record.event_name}'"
            )
            continue
        existing = best.get(record.event_key)
        if existing is None or record.event_score > existing.score:
            best[record.event_key] = CompetitionScore(
                event_key=record.event_key,
                event_name=record.event_name,
                weekend_date=record.weekend_date,
                score=record.event_score,
            )
    return best
