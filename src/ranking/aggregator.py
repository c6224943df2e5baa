from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger

from src.models.enums import SizeCategory
from src.models.ranking import ANY, RankingFilters, TeamRanking
from src.models.result import SemanticRecord
from src.ranking.deduplicator import dedupe
from src.ranking.size_resolver import SizeObservation, resolve_size
from src.ranking.track import classify_track

GroupKey = Tuple[str, str]  # (team identity, track)


@dataclass
class TeamGroup:
    """All rows of one team within one track, gathered before scoring."""

    team_key: str
    track: str
    program: str
    team_name: str
    team_id: Optional[str]
    is_flex: bool
    is_d2: bool
    records: List[SemanticRecord] = field(default_factory=list)

    def size_history(self) -> List[SizeObservation]:
        return [
            SizeObservation(weekend_date=r.weekend_date, size=r.size)
            for r in self.records
        ]


def group_records(records: Iterable[SemanticRecord]) -> Dict[GroupKey, TeamGroup]:
    """Groups rankable records by (team identity x track), in first-seen order."""
    groups: Dict[GroupKey, TeamGroup] = {}
    dropped_track = 0
    dropped_identity = 0

    for record in records:
        track = classify_track(record)
        if not track:
            dropped_track += 1
            continue
        if not record.has_identity:
            dropped_identity += 1
            continue

        key = (record.team_key, track)
        group = groups.get(key)
        if group is None:
            group = TeamGroup(
                team_key=record.team_key,
                track=track,
                program=record.program_name,
                team_name=record.team_name,
                team_id=record.team_id,
                is_flex=record.is_flex,
                is_d2=record.is_d2,
            )
            groups[key] = group
        group.records.append(record)

    if dropped_track or dropped_identity:
        logger.debug(
            f"Dropped {dropped_track} rows without a track and "
            f"{dropped_identity} rows without a team identity."
        )
    return groups


def score_group(group: TeamGroup, precision: int = 3) -> TeamRanking:
    competitions = dedupe(group.records)
    scores = [c.score for c in competitions.values()]
    events_count = len(scores)
    avg_score = sum(scores) / events_count if events_count else 0.0
    weekends = [c.weekend_date for c in competitions.values() if c.weekend_date]

    return TeamRanking(
        team_key=group.team_key,
        team_id=group.team_id,
        program=group.program,
        team_name=group.team_name,
        track=group.track,
        size=resolve_size(group.size_history()),
        is_flex=group.is_flex,
        is_d2=group.is_d2,
        events_count=events_count,
        avg_score=avg_score,
        last_weekend_date=max(weekends) if weekends else None,
        precision=precision,
        competitions=list(competitions.values()),
    )


def passes_categorical(team: TeamRanking, filters: RankingFilters) -> bool:
    if not filters.flex_mode.matches(team.is_flex):
        return False
    if not filters.d2_mode.matches(team.is_d2):
        return False
    if filters.size != ANY:
        # An unresolved size never matches a concrete size filter
        if team.size is None or team.size != SizeCategory(filters.size):
            return False
    return True


def aggregate(
    records: Iterable[SemanticRecord],
    filters: RankingFilters,
    precision: int = 3,
) -> List[TeamRanking]:
    """Produces the ranked team list for one filter selection.

    Args:
        records: Normalized result rows (already pre-filtered by row filters).
        filters: Categorical filters, min-events threshold and display limit.
        precision: Decimals used for the display score.

    Returns:
        Teams ordered by average score (descending, stable), ranked 1..n,
        truncated to ``filters.limit`` after ranking the full population.
    """
    groups = group_records(records)
    teams = [score_group(group, precision) for group in groups.values()]

    eligible = [t for t in teams if passes_categorical(t, filters)]
    eligible = [t for t in eligible if t.events_count >= filters.min_events]

    ranked = sorted(eligible, key=lambda t: t.avg_score, reverse=True)
    for position, team in enumerate(ranked, start=1):
        team.rank = position

    logger.debug(
        f"Ranked {len(ranked)} of {len(teams)} team groups "
        f"(min_events={filters.min_events}, size={filters.size})"
    )

    if filters.limit is not None:
        return ranked[: filters.limit]
    return ranked
