from typing import Any, Dict, Iterable, List

from src.models.result import SemanticRecord
from src.models.team import (
    DivisionOption,
    TeamHit,
    TeamProfile,
    TeamStats,
    TrendPoint,
)


def build_team_profile(team_id: str, records: List[SemanticRecord]) -> TeamProfile:
    """Summarizes every result of one team (all tracks, all rounds).

    The trend keeps the best score per weekend; the stats average every
    finite score, rounds included.
    """
    if not records:
        return TeamProfile(team_id=team_id, title=f"Team {team_id}")

    first = records[0]
    best_by_weekend: Dict[str, TrendPoint] = {}
    for record in records:
        if not record.weekend_date or record.event_score is None:
            continue
        existing = best_by_weekend.get(record.weekend_date)
        if existing is None or record.event_score > existing.event_score:
            best_by_weekend[record.weekend_date] = TrendPoint(
                weekend=record.weekend_date,
                event_score=record.event_score,
                event=record.event_name,
            )

    scores = [r.event_score for r in records if r.event_score is not None]
    stats = TeamStats(
        rows=len(records),
        events=len({r.event_name or r.event_key or "" for r in records}),
        weekends=len({r.weekend_date or "" for r in records}),
        avg=sum(scores) / len(scores) if scores else None,
        best=max(scores) if scores else None,
    )

    return TeamProfile(
        team_id=team_id,
        title=f"{first.team_name or '-'} - {first.program_name or '-'}",
        program=first.program_name,
        team=first.team_name,
        trend=sorted(best_by_weekend.values(), key=lambda p: p.weekend),
        stats=stats,
    )


def group_team_hits(rows: Iterable[Dict[str, Any]]) -> List[TeamHit]:
    """Deduplicates team-search rows by team_id, keeping first/last weekend."""
    hits: Dict[str, TeamHit] = {}
    for row in rows:
        team_id = row.get("team_id")
        if team_id is None:
            continue
        team_id = str(team_id)
        weekend = row.get("weekend_date") or None

        hit = hits.get(team_id)
        if hit is None:
            hits[team_id] = TeamHit(
                team_id=team_id,
                program_id=str(row["program_id"]) if row.get("program_id") is not None else None,
                team=row.get("team") or "",
                program=row.get("program") or "",
                rows=1,
                first_week=weekend,
                last_week=weekend,
            )
            continue

        hit.rows += 1
        if weekend:
            if not hit.first_week or weekend < hit.first_week:
                hit.first_week = weekend
            if not hit.last_week or weekend > hit.last_week:
                hit.last_week = weekend
    return list(hits.values())


def rank_division_options(rows: Iterable[Dict[str, Any]]) -> List[DivisionOption]:
    """Orders dropdown divisions by preference, keeping view order on ties."""
    options = [DivisionOption(**row) for row in rows]
    return sorted(options, key=lambda o: o.preference, reverse=True)
