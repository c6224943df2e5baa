from typing import Iterable, List

from src.models.ranking import (
    ChartPoint,
    RankingSummary,
    SeriesPoint,
    TeamRanking,
    TeamSeries,
)
from src.models.result import SemanticRecord


def chart_series(rankings: List[TeamRanking], top_n: int = 10) -> List[ChartPoint]:
    """Bar-chart data: team name against average score for the top teams."""
    return [
        ChartPoint(label=team.team_name, value=team.avg_score)
        for team in rankings[:top_n]
    ]


def score_series(rankings: List[TeamRanking], top_n: int = 10) -> List[TeamSeries]:
    """Line-chart data: best score per competition over time for the top teams."""
    series: List[TeamSeries] = []
    for team in rankings[:top_n]:
        dated = [c for c in team.competitions if c.weekend_date]
        dated.sort(key=lambda c: c.weekend_date)
        series.append(
            TeamSeries(
                label=f"{team.program} - {team.team_name}",
                points=[SeriesPoint(date=c.weekend_date, score=c.score) for c in dated],
            )
        )
    return series


def summarize(
    records: Iterable[SemanticRecord], rankings: List[TeamRanking]
) -> RankingSummary:
    records = list(records)
    return RankingSummary(
        total_teams=len(rankings),
        events=len({r.event_name or "-" for r in records}),
        weekends=len({r.weekend_date or "" for r in records}),
    )
