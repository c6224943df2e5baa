# src/models/team.py
from typing import List, Optional

from pydantic import BaseModel, computed_field, field_validator


class TeamHit(BaseModel):
    """A team found by the team search, deduplicated by team_id."""

    team_id: str
    program_id: Optional[str] = None
    team: str = ""
    program: str = ""
    rows: int = 0
    first_week: Optional[str] = None
    last_week: Optional[str] = None

    @computed_field  # type: ignore[misc]
    @property
    def team_display_name(self) -> str:
        return f"{self.team} - {self.program}"


class TrendPoint(BaseModel):
    weekend: str
    event_score: float
    event: str = ""


class TeamStats(BaseModel):
    rows: int = 0
    events: int = 0
    weekends: int = 0
    avg: Optional[float] = None
    best: Optional[float] = None


class TeamProfile(BaseModel):
    team_id: str
    title: str
    program: str = ""
    team: str = ""
    trend: List[TrendPoint] = []
    stats: TeamStats = TeamStats()


class DivisionOption(BaseModel):
    division_id: Optional[str] = None
    division_label: Optional[str] = None
    level: Optional[int] = None
    age_group: Optional[str] = None
    size_category: Optional[str] = None
    is_flex: Optional[bool] = None
    is_d2: Optional[bool] = None

    @field_validator("division_id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value) if value is not None else None

    @field_validator("level", mode="before")
    @classmethod
    def _level_number(cls, value):
        # The view stores 3; older rows carry "L3"
        if isinstance(value, str):
            value = value.strip().upper().lstrip("L") or None
        return value

    @property
    def preference(self) -> int:
        """Ordering weight for the rankings dropdown; most common divisions first."""
        score = 0
        if self.level == 3:
            score += 1000
        if "junior" in (self.age_group or "").lower():
            score += 500
        if self.is_flex is False:
            score += 200
        if self.is_d2 is False:
            score += 100
        return score
