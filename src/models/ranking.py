from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from src.models.enums import AgeBracket, FlagMode, SizeCategory

ANY = "Any"


class RankingFilters(BaseModel):
    """Immutable filter selection driving one fetch + aggregation pass."""

    model_config = ConfigDict(frozen=True)

    level: Optional[str] = None  # "L1".."L7"; None means all levels
    age: Optional[AgeBracket] = None
    flex_mode: FlagMode = FlagMode.ANY
    d2_mode: FlagMode = FlagMode.ANY
    size: Union[SizeCategory, str] = ANY
    min_events: int = Field(2, ge=1)
    search: str = ""
    weekend_date: Optional[str] = None  # None means all weekends
    limit: Optional[int] = Field(None, ge=1)

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value):
        if value is None:
            return None
        text = str(value).strip().upper()
        if not text or text == "ALL":
            return None
        return text if text.startswith("L") else f"L{text}"

    @field_validator("age", mode="before")
    @classmethod
    def _normalize_age(cls, value):
        if value is None or isinstance(value, AgeBracket):
            return value
        text = str(value).strip()
        if not text or text.lower() == "all":
            return None
        for bracket in AgeBracket:
            if bracket.value.lower() == text.lower():
                return bracket
        return text  # let pydantic reject it

    @field_validator("size", mode="before")
    @classmethod
    def _normalize_size(cls, value):
        if value is None:
            return ANY
        if isinstance(value, SizeCategory):
            return value
        text = str(value).strip()
        if not text or text.lower() == ANY.lower():
            return ANY
        for category in SizeCategory:
            if category.value.lower() == text.lower():
                return category
        raise ValueError(f"Unknown size filter: {value!r}")

    @property
    def search_text(self) -> str:
        return self.search.strip()

    def fetch_key(self) -> Tuple:
        """Parameters that are pushed down to the store; a change forces a re-fetch."""
        return (
            self.weekend_date,
            self.level,
            self.age,
            self.flex_mode,
            self.d2_mode,
            self.search_text,
        )


class CompetitionScore(BaseModel):
    """Best score recorded by one team (in one track) at one competition."""

    model_config = ConfigDict(frozen=True)

    event_key: str
    event_name: str = ""
    weekend_date: Optional[str] = None
    score: float


class TeamRanking(BaseModel):
    """One ranked row: a team within one track."""

    rank: int = 0
    team_key: str
    team_id: Optional[str] = None
    program: str
    team_name: str
    track: str
    size: Optional[SizeCategory] = None
    is_flex: bool = False
    is_d2: bool = False
    events_count: int
    avg_score: float
    last_weekend_date: Optional[str] = None
    precision: int = Field(3, exclude=True)
    competitions: List[CompetitionScore] = []

    @computed_field  # type: ignore[misc]
    @property
    def bucket(self) -> str:
        """Track label with the resolved size appended when known."""
        if self.size is None:
            return self.track
        return f"{self.track} {self.size.value}"

    @computed_field  # type: ignore[misc]
    @property
    def display_score(self) -> float:
        return round(self.avg_score, self.precision)


class ChartPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: float


class SeriesPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str
    score: float


class TeamSeries(BaseModel):
    label: str
    points: List[SeriesPoint] = []


class RankingSummary(BaseModel):
    total_teams: int = 0
    events: int = 0
    weekends: int = 0


class RankingView(BaseModel):
    """Everything the presentation layer needs for one filter selection."""

    filters: RankingFilters
    rankings: List[TeamRanking] = []
    chart: List[ChartPoint] = []
    series: List[TeamSeries] = []
    summary: RankingSummary = Field(default_factory=RankingSummary)
    error: Optional[str] = None

    @classmethod
    def failed(cls, filters: RankingFilters, error: str) -> "RankingView":
        return cls(filters=filters, error=error)
