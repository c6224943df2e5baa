from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import SizeCategory


class SemanticRecord(BaseModel):
    """A typed view of one raw result row, built once by the field resolver."""

    model_config = ConfigDict(frozen=True)

    # Identity
    team_key: Optional[str] = Field(
        None, description="Stable team identity; None when the row has no usable identity."
    )
    team_id: Optional[str] = None
    program_id: Optional[str] = None
    program_name: str = ""
    team_name: str = ""

    # Division
    division_text: str = ""
    level: Optional[str] = None  # e.g. "L3"
    age_bracket: Optional[str] = None  # e.g. "Junior"
    is_flex: bool = False
    is_d2: bool = False
    size: Optional[SizeCategory] = None

    # Competition
    event_key: Optional[str] = Field(
        None, description="Stable competition identity used to collapse rounds."
    )
    event_name: str = ""
    weekend_date: Optional[str] = None  # ISO date
    round_name: Optional[str] = None

    # Scores (finite or None, never defaulted to zero)
    event_score: Optional[float] = None
    performance_score: Optional[float] = None
    raw_score: Optional[float] = None

    @property
    def has_identity(self) -> bool:
        return bool(self.team_key and self.program_name and self.team_name)
