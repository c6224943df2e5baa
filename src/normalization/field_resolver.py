import math
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from loguru import logger

from src.models.enums import AgeBracket, SizeCategory
from src.models.result import SemanticRecord
from src.normalization.division_parser import (
    match_size,
    parse_age_bracket,
    parse_d2,
    parse_flex,
    parse_level,
    parse_size,
)
from src.utils.misc_utils import clean_label, keyify

Row = Dict[str, Any]

# Upstream column names vary between views and import batches
EVENT_NAME_KEYS = [
    "event_name",
    "event",
    "event_title",
    "competition_name",
    "competition",
    "event_display_name",
    "event_id",
]
PROGRAM_KEYS = ["program", "program_name", "gym", "gym_name"]
TEAM_KEYS = ["team", "team_name"]
DIVISION_KEYS = ["division", "division_name", "division_label"]
EVENT_SCORE_KEYS = ["event_score", "event_total", "total_score", "score"]
PERFORMANCE_SCORE_KEYS = ["performance_score", "performance", "perf_score"]
RAW_SCORE_KEYS = ["raw_score", "raw", "rawScore", "score_raw"]
SIZE_KEYS = ["size_effective", "size_category", "size"]
AGE_KEYS = ["age_bucket", "age_group", "age_bracket"]
WEEKEND_KEYS = ["weekend_date", "weekend", "event_date"]
SOURCE_URL_KEYS = ["source_url", "results_url", "url"]
ROUND_KEYS = ["round", "round_name"]

TRUE_STRINGS = {"true", "t", "1", "yes", "y"}
FALSE_STRINGS = {"false", "f", "0", "no", "n"}


class NormalizationError(Exception):
    """Raised when a raw row cannot be interpreted as a result record at all."""

    pass


def is_usable(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


def pick(row: Row, candidates: Sequence[str], fallback: Any = None) -> Any:
    """Returns the first usable value among ``candidates``.

    A value is usable when the key is present, the value is not None and its
    string form is non-empty after trimming. Falls back to ``fallback``.
    """
    for key in candidates:
        value = row.get(key)
        if is_usable(value):
            return value
    return fallback


def to_number(value: Any) -> Optional[float]:
    """Finite float, or None for missing, unconvertible and non-finite values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def to_bool(value: Any) -> Optional[bool]:
    """Structured flag value, or None when the column is empty or unreadable."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    return None


def to_iso_date(value: Any) -> Optional[str]:
    if not is_usable(value):
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def resolve_level(row: Row, division: str) -> Optional[str]:
    value = pick(row, ["level"])
    if value is not None:
        text = str(value).strip().upper()
        if text.isdigit():
            return f"L{int(text)}"
        parsed = parse_level(text)
        if parsed:
            return parsed
    return parse_level(division)


def resolve_age(row: Row, division: str) -> Optional[str]:
    value = pick(row, AGE_KEYS)
    if value is not None:
        label = clean_label(value)
        for bracket in AgeBracket:
            if bracket.value.lower() == label.lower():
                return bracket.value
        return label
    return parse_age_bracket(division)


def resolve_size(row: Row, division: str) -> Optional[SizeCategory]:
    value = pick(row, SIZE_KEYS)
    if value is not None:
        size = match_size(str(value))
        if size is not None:
            return size
    return parse_size(division)


def resolve_team_key(row: Row, program: str, team: str) -> Optional[str]:
    """Team identity: explicit team id, else program key + normalized team name."""
    team_id = pick(row, ["team_id"])
    if team_id is not None:
        return str(team_id).strip()
    program_id = pick(row, ["program_id"])
    program_key = str(program_id).strip() if program_id is not None else keyify(program)
    team_key = keyify(team)
    if not program_key or not team_key:
        return None
    return f"{program_key}|{team_key}"


def resolve_event_key(row: Row, event_name: str, weekend: Optional[str]) -> Optional[str]:
    """Competition identity: event id, else source URL, else name + weekend."""
    event_id = pick(row, ["event_id"])
    if event_id is not None:
        return str(event_id).strip()
    url = pick(row, SOURCE_URL_KEYS)
    if url is not None:
        return str(url).strip()
    if not event_name:
        return None
    return f"{keyify(event_name)}|{weekend or ''}"


class RecordNormalizer:
    """Builds typed SemanticRecords from loosely-typed result rows."""

    def resolve(self, row: Row) -> SemanticRecord:
        if not isinstance(row, dict):
            raise NormalizationError(f"Result row is not a mapping: {type(row)}")

        division = clean_label(pick(row, DIVISION_KEYS, ""))
        program = clean_label(pick(row, PROGRAM_KEYS, ""))
        team = clean_label(pick(row, TEAM_KEYS, ""))
        event_name = clean_label(pick(row, EVENT_NAME_KEYS, ""))
        weekend = to_iso_date(pick(row, WEEKEND_KEYS))

        is_flex = to_bool(row.get("is_flex"))
        is_d2 = to_bool(row.get("is_d2"))
        round_name = pick(row, ROUND_KEYS)
        team_id = pick(row, ["team_id"])
        program_id = pick(row, ["program_id"])

        return SemanticRecord(
            team_key=resolve_team_key(row, program, team),
            team_id=str(team_id).strip() if team_id is not None else None,
            program_id=str(program_id).strip() if program_id is not None else None,
            program_name=program,
            team_name=team,
            division_text=division,
            level=resolve_level(row, division),
            age_bracket=resolve_age(row, division),
            is_flex=is_flex if is_flex is not None else parse_flex(division),
            is_d2=is_d2 if is_d2 is not None else parse_d2(division),
            size=resolve_size(row, division),
            event_key=resolve_event_key(row, event_name, weekend),
            event_name=event_name,
            weekend_date=weekend,
            round_name=clean_label(round_name) if round_name is not None else None,
            event_score=to_number(pick(row, EVENT_SCORE_KEYS)),
            performance_score=to_number(pick(row, PERFORMANCE_SCORE_KEYS)),
            raw_score=to_number(pick(row, RAW_SCORE_KEYS)),
        )

    def normalize(self, rows: Iterable[Row]) -> List[SemanticRecord]:
        """Normalizes raw rows, skipping anything that is not a mapping.

        Args:
            rows: Result rows as returned by the results view.

        Returns:
            One SemanticRecord per usable row, in input order.
        """
        records: List[SemanticRecord] = []
        skipped = 0
        for row in rows:
            try:
                records.append(self.resolve(row))
            except NormalizationError as e:
                skipped += 1
                logger.warning(f"Skipping result row: {e}")
        if skipped:
            logger.info(f"Normalized {len(records)} rows ({skipped} skipped).")
        else:
            logger.debug(f"Normalized {len(records)} rows.")
        return records
