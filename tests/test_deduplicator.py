import pytest

from src.models.result import SemanticRecord
from src.ranking.deduplicator import dedupe


def rec(event_key, score, weekend="2026-01-10"):
    return SemanticRecord(
        team_key="T1",
        program_name="P",
        team_name="T1",
        level="L3",
        age_bracket="Junior",
        event_key=event_key,
        event_name=f"Event {event_key}",
        weekend_date=weekend,
        event_score=score,
    )


def test_keeps_best_round_per_competition():
    result = dedupe([rec("evt-42", 9.1), rec("evt-42", 9.4)])
    assert list(result) == ["evt-42"]
    assert result["evt-42"].score == pytest.approx(9.4)


def test_lower_later_round_does_not_replace_best():
    result = dedupe([rec("evt-1", 9.6), rec("evt-1", 9.2), rec("evt-2", 8.0)])
    assert result["evt-1"].score == pytest.approx(9.6)
    assert list(result) == ["evt-1", "evt-2"]


def test_unscored_rows_never_contribute():
    result = dedupe([rec("evt-1", None), rec("evt-2", 9.0)])
    assert list(result) == ["evt-2"]


def test_rows_without_competition_identity_are_skipped():
    assert dedupe([rec(None, 9.0)]) == {}


def test_zero_is_a_real_score():
    result = dedupe([rec("evt-1", 0.0)])
    assert result["evt-1"].score == 0.0
