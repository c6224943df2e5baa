import pytest

from src.ranking.team_profile import (
    build_team_profile,
    group_team_hits,
    rank_division_options,
)


def test_profile_trend_keeps_best_per_weekend(normalizer, row_factory):
    records = normalizer.normalize(
        [
            row_factory(team_id="t1", weekend_date="2026-01-24", event_score=9.1),
            row_factory(team_id="t1", weekend_date="2026-01-10", event_score=8.7),
            row_factory(team_id="t1", weekend_date="2026-01-10", event_score=9.0),
            row_factory(team_id="t1", weekend_date="2026-01-10", event_score=None),
        ]
    )
    profile = build_team_profile("t1", records)

    assert profile.title == "Alpha - Cheer Athletics"
    assert [(p.weekend, p.event_score) for p in profile.trend] == [
        ("2026-01-10", 9.0),
        ("2026-01-24", 9.1),
    ]
    assert profile.stats.rows == 4
    assert profile.stats.weekends == 2
    assert profile.stats.avg == pytest.approx((9.1 + 8.7 + 9.0) / 3)
    assert profile.stats.best == pytest.approx(9.1)


def test_empty_profile():
    profile = build_team_profile("t9", [])
    assert profile.title == "Team t9"
    assert profile.stats.avg is None
    assert profile.trend == []


def test_team_hits_are_deduplicated():
    rows = [
        {"team_id": "t1", "program_id": 7, "team": "Alpha", "program": "CA", "weekend_date": "2026-01-10"},
        {"team_id": "t1", "team": "Alpha", "program": "CA", "weekend_date": "2026-02-01"},
        {"team_id": "t1", "team": "Alpha", "program": "CA", "weekend_date": "2025-12-06"},
        {"team_id": "t2", "team": "Beta", "program": "TG", "weekend_date": None},
        {"team": "No id"},
    ]
    hits = group_team_hits(rows)
    assert [h.team_id for h in hits] == ["t1", "t2"]
    alpha = hits[0]
    assert alpha.rows == 3
    assert alpha.program_id == "7"
    assert (alpha.first_week, alpha.last_week) == ("2025-12-06", "2026-02-01")
    assert alpha.team_display_name == "Alpha - CA"
    assert hits[1].first_week is None


def test_division_options_prefer_l3_junior_non_flex_non_d2():
    rows = [
        {"division_id": 1, "division_label": "L1 Tiny", "level": 1, "age_group": "Tiny", "is_flex": False, "is_d2": False},
        {"division_id": 2, "division_label": "L3 Junior Flex", "level": 3, "age_group": "Junior", "is_flex": True, "is_d2": False},
        {"division_id": 3, "division_label": "L3 Junior", "level": "L3", "age_group": "Junior", "is_flex": False, "is_d2": False},
    ]
    options = rank_division_options(rows)
    assert [o.division_id for o in options] == ["3", "2", "1"]
    assert options[0].preference == 1800
