import asyncio

import pytest

from src.pipeline.team_lookup import find_teams, load_division_options, load_team_profile
from src.storage.supabase_client import DataAccessError
from tests.fakes import FakeClient, FakeQuery, make_row


def test_load_team_profile_queries_by_team_id():
    rows = [
        make_row(team_id="t1", weekend_date="2026-01-24", event_score=9.2),
        make_row(team_id="t1", weekend_date="2026-01-10", event_score=8.9),
    ]
    query = FakeQuery(rows=rows)
    profile = asyncio.run(load_team_profile(FakeClient(query), "t1"))

    assert query.called("eq") == [(("team_id", "t1"), {})]
    assert query.called("limit") == [((20000,), {})]
    assert [p.weekend for p in profile.trend] == ["2026-01-10", "2026-01-24"]
    assert profile.stats.best == pytest.approx(9.2)


def test_find_teams_groups_rows():
    rows = [
        {"team_id": "t1", "team": "Alpha", "program": "CA", "weekend_date": "2026-01-10"},
        {"team_id": "t1", "team": "Alpha", "program": "CA", "weekend_date": "2026-01-24"},
    ]
    query = FakeQuery(rows=rows)
    hits = asyncio.run(find_teams(FakeClient(query), " alp "))
    assert query.called("ilike") == [(("team", "%alp%"), {})]
    assert len(hits) == 1 and hits[0].rows == 2


def test_load_division_options_sorted():
    rows = [
        {"division_id": "a", "level": 1, "age_group": "Mini"},
        {"division_id": "b", "level": 3, "age_group": "Junior"},
    ]
    options = asyncio.run(load_division_options(FakeClient(FakeQuery(rows=rows))))
    assert [o.division_id for o in options] == ["b", "a"]


def test_lookup_errors_propagate():
    client = FakeClient(FakeQuery(error=DataAccessError("down")))
    with pytest.raises(DataAccessError):
        asyncio.run(load_team_profile(client, "t1"))
