from typing import Any, Dict, List, Optional


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Records PostgREST builder calls and returns canned rows on execute()."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, error: Exception = None):
        self.rows = rows or []
        self.error = error
        self.calls: List[tuple] = []

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._record("eq", *args, **kwargs)

    def ilike(self, *args, **kwargs):
        return self._record("ilike", *args, **kwargs)

    def or_(self, *args, **kwargs):
        return self._record("or_", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._record("order", *args, **kwargs)

    def range(self, *args, **kwargs):
        return self._record("range", *args, **kwargs)

    def limit(self, *args, **kwargs):
        return self._record("limit", *args, **kwargs)

    def called(self, name):
        return [(args, kwargs) for n, args, kwargs in self.calls if n == name]

    async def execute(self):
        if self.error is not None:
            raise self.error
        return FakeResponse(self.rows)


class FakeClient:
    def __init__(self, query: FakeQuery):
        self.query = query
        self.tables: List[str] = []
        self.rpcs: List[tuple] = []

    def table(self, name):
        self.tables.append(name)
        return self.query

    def rpc(self, name, params):
        self.rpcs.append((name, params))
        return self.query


def make_row(**overrides) -> Dict[str, Any]:
    """A raw results-view row for team Alpha; override any column."""
    row = {
        "team_id": None,
        "program": "Cheer Athletics",
        "team": "Alpha",
        "division": "L3 Junior - Flex",
        "event_id": "evt-a",
        "event_name": "Spirit Classic",
        "weekend_date": "2026-01-10",
        "event_score": 9.0,
    }
    row.update(overrides)
    return row
