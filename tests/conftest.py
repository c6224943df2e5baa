import os

# Settings are loaded at import time and require Supabase credentials
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key-0123456789")

import pytest

from src.normalization.field_resolver import RecordNormalizer
from tests.fakes import make_row


@pytest.fixture
def row_factory():
    return make_row


@pytest.fixture
def normalizer():
    return RecordNormalizer()


@pytest.fixture
def alpha_beta_rows():
    """Alpha: two rounds at A plus one score at B. Beta: one score at A."""
    return [
        make_row(team="Alpha", event_id="evt-a", event_score=9.0),
        make_row(team="Alpha", event_id="evt-a", event_score=9.5, round="Finals"),
        make_row(
            team="Alpha",
            event_id="evt-b",
            event_name="Winter Nationals",
            weekend_date="2026-01-24",
            event_score=8.8,
        ),
        make_row(team="Beta", program="Top Gun", event_id="evt-a", event_score=9.9),
    ]


@pytest.fixture
def alpha_beta_records(normalizer, alpha_beta_rows):
    return normalizer.normalize(alpha_beta_rows)
