from typing import List, Optional

from loguru import logger
from supabase import AsyncClient

from src.models.team import DivisionOption, TeamHit, TeamProfile
from src.normalization.field_resolver import RecordNormalizer
from src.ranking.team_profile import (
    build_team_profile,
    group_team_hits,
    rank_division_options,
)
from src.storage.supabase_client import (
    fetch_division_options,
    fetch_team_results,
    search_teams,
)


async def load_team_profile(
    client: AsyncClient, team_id: str, normalizer: Optional[RecordNormalizer] = None
) -> TeamProfile:
    """Fetches every result of one team and summarizes it."""
    rows = await fetch_team_results(client, team_id)
    records = (normalizer or RecordNormalizer()).normalize(rows)
    logger.info(f"Building profile for team {team_id} from {len(records)} rows.")
    return build_team_profile(team_id, records)


async def find_teams(client: AsyncClient, text: str) -> List[TeamHit]:
    rows = await search_teams(client, text)
    hits = group_team_hits(rows)
    logger.debug(f"Team search '{text.strip()}' matched {len(hits)} teams.")
    return hits


async def load_division_options(client: AsyncClient) -> List[DivisionOption]:
    return rank_division_options(await fetch_division_options(client))
