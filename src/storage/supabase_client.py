# src/storage/supabase_client.py
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger
from postgrest import APIResponse
from postgrest.exceptions import APIError
from supabase import AsyncClient, create_async_client

from src.config.settings import settings
from src.models.enums import FlagMode
from src.models.ranking import RankingFilters

Row = Dict[str, Any]

# Module-level storage for the async client instance
_async_supabase_client: Optional[AsyncClient] = None


class DataAccessError(Exception):
    """Raised when the results store cannot be queried. Never retried."""

    pass


async def initialize_supabase() -> Optional[AsyncClient]:
    """Initializes the global ASYNC Supabase client and returns it."""
    global _async_supabase_client
    if _async_supabase_client:
        logger.debug("Async Supabase client already initialized.")
        return _async_supabase_client

    url = str(settings.supabase_url)
    key = settings.supabase_key
    logger.debug(f"Attempting to initialize Async Supabase client with URL: {url}")
    key_snippet = f"{key[:5]}...{key[-5:]}" if key else "None"
    logger.debug(f"Using Supabase Key (snippet): {key_snippet}")

    try:
        client: AsyncClient = await create_async_client(url, key)
        _async_supabase_client = client
        logger.success("Async Supabase client initialized successfully.")
        return client
    except Exception as e:
        logger.exception(f"Failed to initialize Async Supabase client: {e}")
        return None


def get_supabase_client() -> Optional[AsyncClient]:
    """Returns the initialized ASYNC Supabase client instance."""
    if not _async_supabase_client:
        logger.warning("Async Supabase client accessed before initialization.")
        return None
    return _async_supabase_client


async def _execute(query: Any, description: str) -> List[Row]:
    """Runs a built PostgREST query and returns its rows.

    Raises:
        DataAccessError: on API or transport failures.
    """
    try:
        response: APIResponse = await query.execute()
    except APIError as e:
        logger.error(f"Supabase API error fetching {description}: {e.message}")
        logger.debug(f"Full APIError details: {e}")
        raise DataAccessError(e.message or str(e)) from e
    except httpx.HTTPError as e:
        logger.error(f"Network error fetching {description}: {e}")
        raise DataAccessError(str(e)) from e

    rows = response.data or []
    logger.debug(f"Fetched {len(rows)} rows for {description}.")
    return rows


def search_clause(search: str) -> Optional[str]:
    """PostgREST ``or`` filter matching the search text anywhere in the
    team, program, division or event name columns.

    Searches shorter than two characters are not pushed down.
    """
    text = search.strip()
    if len(text) < 2:
        return None
    escaped = text.replace(",", "")
    return (
        f"team.ilike.%{escaped}%,program.ilike.%{escaped}%,"
        f"division.ilike.%{escaped}%,event_name.ilike.%{escaped}%"
    )


def build_results_query(client: AsyncClient, filters: RankingFilters, row_cap: int) -> Any:
    """Builds the results-view query with the cheap predicates pushed down."""
    query = client.table(settings.results_view).select("*")

    if filters.weekend_date:
        query = query.eq("weekend_date", filters.weekend_date)
    if filters.level:
        query = query.ilike("division", f"{filters.level}%")
    if filters.age is not None:
        query = query.ilike("division", f"%{filters.age.value}%")

    if filters.d2_mode is FlagMode.ONLY:
        query = query.eq("is_d2", True)
    elif filters.d2_mode is FlagMode.EXCLUDE:
        query = query.eq("is_d2", False)
    if filters.flex_mode is FlagMode.ONLY:
        query = query.eq("is_flex", True)
    elif filters.flex_mode is FlagMode.EXCLUDE:
        query = query.eq("is_flex", False)

    clause = search_clause(filters.search)
    if clause:
        query = query.or_(clause)

    # Deterministic order so the cap never drops an arbitrary slice
    return query.order("weekend_date", desc=True).range(0, row_cap - 1)


async def fetch_results(
    client: AsyncClient, filters: RankingFilters, row_cap: Optional[int] = None
) -> List[Row]:
    """Fetches raw result rows for a ranking query.

    Args:
        client: An initialized async Supabase client instance.
        filters: The filter selection; only pushdown-safe parts are used.
        row_cap: Maximum rows to pull (defaults to settings.results_row_cap).

    Returns:
        Raw rows, newest weekend first.
    """
    cap = row_cap or settings.results_row_cap
    logger.info(
        f"Fetching results (weekend={filters.weekend_date or 'all'}, "
        f"level={filters.level or 'all'}, search='{filters.search_text}', cap={cap})"
    )
    return await _execute(build_results_query(client, filters, cap), "results")


async def fetch_available_weekends(client: AsyncClient) -> List[str]:
    query = (
        client.table(settings.weekends_view)
        .select("weekend_date")
        .order("weekend_date", desc=False)
    )
    rows = await _execute(query, "available weekends")
    return [str(r["weekend_date"]) for r in rows if r.get("weekend_date")]


async def fetch_team_results(client: AsyncClient, team_id: str) -> List[Row]:
    query = (
        client.table(settings.results_view)
        .select("*")
        .eq("team_id", team_id)
        .order("weekend_date", desc=True)
        .limit(settings.team_row_cap)
    )
    return await _execute(query, f"team {team_id}")


async def search_teams(client: AsyncClient, text: str) -> List[Row]:
    """Rows whose team name contains ``text``; empty for queries under 2 chars."""
    text = text.strip()
    if len(text) < 2:
        return []
    query = (
        client.table(settings.results_view)
        .select("team_id, program_id, team, program, weekend_date")
        .ilike("team", f"%{text}%")
        .limit(settings.search_row_cap)
    )
    return await _execute(query, f"team search '{text}'")


async def fetch_division_options(client: AsyncClient) -> List[Row]:
    query = client.table(settings.divisions_view).select(
        "division_id, division_label, level, age_group, size_category, is_flex, is_d2"
    )
    return await _execute(query, "division options")


async def fetch_server_rankings(
    client: AsyncClient,
    division: str,
    is_flex: bool,
    is_d2: bool,
    size_effective: str,
    min_events: int = 2,
) -> List[Row]:
    """Rankings computed by the stored procedure, for cross-checking the
    in-memory aggregation."""
    params = {
        "p_division": division,
        "p_is_flex": is_flex,
        "p_is_d2": is_d2,
        "p_size_effective": size_effective,
        "p_min_events": min_events,
        "p_limit": settings.server_rankings_limit,
    }
    return await _execute(
        client.rpc(settings.rankings_rpc, params), f"rpc {settings.rankings_rpc}"
    )
