import sys
import asyncio
from functools import partial

# --- Settings/Logging ---
from src.logging.setup import setup_logging
from src.config.settings import settings

setup_logging()

from loguru import logger

# Core logic imports
from src.models.ranking import RankingFilters, RankingView
from src.pipeline.ranking_pipeline import RankingPipeline
from src.storage.supabase_client import fetch_results, initialize_supabase

from rich import print
from rich.panel import Panel
from rich.table import Table


def default_filters() -> RankingFilters:
    return RankingFilters(
        level=settings.default_level,
        age=settings.default_age,
        min_events=settings.default_min_events,
        limit=settings.table_limit,
    )


def render_view(view: RankingView) -> None:
    """Prints the ranking table (or the error panel) for a view."""
    filters = view.filters
    title = (
        f"Rankings - Level: {filters.level or 'All Levels'} - "
        f"Age: {filters.age.value if filters.age else 'All'}"
    )

    if view.error:
        print(Panel(f"[bold red]Error:[/bold red] {view.error}", title=title))
        return

    if not view.rankings:
        print(
            Panel(
                "No teams match your filters. Try lowering the minimum competitions.",
                title=title,
            )
        )
        return

    table = Table(title=title)
    table.add_column("Rank", justify="right", style="bold")
    table.add_column("Program")
    table.add_column("Team", style="bold")
    table.add_column("Division")
    table.add_column("Events", justify="right")
    table.add_column("Average Event Score", justify="right", style="bold")
    table.add_column("Last weekend")

    for team in view.rankings:
        table.add_row(
            str(team.rank),
            team.program,
            team.team_name,
            team.bucket,
            str(team.events_count),
            f"{team.display_score:.{settings.score_precision}f}",
            team.last_weekend_date or "-",
        )

    print(table)
    summary = view.summary
    print(
        Panel(
            f"{summary.total_teams} teams (from {summary.events} events "
            f"across {summary.weekends} weekends)",
            title="Summary",
        )
    )


async def main() -> None:
    """Main entry point: fetch results, rank them and print the table."""
    logger.info("Starting Cheer Rankings - Fetch, Normalize, and Rank")

    supabase_client = await initialize_supabase()
    if not supabase_client:
        logger.critical("Failed to initialize Supabase client. Exiting.")
        return

    pipeline = RankingPipeline(fetcher=partial(fetch_results, supabase_client))
    view = await pipeline.refresh(default_filters())
    if view is None:
        logger.warning("Ranking request was superseded; nothing to show.")
        return

    render_view(view)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
