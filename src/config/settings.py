import logging
from typing import Optional

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Supabase Configuration
    supabase_url: HttpUrl = Field(..., description="URL for the Supabase project.")
    supabase_key: str = Field(..., description="Anon key for the Supabase project.")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key for Supabase (use with caution!)."
    )

    # Views / procedures exposed by the results store
    results_view: str = Field(
        "v_results_normalized", description="View holding one row per scored run."
    )
    weekends_view: str = Field(
        "v_available_weekends", description="View listing competition weekends."
    )
    divisions_view: str = Field(
        "v_rankings_dropdown", description="View listing rankable divisions."
    )
    rankings_rpc: str = Field(
        "get_rankings_from_normalized",
        description="Stored procedure computing rankings server-side.",
    )

    # Query caps
    results_row_cap: int = Field(
        50000, ge=1, description="Maximum rows pulled for a rankings query."
    )
    team_row_cap: int = Field(
        20000, ge=1, description="Maximum rows pulled for a single team profile."
    )
    search_row_cap: int = Field(
        5000, ge=1, description="Maximum rows pulled for a team search."
    )
    server_rankings_limit: int = Field(
        200, ge=1, description="Row limit passed to the rankings procedure."
    )

    # Ranking defaults
    default_level: Optional[str] = Field("L3", description="Default level filter.")
    default_age: Optional[str] = Field("Junior", description="Default age filter.")
    default_min_events: int = Field(
        2, ge=1, description="Minimum distinct competitions for a team to rank."
    )
    chart_limit: int = Field(10, ge=1, description="Teams shown in charts.")
    table_limit: int = Field(20, ge=1, description="Teams shown in tables.")
    score_precision: int = Field(
        3, ge=0, le=6, description="Decimals used when displaying average scores."
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
