"""
Sync job settings, read from environment variables or a .env file.

Credentials are required; every tunable has a default matching the
production schedule.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Settings for the listing and sync jobs.

    Field names map to upper-case env vars (BOAT_REQUEST_DELAY_SECONDS, ...).
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SUPABASE
    # ===================
    supabase_url: str = Field(
        ...,
        description="Supabase project URL"
    )
    supabase_key: str = Field(
        ...,
        description="Supabase anon/public key"
    )

    # ===================
    # BOATAROUND API
    # ===================
    boataround_api_url: str = Field(
        default="https://api.boataround.com",
        description="Base URL of the BoatAround API"
    )
    boataround_price_path: str = Field(
        default="/v1/price",
        description="Price quote endpoint"
    )
    boataround_search_path: str = Field(
        default="/v1/search",
        description="Paginated boat search endpoint"
    )
    boataround_availability_path: str = Field(
        default="/v1/availability",
        description="Boat reservations endpoint"
    )

    # ===================
    # HTTP CLIENT
    # ===================
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout applied to every upstream request"
    )
    http_max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries for connection errors and 5xx responses"
    )
    http_retry_base_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        le=60,
        description="Backoff base; retry n waits base * 2**n"
    )

    # ===================
    # SYNC JOB
    # ===================
    boat_request_delay_seconds: float = Field(
        default=24.0,
        ge=0,
        le=600,
        description="Pause after each boat to spread load on the pricing API"
    )
    sync_end_year: Optional[int] = Field(
        None,
        ge=2000,
        le=2100,
        description="Last year to sync (defaults to next calendar year)"
    )
    price_fetch_max_workers: int = Field(
        default=16,
        ge=1,
        le=64,
        description="Concurrent price requests per boat/year"
    )
    listing_country: str = Field(
        default="croatia",
        description="Country used for the weekly listing refresh"
    )
    listing_category: str = Field(
        default="catamaran",
        description="Boat category used for the weekly listing refresh"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
