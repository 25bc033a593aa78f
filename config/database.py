"""
Database connection management.

Provides a cached Supabase client for the sync jobs.
"""

from supabase import create_client, Client
from functools import lru_cache
import structlog

from config.settings import Settings

logger = structlog.get_logger(__name__)


class DatabaseConnectionError(Exception):
    """Failed to connect to database."""
    pass


@lru_cache()
def _create_client(url: str, key: str) -> Client:
    logger.info(
        "connecting_to_supabase",
        url=url[:30] + "..."  # Log partial URL only
    )
    return create_client(url, key)


def get_supabase_client(settings: Settings) -> Client:
    """
    Get cached Supabase client for the given settings.

    The client is cached per (url, key) pair.
    Call reset_connection() to reconnect.

    Args:
        settings: Application settings

    Returns:
        Client: Supabase client

    Raises:
        DatabaseConnectionError: If the client cannot be created
    """
    try:
        client = _create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise DatabaseConnectionError(f"Failed to connect to Supabase: {e}") from e

    logger.debug("supabase_client_ready")
    return client


def check_connection(client: Client) -> dict:
    """
    Check database connection health.

    Returns:
        dict: Connection status with details
    """
    try:
        boats = client.table("boats_list").select("slug", count="exact").limit(1).execute()
        return {
            "status": "healthy",
            "boats_count": boats.count
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }


def reset_connection():
    """
    Reset the cached database connection.

    Call this if connection becomes stale or after config changes.
    """
    _create_client.cache_clear()
    logger.info("database_connection_reset")
