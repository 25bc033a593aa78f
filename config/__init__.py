"""
Configuration module.

Exports:
    get_settings: Function to get cached settings
    Settings: Settings model
    get_supabase_client: Build (cached) Supabase client from settings
    check_connection: Health check function
"""

from config.settings import get_settings, Settings
from config.database import (
    get_supabase_client,
    check_connection,
    reset_connection,
    DatabaseConnectionError,
)

__all__ = [
    # Settings
    "get_settings",
    "Settings",

    # Database
    "get_supabase_client",
    "check_connection",
    "reset_connection",
    "DatabaseConnectionError",
]
