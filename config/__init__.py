"""
Configuration module.

Exports:
    settings: Application settings instance
    get_settings: Function to get settings (for dependency injection)
    create_supabase_client: Build a Supabase client for one run
    get_supabase_client: Cached client for the API process
    check_connection: Health check function
    configure_logging: structlog setup
"""

from config.settings import settings, get_settings, Settings
from config.database import (
    create_supabase_client,
    get_supabase_client,
    check_connection,
)
from config.logging import configure_logging

__all__ = [
    # Settings
    "settings",
    "get_settings",
    "Settings",

    # Database
    "create_supabase_client",
    "get_supabase_client",
    "check_connection",

    # Logging
    "configure_logging",
]
