"""
Database connection management.

Scripts build one Supabase client per run with create_supabase_client()
and pass it to the services that persist. The API process shares a cached
client from get_supabase_client().
"""

from supabase import create_client, Client
from functools import lru_cache
from typing import Optional
import structlog

from config.settings import Settings, get_settings
from exceptions import MissingCredentialsError, ExternalServiceError

logger = structlog.get_logger(__name__)


def create_supabase_client(app_settings: Optional[Settings] = None) -> Client:
    """
    Create a new Supabase client for one import run.

    Prefers the service role key so row-level security does not block
    writes; falls back to the anon key.

    Args:
        app_settings: Settings to read credentials from (defaults to global)

    Returns:
        Client: Supabase client

    Raises:
        MissingCredentialsError: If URL or key is not configured
        ExternalServiceError: If the client cannot be created
    """
    app_settings = app_settings or get_settings()

    missing = []
    if not app_settings.supabase_url:
        missing.append("SUPABASE_URL")
    if not app_settings.write_key:
        missing.append("SUPABASE_SERVICE_KEY or SUPABASE_KEY")
    if missing:
        logger.error("supabase_credentials_missing", missing=missing)
        raise MissingCredentialsError(missing)

    try:
        logger.info(
            "connecting_to_supabase",
            url=app_settings.supabase_url[:30] + "...",  # Log partial URL only
            service_role=bool(app_settings.supabase_service_key)
        )
        return create_client(app_settings.supabase_url, app_settings.write_key)

    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise ExternalServiceError("supabase", f"Failed to create Supabase client: {e}") from e


@lru_cache()
def get_supabase_client() -> Client:
    """
    Get cached Supabase client instance for the API process.

    Call get_supabase_client.cache_clear() to reconnect.
    """
    return create_supabase_client()


# ===================
# HELPER FUNCTIONS
# ===================

def check_connection() -> dict:
    """
    Check database connection health.

    Returns:
        dict: Connection status with details
    """
    app_settings = get_settings()
    try:
        client = get_supabase_client()
        perfumes = (
            client.table(app_settings.perfumes_table)
            .select("id", count="exact")
            .limit(1)
            .execute()
        )

        return {
            "status": "healthy",
            "perfumes_count": perfumes.count
        }

    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }

