"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Store credentials are optional here so dry runs work without them;
config.database raises MissingCredentialsError when a client is needed.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
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
    supabase_url: Optional[str] = Field(
        None,
        description="Supabase project URL"
    )
    supabase_key: Optional[str] = Field(
        None,
        description="Supabase anon/public key"
    )
    supabase_service_key: Optional[str] = Field(
        None,
        description="Supabase service role key (preferred for imports)"
    )
    perfumes_table: str = Field(
        default="perfumes",
        min_length=1,
        description="Table holding perfume records"
    )

    # ===================
    # CATALOG DEFAULTS
    # ===================
    default_currency: str = Field(
        default="ZAR",
        pattern="^[A-Z]{3}$",
        description="Currency applied to inserted records without one"
    )
    amazon_base_url: str = Field(
        default="https://www.amazon.co.za",
        description="Marketplace base URL for search and product pages"
    )
    spreadsheet_dir: str = Field(
        default="amazon_web_scrapes",
        description="Directory searched for the latest spreadsheet export"
    )
    import_batch_size: int = Field(
        default=200,
        ge=10,
        le=5000,
        description="Records per upsert batch"
    )

    # ===================
    # FETCHING
    # ===================
    fetch_strategy: str = Field(
        default="http",
        pattern="^(http|browser)$",
        description="Page fetcher: plain HTTP or headless browser"
    )
    request_delay_seconds: float = Field(
        default=1.5,
        ge=0.25,
        le=60,
        description="Fixed pause between page requests"
    )
    record_delay_seconds: float = Field(
        default=0.2,
        ge=0,
        le=10,
        description="Fixed pause between record writes"
    )
    request_timeout_seconds: float = Field(
        default=30,
        ge=1,
        le=180,
        description="Timeout for a single page fetch"
    )
    scrape_api_key: Optional[str] = Field(
        None,
        description="Scraping proxy API key (HTTP strategy only)"
    )
    scrape_api_url: str = Field(
        default="https://scrape.abstractapi.com/v1/",
        description="Scraping proxy endpoint"
    )

    # ===================
    # HEADLESS BROWSER
    # ===================
    browser_headless: bool = Field(
        default=True,
        description="Run Chromium without a window"
    )
    browser_scroll_steps: int = Field(
        default=10,
        ge=0,
        le=50,
        description="Viewport scrolls per page to trigger lazy loading"
    )
    browser_scroll_delay_seconds: float = Field(
        default=0.25,
        ge=0,
        le=5,
        description="Pause between scroll steps"
    )
    browser_selector_timeout_seconds: float = Field(
        default=15,
        ge=1,
        le=120,
        description="Wait for the result container"
    )
    amz_cookie_session_id: Optional[str] = None
    amz_cookie_session_id_time: Optional[str] = None
    amz_cookie_session_token: Optional[str] = None
    amz_cookie_ubid_acza: Optional[str] = None

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )

    # ===================
    # API SETTINGS
    # ===================
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API port")
    max_upload_mb: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Largest spreadsheet accepted by the import endpoint"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def write_key(self) -> Optional[str]:
        """Service key when available, anon key otherwise."""
        return self.supabase_service_key or self.supabase_key

    @property
    def marketplace_cookies(self) -> dict[str, str]:
        """Configured marketplace session cookies by cookie name."""
        cookies = {
            "session-id": self.amz_cookie_session_id,
            "session-id-time": self.amz_cookie_session_id_time,
            "session-token": self.amz_cookie_session_token,
            "ubid-acza": self.amz_cookie_ubid_acza,
        }
        return {name: value for name, value in cookies.items() if value}


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
