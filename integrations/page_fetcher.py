"""
Page fetcher capability and strategy factory.

Two interchangeable implementations: plain HTTP (fast, easily blocked)
and a headless browser (slow, runs page scripts). The operator picks one
through FETCH_STRATEGY or --strategy; there is no automatic fallback.
"""

from abc import ABC, abstractmethod
from typing import Optional
import structlog

from config.settings import Settings, get_settings
from exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

FETCH_STRATEGIES = ("http", "browser")


class PageFetcher(ABC):
    """
    Retrieve the markup of one page.

    Implementations apply a fixed delay before every request and raise
    PageFetchError for a page that cannot be retrieved.
    """

    strategy: str = ""

    @abstractmethod
    def fetch(self, url: str, wait_for: Optional[str] = None) -> str:
        """
        Return the page HTML.

        Args:
            url: Page to load
            wait_for: CSS selector the page must contain (browser strategy
                waits for it; plain HTTP ignores it)

        Raises:
            PageFetchError: Non-success status, transport error or timeout
        """

    def close(self) -> None:
        """Release network / browser resources."""

    def __enter__(self) -> "PageFetcher":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def get_page_fetcher(
    strategy: Optional[str] = None,
    app_settings: Optional[Settings] = None,
    delay_seconds: Optional[float] = None,
    headless: Optional[bool] = None
) -> PageFetcher:
    """
    Build the fetcher selected by configuration.

    Args:
        strategy: "http" or "browser" (defaults to settings.fetch_strategy)
        app_settings: Settings override
        delay_seconds: Inter-request delay override (--delay)
        headless: Browser window override (--show)

    Raises:
        ConfigurationError: Unknown strategy
    """
    app_settings = app_settings or get_settings()
    strategy = (strategy or app_settings.fetch_strategy).lower()
    delay = app_settings.request_delay_seconds if delay_seconds is None else delay_seconds

    if strategy not in FETCH_STRATEGIES:
        raise ConfigurationError(
            f"Unknown fetch strategy: {strategy}",
            code="INVALID_FETCH_STRATEGY",
            details={"provided": strategy, "valid": list(FETCH_STRATEGIES)}
        )

    logger.info("page_fetcher_selected", strategy=strategy, delay_seconds=delay)

    if strategy == "browser":
        from integrations.browser_fetcher import BrowserPageFetcher

        return BrowserPageFetcher(
            base_url=app_settings.amazon_base_url,
            timeout_seconds=app_settings.request_timeout_seconds,
            delay_seconds=delay,
            headless=app_settings.browser_headless if headless is None else headless,
            scroll_steps=app_settings.browser_scroll_steps,
            scroll_delay_seconds=app_settings.browser_scroll_delay_seconds,
            selector_timeout_seconds=app_settings.browser_selector_timeout_seconds,
            cookies=app_settings.marketplace_cookies,
        )

    from integrations.http_fetcher import HttpPageFetcher

    return HttpPageFetcher(
        timeout_seconds=app_settings.request_timeout_seconds,
        delay_seconds=delay,
        scrape_api_key=app_settings.scrape_api_key,
        scrape_api_url=app_settings.scrape_api_url,
    )
