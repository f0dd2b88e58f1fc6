"""
Plain HTTP page fetcher (requests).

Sends a desktop browser User-Agent. When a scraping-proxy key is
configured the request goes through the proxy instead of directly to
the marketplace.
"""

from typing import Optional
import requests
import structlog

from exceptions import PageFetchError
from integrations.page_fetcher import PageFetcher
from utils.throttle import FixedDelayThrottle

logger = structlog.get_logger(__name__)


class HttpPageFetcher(PageFetcher):
    """Fetch pages with a single requests session."""

    strategy = "http"

    DEFAULT_HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/124.0.0.0 Safari/537.36"
        ),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-ZA,en;q=0.9",
    }

    def __init__(
        self,
        timeout_seconds: float = 30,
        delay_seconds: float = 1.5,
        scrape_api_key: Optional[str] = None,
        scrape_api_url: str = "https://scrape.abstractapi.com/v1/",
        session: Optional[requests.Session] = None,
        throttle: Optional[FixedDelayThrottle] = None
    ):
        self.timeout_seconds = timeout_seconds
        self.scrape_api_key = scrape_api_key
        self.scrape_api_url = scrape_api_url
        self.session = session or requests.Session()
        self.session.headers.update(self.DEFAULT_HEADERS)
        self.throttle = throttle or FixedDelayThrottle(delay_seconds)

    @property
    def via_proxy(self) -> bool:
        return bool(self.scrape_api_key)

    def fetch(self, url: str, wait_for: Optional[str] = None) -> str:
        """
        GET a page and return its body.

        Raises:
            PageFetchError: Transport error, timeout or non-2xx status
        """
        self.throttle.wait()
        logger.info("fetching_page", url=url, strategy=self.strategy, via_proxy=self.via_proxy)

        try:
            if self.via_proxy:
                response = self.session.get(
                    self.scrape_api_url,
                    params={"api_key": self.scrape_api_key, "url": url},
                    timeout=self.timeout_seconds,
                )
            else:
                response = self.session.get(url, timeout=self.timeout_seconds)
        except requests.RequestException as e:
            logger.error("page_fetch_failed", url=url, error=str(e), error_type=type(e).__name__)
            raise PageFetchError(url, f"Request failed: {e}", strategy=self.strategy) from e

        if not response.ok:
            logger.error("page_fetch_bad_status", url=url, status=response.status_code)
            raise PageFetchError(
                url,
                f"HTTP {response.status_code} for {url}",
                status=response.status_code,
                strategy=self.strategy,
            )

        logger.debug("page_fetched", url=url, bytes=len(response.content))
        return response.text

    def close(self) -> None:
        self.session.close()
