"""
Headless-browser page fetcher (Playwright, Chromium).

Used for listings that need JavaScript. The browser is launched on the
first fetch with a mobile viewport, visits the marketplace home page once
to pick up session cookies, then for every page: navigate, accept the
cookie banner, wait for the expected container and scroll to trigger
lazy-loaded tiles.
"""

from typing import Optional
from urllib.parse import urlparse
import structlog

from playwright.sync_api import (
    sync_playwright,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

from exceptions import PageFetchError
from integrations.page_fetcher import PageFetcher
from utils.throttle import FixedDelayThrottle

logger = structlog.get_logger(__name__)

MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_4 like Mac OS X) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17 Mobile/15E148 Safari/604.1"
)

COOKIE_ACCEPT_SELECTORS = [
    "#sp-cc-accept",
    "input#sp-cc-accept",
    "button[name='accept']",
    "input[name='accept']",
    "input[type='submit'][aria-label*='Accept']",
    "input[type='submit'][value*='Accept']",
    "button:has-text('Accept Cookies')",
]

HTTP_ONLY_COOKIES = {"session-token"}


class BrowserPageFetcher(PageFetcher):
    """Fetch rendered pages through one reusable browser tab."""

    strategy = "browser"

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 60,
        delay_seconds: float = 1.5,
        headless: bool = True,
        scroll_steps: int = 10,
        scroll_delay_seconds: float = 0.25,
        selector_timeout_seconds: float = 15,
        cookies: Optional[dict[str, str]] = None,
        throttle: Optional[FixedDelayThrottle] = None
    ):
        self.base_url = base_url
        self.timeout_ms = int(timeout_seconds * 1000)
        self.headless = headless
        self.scroll_steps = scroll_steps
        self.scroll_delay_ms = int(scroll_delay_seconds * 1000)
        self.selector_timeout_ms = int(selector_timeout_seconds * 1000)
        self.cookies = cookies or {}
        self.throttle = throttle or FixedDelayThrottle(delay_seconds)

        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None
        self._warmed_up = False

    # ===================
    # SESSION SETUP
    # ===================

    def _launch(self):
        if self._page is not None:
            return self._page

        logger.info("launching_browser", headless=self.headless)
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(
            headless=self.headless,
            args=["--no-sandbox", "--disable-setuid-sandbox"],
        )
        self._context = self._browser.new_context(
            viewport={"width": 390, "height": 844},
            is_mobile=True,
            has_touch=True,
            user_agent=MOBILE_USER_AGENT,
        )
        self._page = self._context.new_page()
        return self._page

    def _cookie_payload(self) -> list[dict]:
        domain = urlparse(self.base_url).hostname
        return [
            {
                "name": name,
                "value": value,
                "domain": domain,
                "path": "/",
                "httpOnly": name in HTTP_ONLY_COOKIES,
            }
            for name, value in self.cookies.items()
        ]

    def _warm_up(self, page) -> None:
        """Visit the home page once and install session cookies."""
        if self._warmed_up:
            return
        try:
            page.goto(self.base_url, wait_until="domcontentloaded", timeout=self.timeout_ms)
            if self.cookies:
                self._context.add_cookies(self._cookie_payload())
                page.reload(wait_until="domcontentloaded", timeout=self.timeout_ms)
        except PlaywrightError as e:
            logger.error("browser_warm_up_failed", url=self.base_url, error=str(e))
            raise PageFetchError(self.base_url, f"Warm-up failed: {e}", strategy=self.strategy) from e

        self._warmed_up = True
        logger.info("browser_session_ready", cookies=len(self.cookies))

    # ===================
    # PAGE ACTIONS
    # ===================

    def _accept_cookies(self, page) -> bool:
        for selector in COOKIE_ACCEPT_SELECTORS:
            try:
                element = page.query_selector(selector)
                if element:
                    element.click(delay=50)
                    page.wait_for_timeout(500)
                    logger.debug("cookie_banner_accepted", selector=selector)
                    return True
            except PlaywrightError as e:
                logger.debug("cookie_selector_failed", selector=selector, error=str(e))
        return False

    def _auto_scroll(self, page) -> None:
        for _ in range(self.scroll_steps):
            page.evaluate("window.scrollBy(0, window.innerHeight)")
            page.wait_for_timeout(self.scroll_delay_ms)

    def fetch(self, url: str, wait_for: Optional[str] = None) -> str:
        """
        Load a page in the browser and return the rendered DOM.

        Raises:
            PageFetchError: Navigation error/timeout, error status, or
                `wait_for` selector not present in time
        """
        page = self._launch()
        self._warm_up(page)
        self.throttle.wait()

        logger.info("fetching_page", url=url, strategy=self.strategy)

        try:
            response = page.goto(url, wait_until="domcontentloaded", timeout=self.timeout_ms)
        except PlaywrightError as e:
            logger.error("page_fetch_failed", url=url, error=str(e), error_type=type(e).__name__)
            raise PageFetchError(url, f"Navigation failed: {e}", strategy=self.strategy) from e

        if response is not None and response.status >= 400:
            logger.error("page_fetch_bad_status", url=url, status=response.status)
            raise PageFetchError(
                url,
                f"HTTP {response.status} for {url}",
                status=response.status,
                strategy=self.strategy,
            )

        self._accept_cookies(page)

        if wait_for:
            try:
                page.wait_for_selector(wait_for, timeout=self.selector_timeout_ms)
            except PlaywrightTimeoutError as e:
                logger.error("expected_structure_missing", url=url, selector=wait_for)
                raise PageFetchError(
                    url,
                    f"Expected element {wait_for} not found",
                    strategy=self.strategy,
                ) from e

        self._auto_scroll(page)
        return page.content()

    def close(self) -> None:
        try:
            if self._browser is not None:
                self._browser.close()
        finally:
            if self._playwright is not None:
                self._playwright.stop()
            self._playwright = None
            self._browser = None
            self._context = None
            self._page = None
            self._warmed_up = False
            logger.debug("browser_closed")
