"""
Unit tests for the fetch/render layer.

Network and browser are mocked: requests.Session and sync_playwright.

Run: pytest tests/unit/test_page_fetchers.py -v
"""

from unittest.mock import MagicMock, patch
import pytest
import requests
from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from config.settings import Settings
from exceptions import PageFetchError, ConfigurationError
from integrations.page_fetcher import get_page_fetcher
from integrations.http_fetcher import HttpPageFetcher
from integrations.browser_fetcher import BrowserPageFetcher, MOBILE_USER_AGENT
from utils.throttle import FixedDelayThrottle

URL = "https://www.amazon.co.za/s?k=dior+perfume&page=1"


def make_response(status: int = 200, text: str = "<html>ok</html>") -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 400
    response.text = text
    response.content = text.encode()
    return response


# ===================
# THROTTLE
# ===================

class TestFixedDelayThrottle:
    """Tests for FixedDelayThrottle.wait()"""

    def test_first_call_never_waits(self):
        sleep = MagicMock()
        throttle = FixedDelayThrottle(1.5, sleep=sleep, clock=lambda: 100.0)

        assert throttle.wait() == 0.0
        sleep.assert_not_called()

    def test_sleeps_remaining_delay(self):
        sleep = MagicMock()
        times = iter([100.0, 100.5, 100.5])
        throttle = FixedDelayThrottle(1.5, sleep=sleep, clock=lambda: next(times))

        throttle.wait()
        slept = throttle.wait()

        assert slept == pytest.approx(1.0)
        sleep.assert_called_once()

    def test_no_sleep_when_delay_already_passed(self):
        sleep = MagicMock()
        times = iter([100.0, 105.0, 105.0])
        throttle = FixedDelayThrottle(1.5, sleep=sleep, clock=lambda: next(times))

        throttle.wait()

        assert throttle.wait() == 0.0
        sleep.assert_not_called()


# ===================
# HTTP FETCHER
# ===================

class TestHttpPageFetcher:
    """Tests for HttpPageFetcher.fetch()"""

    def make_fetcher(self, session, **kwargs) -> HttpPageFetcher:
        return HttpPageFetcher(session=session, throttle=FixedDelayThrottle(0), **kwargs)

    def test_returns_body(self):
        session = MagicMock()
        session.headers = {}
        session.get.return_value = make_response(text="<html>results</html>")

        html = self.make_fetcher(session, timeout_seconds=12).fetch(URL)

        assert html == "<html>results</html>"
        session.get.assert_called_once_with(URL, timeout=12)

    def test_sends_regional_headers(self):
        session = MagicMock()
        session.headers = {}

        self.make_fetcher(session)

        assert session.headers["Accept-Language"] == "en-ZA,en;q=0.9"
        assert "Mozilla/5.0" in session.headers["User-Agent"]

    def test_routes_through_scrape_api(self):
        session = MagicMock()
        session.headers = {}
        session.get.return_value = make_response()
        fetcher = self.make_fetcher(
            session,
            scrape_api_key="key-123",
            scrape_api_url="https://scrape.example/v1/",
            timeout_seconds=30,
        )

        fetcher.fetch(URL)

        session.get.assert_called_once_with(
            "https://scrape.example/v1/",
            params={"api_key": "key-123", "url": URL},
            timeout=30,
        )

    @pytest.mark.parametrize("status", [403, 404, 503])
    def test_error_status_raises(self, status):
        session = MagicMock()
        session.headers = {}
        session.get.return_value = make_response(status=status)

        with pytest.raises(PageFetchError) as exc_info:
            self.make_fetcher(session).fetch(URL)

        assert exc_info.value.status == status
        assert exc_info.value.url == URL

    def test_transport_error_raises(self):
        session = MagicMock()
        session.headers = {}
        session.get.side_effect = requests.Timeout("read timed out")

        with pytest.raises(PageFetchError) as exc_info:
            self.make_fetcher(session).fetch(URL)

        assert exc_info.value.status is None
        assert "read timed out" in exc_info.value.message

    def test_throttles_each_request(self):
        session = MagicMock()
        session.headers = {}
        session.get.return_value = make_response()
        throttle = MagicMock()
        fetcher = HttpPageFetcher(session=session, throttle=throttle)

        fetcher.fetch(URL)
        fetcher.fetch(URL)

        assert throttle.wait.call_count == 2

    def test_context_manager_closes_session(self):
        session = MagicMock()
        session.headers = {}

        with self.make_fetcher(session):
            pass

        session.close.assert_called_once()


# ===================
# BROWSER FETCHER
# ===================

@pytest.fixture
def browser_mocks():
    """Patched sync_playwright returning a chain of mocks."""
    with patch("integrations.browser_fetcher.sync_playwright") as sync_playwright:
        playwright = MagicMock()
        browser = MagicMock()
        context = MagicMock()
        page = MagicMock()

        sync_playwright.return_value.start.return_value = playwright
        playwright.chromium.launch.return_value = browser
        browser.new_context.return_value = context
        context.new_page.return_value = page

        page.goto.return_value = MagicMock(status=200)
        page.query_selector.return_value = None
        page.content.return_value = "<html>rendered</html>"

        yield {
            "sync_playwright": sync_playwright,
            "playwright": playwright,
            "browser": browser,
            "context": context,
            "page": page,
        }


def make_browser_fetcher(**kwargs) -> BrowserPageFetcher:
    kwargs.setdefault("base_url", "https://www.amazon.co.za")
    kwargs.setdefault("throttle", FixedDelayThrottle(0))
    return BrowserPageFetcher(**kwargs)


class TestBrowserPageFetcher:
    """Tests for BrowserPageFetcher.fetch()"""

    def test_returns_rendered_dom(self, browser_mocks):
        fetcher = make_browser_fetcher()

        assert fetcher.fetch(URL, wait_for="div.s-main-slot") == "<html>rendered</html>"
        browser_mocks["page"].wait_for_selector.assert_called_once_with("div.s-main-slot", timeout=15000)

    def test_launches_lazily_with_mobile_profile(self, browser_mocks):
        fetcher = make_browser_fetcher(headless=False)
        browser_mocks["sync_playwright"].assert_not_called()

        fetcher.fetch(URL)

        browser_mocks["playwright"].chromium.launch.assert_called_once()
        assert browser_mocks["playwright"].chromium.launch.call_args.kwargs["headless"] is False
        context_kwargs = browser_mocks["browser"].new_context.call_args.kwargs
        assert context_kwargs["viewport"] == {"width": 390, "height": 844}
        assert context_kwargs["user_agent"] == MOBILE_USER_AGENT

    def test_warm_up_once_with_cookies(self, browser_mocks):
        fetcher = make_browser_fetcher(cookies={"session-id": "123", "session-token": "tok"})

        fetcher.fetch(URL)
        fetcher.fetch(URL)

        page = browser_mocks["page"]
        visited = [call.args[0] for call in page.goto.call_args_list]
        assert visited == ["https://www.amazon.co.za", URL, URL]
        cookies = browser_mocks["context"].add_cookies.call_args.args[0]
        assert {c["name"] for c in cookies} == {"session-id", "session-token"}
        assert all(c["domain"] == "www.amazon.co.za" for c in cookies)
        page.reload.assert_called_once()

    def test_no_cookies_no_reload(self, browser_mocks):
        make_browser_fetcher().fetch(URL)

        browser_mocks["context"].add_cookies.assert_not_called()
        browser_mocks["page"].reload.assert_not_called()

    def test_accepts_cookie_banner(self, browser_mocks):
        banner = MagicMock()
        browser_mocks["page"].query_selector.side_effect = (
            lambda selector: banner if selector == "#sp-cc-accept" else None
        )

        make_browser_fetcher().fetch(URL)

        banner.click.assert_called_once()

    def test_scrolls_configured_steps(self, browser_mocks):
        make_browser_fetcher(scroll_steps=4).fetch(URL)

        assert browser_mocks["page"].evaluate.call_count == 4

    def test_missing_container_raises(self, browser_mocks):
        browser_mocks["page"].wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout 15000ms exceeded")

        with pytest.raises(PageFetchError) as exc_info:
            make_browser_fetcher().fetch(URL, wait_for="div.s-main-slot")

        assert exc_info.value.url == URL

    def test_navigation_error_raises(self, browser_mocks):
        page = browser_mocks["page"]
        page.goto.side_effect = [MagicMock(status=200), PlaywrightError("net::ERR_CONNECTION_RESET")]

        with pytest.raises(PageFetchError):
            make_browser_fetcher().fetch(URL)

    def test_error_status_raises(self, browser_mocks):
        browser_mocks["page"].goto.return_value = MagicMock(status=503)

        with pytest.raises(PageFetchError) as exc_info:
            make_browser_fetcher().fetch(URL)

        assert exc_info.value.status == 503

    def test_close_stops_browser(self, browser_mocks):
        fetcher = make_browser_fetcher()
        fetcher.fetch(URL)

        fetcher.close()

        browser_mocks["browser"].close.assert_called_once()
        browser_mocks["playwright"].stop.assert_called_once()

    def test_close_stops_driver_when_browser_close_fails(self, browser_mocks):
        fetcher = make_browser_fetcher()
        fetcher.fetch(URL)
        browser_mocks["browser"].close.side_effect = PlaywrightError("Target closed")

        with pytest.raises(PlaywrightError):
            fetcher.close()

        browser_mocks["playwright"].stop.assert_called_once()
        fetcher.close()
        browser_mocks["playwright"].stop.assert_called_once()

    def test_close_before_launch_is_noop(self, browser_mocks):
        make_browser_fetcher().close()

        browser_mocks["sync_playwright"].assert_not_called()


# ===================
# FACTORY
# ===================

class TestGetPageFetcher:
    """Tests for get_page_fetcher()"""

    def make_settings(self, **overrides) -> Settings:
        return Settings(_env_file=None, **overrides)

    def test_http_default(self):
        fetcher = get_page_fetcher(app_settings=self.make_settings())

        assert isinstance(fetcher, HttpPageFetcher)
        assert fetcher.throttle.delay_seconds == 1.5

    def test_browser_from_settings(self):
        fetcher = get_page_fetcher(app_settings=self.make_settings(fetch_strategy="browser"))

        assert isinstance(fetcher, BrowserPageFetcher)

    def test_explicit_strategy_and_overrides(self):
        fetcher = get_page_fetcher("browser", self.make_settings(), delay_seconds=3.0, headless=False)

        assert fetcher.headless is False
        assert fetcher.throttle.delay_seconds == 3.0

    def test_marketplace_cookies_passed_to_browser(self):
        app_settings = self.make_settings(amz_cookie_session_id="abc", amz_cookie_ubid_acza="u1")

        fetcher = get_page_fetcher("browser", app_settings)

        assert fetcher.cookies == {"session-id": "abc", "ubid-acza": "u1"}

    def test_scrape_api_key_passed_to_http(self):
        fetcher = get_page_fetcher("http", self.make_settings(scrape_api_key="k"))

        assert fetcher.via_proxy is True

    def test_unknown_strategy(self):
        with pytest.raises(ConfigurationError):
            get_page_fetcher("curl", self.make_settings())
