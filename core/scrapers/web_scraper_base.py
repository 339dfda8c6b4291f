from bs4 import BeautifulSoup
from playwright.sync_api import Error as PlaywrightError, sync_playwright
from typing import Optional
import logging

from core.exceptions import PageSourceError
from core.scrapers.base import BasePageSource
from core.scrapers.extractors import extract_stock_quantity


class BrowserScraperBase(BasePageSource):
    """Base class for page sources that drive a real browser.

    The storefront renders its listing client-side, so plain HTTP fetches see
    an empty shell. This class owns one Chromium browser with one page, reused
    sequentially for every navigation (no tabs, no pooling), and hands the
    rendered DOM to BeautifulSoup for parsing.
    """

    def __init__(
        self,
        name: str,
        url: str,
        headless: bool = True,
        navigation_timeout_ms: int = 30000,
        wait_until: str = "networkidle",
    ):
        """Initialize the browser scraper.

        Args:
            name: Identifier for this storefront
            url: First listing page
            headless: Run Chromium without a window
            navigation_timeout_ms: Timeout applied to every page operation
            wait_until: Playwright load state a navigation waits for
        """
        super().__init__(name, url)
        self.headless = headless
        self.navigation_timeout_ms = navigation_timeout_ms
        self.wait_until = wait_until
        self.logger = logging.getLogger(f"scraper.{name}")
        self._playwright = None
        self._browser = None
        self.page = None

    def __enter__(self):
        self.start()
        return self

    def start(self) -> None:
        """Launch the browser and open the single page used for the whole run."""
        if self.page is not None:
            return
        self.logger.info("Launching browser (headless=%s)", self.headless)
        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(headless=self.headless)
            self.page = self._browser.new_page()
            self.page.set_default_timeout(self.navigation_timeout_ms)
        except PlaywrightError as e:
            self.close()
            raise PageSourceError(f"Could not launch browser: {e}") from e

    def close(self) -> None:
        if self._browser is not None:
            self.logger.info("Closing browser")
            try:
                self._browser.close()
            except PlaywrightError as e:
                self.logger.warning("Error closing browser: %s", str(e))
        if self._playwright is not None:
            self._playwright.stop()
        self._browser = None
        self._playwright = None
        self.page = None

    def _require_page(self):
        if self.page is None:
            raise PageSourceError("Browser session has not been started")
        return self.page

    def get_page(self, url: str = None) -> BeautifulSoup:
        """Navigate to a URL and parse the rendered DOM.

        Args:
            url: URL to open, defaults to the listing URL

        Returns:
            BeautifulSoup object for HTML parsing

        Raises:
            PageSourceError: If the navigation fails or times out
        """
        target_url = url or self.url
        page = self._require_page()
        self.logger.info("Navigating to %s", target_url)
        try:
            page.goto(target_url, wait_until=self.wait_until)
        except PlaywrightError as e:
            self.logger.error("Error navigating to %s: %s", target_url, str(e))
            raise PageSourceError(f"Navigation to {target_url} failed: {e}") from e
        return self.current_soup()

    def current_soup(self) -> BeautifulSoup:
        """Parse whatever the page currently shows, without navigating."""
        return BeautifulSoup(self._require_page().content(), "lxml")

    @property
    def current_url(self) -> Optional[str]:
        return self.page.url if self.page is not None else None

    def open_listing(self) -> None:
        self.get_page(self.url)

    def pause(self, milliseconds: int) -> None:
        self._require_page().wait_for_timeout(milliseconds)

    def read_stock(self, link: str) -> int:
        soup = self.get_page(link)
        quantity = extract_stock_quantity(soup)
        self.logger.debug("Stock on %s: %d", link, quantity)
        return quantity
