from bs4 import BeautifulSoup
from playwright.sync_api import Error as PlaywrightError
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

from core.exceptions import PageSourceError
from core.scrapers.web_scraper_base import BrowserScraperBase

# Storefront markup (generated class names, subject to change on redeploys)
CARD_SELECTOR = "div.css-5w95k > div.css-0"
CHARACTER_SELECTOR = "div.css-182w6d6 > p:first-child"
NEXT_PAGE_SELECTOR = '[aria-label="Go to next page"]'


def parse_listing_cards(soup: BeautifulSoup, base_url: Optional[str] = None) -> List[Dict[str, Any]]:
    """Extract raw listing entries from one rendered listing page.

    Args:
        soup: Parsed listing page
        base_url: URL the page was loaded from, used to absolutize links

    Returns:
        One dict per product card with "link" and "join_key"; either value is
        None when the card lacks it.
    """
    entries = []
    for card in soup.select(CARD_SELECTOR):
        link_element = card.select_one("a")
        href = link_element.get("href") if link_element else None
        character_element = card.select_one(CHARACTER_SELECTOR)
        # Names can span inline tags ("Monkey <span>D.</span> Luffy"); keep the word breaks
        character = " ".join(character_element.get_text().split()) if character_element else None

        entries.append({
            "link": urljoin(base_url, href) if href and base_url else href,
            "join_key": character,
        })
    return entries


def is_next_disabled(soup: BeautifulSoup) -> bool:
    """True when the pagination control is missing or disabled."""
    next_button = soup.select_one(NEXT_PAGE_SELECTOR)
    if next_button is None:
        return True
    return next_button.has_attr("disabled")


class TreasureBoxScraper(BrowserScraperBase):
    """Page source for the Treasure Box Japan storefront.

    Listing cards are matched to inventory by character name; detail pages
    show the stock as a "Stock: <n>" paragraph.
    """

    def __init__(self, url: str, **kwargs):
        super().__init__("treasurebox", url, **kwargs)

    def _read_raw_listings(self) -> List[Dict[str, Any]]:
        return parse_listing_cards(self.current_soup(), self.current_url)

    def has_next_page(self) -> bool:
        return not is_next_disabled(self.current_soup())

    def next_page(self) -> None:
        self.logger.info("Clicking next page")
        try:
            self._require_page().click(NEXT_PAGE_SELECTOR)
        except PlaywrightError as e:
            raise PageSourceError(f"Could not click next page: {e}") from e
