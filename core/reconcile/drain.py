import logging
from typing import List, Optional

from core.inventory.models import ScrapedListing
from core.reconcile.join_index import JoinIndex
from core.reconcile.variants import JoinVariant
from core.scrapers.base import BasePageSource

logger = logging.getLogger("reconcile")

DEFAULT_SETTLE_DELAY_MS = 2000
DEFAULT_MAX_PAGES = 200


def drain_listings(
    source: BasePageSource,
    settle_delay_ms: int = DEFAULT_SETTLE_DELAY_MS,
    max_pages: Optional[int] = DEFAULT_MAX_PAGES,
) -> List[ScrapedListing]:
    """Walk every listing page and return all listings in page order.

    The walk stops when the next-page control is disabled or absent, or after
    ``max_pages`` pages (a falsy ``max_pages`` removes the bound). After each
    page turn the source pauses ``settle_delay_ms`` so the next page can render.
    """
    logger.info("Scraping products")
    source.open_listing()

    listings: List[ScrapedListing] = []
    pages = 0
    while True:
        page_listings = source.read_listings()
        pages += 1
        logger.info("Found %d products on page %d", len(page_listings), pages)
        listings.extend(page_listings)

        if not source.has_next_page():
            logger.info("No more pages to scrape")
            break

        if max_pages and pages >= max_pages:
            logger.warning(
                "Stopping after %d pages: next page is still enabled", pages
            )
            break

        source.next_page()
        source.pause(settle_delay_ms)

    logger.info("Scraped %d products from %d pages", len(listings), pages)
    return listings


def index_listings(index: JoinIndex, variant: JoinVariant) -> List[ScrapedListing]:
    """Build one candidate per indexed key, pointing at its detail page."""
    return [
        ScrapedListing(link=variant.detail_url(key), join_key=key)
        for key in index
        if key
    ]
