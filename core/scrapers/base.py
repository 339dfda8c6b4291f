# This file defines the abstract base class for every page source in the system
# It establishes the narrow interface the drain and the reconciliation loop rely on

import abc  # The Abstract Base Classes module enables the creation of abstract classes
from typing import Any, Dict, List  # Type hints for better code documentation and IDE support

from core.inventory.models import ScrapedListing


class BasePageSource(abc.ABC):
    """Base class for storefront page sources.

    A page source is a single, sequentially reused browsing session against one
    storefront. It exposes two things:
    1. A paginated listing that can be walked page by page
    2. Product detail pages that expose a stock count

    The listing drain and the reconciliation loop only talk to this interface,
    so they can be exercised without a real browser.
    """

    def __init__(self, name: str, url: str):
        """Initialize the page source with a name and listing URL.

        Args:
            name: Identifier for this storefront (e.g., "treasurebox"),
                 used for logger names and report output.
            url: URL of the first listing page to walk.
        """
        self.name = name  # Store source identifier
        self.url = url    # Store the listing URL

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self) -> None:
        """Release the browsing session. Sources without resources need not override."""

    def read_listings(self) -> List[ScrapedListing]:
        """Return the listings on the current page, in page order.

        Entries missing a link or a join key are dropped here, before they
        can be accumulated by the drain, whatever the concrete markup returns.
        """
        listings = []
        for raw in self._read_raw_listings():
            listing = ScrapedListing.from_raw(raw)
            if listing is not None:
                listings.append(listing)
        return listings

    @abc.abstractmethod
    def _read_raw_listings(self) -> List[Dict[str, Any]]:
        """Return raw ``{"link": ..., "join_key": ...}`` entries for the current page.

        Values may be None when the markup for a card is incomplete.
        """
        raise NotImplementedError("Concrete page sources must implement _read_raw_listings()")

    @abc.abstractmethod
    def open_listing(self) -> None:
        """Navigate to the first listing page."""
        raise NotImplementedError("Concrete page sources must implement open_listing()")

    @abc.abstractmethod
    def has_next_page(self) -> bool:
        """Return False once the "next page" control is disabled or absent."""
        raise NotImplementedError("Concrete page sources must implement has_next_page()")

    @abc.abstractmethod
    def next_page(self) -> None:
        """Activate the "next page" control."""
        raise NotImplementedError("Concrete page sources must implement next_page()")

    @abc.abstractmethod
    def pause(self, milliseconds: int) -> None:
        """Block for ``milliseconds`` so client-side rendering can settle."""
        raise NotImplementedError("Concrete page sources must implement pause()")

    @abc.abstractmethod
    def read_stock(self, link: str) -> int:
        """Navigate to a product detail page and return its stock count.

        Returns:
            The parsed stock quantity, or 0 when the page shows none.
            Extraction misses are never errors.

        Raises:
            PageSourceError: if the navigation itself fails.
        """
        raise NotImplementedError("Concrete page sources must implement read_stock()")
