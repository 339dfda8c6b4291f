import logging
from typing import Callable, Optional

from core.inventory.api_client import InventoryAPIClient
from core.reconcile.drain import (
    DEFAULT_MAX_PAGES,
    DEFAULT_SETTLE_DELAY_MS,
    drain_listings,
    index_listings,
)
from core.reconcile.join_index import build_join_index
from core.reconcile.reconciler import ReconciliationReport, StockReconciler
from core.reconcile.variants import JoinVariant
from core.scrapers.base import BasePageSource

logger = logging.getLogger("reconcile")


def run_stock_sync(
    api_client: InventoryAPIClient,
    email: Optional[str],
    password: Optional[str],
    open_page_source: Callable[[], BasePageSource],
    variant: JoinVariant,
    settle_delay_ms: int = DEFAULT_SETTLE_DELAY_MS,
    max_pages: Optional[int] = DEFAULT_MAX_PAGES,
    dry_run: bool = False,
) -> ReconciliationReport:
    """Run one full sync: sign in, fetch inventory, scrape, write back.

    Sign-in and the inventory fetch happen before the browser is launched;
    their errors propagate and end the run before any scraping.

    Args:
        api_client: Unauthenticated inventory API client
        email: Account email
        password: Account password
        open_page_source: Called once to create the page source for this run
        variant: Join variant selecting the key and the candidate source
        settle_delay_ms: Delay after each listing page turn
        max_pages: Safety bound on listing pages
        dry_run: Compute updates without writing them
    """
    repository = api_client.sign_in(email, password)
    records = repository.list_records()
    index = build_join_index(records, variant)

    with open_page_source() as source:
        if variant.drains_listings:
            candidates = drain_listings(source, settle_delay_ms, max_pages)
        else:
            candidates = index_listings(index, variant)

        reconciler = StockReconciler(repository, source, dry_run=dry_run)
        report = reconciler.reconcile(candidates, index)

    logger.info("Sync complete")
    return report
