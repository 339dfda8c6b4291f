import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

from core.exceptions import UpdateError
from core.inventory.base import BaseInventoryRepository
from core.inventory.models import ScrapedListing
from core.reconcile.join_index import JoinIndex
from core.scrapers.base import BasePageSource

logger = logging.getLogger("reconcile")

STATUS_UPDATED = "updated"
STATUS_FAILED = "failed"
STATUS_DRY_RUN = "skipped-write"


@dataclass
class UpdateOutcome:
    """What happened to one matched listing."""

    record_id: Union[int, str]
    join_key: str
    link: str
    previous_stock: Optional[Union[int, float]]
    observed_stock: int
    status: str
    error: Optional[str] = None


@dataclass
class ReconciliationReport:
    outcomes: List[UpdateOutcome] = field(default_factory=list)
    unmatched: List[ScrapedListing] = field(default_factory=list)

    @property
    def matched(self) -> int:
        return len(self.outcomes)

    @property
    def updated(self) -> int:
        return sum(1 for o in self.outcomes if o.status == STATUS_UPDATED)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == STATUS_FAILED)


class StockReconciler:
    """Matches scraped listings to inventory records and writes back stock."""

    def __init__(
        self,
        repository: BaseInventoryRepository,
        page_source: BasePageSource,
        dry_run: bool = False,
    ):
        self.repository = repository
        self.page_source = page_source
        self.dry_run = dry_run

    def reconcile(self, listings: Iterable[ScrapedListing], index: JoinIndex) -> ReconciliationReport:
        """Process listings strictly in order, one navigation and one write per match.

        Listings whose key is not in the index are skipped before any
        navigation. A failed write is logged and recorded; the loop goes on.
        """
        report = ReconciliationReport()
        listings = list(listings)
        logger.info("Processing %d scraped products", len(listings))

        for listing in listings:
            record = index.get(listing.join_key)
            if record is None:
                logger.info("No inventory match for %s", listing.join_key)
                report.unmatched.append(listing)
                continue

            logger.info("Extracting stock data for %s from %s", listing.join_key, listing.link)
            quantity = self.page_source.read_stock(listing.link)
            logger.info("Stock for %s: %d", listing.join_key, quantity)

            request = record.with_stock(quantity)
            outcome = UpdateOutcome(
                record_id=record.id,
                join_key=listing.join_key,
                link=listing.link,
                previous_stock=record.quantity_stock,
                observed_stock=quantity,
                status=STATUS_UPDATED,
            )

            if self.dry_run:
                logger.info("Dry run: not updating product %s", record.id)
                outcome.status = STATUS_DRY_RUN
            else:
                try:
                    self.repository.update_record(request)
                except UpdateError as e:
                    logger.error("Failed to update product %s: %s", e.record_id, e.reason)
                    outcome.status = STATUS_FAILED
                    outcome.error = e.reason

            report.outcomes.append(outcome)

        logger.info(
            "Matched %d of %d products: %d updated, %d failed",
            report.matched, len(listings), report.updated, report.failed,
        )
        return report
