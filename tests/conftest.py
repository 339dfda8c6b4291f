import pytest

from core.exceptions import UpdateError
from core.inventory.base import BaseInventoryRepository
from core.inventory.models import InventoryRecord
from core.scrapers.base import BasePageSource


class FakePageSource(BasePageSource):
    """In-memory storefront: a list of listing pages and a map of detail pages."""

    def __init__(self, pages=None, stock_by_link=None, endless=False):
        super().__init__("fake", "http://store.test/products")
        self.pages = pages or [[]]
        self.stock_by_link = stock_by_link or {}
        self.endless = endless
        self.current = 0
        self.opened = False
        self.closed = False
        self.pauses = []
        self.navigations = []

    def open_listing(self):
        self.opened = True
        self.current = 0

    def _read_raw_listings(self):
        return self.pages[self.current % len(self.pages)]

    def has_next_page(self):
        return self.endless or self.current < len(self.pages) - 1

    def next_page(self):
        self.current += 1

    def pause(self, milliseconds):
        self.pauses.append(milliseconds)

    def read_stock(self, link):
        self.navigations.append(link)
        return self.stock_by_link.get(link, 0)

    def close(self):
        self.closed = True


class FakeRepository(BaseInventoryRepository):
    def __init__(self, records=None, failing_ids=()):
        self.records = records or []
        self.failing_ids = set(failing_ids)
        self.writes = []

    def list_records(self):
        return list(self.records)

    def update_record(self, request):
        if request.record_id in self.failing_ids:
            raise UpdateError(request.record_id, "500 Server Error")
        self.writes.append(request)


def make_record(**fields):
    return InventoryRecord.model_validate(fields)


@pytest.fixture
def luffy():
    return make_record(id=1, character="Luffy", quantityStock=5)
