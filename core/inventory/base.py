import abc
from typing import List

from core.inventory.models import InventoryRecord, UpdateRequest


class BaseInventoryRepository(abc.ABC):
    """Authenticated read/write access to the product store.

    The reconciliation loop only needs two operations: read every record once,
    then replace individual records by id. Keeping the contract this narrow lets
    the loop run against the REST client in production and an in-memory store
    in tests.
    """

    @abc.abstractmethod
    def list_records(self) -> List[InventoryRecord]:
        """Return every product record.

        Raises:
            InventoryFetchError: if the records could not be read or validated.
        """
        raise NotImplementedError("Repositories must implement list_records()")

    @abc.abstractmethod
    def update_record(self, request: UpdateRequest) -> None:
        """Replace the record ``request.record_id`` with ``request.payload``.

        Raises:
            UpdateError: if this single write failed.
        """
        raise NotImplementedError("Repositories must implement update_record()")
