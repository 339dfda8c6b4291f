# Exception hierarchy for the stock sync.
# Fatal errors (authentication, inventory fetch) propagate to the CLI and end the run;
# UpdateError is raised per record and absorbed by the reconciliation loop.


class StockSyncError(Exception):
    """Base class for all errors raised by the stock sync."""


class ConfigurationError(StockSyncError):
    """Missing credentials or an unknown join variant."""


class AuthenticationError(StockSyncError):
    """Signing in to the inventory API failed or returned no token."""


class InventoryFetchError(StockSyncError):
    """The full product list could not be fetched or did not validate."""


class UpdateError(StockSyncError):
    """A single product update was rejected or never reached the API."""

    def __init__(self, record_id, message: str):
        super().__init__(f"Failed to update product {record_id}: {message}")
        self.record_id = record_id
        self.reason = message


class PageSourceError(StockSyncError):
    """The browser session could not be started or a navigation failed."""
