import logging
from typing import Dict, List, Optional
from urllib.parse import urljoin

import pydantic
import requests

from core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    InventoryFetchError,
    UpdateError,
)
from core.inventory.base import BaseInventoryRepository
from core.inventory.models import InventoryRecord, UpdateRequest

logger = logging.getLogger("inventory.api")


class InventoryAPIClient:
    """Unauthenticated entry point to the inventory API.

    The only thing this client can do is sign in. Signing in returns a separate
    AuthenticatedInventoryClient that carries the bearer token, so no shared
    client ever has its headers changed after the fact.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Root of the versioned API, e.g. "https://host/v1/"
            timeout: Per-request timeout in seconds
            session: Optional requests session (connection pool) to reuse
        """
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def url(self, path: str) -> str:
        return urljoin(self.base_url, path)

    def sign_in(self, email: Optional[str], password: Optional[str]) -> "AuthenticatedInventoryClient":
        """Exchange account credentials for an authenticated client.

        Raises:
            ConfigurationError: if either credential is missing
            AuthenticationError: if the request fails or no token comes back
        """
        if not email or not password:
            raise ConfigurationError(
                "EMAIL and PASSWORD must be set in the environment to sign in"
            )

        logger.info("Authenticating as %s", email)
        try:
            response = self.session.post(
                self.url("auth/sign-in"),
                json={"email": email, "password": password},
                timeout=self.timeout,
            )
            response.raise_for_status()
            token = response.json()["userToken"]["token"]
        except requests.RequestException as e:
            logger.error("Authentication failed: %s", str(e))
            raise AuthenticationError(f"Sign-in request failed: {e}") from e
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Authentication failed: unexpected response body")
            raise AuthenticationError("Sign-in response did not contain userToken.token") from e

        if not token:
            raise AuthenticationError("Authentication failed. No token received.")

        logger.info("Authentication successful")
        return AuthenticatedInventoryClient(self.base_url, token, self.session, self.timeout)


class AuthenticatedInventoryClient(BaseInventoryRepository):
    """Inventory repository backed by the REST API, bound to one bearer token."""

    def __init__(self, base_url: str, token: str, session: requests.Session, timeout: float = 30):
        self.base_url = base_url
        self.token = token
        self.session = session
        self.timeout = timeout

    @property
    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    def list_records(self) -> List[InventoryRecord]:
        logger.info("Fetching products from API")
        try:
            response = self.session.get(
                urljoin(self.base_url, "products"),
                headers=self.auth_headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            items = response.json()["items"]
            if not isinstance(items, list):
                raise TypeError(f"items is {type(items).__name__}, not a list")
        except requests.RequestException as e:
            logger.error("Failed to fetch products: %s", str(e))
            raise InventoryFetchError(f"Product list request failed: {e}") from e
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Failed to parse product list: %s", str(e))
            raise InventoryFetchError("Product list response did not contain items") from e

        # One malformed product must not block the rest
        records = []
        for item in items:
            try:
                records.append(InventoryRecord.model_validate(item))
            except pydantic.ValidationError as e:
                item_id = item.get("id") if isinstance(item, dict) else None
                logger.warning(
                    "Skipping product %s: %d validation errors", item_id, e.error_count()
                )

        logger.info("Fetched %d products", len(records))
        return records

    def update_record(self, request: UpdateRequest) -> None:
        logger.info(
            "Updating product %s with stock %s", request.record_id, request.quantity_stock
        )
        try:
            response = self.session.put(
                urljoin(self.base_url, f"products/{request.record_id}"),
                json=request.payload,
                headers=self.auth_headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise UpdateError(request.record_id, str(e)) from e
        logger.info("Successfully updated product %s", request.record_id)
