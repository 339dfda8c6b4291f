import os
from functools import lru_cache
from dotenv import load_dotenv

from core.exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default: str, cast=int):
    """Read a numeric setting at access time; non-numeric values raise ConfigurationError."""
    value = os.getenv(name, default)
    try:
        return cast(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


class Settings:
    """Application settings loaded from environment variables with defaults.

    Credentials for the inventory API have no defaults and must come from the
    environment (or a local .env file). Everything else points at the
    storefront and staging API the sync was written against.
    """

    # Project metadata
    PROJECT_NAME = "Storefront Stock Sync"
    PROJECT_VERSION = "0.1.0"

    # Inventory API
    API_BASE_URL = os.getenv("API_BASE_URL", "https://staging.api.unfoldstore.com.br/v1/")
    EMAIL = os.getenv("EMAIL")
    PASSWORD = os.getenv("PASSWORD")

    # Storefront
    LISTING_URL = os.getenv(
        "LISTING_URL",
        "https://store.treasureboxjapan.com/products"
        "?preOrder=true&inStock=undefined&outOfStock=undefined&preOwned=undefined&tab=1",
    )
    DETAIL_URL_TEMPLATE = os.getenv(
        "DETAIL_URL_TEMPLATE", "https://store.treasureboxjapan.com/details?product={key}"
    )

    # Browser
    HEADLESS = _env_flag("HEADLESS", True)

    @property
    def REQUEST_TIMEOUT(self) -> float:
        return _env_number("REQUEST_TIMEOUT", "30", float)

    @property
    def NAVIGATION_TIMEOUT_MS(self) -> int:
        return _env_number("NAVIGATION_TIMEOUT_MS", "30000")

    @property
    def PAGE_SETTLE_DELAY_MS(self) -> int:
        return _env_number("PAGE_SETTLE_DELAY_MS", "2000")

    @property
    def MAX_LISTING_PAGES(self) -> int:
        return _env_number("MAX_LISTING_PAGES", "200")

    @property
    def has_credentials(self) -> bool:
        """True when both inventory API secrets are present."""
        return bool(self.EMAIL and self.PASSWORD)


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


# For direct access in other modules
settings = get_settings()
