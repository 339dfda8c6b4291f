from dataclasses import dataclass
from typing import Dict, Optional

from core.exceptions import ConfigurationError


@dataclass(frozen=True)
class JoinVariant:
    """How listings and inventory records are matched for one deployment.

    Attributes:
        name: CLI name of the variant
        key_field: InventoryRecord attribute used as the join key
        require_key: Exclude records that have no value for ``key_field``
        drains_listings: Walk the paginated storefront listing for candidates;
            otherwise candidates are built from the join index itself
        detail_url_template: Detail page URL with a ``{key}`` placeholder,
            used when candidates are built from the index
    """

    name: str
    key_field: str
    require_key: bool
    drains_listings: bool
    detail_url_template: Optional[str] = None

    def detail_url(self, key: str) -> str:
        if not self.detail_url_template:
            raise ConfigurationError(f"Variant '{self.name}' has no detail URL template")
        return self.detail_url_template.format(key=key)


class JoinVariantFactory:
    """Creates the join variant selected for a run.

    Each variant replaces one of the two original sync scripts; the
    reconciliation loop is shared between them.
    """

    # Map of variant names to their fixed settings
    VARIANTS: Dict[str, Dict] = {
        "character": {
            "key_field": "character",
            "require_key": False,
            "drains_listings": True,
        },
        "ref-id": {
            "key_field": "treasure_box_ref_id",
            "require_key": True,
            "drains_listings": False,
        },
    }

    @classmethod
    def names(cls):
        return list(cls.VARIANTS)

    @classmethod
    def create_variant(cls, name: str, detail_url_template: Optional[str] = None) -> JoinVariant:
        """Create the variant called ``name``.

        Args:
            name: One of the names in VARIANTS
            detail_url_template: Required for variants that do not drain listings
        """
        if name not in cls.VARIANTS:
            raise ConfigurationError(
                f"Unknown join variant '{name}', expected one of {', '.join(cls.VARIANTS)}"
            )
        variant = JoinVariant(name=name, detail_url_template=detail_url_template, **cls.VARIANTS[name])
        if not variant.drains_listings and not detail_url_template:
            raise ConfigurationError(f"Variant '{name}' needs a detail URL template")
        return variant
