from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class InventoryRecord(BaseModel):
    """A product as returned by the inventory API.

    Only the attributes the sync reads are declared. Anything else the API
    sends is kept as an extra field so a stock update can send the whole
    record back unchanged.
    """

    id: Union[int, str]
    # Either may arrive as a JSON number; join_key() compares them as text
    character: Optional[Union[str, int]] = None
    treasure_box_ref_id: Optional[Union[str, int]] = Field(default=None, alias="treasureBoxRefId")
    # Any stored value is accepted; every update replaces it
    quantity_stock: Optional[Union[int, float]] = Field(default=None, alias="quantityStock")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def join_key(self, field: str) -> Optional[str]:
        """Return the join attribute ``field`` (a declared field name) as text, or None."""
        value = getattr(self, field, None)
        return None if value is None else str(value)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize back to the API's own field names, without adding absent fields."""
        payload = self.model_dump(by_alias=True, exclude_unset=True)
        payload.update(self.model_extra or {})
        return payload

    def with_stock(self, quantity: int) -> "UpdateRequest":
        """Build the full-record replacement with ``quantityStock`` overwritten."""
        payload = self.to_payload()
        payload["quantityStock"] = quantity
        return UpdateRequest(record_id=self.id, payload=payload)


class UpdateRequest(BaseModel):
    """A full-record PUT for one product."""

    record_id: Union[int, str]
    payload: Dict[str, Any]

    @property
    def quantity_stock(self) -> int:
        return self.payload["quantityStock"]


class ScrapedListing(BaseModel):
    """One storefront entry: where to find the product and what to match it on."""

    link: str = Field(min_length=1)
    join_key: str = Field(min_length=1)

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> Optional["ScrapedListing"]:
        """Build a listing from scraped values, or None when link or key is missing."""
        link = raw.get("link")
        join_key = raw.get("join_key")
        if not link or not join_key:
            return None
        return cls(link=link, join_key=join_key)
