import logging
from typing import Dict, Iterable, Optional

from core.inventory.models import InventoryRecord
from core.reconcile.variants import JoinVariant

logger = logging.getLogger("reconcile")

JoinIndex = Dict[Optional[str], InventoryRecord]


def build_join_index(records: Iterable[InventoryRecord], variant: JoinVariant) -> JoinIndex:
    """Index inventory records by the variant's join key.

    Duplicate keys are not an error: the later record replaces the earlier
    one, and the collision is logged. Records without a key are dropped when
    the variant requires a key; otherwise they are indexed under None, which
    no scraped listing can ever match.
    """
    index: JoinIndex = {}
    missing = 0
    for record in records:
        key = record.join_key(variant.key_field)
        if not key:
            if variant.require_key:
                continue
            missing += 1
        if key in index:
            logger.warning(
                "Duplicate %s %r: product %s replaces product %s",
                variant.key_field, key, record.id, index[key].id,
            )
        index[key] = record

    if missing:
        logger.warning("%d products have no %s", missing, variant.key_field)
    logger.info("Indexed %d products by %s", len(index), variant.key_field)
    return index
