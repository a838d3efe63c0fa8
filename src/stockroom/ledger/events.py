"""Domain events for the ledger.

Every quantity-affecting operation records exactly one movement, and every
movement raises ``StockMoved``. Downstream consumers (valuation, reorder
alerts) subscribe to this single stream instead of watching entries, which
may be deleted once emptied.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from stockroom.domain import stockroom


@stockroom.event(part_of="MovementRecord")
class StockMoved:
    """Units of a product were added, transferred, recounted or removed."""

    __version__ = 1

    movement_id = Identifier(required=True)
    entry_id = Identifier(required=True)
    product_type = String(required=True)
    product_id = String(required=True)
    sku = String()
    movement_type = String(required=True)
    from_storage_object_id = Identifier()
    to_storage_object_id = Identifier()
    quantity_delta = Integer(default=0)
    quantity_before = Integer(default=0)
    quantity_after = Integer(default=0)
    moved_by = String(required=True)
    reason = String()
    notes = Text()
    moved_at = DateTime(required=True)
