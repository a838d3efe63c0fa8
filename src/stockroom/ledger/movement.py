"""MovementRecord aggregate: the append-only audit trail of the ledger.

Records are created once and never modified or deleted. They carry the
product reference themselves so history outlives the entries it describes.

``quantity_delta`` per movement type:

* ``add``: units placed (positive)
* ``transfer``: units moved from ``from_storage_object_id`` to
  ``to_storage_object_id`` (positive)
* ``quantity_update``: new quantity minus old quantity (any sign)
* ``remove``: units taken out (negative)

``quantity_before`` / ``quantity_after`` describe the entry named by
``entry_id``; for transfers that is the source entry.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, Integer, String, Text

from stockroom.domain import stockroom
from stockroom.ledger.entry import ProductType
from stockroom.ledger.events import StockMoved


class MovementType(Enum):
    ADD = "add"
    TRANSFER = "transfer"
    QUANTITY_UPDATE = "quantity_update"
    REMOVE = "remove"


@stockroom.aggregate
class MovementRecord:
    entry_id = Identifier(required=True)
    product_type = String(required=True, choices=ProductType)
    product_id = String(required=True, max_length=255)
    sku = String(max_length=100)
    movement_type = String(required=True, choices=MovementType)
    from_storage_object_id = Identifier()
    to_storage_object_id = Identifier()
    quantity_delta = Integer(default=0)
    quantity_before = Integer(default=0)
    quantity_after = Integer(default=0)
    moved_by = String(required=True, max_length=100)
    reason = String(max_length=255)
    notes = Text()
    timestamp = DateTime(required=True)

    @classmethod
    def record(
        cls,
        entry,
        movement_type,
        quantity_delta,
        quantity_before,
        quantity_after,
        moved_by,
        from_storage_object_id=None,
        to_storage_object_id=None,
        reason=None,
        notes=None,
    ):
        """Build the audit record for one operation on ``entry``."""
        movement_type = movement_type.value if isinstance(movement_type, MovementType) else movement_type
        now = datetime.now(UTC)
        movement = cls(
            entry_id=str(entry.id),
            product_type=entry.product_type,
            product_id=entry.product_id,
            sku=entry.sku,
            movement_type=movement_type,
            from_storage_object_id=from_storage_object_id,
            to_storage_object_id=to_storage_object_id,
            quantity_delta=quantity_delta,
            quantity_before=quantity_before,
            quantity_after=quantity_after,
            moved_by=moved_by,
            reason=reason,
            notes=notes,
            timestamp=now,
        )
        movement.raise_(
            StockMoved(
                movement_id=str(movement.id),
                entry_id=str(entry.id),
                product_type=entry.product_type,
                product_id=entry.product_id,
                sku=entry.sku,
                movement_type=movement_type,
                from_storage_object_id=from_storage_object_id,
                to_storage_object_id=to_storage_object_id,
                quantity_delta=quantity_delta,
                quantity_before=quantity_before,
                quantity_after=quantity_after,
                moved_by=moved_by,
                reason=reason,
                notes=notes,
                moved_at=now,
            )
        )
        return movement
