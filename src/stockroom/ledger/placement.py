"""Ledger mutations: placing, transferring, recounting and removing stock.

Each handler runs inside one unit of work: every entry it touches and the
single movement record it appends are committed together or not at all.
Entries emptied by a transfer or removal are deleted; an explicit recount to
zero keeps the entry.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from stockroom.domain import stockroom
from stockroom.ledger.entry import ProductLocationEntry, ProductType
from stockroom.ledger.movement import MovementRecord, MovementType
from stockroom.storage.storage_object import StorageObject

logger = structlog.get_logger(__name__)


@stockroom.command(part_of="ProductLocationEntry")
class AddProductToStorageObject:
    """Place units of a product into a container as a new entry."""

    product_type = String(required=True, choices=ProductType)
    product_id = String(required=True, max_length=255)
    storage_object_id = Identifier(required=True)
    quantity = Integer()
    sku = String(max_length=100)
    product_name = String(max_length=255)
    metal_weight_g = Float()
    purity_k = Float()
    moved_by = String(required=True, max_length=100)
    reason = String(max_length=255)
    notes = Text()


@stockroom.command(part_of="ProductLocationEntry")
class TransferStock:
    """Move units from one entry to another container.

    ``entire`` moves everything the source entry holds and ignores ``quantity``.
    """

    entry_id = Identifier(required=True)
    to_storage_object_id = Identifier(required=True)
    quantity = Integer()
    entire = Boolean(default=False)
    moved_by = String(required=True, max_length=100)
    reason = String(max_length=255)
    notes = Text()


@stockroom.command(part_of="ProductLocationEntry")
class UpdateEntryQuantity:
    """Overwrite an entry's quantity after a stock count."""

    entry_id = Identifier(required=True)
    new_quantity = Integer()
    updated_by = String(required=True, max_length=100)
    reason = String(max_length=255)
    notes = Text()


@stockroom.command(part_of="ProductLocationEntry")
class RemoveStock:
    """Take units out of an entry (sold, damaged, returned to vendor)."""

    entry_id = Identifier(required=True)
    quantity = Integer()
    removed_by = String(required=True, max_length=100)
    reason = String(max_length=255)
    notes = Text()


def _active_storage_object(storage_object_id, field):
    storage_object = current_domain.repository_for(StorageObject).get(storage_object_id)
    if not storage_object.is_active:
        raise ValidationError({field: [f"Storage object '{storage_object.code}' is inactive"]})
    return storage_object


@stockroom.command_handler(part_of=ProductLocationEntry)
class LedgerHandler:
    @handle(AddProductToStorageObject)
    def add_product(self, command):
        storage_object = _active_storage_object(command.storage_object_id, "storage_object_id")

        entry = ProductLocationEntry.place(
            product_type=command.product_type,
            product_id=command.product_id,
            storage_object_id=storage_object.id,
            quantity=command.quantity,
            sku=command.sku,
            product_name=command.product_name,
            metal_weight_g=command.metal_weight_g,
            purity_k=command.purity_k,
        )
        current_domain.repository_for(ProductLocationEntry).add(entry)

        current_domain.repository_for(MovementRecord).add(
            MovementRecord.record(
                entry,
                MovementType.ADD,
                quantity_delta=entry.quantity,
                quantity_before=0,
                quantity_after=entry.quantity,
                moved_by=command.moved_by,
                to_storage_object_id=str(storage_object.id),
                reason=command.reason,
                notes=command.notes,
            )
        )
        logger.info(
            "Product placed",
            entry_id=str(entry.id),
            product_type=entry.product_type,
            product_id=entry.product_id,
            storage_object_id=str(storage_object.id),
            quantity=entry.quantity,
        )
        return str(entry.id)

    @handle(TransferStock)
    def transfer_stock(self, command):
        entries = current_domain.repository_for(ProductLocationEntry)
        source = entries.get(command.entry_id)

        if str(source.storage_object_id) == str(command.to_storage_object_id):
            raise ValidationError({"to_storage_object_id": ["Entry is already in this storage object"]})
        target = _active_storage_object(command.to_storage_object_id, "to_storage_object_id")

        quantity = source.quantity if command.entire else command.quantity
        before = source.quantity
        source.withdraw(quantity)

        destination = entries.find_destination(source.product_type, source.product_id, target.id)
        if destination is None:
            destination = source.split_into(target.id, quantity)
        else:
            destination.deposit(quantity)

        if source.is_depleted:
            entries.remove(source)
        else:
            entries.add(source)
        entries.add(destination)

        current_domain.repository_for(MovementRecord).add(
            MovementRecord.record(
                source,
                MovementType.TRANSFER,
                quantity_delta=quantity,
                quantity_before=before,
                quantity_after=source.quantity,
                moved_by=command.moved_by,
                from_storage_object_id=str(source.storage_object_id),
                to_storage_object_id=str(target.id),
                reason=command.reason,
                notes=command.notes,
            )
        )
        logger.info(
            "Stock transferred",
            entry_id=str(source.id),
            destination_entry_id=str(destination.id),
            from_storage_object_id=str(source.storage_object_id),
            to_storage_object_id=str(target.id),
            quantity=quantity,
        )
        return {
            "source_entry_id": str(source.id),
            "source_remaining": source.quantity,
            "source_deleted": source.is_depleted,
            "destination_entry_id": str(destination.id),
            "destination_quantity": destination.quantity,
            "quantity": quantity,
        }

    @handle(UpdateEntryQuantity)
    def update_quantity(self, command):
        entries = current_domain.repository_for(ProductLocationEntry)
        entry = entries.get(command.entry_id)

        before = entry.quantity
        entry.set_quantity(command.new_quantity)
        entries.add(entry)

        current_domain.repository_for(MovementRecord).add(
            MovementRecord.record(
                entry,
                MovementType.QUANTITY_UPDATE,
                quantity_delta=entry.quantity - before,
                quantity_before=before,
                quantity_after=entry.quantity,
                moved_by=command.updated_by,
                from_storage_object_id=str(entry.storage_object_id),
                to_storage_object_id=str(entry.storage_object_id),
                reason=command.reason,
                notes=command.notes,
            )
        )
        logger.info("Entry quantity updated", entry_id=str(entry.id), before=before, after=entry.quantity)

    @handle(RemoveStock)
    def remove_stock(self, command):
        entries = current_domain.repository_for(ProductLocationEntry)
        entry = entries.get(command.entry_id)

        before = entry.quantity
        entry.withdraw(command.quantity)
        if entry.is_depleted:
            entries.remove(entry)
        else:
            entries.add(entry)

        current_domain.repository_for(MovementRecord).add(
            MovementRecord.record(
                entry,
                MovementType.REMOVE,
                quantity_delta=-command.quantity,
                quantity_before=before,
                quantity_after=entry.quantity,
                moved_by=command.removed_by,
                from_storage_object_id=str(entry.storage_object_id),
                reason=command.reason,
                notes=command.notes,
            )
        )
        logger.info("Stock removed", entry_id=str(entry.id), quantity=command.quantity, remaining=entry.quantity)
        return {"entry_id": str(entry.id), "remaining": entry.quantity, "deleted": entry.is_depleted}
