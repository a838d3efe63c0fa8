"""Inventory aggregator: read-side summaries computed from current ledger rows.

Nothing here is stored: every call re-reads entries and resolves each entry's
storage object → storage type → location chain. An entry whose chain cannot be
resolved is never attributed to a guessed location; it is counted as
unresolved and logged.
"""

from collections import defaultdict

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from stockroom.ledger.entry import ProductLocationEntry
from stockroom.location.location import Location
from stockroom.storage.storage_object import StorageObject
from stockroom.storage.storage_type import StorageType

logger = structlog.get_logger(__name__)


class StorageIndex:
    """In-memory lookup of the storage hierarchy for one read."""

    def __init__(self):
        self.storage_objects = {
            str(storage_object.id): storage_object
            for storage_object in current_domain.repository_for(StorageObject).everything()
        }
        self.storage_types = {
            str(storage_type.id): storage_type
            for storage_type in current_domain.repository_for(StorageType).everything()
        }

    def storage_object_for(self, entry):
        return self.storage_objects.get(str(entry.storage_object_id))

    def location_id_for(self, entry):
        storage_object = self.storage_object_for(entry)
        if storage_object is None:
            return None
        storage_type = self.storage_types.get(str(storage_object.storage_type_id))
        return str(storage_type.location_id) if storage_type is not None else None


def _warn_unresolved(entry, storage_object):
    logger.warning(
        "Ledger entry has no resolvable storage location",
        entry_id=str(entry.id),
        product_type=entry.product_type,
        product_id=entry.product_id,
        storage_object_id=str(entry.storage_object_id),
        missing="storage_object" if storage_object is None else "storage_type",
    )


def inventory_summary(location_id=None) -> dict:
    """Group current entries by product, optionally within one location."""
    if location_id is not None:
        current_domain.repository_for(Location).get(location_id)
        location_id = str(location_id)

    index = StorageIndex()
    entries = current_domain.repository_for(ProductLocationEntry).matching()

    products = {}
    codes = defaultdict(set)
    unresolved = 0
    for entry in entries:
        storage_object = index.storage_object_for(entry)
        entry_location_id = index.location_id_for(entry)
        if entry_location_id is None:
            unresolved += 1
            _warn_unresolved(entry, storage_object)
            if location_id is not None:
                continue
        elif location_id is not None and entry_location_id != location_id:
            continue

        key = (entry.product_type, entry.product_id)
        summary = products.setdefault(
            key,
            {
                "product_id": entry.product_id,
                "product_type": entry.product_type,
                "sku": entry.sku,
                "product_name": entry.product_name,
                "total_quantity": 0,
            },
        )
        summary["total_quantity"] += entry.quantity
        if storage_object is not None:
            codes[key].add(storage_object.code)

    items = []
    for key, summary in products.items():
        summary["storage_object_codes"] = sorted(codes[key])
        summary["num_storage_objects"] = len(codes[key])
        items.append(summary)
    items.sort(key=lambda item: (item["product_type"], item["product_id"]))

    return {
        "location_id": location_id,
        "items": items,
        "total_products": len(items),
        "total_quantity": sum(item["total_quantity"] for item in items),
        "unresolved_entries": unresolved,
    }


def location_statistics(location_id) -> dict:
    location = current_domain.repository_for(Location).get(location_id)
    return _statistics_for(location, StorageIndex())


def locations_with_statistics(active_only=False) -> list[dict]:
    index = StorageIndex()
    locations = current_domain.repository_for(Location).list_locations(active_only=active_only)
    return [{"location": location, **_statistics_for(location, index)} for location in locations]


def _statistics_for(location, index) -> dict:
    location_id = str(location.id)
    storage_type_ids = {
        type_id for type_id, storage_type in index.storage_types.items() if str(storage_type.location_id) == location_id
    }
    storage_object_ids = {
        object_id
        for object_id, storage_object in index.storage_objects.items()
        if str(storage_object.storage_type_id) in storage_type_ids
    }

    products = set()
    total_quantity = 0
    for storage_object_id in storage_object_ids:
        for entry in current_domain.repository_for(ProductLocationEntry).in_storage_object(storage_object_id):
            products.add((entry.product_type, entry.product_id))
            total_quantity += entry.quantity

    return {
        "location_id": location_id,
        "storage_type_count": len(storage_type_ids),
        "storage_object_count": len(storage_object_ids),
        "product_count": len(products),
        "total_quantity": total_quantity,
    }


def storage_object_contents(storage_object) -> dict:
    """A container together with everything it currently holds."""
    entries = current_domain.repository_for(ProductLocationEntry).in_storage_object(storage_object.id)
    return {
        "storage_object": storage_object,
        "entries": entries,
        "total_items": sum(entry.quantity for entry in entries),
    }


def contents_by_id(storage_object_id) -> dict:
    return storage_object_contents(current_domain.repository_for(StorageObject).get(storage_object_id))


def contents_by_code(code) -> dict:
    """Resolve a scanned QR code to its container and contents."""
    storage_object = current_domain.repository_for(StorageObject).find_by_code(code)
    if storage_object is None:
        raise ObjectNotFoundError({"_entity": f"Storage object with code '{code}' does not exist"})
    return storage_object_contents(storage_object)
