"""Ledger read operations: search, locate a product, movement history."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from stockroom.config import MAX_MOVEMENT_LIMIT
from stockroom.ledger.entry import ProductLocationEntry, validate_product_type
from stockroom.ledger.movement import MovementRecord
from stockroom.storage.storage_object import StorageObject
from stockroom.storage.storage_type import StorageType


def _contains(needle, haystack):
    return haystack is not None and needle.lower() in haystack.lower()


def _storage_object_ids_for_type(storage_type_id):
    objects = current_domain.repository_for(StorageObject).for_storage_type(storage_type_id)
    return {str(storage_object.id) for storage_object in objects}


def _storage_object_ids_for_location(location_id):
    storage_types = current_domain.repository_for(StorageType).for_location(location_id)
    ids = set()
    for storage_type in storage_types:
        ids |= _storage_object_ids_for_type(storage_type.id)
    return ids


def search_entries(
    sku=None,
    product_name=None,
    product_type=None,
    storage_object_id=None,
    storage_type_id=None,
    location_id=None,
    min_quantity=None,
    max_quantity=None,
) -> list[ProductLocationEntry]:
    """Every entry matching all the given filters.

    ``sku`` and ``product_name`` match case-insensitive substrings; the
    rest match exactly. Storage type and location filters join through the
    storage registry.
    """
    criteria = {}
    if product_type is not None:
        criteria["product_type"] = validate_product_type(product_type)
    if storage_object_id is not None:
        criteria["storage_object_id"] = str(storage_object_id)
    entries = current_domain.repository_for(ProductLocationEntry).matching(**criteria)

    if storage_type_id is not None:
        allowed = _storage_object_ids_for_type(storage_type_id)
        entries = [entry for entry in entries if str(entry.storage_object_id) in allowed]
    if location_id is not None:
        allowed = _storage_object_ids_for_location(location_id)
        entries = [entry for entry in entries if str(entry.storage_object_id) in allowed]
    if sku:
        entries = [entry for entry in entries if _contains(sku, entry.sku)]
    if product_name:
        entries = [entry for entry in entries if _contains(product_name, entry.product_name)]
    if min_quantity is not None:
        entries = [entry for entry in entries if entry.quantity >= min_quantity]
    if max_quantity is not None:
        entries = [entry for entry in entries if entry.quantity <= max_quantity]
    return entries


def find_product(product_type, product_id) -> list[ProductLocationEntry]:
    """Where is this product stored?"""
    product_type = validate_product_type(product_type)
    return current_domain.repository_for(ProductLocationEntry).for_product(product_type, product_id)


def product_movements(product_type, product_id, limit) -> list[MovementRecord]:
    if limit is None or limit <= 0:
        raise ValidationError({"limit": ["Limit must be positive"]})
    product_type = validate_product_type(product_type)
    return current_domain.repository_for(MovementRecord).for_product(
        product_type, product_id, min(limit, MAX_MOVEMENT_LIMIT)
    )


def storage_object_movements(storage_object_id, limit) -> list[MovementRecord]:
    if limit is None or limit <= 0:
        raise ValidationError({"limit": ["Limit must be positive"]})
    current_domain.repository_for(StorageObject).get(storage_object_id)
    return current_domain.repository_for(MovementRecord).touching_storage_object(
        storage_object_id, min(limit, MAX_MOVEMENT_LIMIT)
    )
