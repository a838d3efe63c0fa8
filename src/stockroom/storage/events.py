"""Domain events for the StorageType and StorageObject aggregates."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from stockroom.domain import stockroom


# ---------------------------------------------------------------------------
# Storage types
# ---------------------------------------------------------------------------
@stockroom.event(part_of="StorageType")
class StorageTypeCreated:
    """A storage type (shelf, display case, section) was added to a location."""

    __version__ = 1

    storage_type_id = Identifier(required=True)
    location_id = Identifier(required=True)
    name = String(required=True)
    code = String(required=True)
    created_at = DateTime(required=True)


@stockroom.event(part_of="StorageType")
class StorageTypeUpdated:
    __version__ = 1

    storage_type_id = Identifier(required=True)
    name = String(required=True)
    code = String(required=True)
    is_active = Boolean()
    updated_at = DateTime(required=True)


@stockroom.event(part_of="StorageType")
class StorageTypeDeactivated:
    __version__ = 1

    storage_type_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)


@stockroom.event(part_of="StorageType")
class StorageTypeRepositioned:
    """A storage type was placed on a new cell of its location's layout grid."""

    __version__ = 1

    storage_type_id = Identifier(required=True)
    location_id = Identifier(required=True)
    row_position = Integer(default=0)
    column_position = Integer(default=0)
    repositioned_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Storage objects
# ---------------------------------------------------------------------------
@stockroom.event(part_of="StorageObject")
class StorageObjectCreated:
    """A container (box) was registered under a storage type."""

    __version__ = 1

    storage_object_id = Identifier(required=True)
    storage_type_id = Identifier(required=True)
    label = String(required=True)
    code = String(required=True)
    capacity = Integer(default=0)
    created_at = DateTime(required=True)


@stockroom.event(part_of="StorageObject")
class StorageObjectUpdated:
    __version__ = 1

    storage_object_id = Identifier(required=True)
    label = String(required=True)
    code = String(required=True)
    capacity = Integer(default=0)
    is_active = Boolean()
    updated_at = DateTime(required=True)


@stockroom.event(part_of="StorageObject")
class StorageObjectMoved:
    """A container was relocated to another storage type, contents included."""

    __version__ = 1

    storage_object_id = Identifier(required=True)
    from_storage_type_id = Identifier(required=True)
    to_storage_type_id = Identifier(required=True)
    moved_by = String(required=True)
    reason = String()
    notes = String()
    moved_at = DateTime(required=True)


@stockroom.event(part_of="StorageObject")
class StorageObjectDeactivated:
    __version__ = 1

    storage_object_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)
