"""Storage registry management: commands and handlers for storage types and objects."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from stockroom.domain import stockroom
from stockroom.ledger.entry import ProductLocationEntry
from stockroom.location.location import Location
from stockroom.storage.storage_object import StorageObject
from stockroom.storage.storage_type import StorageType

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Storage type commands
# ---------------------------------------------------------------------------
@stockroom.command(part_of="StorageType")
class CreateStorageType:
    location_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    code = String(required=True, max_length=50)
    description = Text()
    capacity = Integer(min_value=0)
    row_position = Integer(min_value=0)
    column_position = Integer(min_value=0)
    is_active = Boolean(default=True)


@stockroom.command(part_of="StorageType")
class BulkCreateStorageTypes:
    """Create several storage types at once; either all are created or none."""

    storage_types = Text(required=True)  # JSON-encoded list of storage type payloads


@stockroom.command(part_of="StorageType")
class UpdateStorageType:
    storage_type_id = Identifier(required=True)
    name = String(max_length=255)
    code = String(max_length=50)
    description = Text()
    capacity = Integer(min_value=0)
    row_position = Integer(min_value=0)
    column_position = Integer(min_value=0)
    is_active = Boolean()


@stockroom.command(part_of="StorageType")
class DeactivateStorageType:
    storage_type_id = Identifier(required=True)


@stockroom.command(part_of="StorageType")
class RepositionStorageType:
    """Place a storage type on a cell of its location's layout grid."""

    storage_type_id = Identifier(required=True)
    row_position = Integer()
    column_position = Integer()


# ---------------------------------------------------------------------------
# Storage object commands
# ---------------------------------------------------------------------------
@stockroom.command(part_of="StorageObject")
class CreateStorageObject:
    storage_type_id = Identifier(required=True)
    label = String(required=True, max_length=255)
    code = String(required=True, max_length=100)
    capacity = Integer(default=0, min_value=0)
    description = Text()


@stockroom.command(part_of="StorageObject")
class UpdateStorageObject:
    storage_object_id = Identifier(required=True)
    label = String(max_length=255)
    code = String(max_length=100)
    capacity = Integer(min_value=0)
    description = Text()
    is_active = Boolean()


@stockroom.command(part_of="StorageObject")
class MoveStorageObject:
    """Relocate a container to another storage type."""

    storage_object_id = Identifier(required=True)
    to_storage_type_id = Identifier(required=True)
    moved_by = String(required=True, max_length=100)
    reason = String(max_length=255)
    notes = Text()


@stockroom.command(part_of="StorageObject")
class DeactivateStorageObject:
    """Soft-delete a container. Only empty containers can be retired."""

    storage_object_id = Identifier(required=True)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------
_STORAGE_TYPE_OPTIONAL = ("description", "capacity", "row_position", "column_position", "is_active")


def _new_storage_type(repo, payload, pending_codes=()):
    location_id = payload.get("location_id")
    if not location_id:
        raise ValidationError({"location_id": ["is required"]})
    current_domain.repository_for(Location).get(location_id)

    code = payload.get("code")
    if repo.find_by_code(location_id, code) is not None or (str(location_id), code) in pending_codes:
        raise ValidationError({"code": [f"Storage type code '{code}' already exists in this location"]})

    return StorageType.create(
        location_id=location_id,
        name=payload.get("name"),
        code=code,
        **{key: payload.get(key) for key in _STORAGE_TYPE_OPTIONAL},
    )


@stockroom.command_handler(part_of=StorageType)
class StorageTypeManagementHandler:
    @handle(CreateStorageType)
    def create_storage_type(self, command):
        repo = current_domain.repository_for(StorageType)
        storage_type = _new_storage_type(repo, command.to_dict())
        repo.add(storage_type)
        return str(storage_type.id)

    @handle(BulkCreateStorageTypes)
    def bulk_create_storage_types(self, command):
        payloads = json.loads(command.storage_types)
        if not isinstance(payloads, list) or not payloads:
            raise ValidationError({"storage_types": ["Provide at least one storage type"]})

        repo = current_domain.repository_for(StorageType)
        created = []
        pending_codes = set()
        for payload in payloads:
            storage_type = _new_storage_type(repo, payload, pending_codes)
            pending_codes.add((str(storage_type.location_id), storage_type.code))
            created.append(storage_type)

        for storage_type in created:
            repo.add(storage_type)

        logger.info("Storage types created in bulk", count=len(created))
        return [str(storage_type.id) for storage_type in created]

    @handle(UpdateStorageType)
    def update_storage_type(self, command):
        repo = current_domain.repository_for(StorageType)
        storage_type = repo.get(command.storage_type_id)
        if command.code is not None:
            existing = repo.find_by_code(storage_type.location_id, command.code)
            if existing is not None and str(existing.id) != str(storage_type.id):
                raise ValidationError({"code": [f"Storage type code '{command.code}' already exists in this location"]})
        storage_type.update_details(
            name=command.name,
            code=command.code,
            description=command.description,
            capacity=command.capacity,
            row_position=command.row_position,
            column_position=command.column_position,
            is_active=command.is_active,
        )
        repo.add(storage_type)

    @handle(DeactivateStorageType)
    def deactivate_storage_type(self, command):
        repo = current_domain.repository_for(StorageType)
        storage_type = repo.get(command.storage_type_id)
        storage_type.deactivate()
        repo.add(storage_type)

    @handle(RepositionStorageType)
    def reposition_storage_type(self, command):
        repo = current_domain.repository_for(StorageType)
        storage_type = repo.get(command.storage_type_id)
        storage_type.reposition(command.row_position, command.column_position)
        repo.add(storage_type)
        logger.info(
            "Storage type repositioned",
            storage_type_id=str(storage_type.id),
            row_position=storage_type.row_position,
            column_position=storage_type.column_position,
        )


def _ensure_object_code_available(repo, code, current_id=None):
    existing = repo.find_by_code(code)
    if existing is not None and str(existing.id) != str(current_id):
        raise ValidationError({"code": [f"Storage object code '{code}' is already in use"]})


@stockroom.command_handler(part_of=StorageObject)
class StorageObjectManagementHandler:
    @handle(CreateStorageObject)
    def create_storage_object(self, command):
        current_domain.repository_for(StorageType).get(command.storage_type_id)

        repo = current_domain.repository_for(StorageObject)
        _ensure_object_code_available(repo, command.code)
        storage_object = StorageObject.create(
            storage_type_id=command.storage_type_id,
            label=command.label,
            code=command.code,
            capacity=command.capacity or 0,
            description=command.description,
        )
        repo.add(storage_object)
        return str(storage_object.id)

    @handle(UpdateStorageObject)
    def update_storage_object(self, command):
        repo = current_domain.repository_for(StorageObject)
        storage_object = repo.get(command.storage_object_id)
        if command.code is not None:
            _ensure_object_code_available(repo, command.code, current_id=storage_object.id)
        storage_object.update_details(
            label=command.label,
            code=command.code,
            capacity=command.capacity,
            description=command.description,
            is_active=command.is_active,
        )
        repo.add(storage_object)

    @handle(MoveStorageObject)
    def move_storage_object(self, command):
        target = current_domain.repository_for(StorageType).get(command.to_storage_type_id)
        if not target.is_active:
            raise ValidationError({"to_storage_type_id": ["Target storage type is inactive"]})

        repo = current_domain.repository_for(StorageObject)
        storage_object = repo.get(command.storage_object_id)
        storage_object.move_to(
            storage_type_id=target.id,
            moved_by=command.moved_by,
            reason=command.reason,
            notes=command.notes,
        )
        repo.add(storage_object)

    @handle(DeactivateStorageObject)
    def deactivate_storage_object(self, command):
        repo = current_domain.repository_for(StorageObject)
        storage_object = repo.get(command.storage_object_id)

        held = current_domain.repository_for(ProductLocationEntry).in_storage_object(storage_object.id)
        if held:
            raise ValidationError(
                {"storage_object": [f"Storage object still holds {len(held)} product entries; empty it first"]}
            )

        storage_object.deactivate()
        repo.add(storage_object)
