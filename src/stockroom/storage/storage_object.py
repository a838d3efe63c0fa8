"""StorageObject aggregate: an individual container (a "box").

``capacity`` is advisory: it is displayed to staff but the ledger never
rejects a placement because a container is over capacity.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from stockroom.domain import stockroom
from stockroom.storage.events import (
    StorageObjectCreated,
    StorageObjectDeactivated,
    StorageObjectMoved,
    StorageObjectUpdated,
)

_UPDATABLE = ("label", "code", "capacity", "description", "is_active")


@stockroom.aggregate
class StorageObject:
    """A container holding product entries."""

    storage_type_id = Identifier(required=True)
    label = String(required=True, max_length=255)
    code = String(required=True, max_length=100)
    capacity = Integer(default=0, min_value=0)
    description = Text()
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, storage_type_id, label, code, capacity=0, description=None):
        now = datetime.now(UTC)
        storage_object = cls(
            storage_type_id=str(storage_type_id),
            label=label,
            code=code,
            capacity=capacity or 0,
            description=description,
            created_at=now,
            updated_at=now,
        )
        storage_object.raise_(
            StorageObjectCreated(
                storage_object_id=str(storage_object.id),
                storage_type_id=str(storage_type_id),
                label=label,
                code=code,
                capacity=storage_object.capacity,
                created_at=now,
            )
        )
        return storage_object

    def update_details(self, **changes):
        """Apply a partial update; ``None`` values leave fields unchanged."""
        for key, value in changes.items():
            if key not in _UPDATABLE:
                raise ValidationError({key: ["Field cannot be updated"]})
            if value is not None:
                setattr(self, key, value)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StorageObjectUpdated(
                storage_object_id=str(self.id),
                label=self.label,
                code=self.code,
                capacity=self.capacity,
                is_active=self.is_active,
                updated_at=self.updated_at,
            )
        )

    def move_to(self, storage_type_id, moved_by, reason=None, notes=None):
        """Relocate the container (and everything in it) to another storage type."""
        if str(storage_type_id) == str(self.storage_type_id):
            raise ValidationError({"to_storage_type_id": ["Storage object is already in this storage type"]})
        previous = str(self.storage_type_id)
        self.storage_type_id = str(storage_type_id)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StorageObjectMoved(
                storage_object_id=str(self.id),
                from_storage_type_id=previous,
                to_storage_type_id=str(storage_type_id),
                moved_by=moved_by,
                reason=reason,
                notes=notes,
                moved_at=self.updated_at,
            )
        )

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"storage_object": ["Storage object is already inactive"]})
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StorageObjectDeactivated(
                storage_object_id=str(self.id),
                deactivated_at=self.updated_at,
            )
        )
