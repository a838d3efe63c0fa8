"""StorageType aggregate: a named grouping of containers within a location.

Storage types reference their location by id. They persist independently of
it: deactivating a location leaves its storage types untouched.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from stockroom.domain import stockroom
from stockroom.storage.events import (
    StorageTypeCreated,
    StorageTypeDeactivated,
    StorageTypeRepositioned,
    StorageTypeUpdated,
)

_UPDATABLE = ("name", "code", "description", "capacity", "row_position", "column_position", "is_active")


@stockroom.aggregate
class StorageType:
    """A shelf, display case or section inside a location."""

    location_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    code = String(required=True, max_length=50)
    description = Text()
    capacity = Integer(min_value=0)
    row_position = Integer(min_value=0)
    column_position = Integer(min_value=0)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, location_id, name, code, **attributes):
        now = datetime.now(UTC)
        storage_type = cls(
            location_id=str(location_id),
            name=name,
            code=code,
            created_at=now,
            updated_at=now,
            **{key: value for key, value in attributes.items() if value is not None},
        )
        storage_type.raise_(
            StorageTypeCreated(
                storage_type_id=str(storage_type.id),
                location_id=str(location_id),
                name=name,
                code=code,
                created_at=now,
            )
        )
        return storage_type

    def update_details(self, **changes):
        """Apply a partial update; ``None`` values leave fields unchanged."""
        for key, value in changes.items():
            if key not in _UPDATABLE:
                raise ValidationError({key: ["Field cannot be updated"]})
            if value is not None:
                setattr(self, key, value)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StorageTypeUpdated(
                storage_type_id=str(self.id),
                name=self.name,
                code=self.code,
                is_active=self.is_active,
                updated_at=self.updated_at,
            )
        )

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"storage_type": ["Storage type is already inactive"]})
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StorageTypeDeactivated(
                storage_type_id=str(self.id),
                deactivated_at=self.updated_at,
            )
        )

    def reposition(self, row_position, column_position):
        """Move the storage type to another cell of the location grid."""
        errors = {}
        for field, value in (("row_position", row_position), ("column_position", column_position)):
            if value is None or value < 0:
                errors[field] = ["Grid position must be a non-negative integer"]
        if errors:
            raise ValidationError(errors)

        self.row_position = row_position
        self.column_position = column_position
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StorageTypeRepositioned(
                storage_type_id=str(self.id),
                location_id=str(self.location_id),
                row_position=row_position,
                column_position=column_position,
                repositioned_at=self.updated_at,
            )
        )

    @property
    def is_placed(self):
        return self.row_position is not None and self.column_position is not None
