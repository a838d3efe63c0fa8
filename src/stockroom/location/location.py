"""Location aggregate: a store or building at the top of the storage hierarchy.

Locations are never hard-deleted. Deactivation hides a location from active
listings without touching the storage types registered under it.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String, Text

from stockroom.domain import stockroom
from stockroom.location.events import LocationCreated, LocationDeactivated, LocationUpdated


@stockroom.aggregate
class Location:
    """A physical store or building."""

    name = String(required=True, max_length=255)
    code = String(required=True, max_length=50)
    description = Text()
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name, code, description=None, is_active=True):
        now = datetime.now(UTC)
        location = cls(
            name=name,
            code=code,
            description=description,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        location.raise_(
            LocationCreated(
                location_id=str(location.id),
                name=name,
                code=code,
                created_at=now,
            )
        )
        return location

    def update_details(self, name=None, code=None, description=None, is_active=None):
        """Apply a partial update; ``None`` leaves a field unchanged."""
        if name is not None:
            self.name = name
        if code is not None:
            self.code = code
        if description is not None:
            self.description = description
        if is_active is not None:
            self.is_active = is_active
        self.updated_at = datetime.now(UTC)
        self.raise_(
            LocationUpdated(
                location_id=str(self.id),
                name=self.name,
                code=self.code,
                is_active=self.is_active,
                updated_at=self.updated_at,
            )
        )

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"location": ["Location is already inactive"]})
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(
            LocationDeactivated(
                location_id=str(self.id),
                deactivated_at=self.updated_at,
            )
        )
