"""Domain events for the Location aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from stockroom.domain import stockroom


@stockroom.event(part_of="Location")
class LocationCreated:
    """A new physical location was registered."""

    __version__ = 1

    location_id = Identifier(required=True)
    name = String(required=True)
    code = String(required=True)
    created_at = DateTime(required=True)


@stockroom.event(part_of="Location")
class LocationUpdated:
    """Location details were updated."""

    __version__ = 1

    location_id = Identifier(required=True)
    name = String(required=True)
    code = String(required=True)
    is_active = Boolean()
    updated_at = DateTime(required=True)


@stockroom.event(part_of="Location")
class LocationDeactivated:
    """A location was hidden from active listings."""

    __version__ = 1

    location_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)
