"""Location management: commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from stockroom.domain import stockroom
from stockroom.location.location import Location


@stockroom.command(part_of="Location")
class CreateLocation:
    """Register a new physical location."""

    name = String(required=True, max_length=255)
    code = String(required=True, max_length=50)
    description = Text()
    is_active = Boolean(default=True)


@stockroom.command(part_of="Location")
class UpdateLocation:
    """Partially update a location."""

    location_id = Identifier(required=True)
    name = String(max_length=255)
    code = String(max_length=50)
    description = Text()
    is_active = Boolean()


@stockroom.command(part_of="Location")
class DeactivateLocation:
    """Soft-delete a location."""

    location_id = Identifier(required=True)


def _ensure_code_available(repo, code, current_id=None):
    existing = repo.find_by_code(code)
    if existing is not None and str(existing.id) != str(current_id):
        raise ValidationError({"code": [f"Location code '{code}' is already in use"]})


@stockroom.command_handler(part_of=Location)
class LocationManagementHandler:
    @handle(CreateLocation)
    def create_location(self, command):
        repo = current_domain.repository_for(Location)
        _ensure_code_available(repo, command.code)
        location = Location.create(
            name=command.name,
            code=command.code,
            description=command.description,
            is_active=True if command.is_active is None else command.is_active,
        )
        repo.add(location)
        return str(location.id)

    @handle(UpdateLocation)
    def update_location(self, command):
        repo = current_domain.repository_for(Location)
        location = repo.get(command.location_id)
        if command.code is not None:
            _ensure_code_available(repo, command.code, current_id=location.id)
        location.update_details(
            name=command.name,
            code=command.code,
            description=command.description,
            is_active=command.is_active,
        )
        repo.add(location)

    @handle(DeactivateLocation)
    def deactivate_location(self, command):
        repo = current_domain.repository_for(Location)
        location = repo.get(command.location_id)
        location.deactivate()
        repo.add(location)
