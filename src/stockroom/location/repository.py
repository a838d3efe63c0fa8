"""Repository for the Location aggregate."""

from stockroom.config import QUERY_ROW_LIMIT
from stockroom.domain import stockroom
from stockroom.location.location import Location


@stockroom.repository(part_of=Location)
class LocationRepository:
    def list_locations(self, active_only=False) -> list[Location]:
        """All locations, oldest first."""
        if active_only:
            query = self._dao.query.filter(is_active=True)
        else:
            query = self._dao.query
        locations = query.limit(QUERY_ROW_LIMIT).all().items
        return sorted(locations, key=lambda loc: loc.created_at)

    def find_by_code(self, code) -> Location | None:
        matches = self._dao.query.filter(code=code).all().items
        return matches[0] if matches else None
