"""Repositories for storage types and storage objects."""

from stockroom.config import QUERY_ROW_LIMIT
from stockroom.domain import stockroom
from stockroom.storage.storage_object import StorageObject
from stockroom.storage.storage_type import StorageType


def _oldest_first(records):
    return sorted(records, key=lambda record: record.created_at)


@stockroom.repository(part_of=StorageType)
class StorageTypeRepository:
    def for_location(self, location_id, active_only=False) -> list[StorageType]:
        criteria = {"location_id": str(location_id)}
        if active_only:
            criteria["is_active"] = True
        return _oldest_first(self._dao.query.filter(**criteria).limit(QUERY_ROW_LIMIT).all().items)

    def find_by_code(self, location_id, code) -> StorageType | None:
        matches = self._dao.query.filter(location_id=str(location_id), code=code).all().items
        return matches[0] if matches else None

    def everything(self) -> list[StorageType]:
        return self._dao.query.limit(QUERY_ROW_LIMIT).all().items


@stockroom.repository(part_of=StorageObject)
class StorageObjectRepository:
    def for_storage_type(self, storage_type_id, active_only=False) -> list[StorageObject]:
        criteria = {"storage_type_id": str(storage_type_id)}
        if active_only:
            criteria["is_active"] = True
        return _oldest_first(self._dao.query.filter(**criteria).limit(QUERY_ROW_LIMIT).all().items)

    def find_by_code(self, code) -> StorageObject | None:
        """Look up a container by the code printed on its QR label."""
        matches = self._dao.query.filter(code=code).all().items
        return matches[0] if matches else None

    def everything(self) -> list[StorageObject]:
        return self._dao.query.limit(QUERY_ROW_LIMIT).all().items
