"""Read queries over the ledger's current-state rows and movement history."""

from stockroom.config import QUERY_ROW_LIMIT
from stockroom.domain import stockroom
from stockroom.ledger.entry import ProductLocationEntry
from stockroom.ledger.movement import MovementRecord


@stockroom.repository(part_of=ProductLocationEntry)
class ProductLocationEntryRepository:
    def matching(self, **criteria) -> list[ProductLocationEntry]:
        """Entries matching exact field values, oldest first."""
        query = self._dao.query
        if criteria:
            query = query.filter(**criteria)
        entries = query.limit(QUERY_ROW_LIMIT).all().items
        return sorted(entries, key=lambda entry: entry.created_at)

    def for_product(self, product_type, product_id) -> list[ProductLocationEntry]:
        return self.matching(product_type=product_type, product_id=str(product_id))

    def in_storage_object(self, storage_object_id) -> list[ProductLocationEntry]:
        return self.matching(storage_object_id=str(storage_object_id))

    def find_destination(self, product_type, product_id, storage_object_id) -> ProductLocationEntry | None:
        """Oldest entry of this product already sitting in ``storage_object_id``."""
        entries = self.matching(
            product_type=product_type,
            product_id=str(product_id),
            storage_object_id=str(storage_object_id),
        )
        return entries[0] if entries else None

    def remove(self, entry) -> None:
        self._dao.delete(entry)


def _newest_first(movements, limit):
    return sorted(movements, key=lambda movement: movement.timestamp, reverse=True)[:limit]


@stockroom.repository(part_of=MovementRecord)
class MovementRecordRepository:
    def for_product(self, product_type, product_id, limit) -> list[MovementRecord]:
        movements = (
            self._dao.query.filter(product_type=product_type, product_id=str(product_id))
            .limit(QUERY_ROW_LIMIT)
            .all()
            .items
        )
        return _newest_first(movements, limit)

    def touching_storage_object(self, storage_object_id, limit) -> list[MovementRecord]:
        """Movements into or out of one container, newest first."""
        storage_object_id = str(storage_object_id)
        outgoing = self._dao.query.filter(from_storage_object_id=storage_object_id).limit(QUERY_ROW_LIMIT).all().items
        incoming = self._dao.query.filter(to_storage_object_id=storage_object_id).limit(QUERY_ROW_LIMIT).all().items
        unique = {str(movement.id): movement for movement in [*outgoing, *incoming]}
        return _newest_first(unique.values(), limit)
