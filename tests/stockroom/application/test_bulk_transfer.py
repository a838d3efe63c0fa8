"""Application tests for best-effort bulk transfer."""

import pytest
from protean import current_domain
from stockroom.ledger.bulk import bulk_transfer
from stockroom.ledger.entry import ProductLocationEntry
from stockroom.ledger.movement import MovementRecord
from stockroom.ledger.placement import AddProductToStorageObject
from stockroom.storage.management import DeactivateStorageObject
from structlog.testing import capture_logs


def _add(storage_object_id, product_id, quantity):
    command = AddProductToStorageObject(
        product_type="zakya_product",
        product_id=product_id,
        storage_object_id=storage_object_id,
        quantity=quantity,
        moved_by="alice",
    )
    return current_domain.process(command, asynchronous=False)


@pytest.fixture()
def boxes(make_storage_object):
    return make_storage_object(code="BOX-A"), make_storage_object(code="BOX-B")


class TestBulkTransfer:
    def test_moves_entire_quantity_of_each_entry(self, boxes):
        box_a, box_b = boxes
        first = _add(box_a, "ZP-1", 3)
        second = _add(box_a, "ZP-2", 4)

        result = bulk_transfer([first, second], box_b, moved_by="bob", reason="Consolidate")

        assert result["transferred_count"] == 2
        assert result["failed_count"] == 0
        assert {item["quantity"] for item in result["transferred"]} == {3, 4}
        entries = current_domain.repository_for(ProductLocationEntry).in_storage_object(box_b)
        assert sorted(entry.quantity for entry in entries) == [3, 4]
        assert current_domain.repository_for(ProductLocationEntry).in_storage_object(box_a) == []

    def test_failure_does_not_roll_back_earlier_items(self, boxes):
        box_a, box_b = boxes
        good = _add(box_a, "ZP-1", 3)
        in_target = _add(box_b, "ZP-2", 1)

        with capture_logs() as logs:
            result = bulk_transfer([good, "missing-entry", in_target], box_b, moved_by="bob")

        assert result["transferred_count"] == 1
        assert result["failed_count"] == 2
        assert [failure["entry_id"] for failure in result["failed"]] == ["missing-entry", in_target]
        assert result["failed"][0]["error"] == "ObjectNotFoundError"
        assert result["failed"][1]["error"] == "ValidationError"
        assert sum(1 for log in logs if log["event"] == "Bulk transfer item failed") == 2

        moved = current_domain.repository_for(ProductLocationEntry).for_product("zakya_product", "ZP-1")
        assert [entry.storage_object_id for entry in moved] == [box_b]

    def test_one_transfer_movement_per_success(self, boxes):
        box_a, box_b = boxes
        ids = [_add(box_a, f"ZP-{n}", n) for n in range(1, 4)]
        bulk_transfer(ids, box_b, moved_by="bob")

        movements = current_domain.repository_for(MovementRecord)._dao.query.all().items
        assert sorted(m.movement_type for m in movements) == ["add"] * 3 + ["transfer"] * 3

    def test_inactive_target_fails_every_item(self, boxes):
        box_a, box_b = boxes
        entry_id = _add(box_a, "ZP-1", 2)
        current_domain.process(DeactivateStorageObject(storage_object_id=box_b), asynchronous=False)

        result = bulk_transfer([entry_id], box_b, moved_by="bob")

        assert result["transferred_count"] == 0
        assert result["failed_count"] == 1
        assert current_domain.repository_for(ProductLocationEntry).get(entry_id).quantity == 2
