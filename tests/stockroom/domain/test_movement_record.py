"""Tests for the MovementRecord aggregate."""

import pytest
from protean.exceptions import ValidationError
from stockroom.ledger.entry import ProductLocationEntry
from stockroom.ledger.events import StockMoved
from stockroom.ledger.movement import MovementRecord, MovementType


@pytest.fixture()
def entry():
    return ProductLocationEntry.place(
        product_type="zakya_product",
        product_id="ZP-1",
        storage_object_id="box-a",
        quantity=5,
        sku="ZK-1",
    )


class TestMovementRecord:
    def test_record_copies_product_reference(self, entry):
        movement = MovementRecord.record(
            entry,
            MovementType.ADD,
            quantity_delta=5,
            quantity_before=0,
            quantity_after=5,
            moved_by="alice",
            to_storage_object_id="box-a",
        )
        assert movement.entry_id == str(entry.id)
        assert movement.product_type == "zakya_product"
        assert movement.product_id == "ZP-1"
        assert movement.sku == "ZK-1"
        assert movement.movement_type == "add"
        assert movement.timestamp is not None

    def test_record_raises_stock_moved(self, entry):
        movement = MovementRecord.record(
            entry,
            MovementType.TRANSFER,
            quantity_delta=3,
            quantity_before=5,
            quantity_after=2,
            moved_by="bob",
            from_storage_object_id="box-a",
            to_storage_object_id="box-b",
            reason="Rebalance",
        )
        event = movement._events[0]
        assert isinstance(event, StockMoved)
        assert event.movement_id == str(movement.id)
        assert event.quantity_delta == 3
        assert event.from_storage_object_id == "box-a"
        assert event.to_storage_object_id == "box-b"

    def test_zero_delta_is_recorded(self, entry):
        movement = MovementRecord.record(
            entry,
            MovementType.QUANTITY_UPDATE,
            quantity_delta=0,
            quantity_before=5,
            quantity_after=5,
            moved_by="carol",
        )
        assert movement.quantity_delta == 0

    def test_unknown_movement_type_is_rejected(self, entry):
        with pytest.raises(ValidationError):
            MovementRecord.record(
                entry,
                "teleport",
                quantity_delta=1,
                quantity_before=0,
                quantity_after=1,
                moved_by="dave",
            )
