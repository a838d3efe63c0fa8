"""Application tests for search, find and movement history."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from stockroom.ledger.placement import AddProductToStorageObject, TransferStock
from stockroom.ledger.queries import find_product, product_movements, search_entries, storage_object_movements


def _add(storage_object_id, product_id, quantity=1, product_type="zakya_product", **overrides):
    command = AddProductToStorageObject(
        product_type=product_type,
        product_id=product_id,
        storage_object_id=storage_object_id,
        quantity=quantity,
        moved_by="alice",
        **overrides,
    )
    return current_domain.process(command, asynchronous=False)


@pytest.fixture()
def hierarchy(make_location, make_storage_type, make_storage_object):
    """Two locations, each with one shelf holding one box."""
    north = make_location(name="North", code="N")
    south = make_location(name="South", code="S")
    north_shelf = make_storage_type(location_id=north, code="N-SH")
    south_shelf = make_storage_type(location_id=south, code="S-SH")
    north_box = make_storage_object(code="N-BOX", storage_type_id=north_shelf)
    south_box = make_storage_object(code="S-BOX", storage_type_id=south_shelf)

    _add(north_box, "ZP-1", 2, sku="ZK-RING-01", product_name="Silver Ring")
    _add(north_box, "ZP-2", 7, sku="ZK-CHAIN-02", product_name="Gold Chain")
    _add(south_box, "ZP-1", 4, sku="ZK-RING-01", product_name="Silver Ring")
    _add(
        south_box,
        "RJ-1",
        1,
        product_type="real_jewelry",
        sku="RJ-BANGLE",
        product_name="Bridal Bangle",
        metal_weight_g=12.5,
        purity_k=22,
    )
    return {
        "north": north,
        "south": south,
        "north_shelf": north_shelf,
        "north_box": north_box,
        "south_box": south_box,
    }


class TestSearch:
    def test_no_filters_returns_everything(self, hierarchy):
        assert len(search_entries()) == 4

    def test_sku_substring_is_case_insensitive(self, hierarchy):
        results = search_entries(sku="ring")
        assert {entry.product_id for entry in results} == {"ZP-1"}
        assert len(results) == 2

    def test_product_name_substring(self, hierarchy):
        results = search_entries(product_name="GOLD")
        assert [entry.product_id for entry in results] == ["ZP-2"]

    def test_product_type(self, hierarchy):
        results = search_entries(product_type="real_jewelry")
        assert [entry.product_id for entry in results] == ["RJ-1"]

    def test_unknown_product_type_is_rejected(self, hierarchy):
        with pytest.raises(ValidationError):
            search_entries(product_type="costume")

    def test_storage_object(self, hierarchy):
        results = search_entries(storage_object_id=hierarchy["south_box"])
        assert {entry.product_id for entry in results} == {"ZP-1", "RJ-1"}

    def test_storage_type_joins_through_storage_objects(self, hierarchy):
        results = search_entries(storage_type_id=hierarchy["north_shelf"])
        assert {entry.product_id for entry in results} == {"ZP-1", "ZP-2"}

    def test_location_joins_through_storage_types(self, hierarchy):
        results = search_entries(location_id=hierarchy["south"])
        assert {entry.storage_object_id for entry in results} == {hierarchy["south_box"]}

    def test_quantity_range(self, hierarchy):
        results = search_entries(min_quantity=2, max_quantity=4)
        assert sorted(entry.quantity for entry in results) == [2, 4]

    def test_filters_combine(self, hierarchy):
        results = search_entries(sku="ring", location_id=hierarchy["north"])
        assert len(results) == 1
        assert results[0].quantity == 2


class TestFind:
    def test_find_returns_every_entry_of_product(self, hierarchy):
        located = find_product("zakya_product", "ZP-1")
        assert {entry.storage_object_id for entry in located} == {hierarchy["north_box"], hierarchy["south_box"]}

    def test_find_unknown_product_is_empty(self, hierarchy):
        assert find_product("zakya_product", "nothing") == []


class TestMovements:
    def test_history_is_newest_first(self, hierarchy):
        entry_id = find_product("zakya_product", "ZP-1")[0].id
        current_domain.process(
            TransferStock(entry_id=entry_id, to_storage_object_id=hierarchy["south_box"], quantity=1, moved_by="bob"),
            asynchronous=False,
        )
        movements = product_movements("zakya_product", "ZP-1", limit=100)
        assert [m.movement_type for m in movements] == ["transfer", "add", "add"]

    def test_history_is_capped_at_limit(self, hierarchy):
        assert len(product_movements("zakya_product", "ZP-1", limit=1)) == 1

    def test_non_positive_limit_is_rejected(self, hierarchy):
        with pytest.raises(ValidationError):
            product_movements("zakya_product", "ZP-1", limit=0)

    def test_storage_object_history_includes_incoming_and_outgoing(self, hierarchy):
        entry_id = find_product("zakya_product", "ZP-2")[0].id
        current_domain.process(
            TransferStock(entry_id=entry_id, to_storage_object_id=hierarchy["south_box"], quantity=3, moved_by="bob"),
            asynchronous=False,
        )
        north = storage_object_movements(hierarchy["north_box"], limit=50)
        south = storage_object_movements(hierarchy["south_box"], limit=50)
        assert [m.movement_type for m in north][0] == "transfer"
        assert len(north) == 3
        assert len(south) == 3
