"""Tests for the ProductLocationEntry aggregate."""

import pytest
from protean.exceptions import ValidationError
from stockroom.errors import InsufficientStockError, InvalidQuantityError
from stockroom.ledger.entry import ProductLocationEntry, ProductType


def _place(**overrides):
    defaults = {
        "product_type": "zakya_product",
        "product_id": "ZP-100",
        "storage_object_id": "box-a",
        "quantity": 5,
        "sku": "ZK-RING-100",
        "product_name": "Silver Ring",
    }
    defaults.update(overrides)
    return ProductLocationEntry.place(**defaults)


def _place_jewelry(**overrides):
    defaults = {
        "product_type": ProductType.REAL_JEWELRY,
        "product_id": "RJ-7",
        "metal_weight_g": 4.2,
        "purity_k": 22,
    }
    defaults.update(overrides)
    return _place(**defaults)


class TestPlacement:
    def test_place_sets_fields(self):
        entry = _place()
        assert entry.product_type == "zakya_product"
        assert entry.product_id == "ZP-100"
        assert entry.storage_object_id == "box-a"
        assert entry.quantity == 5
        assert entry.created_at is not None

    def test_place_accepts_enum_product_type(self):
        entry = _place(product_type=ProductType.ZAKYA_PRODUCT)
        assert entry.product_type == "zakya_product"

    def test_unknown_product_type_is_rejected(self):
        with pytest.raises(ValidationError):
            _place(product_type="costume_jewelry")

    @pytest.mark.parametrize("quantity", [0, -3, None])
    def test_non_positive_quantity_is_rejected(self, quantity):
        with pytest.raises(InvalidQuantityError):
            _place(quantity=quantity)


class TestJewelryAttributes:
    def test_real_jewelry_with_weight_and_purity(self):
        entry = _place_jewelry()
        assert entry.metal_weight_g == 4.2
        assert entry.purity_k == 22

    def test_real_jewelry_without_weight_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _place_jewelry(metal_weight_g=None)
        assert "metal_weight_g" in exc.value.messages

    def test_real_jewelry_with_zero_purity_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _place_jewelry(purity_k=0)
        assert "purity_k" in exc.value.messages

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), -2.5])
    def test_real_jewelry_with_non_finite_or_negative_attributes_is_rejected(self, value):
        with pytest.raises(ValidationError) as exc:
            _place_jewelry(metal_weight_g=value, purity_k=value)
        assert set(exc.value.messages) >= {"metal_weight_g", "purity_k"}

    def test_zakya_product_needs_no_jewelry_attributes(self):
        entry = _place(metal_weight_g=None, purity_k=None)
        assert entry.metal_weight_g is None


class TestQuantityChanges:
    def test_withdraw_decrements(self):
        entry = _place()
        entry.withdraw(2)
        assert entry.quantity == 3
        assert entry.is_depleted is False

    def test_withdraw_everything_depletes(self):
        entry = _place()
        entry.withdraw(5)
        assert entry.quantity == 0
        assert entry.is_depleted is True

    def test_withdraw_more_than_available_leaves_entry_untouched(self):
        entry = _place()
        with pytest.raises(InsufficientStockError) as exc:
            entry.withdraw(6)
        assert entry.quantity == 5
        assert "5 available, 6 requested" in str(exc.value.messages)

    def test_withdraw_zero_is_rejected(self):
        with pytest.raises(InvalidQuantityError):
            _place().withdraw(0)

    def test_deposit_increments(self):
        entry = _place()
        entry.deposit(4)
        assert entry.quantity == 9

    def test_deposit_negative_is_rejected(self):
        with pytest.raises(InvalidQuantityError):
            _place().deposit(-1)

    def test_set_quantity_overwrites(self):
        entry = _place()
        entry.set_quantity(12)
        assert entry.quantity == 12

    def test_set_quantity_to_zero_is_allowed(self):
        entry = _place()
        entry.set_quantity(0)
        assert entry.quantity == 0

    def test_set_negative_quantity_is_rejected(self):
        entry = _place()
        with pytest.raises(InvalidQuantityError):
            entry.set_quantity(-1)
        assert entry.quantity == 5

    def test_split_into_copies_product_attributes(self):
        entry = _place_jewelry()
        split = entry.split_into("box-b", 2)
        assert split.id != entry.id
        assert split.storage_object_id == "box-b"
        assert split.quantity == 2
        assert split.product_id == "RJ-7"
        assert split.metal_weight_g == 4.2
