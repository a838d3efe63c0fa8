"""ProductLocationEntry aggregate: how many units of one product sit in one container.

The ledger is a sparse matrix of (product, storage object) → quantity. A
product may have many entries: one per container it occupies, and one per
``add`` call, since additions are tracked as separate lots rather than merged.

Products are referenced polymorphically by ``product_type`` + ``product_id``.
``product_type`` is constrained to :class:`ProductType`; real jewelry must
carry its metal weight and purity.
"""

import math
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String

from stockroom.domain import stockroom
from stockroom.errors import insufficient_stock, invalid_quantity


class ProductType(Enum):
    REAL_JEWELRY = "real_jewelry"
    ZAKYA_PRODUCT = "zakya_product"


def validate_product_type(product_type):
    """Return the canonical string for ``product_type`` or raise ValidationError."""
    value = product_type.value if isinstance(product_type, ProductType) else product_type
    if value not in {member.value for member in ProductType}:
        raise ValidationError({"product_type": [f"Unknown product type '{value}'"]})
    return value


def _positive(value):
    return value is not None and math.isfinite(value) and value > 0


def validate_jewelry_attributes(product_type, metal_weight_g, purity_k):
    if validate_product_type(product_type) != ProductType.REAL_JEWELRY.value:
        return
    errors = {}
    if not _positive(metal_weight_g):
        errors["metal_weight_g"] = ["Metal weight (g) is required and must be positive for real jewelry"]
    if not _positive(purity_k):
        errors["purity_k"] = ["Purity (karat) is required and must be positive for real jewelry"]
    if errors:
        raise ValidationError(errors)


@stockroom.aggregate
class ProductLocationEntry:
    """Current stock of one product in one storage object."""

    product_type = String(required=True, choices=ProductType)
    product_id = String(required=True, max_length=255)
    storage_object_id = Identifier(required=True)
    quantity = Integer(default=0, min_value=0)
    sku = String(max_length=100)
    product_name = String(max_length=255)
    metal_weight_g = Float()
    purity_k = Float()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def real_jewelry_carries_weight_and_purity(self):
        validate_jewelry_attributes(self.product_type, self.metal_weight_g, self.purity_k)

    @invariant.post
    def quantity_is_never_negative(self):
        if self.quantity is not None and self.quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})

    # -------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        product_type,
        product_id,
        storage_object_id,
        quantity,
        sku=None,
        product_name=None,
        metal_weight_g=None,
        purity_k=None,
    ):
        """Create a new entry for units placed into a container."""
        product_type = validate_product_type(product_type)
        if quantity is None or quantity <= 0:
            raise invalid_quantity(quantity)
        validate_jewelry_attributes(product_type, metal_weight_g, purity_k)

        now = datetime.now(UTC)
        return cls(
            product_type=product_type,
            product_id=str(product_id),
            storage_object_id=str(storage_object_id),
            quantity=quantity,
            sku=sku,
            product_name=product_name,
            metal_weight_g=metal_weight_g,
            purity_k=purity_k,
            created_at=now,
            updated_at=now,
        )

    def split_into(self, storage_object_id, quantity):
        """A fresh entry for the same product in another container."""
        return ProductLocationEntry.place(
            product_type=self.product_type,
            product_id=self.product_id,
            storage_object_id=storage_object_id,
            quantity=quantity,
            sku=self.sku,
            product_name=self.product_name,
            metal_weight_g=self.metal_weight_g,
            purity_k=self.purity_k,
        )

    # -------------------------------------------------------------------
    # Quantity changes
    # -------------------------------------------------------------------
    @property
    def is_depleted(self):
        return self.quantity == 0

    def withdraw(self, quantity):
        """Take ``quantity`` units out. Leaves the entry untouched on failure."""
        if quantity is None or quantity <= 0:
            raise invalid_quantity(quantity)
        if quantity > self.quantity:
            raise insufficient_stock(self.quantity, quantity)
        self.quantity = self.quantity - quantity
        self.updated_at = datetime.now(UTC)

    def deposit(self, quantity):
        if quantity is None or quantity <= 0:
            raise invalid_quantity(quantity)
        self.quantity = self.quantity + quantity
        self.updated_at = datetime.now(UTC)

    def set_quantity(self, new_quantity):
        """Overwrite the quantity (a stock count, not a delta)."""
        if new_quantity is None or new_quantity < 0:
            raise invalid_quantity(new_quantity, field="new_quantity", allow_zero=True)
        self.quantity = new_quantity
        self.updated_at = datetime.now(UTC)
