"""Faker-based payload generators for Locust load test scenarios.

Payloads pass the domain's validation rules and use the field names the
API's Pydantic request schemas expect.
"""

import random
import uuid

from faker import Faker

fake = Faker()


def short_code(prefix: str) -> str:
    """Codes like 'BOX-a1b2c3d4'; unique enough to never collide in a run."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def location_data() -> dict:
    return {
        "name": f"{fake.city()[:200]} Store",
        "code": short_code("LOC"),
        "description": fake.sentence(),
    }


def storage_type_data(location_id: str, row: int = 0, column: int = 0) -> dict:
    return {
        "location_id": location_id,
        "name": random.choice(["Shelf", "Display Case", "Vault Drawer", "Counter"]) + f" {row}-{column}",
        "code": short_code("ST"),
        "row_position": row,
        "column_position": column,
        "capacity": random.randint(20, 200),
    }


def storage_object_data(storage_type_id: str) -> dict:
    return {
        "storage_type_id": storage_type_id,
        "label": f"Box {fake.color_name()}",
        "code": short_code("BOX"),
        "capacity": random.randint(10, 50),
    }


def product_data(storage_object_id: str, quantity: int | None = None) -> dict:
    """A product placement; roughly a third are real jewelry."""
    if random.random() < 0.33:
        return {
            "product_type": "real_jewelry",
            "product_id": short_code("RJ"),
            "storage_object_id": storage_object_id,
            "quantity": quantity or random.randint(1, 3),
            "sku": short_code("SKU-RJ"),
            "product_name": f"{fake.word().title()} Necklace",
            "metal_weight_g": round(random.uniform(1.5, 40.0), 2),
            "purity_k": random.choice([14, 18, 22, 24]),
        }
    return {
        "product_type": "zakya_product",
        "product_id": short_code("ZP"),
        "storage_object_id": storage_object_id,
        "quantity": quantity or random.randint(5, 30),
        "sku": short_code("SKU-ZP"),
        "product_name": f"{fake.word().title()} Earrings",
    }


def staff_member() -> str:
    return fake.user_name()[:100]
