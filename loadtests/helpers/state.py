"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared
between users. State tracks ids returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class HierarchyState:
    """A location with one storage type and its storage objects."""

    location_id: str | None = None
    storage_type_id: str | None = None
    storage_object_ids: list[str] = field(default_factory=list)


@dataclass
class StockState:
    """One product's lifecycle through the ledger."""

    product_id: str | None = None
    entry_id: str | None = None
    current_box: str | None = None
    quantity: int = 0
