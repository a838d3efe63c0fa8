"""Stockroom load test scenarios.

Stateful SequentialTaskSet journeys covering hierarchy setup and a product's
life through the ledger, plus a contention user that hammers transfers out of
one shared entry to exercise optimistic concurrency.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    location_data,
    product_data,
    staff_member,
    storage_object_data,
    storage_type_data,
)
from loadtests.helpers.response import extract_error_detail, is_retryable
from loadtests.helpers.state import HierarchyState, StockState


def _build_hierarchy(client, state: HierarchyState, boxes: int = 2) -> bool:
    """Create a location, a storage type and ``boxes`` storage objects."""
    with client.post(
        "/inventory/locations",
        json=location_data(),
        catch_response=True,
        name="POST /inventory/locations",
    ) as resp:
        if resp.status_code != 201:
            resp.failure(f"Create location failed ({resp.status_code}): {extract_error_detail(resp)}")
            return False
        state.location_id = resp.json()["id"]

    with client.post(
        "/inventory/storage-types",
        json=storage_type_data(state.location_id),
        catch_response=True,
        name="POST /inventory/storage-types",
    ) as resp:
        if resp.status_code != 201:
            resp.failure(f"Create storage type failed ({resp.status_code}): {extract_error_detail(resp)}")
            return False
        state.storage_type_id = resp.json()["id"]

    for _ in range(boxes):
        with client.post(
            "/inventory/storage-objects",
            json=storage_object_data(state.storage_type_id),
            catch_response=True,
            name="POST /inventory/storage-objects",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Create storage object failed ({resp.status_code}): {extract_error_detail(resp)}")
                return False
            state.storage_object_ids.append(resp.json()["id"])
    return True


class ProductLifecycleJourney(SequentialTaskSet):
    """Build hierarchy -> Add -> Transfer -> Recount -> Find -> History -> Remove.

    Models a stock clerk receiving an item, moving it to the display, counting
    it and finally selling it.
    """

    def on_start(self):
        self.hierarchy = HierarchyState()
        self.stock = StockState()
        self.clerk = staff_member()
        if not _build_hierarchy(self.client, self.hierarchy):
            self.interrupt()

    @task
    def add_product(self):
        box = self.hierarchy.storage_object_ids[0]
        payload = product_data(box, quantity=random.randint(5, 20))
        with self.client.post(
            "/inventory/products",
            params={"moved_by": self.clerk},
            json=payload,
            catch_response=True,
            name="POST /inventory/products",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.stock.entry_id = body["id"]
                self.stock.product_id = body["product_id"]
                self.stock.current_box = box
                self.stock.quantity = body["quantity"]
            else:
                resp.failure(f"Add product failed ({resp.status_code}): {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def transfer_part(self):
        target = self.hierarchy.storage_object_ids[1]
        with self.client.post(
            "/inventory/products/transfer",
            json={
                "from_location_id": self.stock.entry_id,
                "to_storage_object_id": target,
                "quantity": 1,
                "moved_by": self.clerk,
                "reason": "Display refresh",
            },
            catch_response=True,
            name="POST /inventory/products/transfer",
        ) as resp:
            if resp.status_code == 200:
                self.stock.quantity = resp.json()["source_remaining"]
            else:
                resp.failure(f"Transfer failed ({resp.status_code}): {extract_error_detail(resp)}")

    @task
    def recount(self):
        counted = self.stock.quantity + random.randint(0, 2)
        with self.client.patch(
            f"/inventory/products/{self.stock.entry_id}/quantity",
            json={"new_quantity": counted, "updated_by": self.clerk, "reason": "Cycle count"},
            catch_response=True,
            name="PATCH /inventory/products/{id}/quantity",
        ) as resp:
            if resp.status_code == 200:
                self.stock.quantity = counted
            else:
                resp.failure(f"Recount failed ({resp.status_code}): {extract_error_detail(resp)}")

    @task
    def find_product(self):
        product_type = "real_jewelry" if self.stock.product_id.startswith("RJ") else "zakya_product"
        self.client.get(
            f"/inventory/products/find/{product_type}/{self.stock.product_id}",
            name="GET /inventory/products/find/{type}/{id}",
        )
        self.client.get(
            f"/inventory/products/movements/{product_type}/{self.stock.product_id}",
            name="GET /inventory/products/movements/{type}/{id}",
        )

    @task
    def sell_everything(self):
        if self.stock.quantity <= 0:
            self.interrupt()
            return
        with self.client.delete(
            f"/inventory/products/{self.stock.entry_id}",
            params={"quantity": self.stock.quantity, "removed_by": self.clerk, "reason": "Sold"},
            catch_response=True,
            name="DELETE /inventory/products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Remove failed ({resp.status_code}): {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class StockroomUser(HttpUser):
    """A stock clerk repeatedly moving products through the ledger."""

    wait_time = between(0.5, 2)
    tasks = {ProductLifecycleJourney: 1}

    @task(3)
    def browse_summary(self):
        self.client.get("/inventory/products/inventory/summary", name="GET /inventory/products/inventory/summary")

    @task(2)
    def search_by_sku(self):
        self.client.get("/inventory/products/search", params={"sku": "SKU-ZP"}, name="GET /inventory/products/search")


class TransferContentionUser(HttpUser):
    """Many users transferring single units out of one shared entry.

    Every successful transfer must be matched by exactly one movement; 409
    responses (insufficient stock or concurrent modification) are expected
    and not counted as failures.
    """

    wait_time = between(0.05, 0.2)
    shared = None

    def on_start(self):
        cls = type(self)
        if cls.shared is None:
            hierarchy = HierarchyState()
            if not _build_hierarchy(self.client, hierarchy, boxes=3):
                return
            resp = self.client.post(
                "/inventory/products",
                params={"moved_by": "contention-setup"},
                json=product_data(hierarchy.storage_object_ids[0], quantity=10_000),
                name="POST /inventory/products",
            )
            if resp.status_code == 201:
                cls.shared = {"entry_id": resp.json()["id"], "targets": hierarchy.storage_object_ids[1:]}

    @task
    def transfer_one(self):
        if self.shared is None:
            return
        with self.client.post(
            "/inventory/products/transfer",
            json={
                "from_location_id": self.shared["entry_id"],
                "to_storage_object_id": random.choice(self.shared["targets"]),
                "quantity": 1,
                "moved_by": staff_member(),
            },
            catch_response=True,
            name="POST /inventory/products/transfer [contended]",
        ) as resp:
            if resp.status_code == 200 or is_retryable(resp):
                resp.success()
            else:
                resp.failure(f"Contended transfer failed ({resp.status_code}): {extract_error_detail(resp)}")
