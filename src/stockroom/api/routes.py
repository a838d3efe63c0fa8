"""FastAPI routes for the stockroom: registries, ledger and summaries.

Handlers are plain functions. FastAPI runs them in its threadpool, which
copies the request context (including the pushed domain context) into the
worker thread and leaves the event loop free to enforce the time budget.
"""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from stockroom.api.schemas import (
    AddProductRequest,
    BulkCreateStorageTypesRequest,
    BulkRepositionRequest,
    BulkRepositionResponse,
    BulkTransferRequest,
    BulkTransferResponse,
    CreateLocationRequest,
    CreateStorageObjectRequest,
    CreateStorageTypeRequest,
    EntryResponse,
    InventorySummaryResponse,
    LocationResponse,
    LocationStatisticsResponse,
    LocationWithStatsResponse,
    MovementResponse,
    MoveStorageObjectRequest,
    RemoveResponse,
    RepositionStorageTypeRequest,
    StatusResponse,
    StorageObjectContentsResponse,
    StorageObjectResponse,
    StorageTypeGridResponse,
    StorageTypeResponse,
    TransferRequest,
    TransferResponse,
    UpdateLocationRequest,
    UpdateQuantityRequest,
    UpdateStorageObjectRequest,
    UpdateStorageTypeRequest,
)
from stockroom.config import DEFAULT_MOVEMENT_LIMIT, DEFAULT_STORAGE_OBJECT_MOVEMENT_LIMIT
from stockroom.ledger.bulk import bulk_transfer
from stockroom.ledger.entry import ProductLocationEntry, ProductType
from stockroom.ledger.placement import (
    AddProductToStorageObject,
    RemoveStock,
    TransferStock,
    UpdateEntryQuantity,
)
from stockroom.ledger.queries import find_product, product_movements, search_entries, storage_object_movements
from stockroom.location.location import Location
from stockroom.location.management import CreateLocation, DeactivateLocation, UpdateLocation
from stockroom.reporting.summary import (
    contents_by_code,
    contents_by_id,
    inventory_summary,
    location_statistics,
    locations_with_statistics,
)
from stockroom.storage.layout import bulk_reposition, storage_type_grid
from stockroom.storage.management import (
    BulkCreateStorageTypes,
    CreateStorageObject,
    CreateStorageType,
    DeactivateStorageObject,
    DeactivateStorageType,
    MoveStorageObject,
    RepositionStorageType,
    UpdateStorageObject,
    UpdateStorageType,
)
from stockroom.storage.storage_object import StorageObject
from stockroom.storage.storage_type import StorageType


def _location(location_id) -> LocationResponse:
    return LocationResponse.model_validate(current_domain.repository_for(Location).get(location_id))


def _storage_type(storage_type_id) -> StorageTypeResponse:
    return StorageTypeResponse.model_validate(current_domain.repository_for(StorageType).get(storage_type_id))


def _storage_object(storage_object_id) -> StorageObjectResponse:
    return StorageObjectResponse.model_validate(current_domain.repository_for(StorageObject).get(storage_object_id))


def _entry(entry_id) -> EntryResponse:
    return EntryResponse.model_validate(current_domain.repository_for(ProductLocationEntry).get(entry_id))


def _contents(contents) -> StorageObjectContentsResponse:
    return StorageObjectContentsResponse(
        storage_object=StorageObjectResponse.model_validate(contents["storage_object"]),
        entries=[EntryResponse.model_validate(entry) for entry in contents["entries"]],
        total_items=contents["total_items"],
    )


# ---------------------------------------------------------------------------
# Location Router
# ---------------------------------------------------------------------------
location_router = APIRouter(prefix="/inventory/locations", tags=["locations"])


@location_router.post("", status_code=201, response_model=LocationResponse)
def create_location(body: CreateLocationRequest) -> LocationResponse:
    command = CreateLocation(
        name=body.name,
        code=body.code,
        description=body.description,
        is_active=body.is_active,
    )
    result = current_domain.process(command, asynchronous=False)
    return _location(result)


@location_router.get("", response_model=list[LocationResponse])
def list_locations(active_only: bool = False) -> list[LocationResponse]:
    locations = current_domain.repository_for(Location).list_locations(active_only=active_only)
    return [LocationResponse.model_validate(location) for location in locations]


@location_router.get("/with-stats", response_model=list[LocationWithStatsResponse])
def list_locations_with_stats(active_only: bool = False) -> list[LocationWithStatsResponse]:
    return [
        LocationWithStatsResponse(
            location=LocationResponse.model_validate(row["location"]),
            **{key: value for key, value in row.items() if key != "location"},
        )
        for row in locations_with_statistics(active_only=active_only)
    ]


@location_router.get("/{location_id}", response_model=LocationResponse)
def get_location(location_id: str) -> LocationResponse:
    return _location(location_id)


@location_router.get("/{location_id}/statistics", response_model=LocationStatisticsResponse)
def get_location_statistics(location_id: str) -> LocationStatisticsResponse:
    return LocationStatisticsResponse(**location_statistics(location_id))


@location_router.patch("/{location_id}", response_model=LocationResponse)
def update_location(location_id: str, body: UpdateLocationRequest) -> LocationResponse:
    command = UpdateLocation(location_id=location_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return _location(location_id)


@location_router.delete("/{location_id}", response_model=StatusResponse)
def deactivate_location(location_id: str) -> StatusResponse:
    current_domain.process(DeactivateLocation(location_id=location_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Storage Type Router
# ---------------------------------------------------------------------------
storage_type_router = APIRouter(prefix="/inventory/storage-types", tags=["storage-types"])


@storage_type_router.post("", status_code=201, response_model=StorageTypeResponse)
def create_storage_type(body: CreateStorageTypeRequest) -> StorageTypeResponse:
    command = CreateStorageType(**body.model_dump(exclude_none=True))
    result = current_domain.process(command, asynchronous=False)
    return _storage_type(result)


@storage_type_router.post("/bulk", status_code=201, response_model=list[StorageTypeResponse])
def bulk_create_storage_types(body: BulkCreateStorageTypesRequest) -> list[StorageTypeResponse]:
    command = BulkCreateStorageTypes(
        storage_types=json.dumps([item.model_dump(exclude_none=True) for item in body.storage_types])
    )
    result = current_domain.process(command, asynchronous=False)
    return [_storage_type(storage_type_id) for storage_type_id in result]


@storage_type_router.get("/location/{location_id}", response_model=list[StorageTypeResponse])
def list_storage_types(location_id: str, active_only: bool = False) -> list[StorageTypeResponse]:
    current_domain.repository_for(Location).get(location_id)
    storage_types = current_domain.repository_for(StorageType).for_location(location_id, active_only=active_only)
    return [StorageTypeResponse.model_validate(storage_type) for storage_type in storage_types]


@storage_type_router.get("/location/{location_id}/grid", response_model=StorageTypeGridResponse)
def get_storage_type_grid(location_id: str, active_only: bool = True) -> StorageTypeGridResponse:
    grid = storage_type_grid(location_id, active_only=active_only)
    return StorageTypeGridResponse(
        location_id=grid["location_id"],
        rows=grid["rows"],
        columns=grid["columns"],
        cells=[StorageTypeResponse.model_validate(storage_type) for storage_type in grid["cells"]],
        unplaced=[StorageTypeResponse.model_validate(storage_type) for storage_type in grid["unplaced"]],
    )


# Declared before ``/{storage_type_id}/coordinates`` so "bulk" is never read as an id.
@storage_type_router.patch("/bulk/coordinates", response_model=BulkRepositionResponse)
def bulk_reposition_storage_types(body: BulkRepositionRequest) -> BulkRepositionResponse:
    return BulkRepositionResponse(**bulk_reposition([update.model_dump() for update in body.updates]))


@storage_type_router.get("/{storage_type_id}", response_model=StorageTypeResponse)
def get_storage_type(storage_type_id: str) -> StorageTypeResponse:
    return _storage_type(storage_type_id)


@storage_type_router.patch("/{storage_type_id}", response_model=StorageTypeResponse)
def update_storage_type(storage_type_id: str, body: UpdateStorageTypeRequest) -> StorageTypeResponse:
    command = UpdateStorageType(storage_type_id=storage_type_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return _storage_type(storage_type_id)


@storage_type_router.patch("/{storage_type_id}/position", response_model=StorageTypeResponse)
@storage_type_router.patch("/{storage_type_id}/coordinates", response_model=StorageTypeResponse)
def reposition_storage_type(storage_type_id: str, body: RepositionStorageTypeRequest) -> StorageTypeResponse:
    command = RepositionStorageType(
        storage_type_id=storage_type_id,
        row_position=body.row_position,
        column_position=body.column_position,
    )
    current_domain.process(command, asynchronous=False)
    return _storage_type(storage_type_id)


@storage_type_router.delete("/{storage_type_id}", response_model=StatusResponse)
def deactivate_storage_type(storage_type_id: str) -> StatusResponse:
    current_domain.process(DeactivateStorageType(storage_type_id=storage_type_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Storage Object Router
# ---------------------------------------------------------------------------
storage_object_router = APIRouter(prefix="/inventory/storage-objects", tags=["storage-objects"])


@storage_object_router.post("", status_code=201, response_model=StorageObjectResponse)
def create_storage_object(body: CreateStorageObjectRequest) -> StorageObjectResponse:
    command = CreateStorageObject(
        storage_type_id=body.storage_type_id,
        label=body.label,
        code=body.code,
        capacity=body.capacity,
        description=body.description,
    )
    result = current_domain.process(command, asynchronous=False)
    return _storage_object(result)


@storage_object_router.get("/storage-type/{storage_type_id}", response_model=list[StorageObjectResponse])
def list_storage_objects(storage_type_id: str, active_only: bool = False) -> list[StorageObjectResponse]:
    current_domain.repository_for(StorageType).get(storage_type_id)
    storage_objects = current_domain.repository_for(StorageObject).for_storage_type(
        storage_type_id, active_only=active_only
    )
    return [StorageObjectResponse.model_validate(storage_object) for storage_object in storage_objects]


@storage_object_router.get("/qr/{code}", response_model=StorageObjectContentsResponse)
def get_storage_object_by_code(code: str) -> StorageObjectContentsResponse:
    return _contents(contents_by_code(code))


@storage_object_router.get("/{storage_object_id}", response_model=StorageObjectResponse)
def get_storage_object(storage_object_id: str) -> StorageObjectResponse:
    return _storage_object(storage_object_id)


@storage_object_router.get("/{storage_object_id}/contents", response_model=StorageObjectContentsResponse)
def get_storage_object_contents(storage_object_id: str) -> StorageObjectContentsResponse:
    return _contents(contents_by_id(storage_object_id))


@storage_object_router.get("/{storage_object_id}/movements", response_model=list[MovementResponse])
def get_storage_object_movements(
    storage_object_id: str, limit: int = DEFAULT_STORAGE_OBJECT_MOVEMENT_LIMIT
) -> list[MovementResponse]:
    movements = storage_object_movements(storage_object_id, limit)
    return [MovementResponse.model_validate(movement) for movement in movements]


@storage_object_router.patch("/{storage_object_id}", response_model=StorageObjectResponse)
def update_storage_object(storage_object_id: str, body: UpdateStorageObjectRequest) -> StorageObjectResponse:
    command = UpdateStorageObject(storage_object_id=storage_object_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return _storage_object(storage_object_id)


@storage_object_router.post("/{storage_object_id}/move", response_model=StorageObjectResponse)
def move_storage_object(storage_object_id: str, body: MoveStorageObjectRequest) -> StorageObjectResponse:
    command = MoveStorageObject(
        storage_object_id=storage_object_id,
        to_storage_type_id=body.to_storage_type_id,
        moved_by=body.moved_by,
        reason=body.reason,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    return _storage_object(storage_object_id)


@storage_object_router.delete("/{storage_object_id}", response_model=StatusResponse)
def deactivate_storage_object(storage_object_id: str) -> StatusResponse:
    current_domain.process(DeactivateStorageObject(storage_object_id=storage_object_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Product Ledger Router
# ---------------------------------------------------------------------------
# Static paths are declared before ``/{entry_id}`` so they are never
# captured as entry ids.
product_router = APIRouter(prefix="/inventory/products", tags=["products"])


@product_router.get("/search", response_model=list[EntryResponse])
def search_products(
    sku: str | None = None,
    product_name: str | None = None,
    product_type: ProductType | None = None,
    storage_object_id: str | None = None,
    box_id: str | None = None,
    storage_type_id: str | None = None,
    shelf_id: str | None = None,
    location_id: str | None = None,
    min_quantity: int | None = None,
    max_quantity: int | None = None,
) -> list[EntryResponse]:
    entries = search_entries(
        sku=sku,
        product_name=product_name,
        product_type=product_type.value if product_type else None,
        storage_object_id=storage_object_id or box_id,
        storage_type_id=storage_type_id or shelf_id,
        location_id=location_id,
        min_quantity=min_quantity,
        max_quantity=max_quantity,
    )
    return [EntryResponse.model_validate(entry) for entry in entries]


@product_router.get("/find/{product_type}/{product_id}", response_model=list[EntryResponse])
def find_product_entries(product_type: ProductType, product_id: str) -> list[EntryResponse]:
    return [EntryResponse.model_validate(entry) for entry in find_product(product_type.value, product_id)]


@product_router.get("/movements/{product_type}/{product_id}", response_model=list[MovementResponse])
def get_product_movements(
    product_type: ProductType, product_id: str, limit: int = DEFAULT_MOVEMENT_LIMIT
) -> list[MovementResponse]:
    movements = product_movements(product_type.value, product_id, limit)
    return [MovementResponse.model_validate(movement) for movement in movements]


@product_router.get("/inventory/summary", response_model=InventorySummaryResponse)
def get_inventory_summary(location_id: str | None = None) -> InventorySummaryResponse:
    return InventorySummaryResponse(**inventory_summary(location_id))


@product_router.post("", status_code=201, response_model=EntryResponse)
def add_product(body: AddProductRequest, moved_by: str) -> EntryResponse:
    command = AddProductToStorageObject(
        product_type=body.product_type.value,
        product_id=body.product_id,
        storage_object_id=body.storage_object_id,
        quantity=body.quantity,
        sku=body.sku,
        product_name=body.product_name,
        metal_weight_g=body.metal_weight_g,
        purity_k=body.purity_k,
        moved_by=moved_by,
        reason=body.reason,
        notes=body.notes,
    )
    result = current_domain.process(command, asynchronous=False)
    return _entry(result)


@product_router.post("/transfer", response_model=TransferResponse)
def transfer_stock(body: TransferRequest) -> TransferResponse:
    command = TransferStock(
        entry_id=body.from_location_id,
        to_storage_object_id=body.to_storage_object_id,
        quantity=body.quantity,
        moved_by=body.moved_by,
        reason=body.reason,
        notes=body.notes,
    )
    result = current_domain.process(command, asynchronous=False)
    return TransferResponse(**result)


@product_router.post("/bulk-transfer", response_model=BulkTransferResponse)
def bulk_transfer_stock(body: BulkTransferRequest) -> BulkTransferResponse:
    result = bulk_transfer(
        entry_ids=body.entry_ids,
        target_storage_object_id=body.target_storage_object_id,
        moved_by=body.moved_by,
        reason=body.reason,
        notes=body.notes,
    )
    return BulkTransferResponse(**result)


@product_router.get("/{entry_id}", response_model=EntryResponse)
def get_entry(entry_id: str) -> EntryResponse:
    return _entry(entry_id)


@product_router.patch("/{entry_id}/quantity", response_model=EntryResponse)
def update_entry_quantity(entry_id: str, body: UpdateQuantityRequest) -> EntryResponse:
    command = UpdateEntryQuantity(
        entry_id=entry_id,
        new_quantity=body.new_quantity,
        updated_by=body.updated_by,
        reason=body.reason,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    return _entry(entry_id)


@product_router.delete("/{entry_id}", response_model=RemoveResponse)
def remove_stock(
    entry_id: str, quantity: int, removed_by: str, reason: str | None = None, notes: str | None = None
) -> RemoveResponse:
    command = RemoveStock(
        entry_id=entry_id,
        quantity=quantity,
        removed_by=removed_by,
        reason=reason,
        notes=notes,
    )
    result = current_domain.process(command, asynchronous=False)
    return RemoveResponse(**result)
