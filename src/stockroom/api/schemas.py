"""Pydantic request/response schemas for the stockroom API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands. Older clients still send the shelf/box
vocabulary; those names are accepted as input aliases.
"""

from datetime import datetime
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from stockroom.ledger.entry import ProductType


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------
class CreateLocationRequest(_Request):
    name: str = Field(validation_alias=AliasChoices("name", "location_name"))
    code: str = Field(validation_alias=AliasChoices("code", "location_code"))
    description: str | None = None
    is_active: bool = True


class UpdateLocationRequest(_Request):
    name: str | None = Field(default=None, validation_alias=AliasChoices("name", "location_name"))
    code: str | None = Field(default=None, validation_alias=AliasChoices("code", "location_code"))
    description: str | None = None
    is_active: bool | None = None


class LocationResponse(_Record):
    id: str
    name: str
    code: str
    description: str | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LocationStatisticsResponse(BaseModel):
    location_id: str
    storage_type_count: int
    storage_object_count: int
    product_count: int
    total_quantity: int


class LocationWithStatsResponse(LocationStatisticsResponse):
    location: LocationResponse


# ---------------------------------------------------------------------------
# Storage types
# ---------------------------------------------------------------------------
class CreateStorageTypeRequest(_Request):
    location_id: str
    name: str = Field(validation_alias=AliasChoices("name", "storage_type_name"))
    code: str = Field(validation_alias=AliasChoices("code", "storage_type_code"))
    description: str | None = None
    capacity: int | None = Field(default=None, ge=0)
    row_position: int | None = Field(default=None, ge=0)
    column_position: int | None = Field(default=None, ge=0)
    is_active: bool = True


class BulkCreateStorageTypesRequest(_Request):
    storage_types: list[CreateStorageTypeRequest] = Field(min_length=1)


class UpdateStorageTypeRequest(_Request):
    name: str | None = Field(default=None, validation_alias=AliasChoices("name", "storage_type_name"))
    code: str | None = Field(default=None, validation_alias=AliasChoices("code", "storage_type_code"))
    description: str | None = None
    capacity: int | None = Field(default=None, ge=0)
    row_position: int | None = Field(default=None, ge=0)
    column_position: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class StorageTypeResponse(_Record):
    id: str
    location_id: str
    name: str
    code: str
    description: str | None = None
    capacity: int | None = None
    row_position: int | None = None
    column_position: int | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RepositionStorageTypeRequest(_Request):
    row_position: int = Field(ge=0)
    column_position: int = Field(ge=0)


class StorageTypePosition(RepositionStorageTypeRequest):
    storage_type_id: str = Field(validation_alias=AliasChoices("storage_type_id", "id"))


class BulkRepositionRequest(_Request):
    updates: list[StorageTypePosition] = Field(min_length=1)


class RepositionFailure(BaseModel):
    storage_type_id: str
    error: str
    message: str


class BulkRepositionResponse(BaseModel):
    updated: list[str]
    errors: list[RepositionFailure]
    message: str


class StorageTypeGridResponse(BaseModel):
    location_id: str
    rows: int
    columns: int
    cells: list[StorageTypeResponse]
    unplaced: list[StorageTypeResponse]


# ---------------------------------------------------------------------------
# Storage objects
# ---------------------------------------------------------------------------
class CreateStorageObjectRequest(_Request):
    storage_type_id: str = Field(validation_alias=AliasChoices("storage_type_id", "shelf_id"))
    label: str = Field(validation_alias=AliasChoices("label", "box_name"))
    code: str = Field(validation_alias=AliasChoices("code", "box_code"))
    capacity: int = Field(default=0, ge=0)
    description: str | None = None


class UpdateStorageObjectRequest(_Request):
    label: str | None = Field(default=None, validation_alias=AliasChoices("label", "box_name"))
    code: str | None = Field(default=None, validation_alias=AliasChoices("code", "box_code"))
    capacity: int | None = Field(default=None, ge=0)
    description: str | None = None
    is_active: bool | None = None


class MoveStorageObjectRequest(_Request):
    to_storage_type_id: str = Field(
        validation_alias=AliasChoices("to_storage_type_id", "storage_type_id", "to_shelf_id", "shelf_id")
    )
    moved_by: str
    reason: str | None = None
    notes: str | None = None


class StorageObjectResponse(_Record):
    id: str
    storage_type_id: str
    label: str
    code: str
    capacity: int
    description: str | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------
class AddProductRequest(_Request):
    product_type: ProductType
    product_id: str
    storage_object_id: str = Field(validation_alias=AliasChoices("storage_object_id", "box_id"))
    quantity: int = 1
    sku: str | None = None
    product_name: str | None = None
    metal_weight_g: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    purity_k: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    reason: str | None = None
    notes: str | None = None


class TransferRequest(_Request):
    """``from_location_id`` names the source *entry*, not a Location."""

    from_location_id: str = Field(validation_alias=AliasChoices("from_location_id", "entry_id"))
    to_storage_object_id: str = Field(validation_alias=AliasChoices("to_storage_object_id", "to_box_id"))
    quantity: int
    moved_by: str
    reason: str | None = None
    notes: str | None = None


class BulkTransferRequest(_Request):
    entry_ids: list[str] = Field(min_length=1, validation_alias=AliasChoices("entry_ids", "product_locations"))
    target_storage_object_id: str = Field(
        validation_alias=AliasChoices("target_storage_object_id", "target_box_id", "to_box_id")
    )
    moved_by: str
    reason: str | None = None
    notes: str | None = None


class UpdateQuantityRequest(_Request):
    new_quantity: int = Field(validation_alias=AliasChoices("new_quantity", "quantity"))
    updated_by: str
    reason: str | None = None
    notes: str | None = None


class EntryResponse(_Record):
    id: str
    product_type: str
    product_id: str
    storage_object_id: str
    quantity: int
    sku: str | None = None
    product_name: str | None = None
    metal_weight_g: float | None = None
    purity_k: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MovementResponse(_Record):
    id: str
    entry_id: str
    product_type: str
    product_id: str
    sku: str | None = None
    movement_type: str
    from_storage_object_id: str | None = None
    to_storage_object_id: str | None = None
    quantity_delta: int
    quantity_before: int
    quantity_after: int
    moved_by: str
    reason: str | None = None
    notes: str | None = None
    timestamp: datetime


class TransferResponse(BaseModel):
    source_entry_id: str
    source_remaining: int
    source_deleted: bool
    destination_entry_id: str
    destination_quantity: int
    quantity: int


class TransferFailure(BaseModel):
    entry_id: str
    error: str
    message: str


class BulkTransferResponse(BaseModel):
    transferred_count: int
    failed_count: int
    transferred: list[TransferResponse]
    failed: list[TransferFailure]


class RemoveResponse(BaseModel):
    entry_id: str
    remaining: int
    deleted: bool


class StorageObjectContentsResponse(BaseModel):
    storage_object: StorageObjectResponse
    entries: list[EntryResponse]
    total_items: int


class ProductSummary(BaseModel):
    product_id: str
    product_type: str
    sku: str | None = None
    product_name: str | None = None
    total_quantity: int
    storage_object_codes: list[str]
    num_storage_objects: int


class InventorySummaryResponse(BaseModel):
    location_id: str | None = None
    items: list[ProductSummary]
    total_products: int
    total_quantity: int
    unresolved_entries: int


# ---------------------------------------------------------------------------
# Generic
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"
