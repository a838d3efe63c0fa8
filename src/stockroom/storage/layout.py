"""Storage type layout: the grid view of a location and bulk repositioning.

Grid positions are layout hints for floor maps. Several storage types may
share a cell, and storage types without a position are listed separately.
"""

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from stockroom.errors import describe_failure
from stockroom.location.location import Location
from stockroom.storage.management import RepositionStorageType
from stockroom.storage.storage_type import StorageType

logger = structlog.get_logger(__name__)


def storage_type_grid(location_id, active_only=True) -> dict:
    """Storage types of a location ordered by row, then column."""
    current_domain.repository_for(Location).get(location_id)
    storage_types = current_domain.repository_for(StorageType).for_location(location_id, active_only=active_only)

    placed = sorted(
        (storage_type for storage_type in storage_types if storage_type.is_placed),
        key=lambda storage_type: (storage_type.row_position, storage_type.column_position),
    )
    unplaced = [storage_type for storage_type in storage_types if not storage_type.is_placed]

    return {
        "location_id": str(location_id),
        "rows": max((storage_type.row_position for storage_type in placed), default=-1) + 1,
        "columns": max((storage_type.column_position for storage_type in placed), default=-1) + 1,
        "cells": placed,
        "unplaced": unplaced,
    }


def bulk_reposition(updates) -> dict:
    """Apply each ``{storage_type_id, row_position, column_position}`` independently."""
    updated = []
    errors = []

    for update in updates:
        storage_type_id = update["storage_type_id"]
        command = RepositionStorageType(
            storage_type_id=storage_type_id,
            row_position=update.get("row_position"),
            column_position=update.get("column_position"),
        )
        try:
            current_domain.process(command, asynchronous=False)
        except (ValidationError, ObjectNotFoundError) as exc:
            logger.warning("Storage type reposition failed", storage_type_id=storage_type_id, error=type(exc).__name__)
            errors.append(
                {"storage_type_id": storage_type_id, "error": type(exc).__name__, "message": describe_failure(exc)}
            )
        else:
            updated.append(storage_type_id)

    return {
        "updated": updated,
        "errors": errors,
        "message": f"Repositioned {len(updated)} of {len(updates)} storage types",
    }
