"""Best-effort bulk transfer.

Each listed entry moves in full through its own ``TransferStock`` command,
and therefore its own unit of work. A failing item is reported and skipped;
items already transferred stay transferred.
"""

import structlog
from protean.exceptions import (
    ExpectedVersionError,
    InvalidOperationError,
    ObjectNotFoundError,
    ValidationError,
)
from protean.utils.globals import current_domain

from stockroom.errors import describe_failure
from stockroom.ledger.placement import TransferStock

logger = structlog.get_logger(__name__)

_ITEM_FAILURES = (ValidationError, ObjectNotFoundError, InvalidOperationError, ExpectedVersionError)


def bulk_transfer(entry_ids, target_storage_object_id, moved_by, reason=None, notes=None) -> dict:
    transferred = []
    failed = []

    for entry_id in entry_ids:
        command = TransferStock(
            entry_id=entry_id,
            to_storage_object_id=target_storage_object_id,
            entire=True,
            moved_by=moved_by,
            reason=reason,
            notes=notes,
        )
        try:
            result = current_domain.process(command, asynchronous=False)
        except _ITEM_FAILURES as exc:
            logger.warning(
                "Bulk transfer item failed",
                entry_id=entry_id,
                target_storage_object_id=target_storage_object_id,
                error=type(exc).__name__,
            )
            failed.append({"entry_id": entry_id, "error": type(exc).__name__, "message": describe_failure(exc)})
        else:
            transferred.append(result)

    logger.info(
        "Bulk transfer finished",
        target_storage_object_id=target_storage_object_id,
        transferred_count=len(transferred),
        failed_count=len(failed),
    )
    return {
        "transferred_count": len(transferred),
        "failed_count": len(failed),
        "transferred": transferred,
        "failed": failed,
    }
