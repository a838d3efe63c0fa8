"""Ledger-specific failure kinds.

Missing records surface as Protean's ``ObjectNotFoundError`` and malformed
input as ``ValidationError``. The classes below narrow those down so the API
layer can report distinct kinds without parsing messages.
"""

from protean.exceptions import ValidationError


class InvalidQuantityError(ValidationError):
    """A quantity was negative, or zero where a positive amount is required."""


class InsufficientStockError(ValidationError):
    """More units were requested than the entry holds."""


def invalid_quantity(quantity, field="quantity", allow_zero=False):
    qualifier = "non-negative" if allow_zero else "positive"
    return InvalidQuantityError({field: [f"Quantity must be {qualifier}, got {quantity}"]})


def insufficient_stock(available, requested):
    return InsufficientStockError(
        {"quantity": [f"Insufficient stock: {available} available, {requested} requested"]}
    )


def describe_failure(exc):
    """One-line, human-readable text for a domain exception."""
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return "; ".join(
            f"{field}: {', '.join(str(m) for m in errors) if isinstance(errors, list) else errors}"
            for field, errors in messages.items()
        )
    return str(exc)
