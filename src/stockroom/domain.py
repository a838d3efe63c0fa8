"""Stockroom bounded context: product placement across physical storage.

Tracks where every product sits in the storage hierarchy
(Location → StorageType → StorageObject), in what quantity, and keeps an
append-only movement history of every quantity-affecting operation.
"""

import structlog
from protean.domain import Domain

stockroom = Domain(name="stockroom")

logger = structlog.get_logger(__name__)
