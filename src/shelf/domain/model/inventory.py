"""InventoryItem: copy counts and stock thresholds for one catalog item.

The record is immutable: ledger transitions in ``shelf.domain.model.ledger``
take a snapshot and return a new one with ``version`` advanced, which the
repository then compares-and-swaps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from shelf.domain.exceptions import ValidationError
from shelf.domain.model.value_objects import CopyPools


class InventoryStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DISCONTINUED = "DISCONTINUED"


DEFAULT_MINIMUM_STOCK = 1


@dataclass(frozen=True)
class InventoryItem:
    """Aggregate root for copy tracking.

    Invariants (checked by ``CopyPools.check``):
    - ``total == available + reserved + rented + damaged``
    - no counter is ever negative
    """

    item_id: str
    title: str
    pools: CopyPools = field(default_factory=CopyPools)
    minimum_stock: int = DEFAULT_MINIMUM_STOCK
    maximum_stock: int | None = None
    reorder_level: int | None = None
    status: InventoryStatus = InventoryStatus.ACTIVE
    location_code: str | None = None
    shelf_code: str | None = None
    notes: str | None = None
    version: int = 0

    # --- Derived queries ------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.status == InventoryStatus.ACTIVE

    @property
    def is_available(self) -> bool:
        return self.is_active and self.pools.available > 0

    @property
    def is_out_of_stock(self) -> bool:
        return self.is_active and self.pools.available == 0

    @property
    def is_low_stock(self) -> bool:
        return self.pools.available <= self.minimum_stock

    @property
    def needs_reorder(self) -> bool:
        return self.reorder_level is not None and self.pools.available <= self.reorder_level


def validate_thresholds(
    minimum_stock: int,
    maximum_stock: int | None,
    reorder_level: int | None,
) -> None:
    """Reject negative thresholds and a maximum below the minimum."""
    if minimum_stock < 0:
        raise ValidationError("Minimum stock cannot be negative")
    if maximum_stock is not None:
        if maximum_stock < 0:
            raise ValidationError("Maximum stock cannot be negative")
        if maximum_stock < minimum_stock:
            raise ValidationError(
                f"Maximum stock {maximum_stock} is below minimum stock {minimum_stock}"
            )
    if reorder_level is not None and reorder_level < 0:
        raise ValidationError("Reorder level cannot be negative")
