"""Domain service: Inventory Ledger.

Every mutation is a single read-check-write against one InventoryItem:
load the snapshot, compute the next snapshot with a pure transition, then
ask the repository to compare-and-swap on the version that was read.  A
concurrent writer that got there first turns the save into a
ConcurrencyConflictError; the service surfaces it and never retries.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable

import structlog

from shelf.domain.exceptions import (
    ConcurrencyConflictError,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)
from shelf.domain.model.inventory import (
    DEFAULT_MINIMUM_STOCK,
    InventoryItem,
    InventoryStatus,
    validate_thresholds,
)
from shelf.domain.model.ledger import LedgerOperation, apply_operation
from shelf.domain.model.value_objects import CopyPools
from shelf.domain.repository.inventory_repository import InventoryRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class InventorySummary:
    active_items: int
    available_items: int
    out_of_stock_items: int
    low_stock_items: int
    total_copies: int
    available_copies: int
    rented_copies: int


class InventoryLedgerService:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    # --- Lifecycle ------------------------------------------------------------

    def start_tracking(
        self,
        item_id: str,
        title: str,
        initial_copies: int = 0,
        minimum_stock: int = DEFAULT_MINIMUM_STOCK,
        maximum_stock: int | None = None,
        reorder_level: int | None = None,
        location_code: str | None = None,
        shelf_code: str | None = None,
        notes: str | None = None,
    ) -> InventoryItem:
        """Begin tracking copies of a catalog item.

        All initial copies land on the shelf.  A catalog item is tracked at
        most once.
        """
        logger.debug("inventory.start_tracking", item_id=item_id, copies=initial_copies)
        if not item_id or not item_id.strip():
            raise ValidationError("Catalog item ID is required")
        if not title or not title.strip():
            raise ValidationError("Title is required")
        validate_thresholds(minimum_stock, maximum_stock, reorder_level)
        if self._inventory_repo.get_by_item_id(item_id) is not None:
            raise ValidationError(f"Catalog item '{item_id}' is already tracked")

        item = InventoryItem(
            item_id=item_id.strip(),
            title=title.strip(),
            pools=CopyPools.stocked(initial_copies),
            minimum_stock=minimum_stock,
            maximum_stock=maximum_stock,
            reorder_level=reorder_level,
            location_code=location_code,
            shelf_code=shelf_code,
            notes=notes,
        )
        self._inventory_repo.add(item)
        logger.info("inventory.tracked", item_id=item.item_id, total=item.pools.total)
        return item

    def set_status(
        self,
        item_id: str,
        status: InventoryStatus,
        expected_version: int | None = None,
    ) -> InventoryItem:
        """Soft (de)activation; copy counts are untouched."""
        return self._mutate(
            item_id,
            expected_version,
            lambda item: replace(item, status=status, version=item.version + 1),
            action="set_status",
            status=status.value,
        )

    def update_thresholds(
        self,
        item_id: str,
        minimum_stock: int,
        maximum_stock: int | None = None,
        reorder_level: int | None = None,
        expected_version: int | None = None,
    ) -> InventoryItem:
        validate_thresholds(minimum_stock, maximum_stock, reorder_level)
        return self._mutate(
            item_id,
            expected_version,
            lambda item: replace(
                item,
                minimum_stock=minimum_stock,
                maximum_stock=maximum_stock,
                reorder_level=reorder_level,
                version=item.version + 1,
            ),
            action="update_thresholds",
        )

    # --- Pool transitions -----------------------------------------------------

    def apply(
        self,
        item_id: str,
        operation: LedgerOperation,
        quantity: int,
        expected_version: int | None = None,
    ) -> InventoryItem:
        """Run one ledger operation and commit it against the version read."""
        return self._mutate(
            item_id,
            expected_version,
            lambda item: apply_operation(item, operation, quantity),
            action=operation.value,
            quantity=quantity,
        )

    def reserve(self, item_id: str, quantity: int, expected_version: int | None = None) -> InventoryItem:
        return self.apply(item_id, LedgerOperation.RESERVE, quantity, expected_version)

    def release_reservation(self, item_id: str, quantity: int, expected_version: int | None = None) -> InventoryItem:
        return self.apply(item_id, LedgerOperation.RELEASE_RESERVATION, quantity, expected_version)

    def rent(self, item_id: str, quantity: int, expected_version: int | None = None) -> InventoryItem:
        return self.apply(item_id, LedgerOperation.RENT, quantity, expected_version)

    def return_rental(self, item_id: str, quantity: int, expected_version: int | None = None) -> InventoryItem:
        return self.apply(item_id, LedgerOperation.RETURN_RENTAL, quantity, expected_version)

    def mark_damaged(self, item_id: str, quantity: int, expected_version: int | None = None) -> InventoryItem:
        return self.apply(item_id, LedgerOperation.MARK_DAMAGED, quantity, expected_version)

    def mark_lost(self, item_id: str, quantity: int, expected_version: int | None = None) -> InventoryItem:
        return self.apply(item_id, LedgerOperation.MARK_LOST, quantity, expected_version)

    def add_stock(self, item_id: str, quantity: int, expected_version: int | None = None) -> InventoryItem:
        return self.apply(item_id, LedgerOperation.ADD_STOCK, quantity, expected_version)

    def remove_stock(self, item_id: str, quantity: int, expected_version: int | None = None) -> InventoryItem:
        return self.apply(item_id, LedgerOperation.REMOVE_STOCK, quantity, expected_version)

    # --- Queries --------------------------------------------------------------

    def get(self, item_id: str) -> InventoryItem:
        item = self._inventory_repo.get_by_item_id(item_id)
        if item is None:
            raise EntityNotFoundError(f"No inventory record for catalog item '{item_id}'")
        return item

    def low_stock_items(self) -> list[InventoryItem]:
        return [i for i in self._inventory_repo.list_all() if i.is_low_stock]

    def items_needing_reorder(self) -> list[InventoryItem]:
        return [i for i in self._inventory_repo.list_all() if i.needs_reorder]

    def available_items(self) -> list[InventoryItem]:
        return [i for i in self._inventory_repo.list_all() if i.is_available]

    def out_of_stock_items(self) -> list[InventoryItem]:
        return [i for i in self._inventory_repo.list_all() if i.is_out_of_stock]

    def summary(self) -> InventorySummary:
        items = self._inventory_repo.list_all()
        active = [i for i in items if i.is_active]
        return InventorySummary(
            active_items=len(active),
            available_items=sum(1 for i in active if i.is_available),
            out_of_stock_items=sum(1 for i in active if i.is_out_of_stock),
            low_stock_items=sum(1 for i in items if i.is_low_stock),
            total_copies=sum(i.pools.total for i in active),
            available_copies=sum(i.pools.available for i in active),
            rented_copies=sum(i.pools.rented for i in active),
        )

    # --- Internal helpers -----------------------------------------------------

    def _mutate(
        self,
        item_id: str,
        expected_version: int | None,
        change: Callable[[InventoryItem], InventoryItem],
        **log_context,
    ) -> InventoryItem:
        log = logger.bind(item_id=item_id, **log_context)
        log.debug("inventory.mutate")

        current = self.get(item_id)
        if expected_version is not None and expected_version != current.version:
            log.warning("inventory.stale_version", expected=expected_version, actual=current.version)
            raise ConcurrencyConflictError(
                f"Inventory for '{item_id}' changed since it was read "
                f"(expected version {expected_version}, found {current.version})",
                expected=expected_version,
                actual=current.version,
            )

        try:
            updated = change(current)
        except DomainException as exc:
            log.warning("inventory.rejected", reason=str(exc))
            raise

        self._inventory_repo.save(updated, expected_version=current.version)
        log.info("inventory.committed", version=updated.version, **updated.pools.as_dict())
        return updated
