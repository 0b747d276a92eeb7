"""Application service: inventory queries."""

from __future__ import annotations

from shelf.application.dto import AvailabilityDTO, InventoryDTO, InventorySummaryDTO
from shelf.application.mapping import inventory_to_dto
from shelf.domain.exceptions import ValidationError
from shelf.domain.repository.inventory_repository import InventoryRepository
from shelf.domain.service.inventory_ledger_service import InventoryLedgerService

VIEWS = ("all", "available", "out-of-stock", "low-stock", "reorder")


class ShowInventoryHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(self, view: str = "all") -> list[InventoryDTO]:
        ledger = InventoryLedgerService(self._inventory_repo)
        if view == "all":
            items = self._inventory_repo.list_all()
        elif view == "available":
            items = ledger.available_items()
        elif view == "out-of-stock":
            items = ledger.out_of_stock_items()
        elif view == "low-stock":
            items = ledger.low_stock_items()
        elif view == "reorder":
            items = ledger.items_needing_reorder()
        else:
            raise ValidationError(f"Unknown view '{view}' (expected one of: {', '.join(VIEWS)})")
        return [inventory_to_dto(item) for item in sorted(items, key=lambda i: i.item_id)]


class ShowAvailabilityHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(self, item_id: str) -> AvailabilityDTO:
        """Availability of one catalog item, read from the ledger."""
        item = InventoryLedgerService(self._inventory_repo).get(item_id)
        return AvailabilityDTO(
            item_id=item.item_id,
            available=item.is_available,
            available_copies=item.pools.available,
            total_copies=item.pools.total,
            status=item.status.value,
        )


class InventoryReportHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(self) -> InventorySummaryDTO:
        s = InventoryLedgerService(self._inventory_repo).summary()
        return InventorySummaryDTO(
            active_items=s.active_items,
            available_items=s.available_items,
            out_of_stock_items=s.out_of_stock_items,
            low_stock_items=s.low_stock_items,
            total_copies=s.total_copies,
            available_copies=s.available_copies,
            rented_copies=s.rented_copies,
        )
