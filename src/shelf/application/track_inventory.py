"""Application service: Track Inventory use case."""

from __future__ import annotations

from shelf.application.dto import InventoryDTO
from shelf.application.mapping import inventory_to_dto
from shelf.domain.repository.inventory_repository import InventoryRepository
from shelf.domain.service.inventory_ledger_service import InventoryLedgerService


class TrackInventoryHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(
        self,
        item_id: str,
        title: str,
        copies: int = 0,
        minimum_stock: int = 1,
        maximum_stock: int | None = None,
        reorder_level: int | None = None,
        location_code: str | None = None,
        shelf_code: str | None = None,
    ) -> InventoryDTO:
        """Start tracking copies of a catalog item."""
        ledger = InventoryLedgerService(self._inventory_repo)
        item = ledger.start_tracking(
            item_id=item_id,
            title=title,
            initial_copies=copies,
            minimum_stock=minimum_stock,
            maximum_stock=maximum_stock,
            reorder_level=reorder_level,
            location_code=location_code,
            shelf_code=shelf_code,
        )
        return inventory_to_dto(item)
