"""Application service: inventory status and threshold maintenance."""

from __future__ import annotations

from shelf.application.dto import InventoryDTO
from shelf.application.mapping import inventory_to_dto
from shelf.domain.exceptions import ValidationError
from shelf.domain.model.inventory import InventoryStatus
from shelf.domain.repository.inventory_repository import InventoryRepository
from shelf.domain.service.inventory_ledger_service import InventoryLedgerService


class SetInventoryStatusHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(self, item_id: str, status: str) -> InventoryDTO:
        """Activate, deactivate or discontinue a tracked item."""
        try:
            new_status = InventoryStatus(status.strip().upper())
        except ValueError as exc:
            raise ValidationError(f"Unknown inventory status '{status}'") from exc

        ledger = InventoryLedgerService(self._inventory_repo)
        return inventory_to_dto(ledger.set_status(item_id, new_status))


class UpdateThresholdsHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(
        self,
        item_id: str,
        minimum_stock: int,
        maximum_stock: int | None = None,
        reorder_level: int | None = None,
    ) -> InventoryDTO:
        ledger = InventoryLedgerService(self._inventory_repo)
        item = ledger.update_thresholds(
            item_id,
            minimum_stock=minimum_stock,
            maximum_stock=maximum_stock,
            reorder_level=reorder_level,
        )
        return inventory_to_dto(item)
