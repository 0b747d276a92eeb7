"""Application service: Adjust Inventory use case.

Runs one ledger operation (reserve, rent, return, ...) against a catalog
item.  When the caller passes the version it last saw, a newer stored
version is reported as a conflict instead of being silently overwritten.
"""

from __future__ import annotations

from shelf.application.dto import InventoryDTO
from shelf.application.mapping import inventory_to_dto
from shelf.domain.exceptions import ValidationError
from shelf.domain.model.ledger import LedgerOperation
from shelf.domain.repository.inventory_repository import InventoryRepository
from shelf.domain.service.inventory_ledger_service import InventoryLedgerService


def parse_operation(name: str) -> LedgerOperation:
    """Accept 'mark-lost', 'mark_lost' or 'MARK_LOST'."""
    try:
        return LedgerOperation(name.strip().lower().replace("-", "_"))
    except ValueError as exc:
        valid = ", ".join(op.value for op in LedgerOperation)
        raise ValidationError(f"Unknown operation '{name}' (expected one of: {valid})") from exc


class AdjustInventoryHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(
        self,
        item_id: str,
        operation: str | LedgerOperation,
        quantity: int,
        expected_version: int | None = None,
    ) -> InventoryDTO:
        if not isinstance(operation, LedgerOperation):
            operation = parse_operation(operation)
        ledger = InventoryLedgerService(self._inventory_repo)
        item = ledger.apply(item_id, operation, quantity, expected_version=expected_version)
        return inventory_to_dto(item)
