"""Abstract repository for InventoryItem aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shelf.domain.model.inventory import InventoryItem


class InventoryRepository(ABC):

    @abstractmethod
    def get_by_item_id(self, item_id: str) -> InventoryItem | None:
        """Return the inventory record for a catalog item, or None."""

    @abstractmethod
    def list_all(self) -> list[InventoryItem]:
        """Return every inventory record."""

    @abstractmethod
    def add(self, item: InventoryItem) -> None:
        """Persist a new record.

        Raises ValidationError if the catalog item is already tracked.
        """

    @abstractmethod
    def save(self, item: InventoryItem, expected_version: int) -> None:
        """Replace the stored record if its version is still *expected_version*.

        The compare and the write happen atomically.  Raises
        ConcurrencyConflictError (storing nothing) on a version mismatch and
        EntityNotFoundError if the record does not exist.
        """
