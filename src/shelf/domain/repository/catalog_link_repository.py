"""Abstract repository for category <-> catalog item links.

Links are queried explicitly; a category never carries a populated
collection of its catalog items.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class CatalogLinkRepository(ABC):

    @abstractmethod
    def count_linked_items(self, category_id: str) -> int:
        """Return how many catalog items are filed under a category."""

    @abstractmethod
    def linked_items(self, category_id: str) -> list[str]:
        """Return the catalog item IDs filed under a category."""

    @abstractmethod
    def link(self, category_id: str, item_id: str) -> None:
        """File a catalog item under a category (idempotent)."""

    @abstractmethod
    def unlink(self, category_id: str, item_id: str) -> None:
        """Remove a catalog item from a category (idempotent)."""
