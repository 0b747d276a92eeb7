"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.  Version
checks behave exactly like the real ones.
"""

from __future__ import annotations

import threading
from typing import Iterable

from shelf.domain.exceptions import (
    ConcurrencyConflictError,
    EntityNotFoundError,
    ValidationError,
)
from shelf.domain.model.category import CategoryNode
from shelf.domain.model.inventory import InventoryItem
from shelf.domain.repository.catalog_link_repository import CatalogLinkRepository
from shelf.domain.repository.category_repository import CategoryRepository
from shelf.domain.repository.inventory_repository import InventoryRepository


class FakeInventoryRepository(InventoryRepository):

    def __init__(self, items: list[InventoryItem] | None = None) -> None:
        self._store: dict[str, InventoryItem] = {}
        self._lock = threading.Lock()
        self.saves = 0
        for item in items or []:
            self._store[item.item_id] = item

    def get_by_item_id(self, item_id: str) -> InventoryItem | None:
        return self._store.get(item_id)

    def list_all(self) -> list[InventoryItem]:
        return list(self._store.values())

    def add(self, item: InventoryItem) -> None:
        if item.item_id in self._store:
            raise ValidationError(f"Catalog item '{item.item_id}' is already tracked")
        self._store[item.item_id] = item

    def save(self, item: InventoryItem, expected_version: int) -> None:
        with self._lock:
            stored = self._store.get(item.item_id)
            if stored is None:
                raise EntityNotFoundError(f"No inventory record for '{item.item_id}'")
            if stored.version != expected_version:
                raise ConcurrencyConflictError(
                    "version mismatch", expected=expected_version, actual=stored.version
                )
            self._store[item.item_id] = item
            self.saves += 1


class FakeCategoryRepository(CategoryRepository):

    def __init__(self) -> None:
        self._store: dict[str, CategoryNode] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def next_id(self) -> str:
        return str(self._next_id)

    def get_by_id(self, category_id: str) -> CategoryNode | None:
        return self._store.get(category_id)

    def get_by_name(self, name: str) -> CategoryNode | None:
        for node in self._store.values():
            if node.is_active and node.name.lower() == name.lower():
                return node
        return None

    def get_by_slug(self, slug: str) -> CategoryNode | None:
        for node in self._store.values():
            if node.slug == slug:
                return node
        return None

    def find_by_ids(self, category_ids: Iterable[str]) -> list[CategoryNode]:
        return [self._store[i] for i in category_ids if i in self._store]

    def list_all(self) -> list[CategoryNode]:
        return list(self._store.values())

    def add(self, node: CategoryNode) -> None:
        self.save_all([], added=[node])

    def save_all(
        self,
        changes: Iterable[tuple[CategoryNode, int]],
        added: Iterable[CategoryNode] = (),
        removed: Iterable[tuple[str, int]] = (),
    ) -> None:
        changes, added, removed = list(changes), list(added), list(removed)
        with self._lock:
            for node, expected in changes:
                self._check(node.id, expected)
            for category_id, expected in removed:
                self._check(category_id, expected)
            for node in added:
                if node.id in self._store:
                    raise ConcurrencyConflictError(
                        "id taken", expected=None, actual=self._store[node.id].version
                    )
            for node in added:
                self._store[node.id] = node
                self._next_id = max(self._next_id, int(node.id) + 1)
            for node, _ in changes:
                self._store[node.id] = node
            for category_id, _ in removed:
                del self._store[category_id]

    def tree_lock(self):
        return self._lock

    def _check(self, category_id: str, expected: int) -> None:
        stored = self._store.get(category_id)
        if stored is None:
            raise EntityNotFoundError(f"Category not found with ID: {category_id}")
        if stored.version != expected:
            raise ConcurrencyConflictError(
                "version mismatch", expected=expected, actual=stored.version
            )


class FakeCatalogLinkRepository(CatalogLinkRepository):

    def __init__(self) -> None:
        self._links: dict[str, set[str]] = {}

    def count_linked_items(self, category_id: str) -> int:
        return len(self._links.get(category_id, ()))

    def linked_items(self, category_id: str) -> list[str]:
        return sorted(self._links.get(category_id, ()))

    def link(self, category_id: str, item_id: str) -> None:
        self._links.setdefault(category_id, set()).add(item_id)

    def unlink(self, category_id: str, item_id: str) -> None:
        self._links.get(category_id, set()).discard(item_id)
