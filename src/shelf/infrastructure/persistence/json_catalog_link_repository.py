"""JSON-file-backed implementation of CatalogLinkRepository.

The file maps each category ID to the sorted list of catalog item IDs
filed under it.
"""

from __future__ import annotations

import json
from pathlib import Path

from shelf.domain.repository.catalog_link_repository import CatalogLinkRepository
from shelf.infrastructure.persistence._file_lock import lock_for, write_atomic


class JsonCatalogLinkRepository(CatalogLinkRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = lock_for(file_path)
        self._ensure_file()

    def count_linked_items(self, category_id: str) -> int:
        return len(self.linked_items(category_id))

    def linked_items(self, category_id: str) -> list[str]:
        return list(self._load().get(category_id, []))

    def link(self, category_id: str, item_id: str) -> None:
        with self._lock:
            links = self._load()
            items = set(links.get(category_id, []))
            items.add(item_id)
            links[category_id] = sorted(items)
            self._persist(links)

    def unlink(self, category_id: str, item_id: str) -> None:
        with self._lock:
            links = self._load()
            items = set(links.get(category_id, []))
            items.discard(item_id)
            if items:
                links[category_id] = sorted(items)
            else:
                links.pop(category_id, None)
            self._persist(links)

    # --- File helpers ---------------------------------------------------------

    def _load(self) -> dict[str, list[str]]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist(self, links: dict[str, list[str]]) -> None:
        write_atomic(self._file_path, json.dumps(links, indent=2, sort_keys=True) + "\n")

    def _ensure_file(self) -> None:
        with self._lock:
            if not self._file_path.exists():
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                write_atomic(self._file_path, "{}")
