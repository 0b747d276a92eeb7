"""JSON-file-backed implementation of InventoryRepository."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from shelf.domain.exceptions import (
    ConcurrencyConflictError,
    EntityNotFoundError,
    ValidationError,
)
from shelf.domain.model.inventory import InventoryItem, InventoryStatus
from shelf.domain.model.value_objects import CopyPools
from shelf.domain.repository.inventory_repository import InventoryRepository
from shelf.infrastructure.persistence._file_lock import lock_for, write_atomic

logger = structlog.get_logger(__name__)


class JsonInventoryRepository(InventoryRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = lock_for(file_path)
        self._ensure_file()

    # --- InventoryRepository interface ----------------------------------------

    def get_by_item_id(self, item_id: str) -> InventoryItem | None:
        raw = self._load_raw().get(item_id)
        return self._to_domain(raw) if raw is not None else None

    def list_all(self) -> list[InventoryItem]:
        return [self._to_domain(raw) for raw in self._load_raw().values()]

    def add(self, item: InventoryItem) -> None:
        with self._lock:
            records = self._load_raw()
            if item.item_id in records:
                raise ValidationError(f"Catalog item '{item.item_id}' is already tracked")
            records[item.item_id] = self._to_raw(item)
            self._persist_raw(records)

    def save(self, item: InventoryItem, expected_version: int) -> None:
        with self._lock:
            records = self._load_raw()
            stored = records.get(item.item_id)
            if stored is None:
                raise EntityNotFoundError(
                    f"No inventory record for catalog item '{item.item_id}'"
                )
            if stored["version"] != expected_version:
                logger.warning(
                    "inventory.version_conflict",
                    item_id=item.item_id,
                    expected=expected_version,
                    actual=stored["version"],
                )
                raise ConcurrencyConflictError(
                    f"Inventory for '{item.item_id}' was modified concurrently "
                    f"(expected version {expected_version}, found {stored['version']})",
                    expected=expected_version,
                    actual=stored["version"],
                )
            records[item.item_id] = self._to_raw(item)
            self._persist_raw(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: InventoryItem) -> dict:
        return {
            "item_id": item.item_id,
            "title": item.title,
            "copies": item.pools.as_dict(),
            "minimum_stock": item.minimum_stock,
            "maximum_stock": item.maximum_stock,
            "reorder_level": item.reorder_level,
            "status": item.status.value,
            "location_code": item.location_code,
            "shelf_code": item.shelf_code,
            "notes": item.notes,
            "version": item.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryItem:
        return InventoryItem(
            item_id=raw["item_id"],
            title=raw["title"],
            pools=CopyPools(**raw["copies"]),
            minimum_stock=raw.get("minimum_stock", 1),
            maximum_stock=raw.get("maximum_stock"),
            reorder_level=raw.get("reorder_level"),
            status=InventoryStatus(raw.get("status", InventoryStatus.ACTIVE.value)),
            location_code=raw.get("location_code"),
            shelf_code=raw.get("shelf_code"),
            notes=raw.get("notes"),
            version=raw.get("version", 0),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict[str, dict]:
        with self._lock:
            records = json.loads(self._file_path.read_text(encoding="utf-8"))
        return {raw["item_id"]: raw for raw in records}

    def _persist_raw(self, records: dict[str, dict]) -> None:
        write_atomic(self._file_path, json.dumps(list(records.values()), indent=2) + "\n")

    def _ensure_file(self) -> None:
        with self._lock:
            if not self._file_path.exists():
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                write_atomic(self._file_path, "[]")
