"""JSON-file-backed implementation of CategoryRepository."""

from __future__ import annotations

import json
from contextlib import AbstractContextManager
from datetime import datetime
from pathlib import Path
from typing import Iterable

import structlog

from shelf.domain.exceptions import ConcurrencyConflictError, EntityNotFoundError
from shelf.domain.model.category import CategoryNode
from shelf.domain.repository.category_repository import CategoryRepository
from shelf.infrastructure.persistence._file_lock import lock_for, write_atomic

logger = structlog.get_logger(__name__)


class JsonCategoryRepository(CategoryRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = lock_for(file_path)
        self._ensure_file()

    # --- CategoryRepository interface -----------------------------------------

    def next_id(self) -> str:
        nodes = self._load()
        if not nodes:
            return "1"
        return str(max(int(node_id) for node_id in nodes) + 1)

    def get_by_id(self, category_id: str) -> CategoryNode | None:
        return self._load().get(category_id)

    def get_by_name(self, name: str) -> CategoryNode | None:
        for node in self._load().values():
            if node.is_active and node.name.lower() == name.lower():
                return node
        return None

    def get_by_slug(self, slug: str) -> CategoryNode | None:
        for node in self._load().values():
            if node.slug == slug:
                return node
        return None

    def find_by_ids(self, category_ids: Iterable[str]) -> list[CategoryNode]:
        nodes = self._load()
        return [nodes[i] for i in category_ids if i in nodes]

    def list_all(self) -> list[CategoryNode]:
        return list(self._load().values())

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
            nodes = self._load()
            for node, expected_version in changes:
                self._check_version(nodes, node.id, expected_version)
            for category_id, expected_version in removed:
                self._check_version(nodes, category_id, expected_version)
            for node in added:
                if node.id in nodes:
                    logger.warning("category.id_taken", category_id=node.id)
                    raise ConcurrencyConflictError(
                        f"Category ID {node.id} was taken concurrently",
                        expected=None,
                        actual=nodes[node.id].version,
                    )

            for node in added:
                nodes[node.id] = node
            for node, _ in changes:
                nodes[node.id] = node
            for category_id, _ in removed:
                del nodes[category_id]
            self._persist(nodes)

    def tree_lock(self) -> AbstractContextManager:
        return self._lock

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _check_version(nodes: dict[str, CategoryNode], category_id: str, expected: int) -> None:
        stored = nodes.get(category_id)
        if stored is None:
            raise EntityNotFoundError(f"Category not found with ID: {category_id}")
        if stored.version != expected:
            logger.warning(
                "category.version_conflict",
                category_id=category_id,
                expected=expected,
                actual=stored.version,
            )
            raise ConcurrencyConflictError(
                f"Category {category_id} was modified concurrently "
                f"(expected version {expected}, found {stored.version})",
                expected=expected,
                actual=stored.version,
            )

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, CategoryNode]:
        with self._lock:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return {
            item["id"]: CategoryNode(
                id=item["id"],
                name=item["name"],
                slug=item["slug"],
                description=item.get("description"),
                parent_id=item.get("parent_id"),
                child_ids=frozenset(item.get("child_ids", [])),
                is_active=item.get("is_active", True),
                version=item.get("version", 0),
                created_at=datetime.fromisoformat(item["created_at"]),
                updated_at=datetime.fromisoformat(item["updated_at"]),
            )
            for item in raw
        }

    def _persist(self, nodes: dict[str, CategoryNode]) -> None:
        raw = [
            {
                "id": n.id,
                "name": n.name,
                "slug": n.slug,
                "description": n.description,
                "parent_id": n.parent_id,
                "child_ids": sorted(n.child_ids),
                "is_active": n.is_active,
                "version": n.version,
                "created_at": n.created_at.isoformat(),
                "updated_at": n.updated_at.isoformat(),
            }
            for n in nodes.values()
        ]
        write_atomic(self._file_path, json.dumps(raw, indent=2) + "\n")

    def _ensure_file(self) -> None:
        with self._lock:
            if not self._file_path.exists():
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                write_atomic(self._file_path, "[]")
