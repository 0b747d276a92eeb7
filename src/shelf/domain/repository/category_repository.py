"""Abstract repository for CategoryNode records.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory)
live in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Iterable

from shelf.domain.model.category import CategoryNode


class CategoryRepository(ABC):

    @abstractmethod
    def next_id(self) -> str:
        """Generate the next unique category ID."""

    @abstractmethod
    def get_by_id(self, category_id: str) -> CategoryNode | None:
        """Return a category by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> CategoryNode | None:
        """Return the active category with this name (case-insensitive), or None."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> CategoryNode | None:
        """Return the category owning *slug*, active or not, or None."""

    @abstractmethod
    def find_by_ids(self, category_ids: Iterable[str]) -> list[CategoryNode]:
        """Return the categories that exist among *category_ids*."""

    @abstractmethod
    def list_all(self) -> list[CategoryNode]:
        """Return every category."""

    @abstractmethod
    def add(self, node: CategoryNode) -> None:
        """Persist a new category."""

    @abstractmethod
    def save_all(
        self,
        changes: Iterable[tuple[CategoryNode, int]],
        added: Iterable[CategoryNode] = (),
        removed: Iterable[tuple[str, int]] = (),
    ) -> None:
        """Persist one structural change to the tree as a single unit.

        *changes* pairs each updated snapshot with the version the caller
        read, *added* holds brand-new nodes and *removed* pairs the ids to
        delete with their expected versions.  Every version is verified, and
        every added id checked to be free, before anything is written; a
        single mismatch raises ConcurrencyConflictError and nothing is stored.
        """

    @abstractmethod
    def tree_lock(self) -> AbstractContextManager:
        """Serialization point for structural writes to the tree."""
