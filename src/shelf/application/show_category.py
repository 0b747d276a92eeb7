"""Application service: category queries (query side only)."""

from __future__ import annotations

from shelf.application.dto import CategoryDTO, CategoryTreeDTO
from shelf.application.mapping import category_to_dto, tree_to_dto
from shelf.domain.repository.catalog_link_repository import CatalogLinkRepository
from shelf.domain.repository.category_repository import CategoryRepository
from shelf.domain.service.category_hierarchy_service import CategoryHierarchyService


class ShowCategoryHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        link_repo: CatalogLinkRepository,
    ) -> None:
        self._svc = CategoryHierarchyService(category_repo, link_repo)

    def get(self, category_id: str) -> CategoryDTO:
        return category_to_dto(self._svc.get(category_id))

    def get_by_slug(self, slug: str) -> CategoryDTO:
        return category_to_dto(self._svc.get_by_slug(slug))

    def roots(self) -> list[CategoryDTO]:
        return [category_to_dto(n) for n in self._svc.roots()]

    def children(self, category_id: str) -> list[CategoryDTO]:
        return [category_to_dto(n) for n in self._svc.children(category_id)]

    def ancestors(self, category_id: str) -> list[CategoryDTO]:
        return [category_to_dto(n) for n in self._svc.ancestors(category_id)]

    def descendants(self, category_id: str) -> list[CategoryDTO]:
        return [category_to_dto(n) for n in self._svc.descendants(category_id)]

    def tree(self, category_id: str | None = None) -> list[CategoryTreeDTO]:
        """The full forest, or a single-element list holding one subtree."""
        if category_id is None:
            return [tree_to_dto(t) for t in self._svc.hierarchy()]
        return [tree_to_dto(self._svc.hierarchy(category_id))]

    def linked_item_count(self, category_id: str) -> int:
        return self._svc.linked_item_count(category_id)
