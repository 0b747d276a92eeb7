"""Application service: Delete Category use case.

Deletion is refused while the category still has subcategories or
catalog items filed under it.
"""

from __future__ import annotations

from shelf.domain.repository.catalog_link_repository import CatalogLinkRepository
from shelf.domain.repository.category_repository import CategoryRepository
from shelf.domain.service.category_hierarchy_service import CategoryHierarchyService


class DeleteCategoryHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        link_repo: CatalogLinkRepository,
    ) -> None:
        self._category_repo = category_repo
        self._link_repo = link_repo

    def handle(self, category_id: str) -> None:
        CategoryHierarchyService(self._category_repo, self._link_repo).delete(category_id)
