"""Application service: Create Category use case."""

from __future__ import annotations

from shelf.application.dto import CategoryDTO
from shelf.application.mapping import category_to_dto
from shelf.domain.repository.catalog_link_repository import CatalogLinkRepository
from shelf.domain.repository.category_repository import CategoryRepository
from shelf.domain.service.category_hierarchy_service import CategoryHierarchyService


class CreateCategoryHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        link_repo: CatalogLinkRepository,
    ) -> None:
        self._category_repo = category_repo
        self._link_repo = link_repo

    def handle(
        self,
        name: str,
        description: str | None = None,
        parent_id: str | None = None,
    ) -> CategoryDTO:
        svc = CategoryHierarchyService(self._category_repo, self._link_repo)
        return category_to_dto(svc.create(name, description=description, parent_id=parent_id))
