"""Application services: rename, move and (de)activate categories."""

from __future__ import annotations

from shelf.application.dto import CategoryDTO
from shelf.application.mapping import category_to_dto
from shelf.domain.repository.catalog_link_repository import CatalogLinkRepository
from shelf.domain.repository.category_repository import CategoryRepository
from shelf.domain.service.category_hierarchy_service import CategoryHierarchyService


class _CategoryHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        link_repo: CatalogLinkRepository,
    ) -> None:
        self._svc = CategoryHierarchyService(category_repo, link_repo)


class UpdateCategoryHandler(_CategoryHandler):

    def handle(
        self,
        category_id: str,
        name: str | None = None,
        description: str | None = None,
    ) -> CategoryDTO:
        return category_to_dto(self._svc.update(category_id, name=name, description=description))


class MoveCategoryHandler(_CategoryHandler):

    def handle(self, category_id: str, new_parent_id: str | None) -> CategoryDTO:
        """Re-parent a category; ``None`` turns it into a root."""
        return category_to_dto(self._svc.move(category_id, new_parent_id))


class ChangeCategoryStateHandler(_CategoryHandler):

    def handle(self, category_id: str, active: bool) -> CategoryDTO:
        if active:
            node = self._svc.reactivate(category_id)
        else:
            node = self._svc.deactivate(category_id)
        return category_to_dto(node)
