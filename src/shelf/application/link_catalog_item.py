"""Application service: file catalog items under categories."""

from __future__ import annotations

from shelf.domain.exceptions import EntityNotFoundError, ValidationError
from shelf.domain.repository.catalog_link_repository import CatalogLinkRepository
from shelf.domain.repository.category_repository import CategoryRepository


class LinkCatalogItemHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        link_repo: CatalogLinkRepository,
    ) -> None:
        self._category_repo = category_repo
        self._link_repo = link_repo

    def link(self, category_id: str, item_id: str) -> None:
        self._require_category(category_id)
        if not item_id or not item_id.strip():
            raise ValidationError("Catalog item ID is required")
        self._link_repo.link(category_id, item_id.strip())

    def unlink(self, category_id: str, item_id: str) -> None:
        self._require_category(category_id)
        self._link_repo.unlink(category_id, item_id.strip())

    def _require_category(self, category_id: str) -> None:
        if self._category_repo.get_by_id(category_id) is None:
            raise EntityNotFoundError(f"Category not found with ID: {category_id}")
