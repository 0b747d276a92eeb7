"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from shelf.infrastructure.config import Settings, load_settings
from shelf.infrastructure.persistence.json_catalog_link_repository import (
    JsonCatalogLinkRepository,
)
from shelf.infrastructure.persistence.json_category_repository import (
    JsonCategoryRepository,
)
from shelf.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)


def inventory_repository(settings: Settings | None = None) -> JsonInventoryRepository:
    settings = settings or load_settings()
    return JsonInventoryRepository(settings.data_dir / "inventory.json")


def category_repository(settings: Settings | None = None) -> JsonCategoryRepository:
    settings = settings or load_settings()
    return JsonCategoryRepository(settings.data_dir / "categories.json")


def catalog_link_repository(settings: Settings | None = None) -> JsonCatalogLinkRepository:
    settings = settings or load_settings()
    return JsonCatalogLinkRepository(settings.data_dir / "catalog_links.json")
