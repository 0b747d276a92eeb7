"""Entity -> DTO mapping shared by the handlers."""

from __future__ import annotations

from shelf.application.dto import CategoryDTO, CategoryTreeDTO, InventoryDTO
from shelf.domain.model.category import CategoryNode, CategoryTree
from shelf.domain.model.inventory import InventoryItem

_TIMESTAMP = "%Y-%m-%d %H:%M UTC"


def inventory_to_dto(item: InventoryItem) -> InventoryDTO:
    pools = item.pools
    return InventoryDTO(
        item_id=item.item_id,
        title=item.title,
        status=item.status.value,
        total=pools.total,
        available=pools.available,
        reserved=pools.reserved,
        rented=pools.rented,
        damaged=pools.damaged,
        lost=pools.lost,
        minimum_stock=item.minimum_stock,
        maximum_stock=item.maximum_stock,
        reorder_level=item.reorder_level,
        low_stock=item.is_low_stock,
        needs_reorder=item.needs_reorder,
        version=item.version,
    )


def category_to_dto(node: CategoryNode) -> CategoryDTO:
    return CategoryDTO(
        id=node.id,
        name=node.name,
        slug=node.slug,
        description=node.description,
        parent_id=node.parent_id,
        child_count=len(node.child_ids),
        is_active=node.is_active,
        created_at=node.created_at.strftime(_TIMESTAMP),
        updated_at=node.updated_at.strftime(_TIMESTAMP),
    )


def tree_to_dto(tree: CategoryTree) -> CategoryTreeDTO:
    return CategoryTreeDTO(
        category=category_to_dto(tree.node),
        children=[tree_to_dto(child) for child in tree.children],
    )
