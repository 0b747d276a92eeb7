"""Domain service: Category Hierarchy.

Owns every structural change to the category forest.  Writes that touch
the shape of the tree, or the name/slug namespaces, run inside the
repository's ``tree_lock()``; inside the lock every node is re-read, the
cycle check runs against that fresh state, and all touched nodes are
committed together through ``save_all``.
"""

from __future__ import annotations

import structlog

from shelf.domain.exceptions import (
    CycleDetectedError,
    DuplicateNameError,
    EntityNotFoundError,
    HasAssociatedItemsError,
    HasChildrenError,
    SelfParentError,
    ValidationError,
)
from shelf.domain.model.category import CategoryNode, CategoryTree, slugify
from shelf.domain.repository.catalog_link_repository import CatalogLinkRepository
from shelf.domain.repository.category_repository import CategoryRepository

logger = structlog.get_logger(__name__)


def _by_name(node: CategoryNode) -> tuple[str, str]:
    return (node.name.lower(), node.id)


class CategoryHierarchyService:

    def __init__(
        self,
        category_repo: CategoryRepository,
        link_repo: CatalogLinkRepository,
    ) -> None:
        self._category_repo = category_repo
        self._link_repo = link_repo

    # --- Commands -------------------------------------------------------------

    def create(
        self,
        name: str,
        description: str | None = None,
        parent_id: str | None = None,
    ) -> CategoryNode:
        """Create a root category, or a child of *parent_id*."""
        logger.debug("category.create", name=name, parent_id=parent_id)
        name = self._clean_name(name)

        with self._category_repo.tree_lock():
            self._ensure_name_free(name)
            parent = self._get_or_raise(parent_id) if parent_id is not None else None

            node = CategoryNode(
                id=self._category_repo.next_id(),
                name=name,
                slug=self._unique_slug(slugify(name)),
                description=description,
                parent_id=parent_id,
            )
            changes = [(parent.with_child(node.id), parent.version)] if parent is not None else []
            self._category_repo.save_all(changes, added=[node])

        logger.info("category.created", category_id=node.id, slug=node.slug, parent_id=parent_id)
        return node

    def update(
        self,
        category_id: str,
        name: str | None = None,
        description: str | None = None,
    ) -> CategoryNode:
        """Rename and/or re-describe a category.

        A new name re-derives the slug; the node's own current slug does not
        count as a collision.  ``None`` leaves a field alone, while an empty
        description clears it.
        """
        logger.debug("category.update", category_id=category_id, name=name)

        with self._category_repo.tree_lock():
            node = self._get_or_raise(category_id)
            changes: dict = {}

            if name is not None:
                name = self._clean_name(name)
                if name != node.name:
                    if node.is_active:
                        self._ensure_name_free(name, exclude_id=node.id)
                    changes["name"] = name
                    changes["slug"] = self._unique_slug(slugify(name), exclude_id=node.id)
            if description is not None:
                description = description.strip() or None
                if description != node.description:
                    changes["description"] = description

            if not changes:
                return node
            updated = node.changed(**changes)
            self._category_repo.save_all([(updated, node.version)])

        logger.info("category.updated", category_id=category_id, fields=sorted(changes))
        return updated

    def move(self, category_id: str, new_parent_id: str | None) -> CategoryNode:
        """Re-parent a category; ``None`` makes it a root."""
        logger.debug("category.move", category_id=category_id, new_parent_id=new_parent_id)
        if new_parent_id is not None and new_parent_id == category_id:
            logger.warning("category.move_rejected", category_id=category_id, reason="self-parent")
            raise SelfParentError(f"Category {category_id} cannot be its own parent")

        with self._category_repo.tree_lock():
            node = self._get_or_raise(category_id)
            new_parent = None
            if new_parent_id is not None:
                new_parent = self._get_or_raise(new_parent_id)
                if self._is_ancestor_or_self(category_id, new_parent):
                    logger.warning("category.move_rejected", category_id=category_id, reason="cycle")
                    raise CycleDetectedError(
                        f"Moving category {category_id} under {new_parent_id} "
                        f"would create a cycle in the hierarchy"
                    )

            if node.parent_id == new_parent_id:
                return node

            changes = [(node.changed(parent_id=new_parent_id), node.version)]
            if node.parent_id is not None:
                old_parent = self._get_or_raise(node.parent_id)
                changes.append((old_parent.without_child(category_id), old_parent.version))
            if new_parent is not None:
                changes.append((new_parent.with_child(category_id), new_parent.version))
            self._category_repo.save_all(changes)

        logger.info(
            "category.moved",
            category_id=category_id,
            old_parent_id=node.parent_id,
            new_parent_id=new_parent_id,
        )
        return changes[0][0]

    def delete(self, category_id: str) -> None:
        """Remove a leaf category that has no catalog items filed under it."""
        logger.debug("category.delete", category_id=category_id)

        with self._category_repo.tree_lock():
            node = self._get_or_raise(category_id)
            if node.has_children:
                logger.warning("category.delete_rejected", category_id=category_id, reason="children")
                raise HasChildrenError(
                    f"Cannot delete category '{node.name}' with subcategories; "
                    f"delete or move them first"
                )
            linked = self._link_repo.count_linked_items(category_id)
            if linked:
                logger.warning("category.delete_rejected", category_id=category_id, reason="items")
                raise HasAssociatedItemsError(
                    f"Cannot delete category '{node.name}' with {linked} catalog "
                    f"item(s); move them to another category first"
                )

            changes = []
            if node.parent_id is not None:
                parent = self._get_or_raise(node.parent_id)
                changes.append((parent.without_child(category_id), parent.version))
            self._category_repo.save_all(changes, removed=[(category_id, node.version)])

        logger.info("category.deleted", category_id=category_id)

    def deactivate(self, category_id: str) -> CategoryNode:
        """Hide a category without deleting it; its name becomes reusable."""
        with self._category_repo.tree_lock():
            node = self._get_or_raise(category_id)
            if not node.is_active:
                raise ValidationError(f"Category '{node.name}' is already inactive")
            updated = node.changed(is_active=False)
            self._category_repo.save_all([(updated, node.version)])
        logger.info("category.deactivated", category_id=category_id)
        return updated

    def reactivate(self, category_id: str) -> CategoryNode:
        with self._category_repo.tree_lock():
            node = self._get_or_raise(category_id)
            if node.is_active:
                raise ValidationError(f"Category '{node.name}' is already active")
            self._ensure_name_free(node.name)
            updated = node.changed(is_active=True)
            self._category_repo.save_all([(updated, node.version)])
        logger.info("category.reactivated", category_id=category_id)
        return updated

    # --- Queries --------------------------------------------------------------

    def get(self, category_id: str) -> CategoryNode:
        return self._get_or_raise(category_id)

    def get_by_slug(self, slug: str) -> CategoryNode:
        node = self._category_repo.get_by_slug(slug)
        if node is None:
            raise EntityNotFoundError(f"Category not found with slug: {slug}")
        return node

    def roots(self) -> list[CategoryNode]:
        return sorted((n for n in self._category_repo.list_all() if n.is_root), key=_by_name)

    def children(self, category_id: str) -> list[CategoryNode]:
        node = self._get_or_raise(category_id)
        return sorted(self._category_repo.find_by_ids(node.child_ids), key=_by_name)

    def ancestors(self, category_id: str) -> list[CategoryNode]:
        """Ancestors ordered from the root down to the immediate parent."""
        node = self._get_or_raise(category_id)
        chain = self._walk_up(node)[1:]
        chain.reverse()
        return chain

    def descendants(self, category_id: str) -> list[CategoryNode]:
        """All nodes below *category_id*, depth-first pre-order."""
        return list(self.hierarchy(category_id).walk())[1:]

    def hierarchy(self, category_id: str | None = None) -> list[CategoryTree] | CategoryTree:
        """The whole forest (roots in name order) or the subtree of one node."""
        if category_id is None:
            return [self._build_tree(root, set()) for root in self.roots()]
        return self._build_tree(self._get_or_raise(category_id), set())

    def is_valid_hierarchy(self, category_id: str, new_parent_id: str | None) -> bool:
        """Would ``move(category_id, new_parent_id)`` keep the forest acyclic?"""
        self._get_or_raise(category_id)
        if new_parent_id is None:
            return True
        if new_parent_id == category_id:
            return False
        return not self._is_ancestor_or_self(category_id, self._get_or_raise(new_parent_id))

    def linked_item_count(self, category_id: str) -> int:
        self._get_or_raise(category_id)
        return self._link_repo.count_linked_items(category_id)

    # --- Internal helpers -----------------------------------------------------

    def _get_or_raise(self, category_id: str) -> CategoryNode:
        node = self._category_repo.get_by_id(category_id)
        if node is None:
            raise EntityNotFoundError(f"Category not found with ID: {category_id}")
        return node

    @staticmethod
    def _clean_name(name: str | None) -> str:
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        return name.strip()

    def _ensure_name_free(self, name: str, exclude_id: str | None = None) -> None:
        existing = self._category_repo.get_by_name(name)
        if existing is not None and existing.id != exclude_id:
            logger.warning("category.duplicate_name", name=name, existing_id=existing.id)
            raise DuplicateNameError(f"Category with name '{name}' already exists")

    def _unique_slug(self, base: str, exclude_id: str | None = None) -> str:
        slug = base
        counter = 1
        while True:
            existing = self._category_repo.get_by_slug(slug)
            if existing is None or existing.id == exclude_id:
                return slug
            slug = f"{base}-{counter}"
            counter += 1

    def _walk_up(self, node: CategoryNode) -> list[CategoryNode]:
        """*node* followed by its ancestors, nearest first."""
        chain = [node]
        seen = {node.id}
        while chain[-1].parent_id is not None:
            parent_id = chain[-1].parent_id
            if parent_id in seen:
                raise CycleDetectedError(f"Stored hierarchy contains a cycle at category {parent_id}")
            parent = self._category_repo.get_by_id(parent_id)
            if parent is None:
                raise EntityNotFoundError(f"Category not found with ID: {parent_id}")
            seen.add(parent_id)
            chain.append(parent)
        return chain

    def _is_ancestor_or_self(self, category_id: str, node: CategoryNode) -> bool:
        return any(n.id == category_id for n in self._walk_up(node))

    def _build_tree(self, node: CategoryNode, visiting: set[str]) -> CategoryTree:
        if node.id in visiting:
            raise CycleDetectedError(f"Stored hierarchy contains a cycle at category {node.id}")
        visiting.add(node.id)
        children = sorted(self._category_repo.find_by_ids(node.child_ids), key=_by_name)
        return CategoryTree(node=node, children=[self._build_tree(c, visiting) for c in children])
