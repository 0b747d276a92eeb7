"""CategoryNode: a named node in the category forest.

Nodes reference each other by id only: ``parent_id`` points up,
``child_ids`` points down, and the hierarchy service keeps the two in step.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

_STRIP = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

FALLBACK_SLUG = "category"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def slugify(name: str) -> str:
    """Derive a URL-safe key from a category name.

    >>> slugify("  Science  Fiction & Fantasy! ")
    'science-fiction-fantasy'
    """
    slug = _STRIP.sub("", name.lower())
    slug = _WHITESPACE.sub("-", slug.strip())
    slug = _HYPHENS.sub("-", slug).strip("-")
    return slug or FALLBACK_SLUG


@dataclass(frozen=True)
class CategoryNode:
    id: str
    name: str
    slug: str
    description: str | None = None
    parent_id: str | None = None
    child_ids: frozenset[str] = frozenset()
    is_active: bool = True
    version: int = 0
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def has_children(self) -> bool:
        return bool(self.child_ids)

    def changed(self, **changes) -> CategoryNode:
        """Copy with *changes* applied, version bumped and timestamp refreshed."""
        return replace(self, **changes, version=self.version + 1, updated_at=_now())

    def with_child(self, child_id: str) -> CategoryNode:
        return self.changed(child_ids=self.child_ids | {child_id})

    def without_child(self, child_id: str) -> CategoryNode:
        return self.changed(child_ids=self.child_ids - {child_id})


@dataclass(frozen=True)
class CategoryTree:
    """A node together with its materialized subtree."""

    node: CategoryNode
    children: list[CategoryTree] = field(default_factory=list)

    def walk(self):
        """Yield nodes of the subtree in pre-order."""
        yield self.node
        for child in self.children:
            yield from child.walk()
