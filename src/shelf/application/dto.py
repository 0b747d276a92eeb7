"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class InventoryDTO:
    """Output: copy counts and flags for one catalog item."""

    item_id: str
    title: str
    status: str
    total: int
    available: int
    reserved: int
    rented: int
    damaged: int
    lost: int
    minimum_stock: int
    maximum_stock: int | None
    reorder_level: int | None
    low_stock: bool
    needs_reorder: bool
    version: int


@dataclass(frozen=True)
class AvailabilityDTO:
    item_id: str
    available: bool
    available_copies: int
    total_copies: int
    status: str


@dataclass(frozen=True)
class InventorySummaryDTO:
    active_items: int
    available_items: int
    out_of_stock_items: int
    low_stock_items: int
    total_copies: int
    available_copies: int
    rented_copies: int


@dataclass(frozen=True)
class CategoryDTO:
    """Output: a single category as displayed to the user."""

    id: str
    name: str
    slug: str
    description: str | None
    parent_id: str | None
    child_count: int
    is_active: bool
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class CategoryTreeDTO:
    category: CategoryDTO
    children: list[CategoryTreeDTO] = field(default_factory=list)
