"""Ledger transitions: pure functions over copy pools.

Each transition models one custody change (shelf -> hold -> customer -> shelf,
or shelf -> damaged / lost).  A transition either returns new pools that
satisfy every invariant or raises; it never half-applies.
"""

from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import Callable

from shelf.domain.exceptions import (
    InsufficientAvailableError,
    InsufficientReservedError,
    InsufficientRentedError,
    InsufficientStockError,
)
from shelf.domain.model.inventory import InventoryItem
from shelf.domain.model.value_objects import CopyPools, Quantity


class LedgerOperation(Enum):
    RESERVE = "reserve"
    RELEASE_RESERVATION = "release_reservation"
    RENT = "rent"
    RETURN_RENTAL = "return_rental"
    MARK_DAMAGED = "mark_damaged"
    MARK_LOST = "mark_lost"
    ADD_STOCK = "add_stock"
    REMOVE_STOCK = "remove_stock"


def reserve(pools: CopyPools, qty: Quantity) -> CopyPools:
    n = qty.value
    if pools.available < n:
        raise InsufficientAvailableError(
            f"Not enough copies available for reservation "
            f"(need {n}, have {pools.available} available)",
            requested=n,
            on_hand=pools.available,
        )
    return replace(pools, available=pools.available - n, reserved=pools.reserved + n)


def release_reservation(pools: CopyPools, qty: Quantity) -> CopyPools:
    n = qty.value
    if pools.reserved < n:
        raise InsufficientReservedError(
            f"Cannot release {n} copies, only {pools.reserved} reserved",
            requested=n,
            on_hand=pools.reserved,
        )
    return replace(pools, reserved=pools.reserved - n, available=pools.available + n)


def rent(pools: CopyPools, qty: Quantity) -> CopyPools:
    n = qty.value
    if pools.reserved < n:
        raise InsufficientReservedError(
            f"Cannot rent {n} copies, only {pools.reserved} reserved",
            requested=n,
            on_hand=pools.reserved,
        )
    return replace(pools, reserved=pools.reserved - n, rented=pools.rented + n)


def return_rental(pools: CopyPools, qty: Quantity) -> CopyPools:
    n = qty.value
    if pools.rented < n:
        raise InsufficientRentedError(
            f"Cannot return {n} copies, only {pools.rented} rented",
            requested=n,
            on_hand=pools.rented,
        )
    return replace(pools, rented=pools.rented - n, available=pools.available + n)


def mark_damaged(pools: CopyPools, qty: Quantity) -> CopyPools:
    n = qty.value
    if pools.available < n:
        raise InsufficientAvailableError(
            f"Not enough available copies to mark {n} as damaged "
            f"(have {pools.available})",
            requested=n,
            on_hand=pools.available,
        )
    return replace(pools, available=pools.available - n, damaged=pools.damaged + n)


def mark_lost(pools: CopyPools, qty: Quantity) -> CopyPools:
    """Write off lost copies.

    Rented copies are consumed first (a customer never brought them back);
    only when the rented pool cannot cover the whole quantity are shelf
    copies used.  Lost copies leave ``total``.
    """
    n = qty.value
    if pools.rented >= n:
        pools = replace(pools, rented=pools.rented - n)
    elif pools.available >= n:
        pools = replace(pools, available=pools.available - n)
    else:
        raise InsufficientStockError(
            f"Not enough copies to mark {n} as lost "
            f"(rented {pools.rented}, available {pools.available})",
            requested=n,
            on_hand=max(pools.rented, pools.available),
        )
    return replace(pools, total=pools.total - n, lost=pools.lost + n)


def add_stock(pools: CopyPools, qty: Quantity) -> CopyPools:
    n = qty.value
    return replace(pools, total=pools.total + n, available=pools.available + n)


def remove_stock(pools: CopyPools, qty: Quantity) -> CopyPools:
    n = qty.value
    # total >= available always holds, so the available check covers both
    if pools.total < n or pools.available < n:
        raise InsufficientAvailableError(
            f"Cannot remove {n} copies, only {pools.available} unencumbered "
            f"on the shelf",
            requested=n,
            on_hand=pools.available,
        )
    return replace(pools, total=pools.total - n, available=pools.available - n)


TRANSITIONS: dict[LedgerOperation, Callable[[CopyPools, Quantity], CopyPools]] = {
    LedgerOperation.RESERVE: reserve,
    LedgerOperation.RELEASE_RESERVATION: release_reservation,
    LedgerOperation.RENT: rent,
    LedgerOperation.RETURN_RENTAL: return_rental,
    LedgerOperation.MARK_DAMAGED: mark_damaged,
    LedgerOperation.MARK_LOST: mark_lost,
    LedgerOperation.ADD_STOCK: add_stock,
    LedgerOperation.REMOVE_STOCK: remove_stock,
}


def apply_operation(
    item: InventoryItem,
    operation: LedgerOperation,
    quantity: int | Quantity,
) -> InventoryItem:
    """Return the snapshot of *item* after *operation*, with version advanced."""
    qty = Quantity.of(quantity)
    pools = TRANSITIONS[operation](item.pools, qty).check()
    return replace(item, pools=pools, version=item.version + 1)
