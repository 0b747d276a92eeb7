"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass

from shelf.domain.exceptions import InvalidQuantityError, ValidationError


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Every ledger transition moves at least one copy, so zero and negative
    values are rejected at construction time.
    """

    value: int

    def __post_init__(self) -> None:
        # bool is a subclass of int; True copies makes no sense
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidQuantityError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise InvalidQuantityError(
                f"Quantity must be positive, got {self.value}"
            )

    def __str__(self) -> str:
        return str(self.value)

    @staticmethod
    def of(value: int | Quantity) -> Quantity:
        if isinstance(value, Quantity):
            return value
        return Quantity(value)


@dataclass(frozen=True)
class CopyPools:
    """Copy counters for one catalog item.

    ``available``, ``reserved``, ``rented`` and ``damaged`` partition the
    copies on the books, so their sum is always ``total``.  ``lost`` counts
    copies written off over the item's lifetime; they have already left
    ``total``.
    """

    total: int = 0
    available: int = 0
    reserved: int = 0
    rented: int = 0
    damaged: int = 0
    lost: int = 0

    @property
    def on_books(self) -> int:
        return self.available + self.reserved + self.rented + self.damaged

    @property
    def is_conserved(self) -> bool:
        return self.total == self.on_books

    @property
    def is_non_negative(self) -> bool:
        return min(self.as_dict().values()) >= 0

    def check(self) -> CopyPools:
        """Return self if both invariants hold, raise ValidationError otherwise."""
        if not self.is_non_negative:
            raise ValidationError(f"Copy counters cannot be negative: {self.as_dict()}")
        if not self.is_conserved:
            raise ValidationError(
                f"Copy counters out of balance: total={self.total} but "
                f"available+reserved+rented+damaged={self.on_books}"
            )
        return self

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "available": self.available,
            "reserved": self.reserved,
            "rented": self.rented,
            "damaged": self.damaged,
            "lost": self.lost,
        }

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def stocked(copies: int) -> CopyPools:
        """Pools for a freshly stocked item: everything on the shelf."""
        if isinstance(copies, bool) or not isinstance(copies, int) or copies < 0:
            raise InvalidQuantityError(
                f"Initial copies must be a non-negative integer, got {copies!r}"
            )
        return CopyPools(total=copies, available=copies)
