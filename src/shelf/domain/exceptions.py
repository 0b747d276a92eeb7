"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ConcurrencyConflictError(DomainException):
    """The stored version no longer matches the version the caller read.

    The caller should re-read the entity and retry.
    """

    def __init__(self, message: str, expected: int | None, actual: int) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


# ---------------------------------------------------------------------------
# Inventory ledger
# ---------------------------------------------------------------------------


class InvalidQuantityError(ValidationError):
    """A quantity argument was zero, negative or not an integer."""


class InsufficientCopiesError(ValidationError):
    """A pool does not hold enough copies for the requested transition."""

    pool = "copies"

    def __init__(self, message: str, requested: int, on_hand: int) -> None:
        super().__init__(message)
        self.requested = requested
        self.on_hand = on_hand


class InsufficientAvailableError(InsufficientCopiesError):
    pool = "available"


class InsufficientReservedError(InsufficientCopiesError):
    pool = "reserved"


class InsufficientRentedError(InsufficientCopiesError):
    pool = "rented"


class InsufficientStockError(InsufficientCopiesError):
    """Neither the rented nor the available pool covers the quantity."""

    pool = "rented or available"


# ---------------------------------------------------------------------------
# Category hierarchy
# ---------------------------------------------------------------------------


class DuplicateNameError(ValidationError):
    """An active category already uses this name."""


class HierarchyError(ValidationError):
    """A parent assignment would break the category forest."""


class SelfParentError(HierarchyError):
    pass


class CycleDetectedError(HierarchyError):
    pass


class DeleteRefusedError(ValidationError):
    """A category cannot be deleted in its current state."""


class HasChildrenError(DeleteRefusedError):
    pass


class HasAssociatedItemsError(DeleteRefusedError):
    pass
