"""Cross-cutting domain helpers: error taxonomy and ownership guard."""

from .exceptions import (
    AlreadyDeletedError,
    AmountFormatError,
    AmountRangeError,
    AmountTypeError,
    EntityKind,
    ErrorKind,
    ForbiddenError,
    NameConflictError,
    NotFoundError,
    ParentSoftDeletedError,
    PiggyBankError,
    ServiceError,
    SoftDeletedError,
    ValidationError,
)
from .guard import EntityMeta, GuardMode, ensure_parent_active, guard_entity

__all__ = [
    "AlreadyDeletedError",
    "AmountFormatError",
    "AmountRangeError",
    "AmountTypeError",
    "EntityKind",
    "EntityMeta",
    "ErrorKind",
    "ForbiddenError",
    "GuardMode",
    "NameConflictError",
    "NotFoundError",
    "ParentSoftDeletedError",
    "PiggyBankError",
    "ServiceError",
    "SoftDeletedError",
    "ValidationError",
    "ensure_parent_active",
    "guard_entity",
]
