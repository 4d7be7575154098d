"""Error taxonomy shared by every Piggy Bank domain module.

Each error carries a closed :class:`ErrorKind` plus the structured payload
(entity kind, ids) the HTTP boundary needs to build a stable response.
"""

from __future__ import annotations

import enum
from typing import Any, Optional


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    SOFT_DELETED = "soft_deleted"
    ALREADY_DELETED = "already_deleted"
    PARENT_SOFT_DELETED = "parent_soft_deleted"
    NAME_CONFLICT = "name_conflict"
    VALIDATION = "validation"
    SERVICE = "service"


class EntityKind(str, enum.Enum):
    WALLET = "wallet"
    INSTRUMENT = "instrument"


class PiggyBankError(Exception):
    """Base class for domain errors."""

    kind: ErrorKind = ErrorKind.SERVICE

    def __init__(
        self,
        message: str,
        *,
        entity: Optional[EntityKind] = None,
        entity_id: Optional[str] = None,
        owner_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.entity_id = entity_id
        self.owner_id = owner_id

    def payload(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.entity is not None:
            data["entity"] = self.entity.value
        if self.entity_id is not None:
            data["entity_id"] = self.entity_id
        return data


class NotFoundError(PiggyBankError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: EntityKind, entity_id: str) -> None:
        super().__init__(
            f'{entity.value.capitalize()} with id "{entity_id}" was not found',
            entity=entity,
            entity_id=entity_id,
        )


class ForbiddenError(PiggyBankError):
    kind = ErrorKind.FORBIDDEN

    def __init__(self, entity: EntityKind, entity_id: str, owner_id: str) -> None:
        super().__init__(
            f'{entity.value.capitalize()} "{entity_id}" is not accessible for owner "{owner_id}"',
            entity=entity,
            entity_id=entity_id,
            owner_id=owner_id,
        )


class SoftDeletedError(PiggyBankError):
    kind = ErrorKind.SOFT_DELETED

    def __init__(self, entity: EntityKind, entity_id: str) -> None:
        super().__init__(
            f'{entity.value.capitalize()} with id "{entity_id}" has been soft-deleted',
            entity=entity,
            entity_id=entity_id,
        )


class AlreadyDeletedError(PiggyBankError):
    kind = ErrorKind.ALREADY_DELETED

    def __init__(self, entity: EntityKind, entity_id: str) -> None:
        super().__init__(
            f'{entity.value.capitalize()} with id "{entity_id}" is already deleted',
            entity=entity,
            entity_id=entity_id,
        )


class ParentSoftDeletedError(PiggyBankError):
    kind = ErrorKind.PARENT_SOFT_DELETED

    def __init__(self, entity: EntityKind, entity_id: str, parent_id: str) -> None:
        super().__init__(
            f'Parent wallet "{parent_id}" of {entity.value} "{entity_id}" has been soft-deleted',
            entity=entity,
            entity_id=entity_id,
        )
        self.parent_id = parent_id

    def payload(self) -> dict[str, Any]:
        data = super().payload()
        data["parent_id"] = self.parent_id
        return data


class NameConflictError(PiggyBankError):
    kind = ErrorKind.NAME_CONFLICT

    def __init__(self, entity: EntityKind, name: str, scope_id: str) -> None:
        super().__init__(
            f'{entity.value.capitalize()} "{name}" already exists in scope "{scope_id}"',
            entity=entity,
        )
        self.name = name
        self.scope_id = scope_id

    def payload(self) -> dict[str, Any]:
        data = super().payload()
        data["name"] = self.name
        return data


class ValidationError(PiggyBankError):
    kind = ErrorKind.VALIDATION


class AmountFormatError(ValidationError):
    """Raised when a decimal amount string does not match the accepted pattern."""


class AmountRangeError(ValidationError):
    """Raised when an amount falls outside the supported minor-unit range."""


class AmountTypeError(ValidationError):
    """Raised when an amount has the wrong type (e.g. a non-finite number)."""


class ServiceError(PiggyBankError):
    """Unexpected failure of the persistence layer."""

    kind = ErrorKind.SERVICE

    def __init__(self, message: str, *, cause: Optional[BaseException] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.cause = cause


__all__ = [
    "AlreadyDeletedError",
    "AmountFormatError",
    "AmountRangeError",
    "AmountTypeError",
    "EntityKind",
    "ErrorKind",
    "ForbiddenError",
    "NameConflictError",
    "NotFoundError",
    "ParentSoftDeletedError",
    "PiggyBankError",
    "ServiceError",
    "SoftDeletedError",
    "ValidationError",
]
