"""Ownership and soft-delete guard shared by wallet and instrument use cases.

Every entity operation runs the same fixed sequence before touching data:

1. load the entity's minimal metadata,
2. missing row -> :class:`NotFoundError`,
3. ``deleted_at`` set -> :class:`SoftDeletedError` (or
   :class:`AlreadyDeletedError` on delete paths),
4. owner mismatch -> :class:`ForbiddenError`.

Instrument mutations additionally verify the parent wallet with
:func:`ensure_parent_active`.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .exceptions import (
    AlreadyDeletedError,
    EntityKind,
    ForbiddenError,
    NotFoundError,
    ParentSoftDeletedError,
    SoftDeletedError,
)
from .persistence import persistence_errors

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class EntityMeta:
    id: str
    owner_id: str
    deleted_at: Optional[datetime] = None
    parent_id: Optional[str] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class GuardMode(enum.Enum):
    ACCESS = "access"
    DELETE = "delete"


MetaFetcher = Callable[[], Awaitable[Optional[EntityMeta]]]


async def guard_entity(
    kind: EntityKind,
    entity_id: str,
    owner_id: str,
    fetch: MetaFetcher,
    *,
    mode: GuardMode = GuardMode.ACCESS,
) -> EntityMeta:
    with persistence_errors(f"Failed to load {kind.value} metadata", entity=kind, entity_id=entity_id):
        meta = await fetch()

    if meta is None:
        raise NotFoundError(kind, entity_id)

    if meta.is_deleted:
        if mode is GuardMode.DELETE:
            raise AlreadyDeletedError(kind, entity_id)
        raise SoftDeletedError(kind, entity_id)

    if meta.owner_id != owner_id:
        logger.warning("Owner %s denied access to %s %s", owner_id, kind.value, entity_id)
        raise ForbiddenError(kind, entity_id, owner_id)

    return meta


async def ensure_parent_active(
    kind: EntityKind,
    entity_id: str,
    parent_id: str,
    fetch: MetaFetcher,
) -> EntityMeta:
    with persistence_errors("Failed to verify parent wallet", entity=kind, entity_id=entity_id):
        parent = await fetch()

    if parent is None or parent.is_deleted:
        raise ParentSoftDeletedError(kind, entity_id, parent_id)
    return parent


__all__ = [
    "EntityMeta",
    "GuardMode",
    "MetaFetcher",
    "ensure_parent_active",
    "guard_entity",
]
