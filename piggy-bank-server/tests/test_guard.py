"""Tests for the ownership / soft-delete guard."""

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from piggybank.modules.common.exceptions import (
    AlreadyDeletedError,
    EntityKind,
    ForbiddenError,
    NotFoundError,
    ParentSoftDeletedError,
    ServiceError,
    SoftDeletedError,
)
from piggybank.modules.common.guard import EntityMeta, GuardMode, ensure_parent_active, guard_entity

DELETED_AT = datetime(2026, 1, 1, tzinfo=timezone.utc)


def fetcher(meta):
    async def _fetch():
        return meta

    return _fetch


class TestGuardEntity:
    async def test_returns_meta_for_owner(self):
        meta = EntityMeta(id="i1", owner_id="u1", parent_id="w1")
        assert await guard_entity(EntityKind.INSTRUMENT, "i1", "u1", fetcher(meta)) is meta

    async def test_missing_entity_is_not_found(self):
        with pytest.raises(NotFoundError) as excinfo:
            await guard_entity(EntityKind.WALLET, "w1", "u1", fetcher(None))
        assert excinfo.value.entity_id == "w1"

    async def test_soft_delete_is_checked_before_ownership(self):
        meta = EntityMeta(id="i1", owner_id="someone-else", deleted_at=DELETED_AT)
        with pytest.raises(SoftDeletedError):
            await guard_entity(EntityKind.INSTRUMENT, "i1", "u1", fetcher(meta))

    async def test_delete_mode_reports_already_deleted(self):
        meta = EntityMeta(id="i1", owner_id="someone-else", deleted_at=DELETED_AT)
        with pytest.raises(AlreadyDeletedError):
            await guard_entity(EntityKind.INSTRUMENT, "i1", "u1", fetcher(meta), mode=GuardMode.DELETE)

    async def test_foreign_owner_is_forbidden(self):
        meta = EntityMeta(id="w1", owner_id="u2")
        with pytest.raises(ForbiddenError) as excinfo:
            await guard_entity(EntityKind.WALLET, "w1", "u1", fetcher(meta))
        assert excinfo.value.owner_id == "u1"

    async def test_persistence_failure_is_wrapped(self):
        async def broken():
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        with pytest.raises(ServiceError) as excinfo:
            await guard_entity(EntityKind.WALLET, "w1", "u1", broken)
        assert isinstance(excinfo.value.cause, OperationalError)


class TestEnsureParentActive:
    async def test_active_parent_passes(self):
        parent = EntityMeta(id="w1", owner_id="u1")
        assert await ensure_parent_active(EntityKind.INSTRUMENT, "i1", "w1", fetcher(parent)) is parent

    async def test_deleted_parent_blocks_mutation(self):
        parent = EntityMeta(id="w1", owner_id="u1", deleted_at=DELETED_AT)
        with pytest.raises(ParentSoftDeletedError) as excinfo:
            await ensure_parent_active(EntityKind.INSTRUMENT, "i1", "w1", fetcher(parent))
        assert excinfo.value.payload()["parent_id"] == "w1"
