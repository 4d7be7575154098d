"""SQLAlchemy implementation for wallet domain"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from piggybank.db.models import Instrument as InstrumentModel, Wallet as WalletModel, as_utc, utcnow
from piggybank.modules.common.exceptions import EntityKind, NameConflictError
from piggybank.modules.common.guard import EntityMeta
from piggybank.modules.common.models import SortOrder
from piggybank.modules.common.persistence import is_unique_violation
from piggybank.modules.wallets.models import Wallet, WalletDeleted, WalletSortField
from piggybank.modules.wallets.repository import WalletRepository

_SORT_COLUMNS = {
    WalletSortField.NAME: WalletModel.name,
    WalletSortField.CREATED_AT: WalletModel.created_at,
    WalletSortField.UPDATED_AT: WalletModel.updated_at,
}


class SqlWalletRepository(WalletRepository):
    """Wallet repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_meta(self, wallet_id: str) -> EntityMeta | None:
        stmt = select(WalletModel.id, WalletModel.owner_id, WalletModel.deleted_at).where(
            WalletModel.id == wallet_id
        )
        row = (await self._session.execute(stmt)).one_or_none()
        if row is None:
            return None
        return EntityMeta(id=row.id, owner_id=row.owner_id, deleted_at=row.deleted_at)

    async def get_wallet(self, wallet_id: str) -> Wallet | None:
        stmt = (
            select(WalletModel)
            .where(WalletModel.id == wallet_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def find_active_by_name(
        self,
        owner_id: str,
        name: str,
        *,
        case_insensitive: bool = False,
        exclude_id: Optional[str] = None,
    ) -> str | None:
        if case_insensitive:
            name_clause = func.lower(WalletModel.name) == func.lower(name)
        else:
            name_clause = WalletModel.name == name
        stmt = select(WalletModel.id).where(
            WalletModel.owner_id == owner_id,
            WalletModel.deleted_at.is_(None),
            name_clause,
        )
        if exclude_id is not None:
            stmt = stmt.where(WalletModel.id != exclude_id)
        result = await self._session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def list_active(self, owner_id: str, sort: WalletSortField, order: SortOrder) -> Sequence[Wallet]:
        column = _SORT_COLUMNS[sort]
        ordering = column.asc() if order is SortOrder.ASC else column.desc()
        stmt = (
            select(WalletModel)
            .where(WalletModel.owner_id == owner_id, WalletModel.deleted_at.is_(None))
            .order_by(ordering, WalletModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def create_wallet(self, *, owner_id: str, name: str, description: Optional[str]) -> Wallet:
        model = WalletModel(owner_id=owner_id, name=name, description=description)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            if is_unique_violation(exc):
                raise NameConflictError(EntityKind.WALLET, name, owner_id) from exc
            raise
        await self._session.refresh(model)
        return self._to_domain(model)

    async def update_wallet(self, wallet_id: str, owner_id: str, values: dict[str, Any]) -> Wallet | None:
        stmt = (
            update(WalletModel)
            .where(
                WalletModel.id == wallet_id,
                WalletModel.owner_id == owner_id,
                WalletModel.deleted_at.is_(None),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as exc:
            await self._session.rollback()
            if is_unique_violation(exc):
                raise NameConflictError(EntityKind.WALLET, values.get("name", ""), owner_id) from exc
            raise
        if result.rowcount == 0:
            return None
        return await self.get_wallet(wallet_id)

    async def soft_delete(self, wallet_id: str, owner_id: str, deleted_at: datetime) -> WalletDeleted | None:
        stmt = (
            update(WalletModel)
            .where(
                WalletModel.id == wallet_id,
                WalletModel.owner_id == owner_id,
                WalletModel.deleted_at.is_(None),
            )
            .values(deleted_at=deleted_at)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            return None

        # instruments inherit the wallet's deletion timestamp
        cascade = (
            update(InstrumentModel)
            .where(InstrumentModel.wallet_id == wallet_id, InstrumentModel.deleted_at.is_(None))
            .values(deleted_at=deleted_at)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(cascade)
        return WalletDeleted(id=wallet_id, deleted_at=deleted_at)

    async def touch(self, wallet_id: str) -> None:
        stmt = (
            update(WalletModel)
            .where(WalletModel.id == wallet_id)
            .values(updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    @staticmethod
    def _to_domain(model: WalletModel | None) -> Wallet | None:
        if model is None:
            return None
        return Wallet(
            id=str(model.id),
            owner_id=model.owner_id,
            name=model.name,
            description=model.description,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            deleted_at=as_utc(model.deleted_at),
        )
