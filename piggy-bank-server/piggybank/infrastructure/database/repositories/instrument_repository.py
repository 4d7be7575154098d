"""SQLAlchemy implementation of the instrument repository."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from piggybank.db.models import Instrument as InstrumentModel, as_utc
from piggybank.modules.common.exceptions import EntityKind, NameConflictError
from piggybank.modules.common.guard import EntityMeta
from piggybank.modules.common.models import SortOrder
from piggybank.modules.common.persistence import is_unique_violation
from piggybank.modules.instruments.models import (
    Instrument,
    InstrumentDeleted,
    InstrumentSortField,
    InstrumentType,
)
from piggybank.modules.instruments.repository import InstrumentRepository

_SORT_COLUMNS = {
    InstrumentSortField.NAME: InstrumentModel.name,
    InstrumentSortField.UPDATED_AT: InstrumentModel.updated_at,
    InstrumentSortField.TYPE: InstrumentModel.type,
    InstrumentSortField.CURRENT_VALUE: InstrumentModel.current_value_grosze,
}


class SqlInstrumentRepository(InstrumentRepository):
    """Instrument repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_meta(self, instrument_id: str) -> EntityMeta | None:
        stmt = select(
            InstrumentModel.id,
            InstrumentModel.owner_id,
            InstrumentModel.deleted_at,
            InstrumentModel.wallet_id,
        ).where(InstrumentModel.id == instrument_id)
        row = (await self._session.execute(stmt)).one_or_none()
        if row is None:
            return None
        return EntityMeta(
            id=row.id,
            owner_id=row.owner_id,
            deleted_at=row.deleted_at,
            parent_id=row.wallet_id,
        )

    async def get_instrument(self, instrument_id: str) -> Instrument | None:
        stmt = (
            select(InstrumentModel)
            .where(InstrumentModel.id == instrument_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def find_active_by_name(
        self,
        wallet_id: str,
        name: str,
        *,
        case_insensitive: bool = False,
        exclude_id: Optional[str] = None,
    ) -> str | None:
        if case_insensitive:
            name_clause = func.lower(InstrumentModel.name) == func.lower(name)
        else:
            name_clause = InstrumentModel.name == name
        stmt = select(InstrumentModel.id).where(
            InstrumentModel.wallet_id == wallet_id,
            InstrumentModel.deleted_at.is_(None),
            name_clause,
        )
        if exclude_id is not None:
            stmt = stmt.where(InstrumentModel.id != exclude_id)
        result = await self._session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def list_active_for_wallet(
        self,
        wallet_id: str,
        sort: InstrumentSortField,
        order: SortOrder,
    ) -> Sequence[Instrument]:
        column = _SORT_COLUMNS[sort]
        ordering = column.asc() if order is SortOrder.ASC else column.desc()
        stmt = (
            select(InstrumentModel)
            .where(InstrumentModel.wallet_id == wallet_id, InstrumentModel.deleted_at.is_(None))
            .order_by(ordering, InstrumentModel.created_at, InstrumentModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_active_for_wallets(self, wallet_ids: Sequence[str]) -> Sequence[Instrument]:
        if not wallet_ids:
            return []
        stmt = (
            select(InstrumentModel)
            .where(InstrumentModel.wallet_id.in_(list(wallet_ids)), InstrumentModel.deleted_at.is_(None))
            .order_by(InstrumentModel.created_at, InstrumentModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def create_instrument(
        self,
        *,
        wallet_id: str,
        owner_id: str,
        type: str,
        name: str,
        short_description: Optional[str],
        invested_money_grosze: int,
        current_value_grosze: int,
        goal_grosze: Optional[int],
    ) -> Instrument:
        model = InstrumentModel(
            wallet_id=wallet_id,
            owner_id=owner_id,
            type=type,
            name=name,
            short_description=short_description,
            invested_money_grosze=invested_money_grosze,
            current_value_grosze=current_value_grosze,
            goal_grosze=goal_grosze,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            if is_unique_violation(exc):
                raise NameConflictError(EntityKind.INSTRUMENT, name, wallet_id) from exc
            raise
        await self._session.refresh(model)
        return self._to_domain(model)

    async def update_instrument(
        self,
        instrument_id: str,
        owner_id: str,
        values: dict[str, Any],
        *,
        wallet_id: str,
    ) -> Instrument | None:
        stmt = (
            update(InstrumentModel)
            .where(
                InstrumentModel.id == instrument_id,
                InstrumentModel.wallet_id == wallet_id,
                InstrumentModel.owner_id == owner_id,
                InstrumentModel.deleted_at.is_(None),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as exc:
            await self._session.rollback()
            if is_unique_violation(exc):
                # the store constraint is the final arbiter for concurrent renames
                raise NameConflictError(EntityKind.INSTRUMENT, values.get("name", ""), wallet_id) from exc
            raise
        if result.rowcount == 0:
            return None
        return await self.get_instrument(instrument_id)

    async def soft_delete(self, instrument_id: str, owner_id: str, deleted_at: datetime) -> InstrumentDeleted | None:
        stmt = (
            update(InstrumentModel)
            .where(
                InstrumentModel.id == instrument_id,
                InstrumentModel.owner_id == owner_id,
                InstrumentModel.deleted_at.is_(None),
            )
            .values(deleted_at=deleted_at)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            return None
        return InstrumentDeleted(id=instrument_id, deleted_at=deleted_at)

    @staticmethod
    def _to_domain(model: InstrumentModel | None) -> Instrument | None:
        if model is None:
            return None
        return Instrument(
            id=str(model.id),
            wallet_id=model.wallet_id,
            owner_id=model.owner_id,
            type=InstrumentType(model.type),
            name=model.name,
            short_description=model.short_description,
            invested_money_grosze=int(model.invested_money_grosze),
            current_value_grosze=int(model.current_value_grosze),
            goal_grosze=None if model.goal_grosze is None else int(model.goal_grosze),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            deleted_at=as_utc(model.deleted_at),
        )
