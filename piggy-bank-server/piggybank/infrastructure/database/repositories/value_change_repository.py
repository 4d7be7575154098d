"""SQLAlchemy implementation of the value-change history repository."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from piggybank.db.models import InstrumentValueChange as ValueChangeModel, as_utc
from piggybank.modules.value_changes.models import ValueChange
from piggybank.modules.value_changes.repository import ValueChangeRepository


class SqlValueChangeRepository(ValueChangeRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add_value_change(
        self,
        *,
        instrument_id: str,
        before_value_grosze: int,
        after_value_grosze: int,
    ) -> ValueChange:
        model = ValueChangeModel(
            instrument_id=instrument_id,
            before_value_grosze=before_value_grosze,
            after_value_grosze=after_value_grosze,
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_domain(model)

    async def list_for_instrument(self, instrument_id: str) -> Sequence[ValueChange]:
        stmt = (
            select(ValueChangeModel)
            .where(ValueChangeModel.instrument_id == instrument_id)
            .order_by(desc(ValueChangeModel.created_at), desc(ValueChangeModel.id))
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: ValueChangeModel) -> ValueChange:
        return ValueChange(
            id=model.id,
            instrument_id=model.instrument_id,
            before_value_grosze=int(model.before_value_grosze),
            after_value_grosze=int(model.after_value_grosze),
            created_at=as_utc(model.created_at),
        )
