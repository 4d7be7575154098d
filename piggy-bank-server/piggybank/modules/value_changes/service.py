"""Read access to an instrument's value-change history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from piggybank.infrastructure.database.repositories.instrument_repository import SqlInstrumentRepository
from piggybank.infrastructure.database.repositories.value_change_repository import SqlValueChangeRepository
from piggybank.modules.common.exceptions import EntityKind
from piggybank.modules.common.guard import guard_entity
from piggybank.modules.common.persistence import persistence_errors
from piggybank.modules.instruments.repository import InstrumentRepository

from .models import ValueChange
from .repository import ValueChangeRepository


@dataclass(slots=True)
class ValueChangeService:
    repository: ValueChangeRepository
    instruments: InstrumentRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "ValueChangeService":
        return cls(SqlValueChangeRepository(session), SqlInstrumentRepository(session))

    async def get_value_change_history(self, owner_id: str, instrument_id: str) -> Sequence[ValueChange]:
        """Newest first. Access is checked against the instrument, not the wallet."""
        await guard_entity(
            EntityKind.INSTRUMENT,
            instrument_id,
            owner_id,
            lambda: self.instruments.get_meta(instrument_id),
        )
        with persistence_errors("Failed to load value changes", entity=EntityKind.INSTRUMENT, entity_id=instrument_id):
            return await self.repository.list_for_instrument(instrument_id)
