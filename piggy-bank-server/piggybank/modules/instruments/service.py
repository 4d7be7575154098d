"""Domain service for instrument use cases."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from piggybank.db.models import utcnow
from piggybank.infrastructure.database.repositories.instrument_repository import SqlInstrumentRepository
from piggybank.infrastructure.database.repositories.value_change_repository import SqlValueChangeRepository
from piggybank.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from piggybank.modules.common.exceptions import AlreadyDeletedError, EntityKind, NameConflictError, SoftDeletedError
from piggybank.modules.common.guard import GuardMode, ensure_parent_active, guard_entity
from piggybank.modules.common.models import UNSET, SortOrder
from piggybank.modules.common.persistence import persistence_errors
from piggybank.modules.currency import parse_amount_to_minor_units, parse_optional_amount
from piggybank.modules.value_changes.repository import ValueChangeRepository
from piggybank.modules.wallets.repository import WalletRepository

from .models import (
    Instrument,
    InstrumentCreateInput,
    InstrumentDeleted,
    InstrumentSortField,
    InstrumentUpdateInput,
)
from .repository import InstrumentRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class InstrumentService:
    """Instrument lifecycle scoped to the calling owner."""

    repository: InstrumentRepository
    wallets: WalletRepository
    value_changes: ValueChangeRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "InstrumentService":
        return cls(
            SqlInstrumentRepository(session),
            SqlWalletRepository(session),
            SqlValueChangeRepository(session),
        )

    async def create_instrument(
        self,
        owner_id: str,
        wallet_id: str,
        payload: InstrumentCreateInput,
    ) -> Instrument:
        await self._guard_wallet(owner_id, wallet_id)

        with persistence_errors("Failed to verify instrument name uniqueness", entity=EntityKind.INSTRUMENT):
            duplicate = await self.repository.find_active_by_name(wallet_id, payload.name)
        if duplicate is not None:
            raise NameConflictError(EntityKind.INSTRUMENT, payload.name, wallet_id)

        invested = parse_amount_to_minor_units(payload.invested_money_pln)
        current = parse_amount_to_minor_units(payload.current_value_pln)
        goal = parse_optional_amount(payload.goal_pln)

        with persistence_errors("Failed to persist instrument", entity=EntityKind.INSTRUMENT):
            instrument = await self.repository.create_instrument(
                wallet_id=wallet_id,
                owner_id=owner_id,
                type=payload.type.value,
                name=payload.name,
                short_description=payload.short_description,
                invested_money_grosze=invested,
                current_value_grosze=current,
                goal_grosze=goal,
            )
            await self.wallets.touch(wallet_id)

        logger.info("Instrument %s created in wallet %s", instrument.id, wallet_id)
        return instrument

    async def get_instrument(self, owner_id: str, instrument_id: str) -> Instrument:
        await self._guard_instrument(owner_id, instrument_id)
        with persistence_errors("Failed to load instrument", entity=EntityKind.INSTRUMENT, entity_id=instrument_id):
            return await self.repository.get_instrument(instrument_id)

    async def list_wallet_instruments(
        self,
        owner_id: str,
        wallet_id: str,
        sort: InstrumentSortField = InstrumentSortField.UPDATED_AT,
        order: SortOrder = SortOrder.DESC,
    ) -> Sequence[Instrument]:
        await self._guard_wallet(owner_id, wallet_id)
        with persistence_errors("Failed to load instruments", entity=EntityKind.WALLET, entity_id=wallet_id):
            return await self.repository.list_active_for_wallet(wallet_id, sort, order)

    async def update_instrument(
        self,
        owner_id: str,
        instrument_id: str,
        payload: InstrumentUpdateInput,
    ) -> Instrument:
        meta = await self._guard_instrument(owner_id, instrument_id)
        wallet_id = meta.parent_id
        await ensure_parent_active(
            EntityKind.INSTRUMENT,
            instrument_id,
            wallet_id,
            lambda: self.wallets.get_meta(wallet_id),
        )

        with persistence_errors("Failed to load instrument", entity=EntityKind.INSTRUMENT, entity_id=instrument_id):
            current = await self.repository.get_instrument(instrument_id)

        updates = self._diff(current, payload)
        if not updates:
            return current

        if "name" in updates:
            with persistence_errors("Failed to verify instrument name uniqueness", entity=EntityKind.INSTRUMENT):
                duplicate = await self.repository.find_active_by_name(
                    wallet_id,
                    updates["name"],
                    case_insensitive=True,
                    exclude_id=instrument_id,
                )
            if duplicate is not None:
                raise NameConflictError(EntityKind.INSTRUMENT, updates["name"], wallet_id)

        with persistence_errors(
            "Failed to persist instrument changes",
            entity=EntityKind.INSTRUMENT,
            entity_id=instrument_id,
        ):
            updated = await self.repository.update_instrument(instrument_id, owner_id, updates, wallet_id=wallet_id)
            if updated is None:
                raise SoftDeletedError(EntityKind.INSTRUMENT, instrument_id)

            if "current_value_grosze" in updates:
                await self.value_changes.add_value_change(
                    instrument_id=instrument_id,
                    before_value_grosze=current.current_value_grosze,
                    after_value_grosze=updated.current_value_grosze,
                )
            await self.wallets.touch(wallet_id)

        logger.info("Instrument %s updated (%s)", instrument_id, ", ".join(sorted(updates)))
        return updated

    async def soft_delete_instrument(self, owner_id: str, instrument_id: str) -> InstrumentDeleted:
        meta = await guard_entity(
            EntityKind.INSTRUMENT,
            instrument_id,
            owner_id,
            lambda: self.repository.get_meta(instrument_id),
            mode=GuardMode.DELETE,
        )

        with persistence_errors(
            "Failed to soft delete instrument",
            entity=EntityKind.INSTRUMENT,
            entity_id=instrument_id,
        ):
            deleted = await self.repository.soft_delete(instrument_id, owner_id, utcnow())
            if deleted is None:
                raise AlreadyDeletedError(EntityKind.INSTRUMENT, instrument_id)
            await self.wallets.touch(meta.parent_id)

        logger.info("Instrument %s soft-deleted by owner %s", instrument_id, owner_id)
        return deleted

    async def _guard_wallet(self, owner_id: str, wallet_id: str):
        return await guard_entity(EntityKind.WALLET, wallet_id, owner_id, lambda: self.wallets.get_meta(wallet_id))

    async def _guard_instrument(self, owner_id: str, instrument_id: str):
        return await guard_entity(
            EntityKind.INSTRUMENT,
            instrument_id,
            owner_id,
            lambda: self.repository.get_meta(instrument_id),
        )

    @staticmethod
    def _diff(current: Instrument, payload: InstrumentUpdateInput) -> dict[str, Any]:
        updates: dict[str, Any] = {}
        if payload.type is not UNSET and payload.type != current.type:
            updates["type"] = payload.type.value
        if payload.name is not UNSET and payload.name != current.name:
            updates["name"] = payload.name
        if payload.short_description is not UNSET and payload.short_description != current.short_description:
            updates["short_description"] = payload.short_description

        if payload.invested_money_pln is not UNSET:
            invested = parse_amount_to_minor_units(payload.invested_money_pln)
            if invested != current.invested_money_grosze:
                updates["invested_money_grosze"] = invested
        if payload.current_value_pln is not UNSET:
            value = parse_amount_to_minor_units(payload.current_value_pln)
            if value != current.current_value_grosze:
                updates["current_value_grosze"] = value
        if payload.goal_pln is not UNSET:
            goal = parse_optional_amount(payload.goal_pln)
            if goal != current.goal_grosze:
                updates["goal_grosze"] = goal
        return updates
