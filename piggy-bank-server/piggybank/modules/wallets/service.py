"""Wallet domain service"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from piggybank.db.models import utcnow
from piggybank.infrastructure.database.repositories.instrument_repository import SqlInstrumentRepository
from piggybank.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from piggybank.modules.common.exceptions import AlreadyDeletedError, EntityKind, NameConflictError, SoftDeletedError
from piggybank.modules.common.guard import GuardMode, guard_entity
from piggybank.modules.common.models import UNSET, SortOrder
from piggybank.modules.common.persistence import persistence_errors
from piggybank.modules.instruments.repository import InstrumentRepository

from .aggregates import compute_aggregates, empty_aggregates
from .models import (
    Wallet,
    WalletCreateInput,
    WalletDeleted,
    WalletDetail,
    WalletSortField,
    WalletSummary,
    WalletUpdateInput,
)
from .repository import WalletRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WalletService:
    repository: WalletRepository
    instruments: InstrumentRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "WalletService":
        return cls(SqlWalletRepository(session), SqlInstrumentRepository(session))

    async def create_wallet(self, owner_id: str, payload: WalletCreateInput) -> WalletSummary:
        with persistence_errors("Failed to verify wallet name uniqueness", entity=EntityKind.WALLET):
            duplicate = await self.repository.find_active_by_name(owner_id, payload.name)
        if duplicate is not None:
            raise NameConflictError(EntityKind.WALLET, payload.name, owner_id)

        with persistence_errors("Failed to persist wallet", entity=EntityKind.WALLET):
            wallet = await self.repository.create_wallet(
                owner_id=owner_id,
                name=payload.name,
                description=payload.description,
            )
        logger.info("Wallet %s created for owner %s", wallet.id, owner_id)
        return WalletSummary(wallet=wallet, aggregates=empty_aggregates())

    async def list_wallets(
        self,
        owner_id: str,
        sort: WalletSortField = WalletSortField.UPDATED_AT,
        order: SortOrder = SortOrder.DESC,
    ) -> list[WalletSummary]:
        with persistence_errors("Failed to load wallets", entity=EntityKind.WALLET):
            wallets = await self.repository.list_active(owner_id, sort, order)
            if not wallets:
                return []
            instruments = await self.instruments.list_active_for_wallets([wallet.id for wallet in wallets])

        by_wallet = defaultdict(list)
        for instrument in instruments:
            by_wallet[instrument.wallet_id].append(instrument)

        return [
            WalletSummary(wallet=wallet, aggregates=compute_aggregates(by_wallet.get(wallet.id, ())))
            for wallet in wallets
        ]

    async def get_wallet_detail(self, owner_id: str, wallet_id: str) -> WalletDetail:
        await guard_entity(EntityKind.WALLET, wallet_id, owner_id, lambda: self.repository.get_meta(wallet_id))

        with persistence_errors("Failed to load wallet instruments", entity=EntityKind.WALLET, entity_id=wallet_id):
            wallet = await self.repository.get_wallet(wallet_id)
            instruments = await self.instruments.list_active_for_wallets([wallet_id])

        return WalletDetail(
            wallet=wallet,
            aggregates=compute_aggregates(instruments),
            instruments=list(instruments),
        )

    async def update_wallet(self, owner_id: str, wallet_id: str, payload: WalletUpdateInput) -> WalletSummary:
        await guard_entity(EntityKind.WALLET, wallet_id, owner_id, lambda: self.repository.get_meta(wallet_id))

        with persistence_errors("Failed to load wallet", entity=EntityKind.WALLET, entity_id=wallet_id):
            current = await self.repository.get_wallet(wallet_id)

        updates: dict[str, Any] = {}
        if payload.name is not UNSET and payload.name != current.name:
            updates["name"] = payload.name
        if payload.description is not UNSET and payload.description != current.description:
            updates["description"] = payload.description

        if not updates:
            return await self._summarize(current)

        if "name" in updates:
            with persistence_errors("Failed to verify wallet name uniqueness", entity=EntityKind.WALLET):
                duplicate = await self.repository.find_active_by_name(
                    owner_id,
                    updates["name"],
                    case_insensitive=True,
                    exclude_id=wallet_id,
                )
            if duplicate is not None:
                raise NameConflictError(EntityKind.WALLET, updates["name"], owner_id)

        with persistence_errors("Failed to persist wallet changes", entity=EntityKind.WALLET, entity_id=wallet_id):
            updated = await self.repository.update_wallet(wallet_id, owner_id, updates)
        if updated is None:
            raise SoftDeletedError(EntityKind.WALLET, wallet_id)

        logger.info("Wallet %s updated (%s)", wallet_id, ", ".join(sorted(updates)))
        return await self._summarize(updated)

    async def soft_delete_wallet(self, owner_id: str, wallet_id: str) -> WalletDeleted:
        await guard_entity(
            EntityKind.WALLET,
            wallet_id,
            owner_id,
            lambda: self.repository.get_meta(wallet_id),
            mode=GuardMode.DELETE,
        )

        with persistence_errors("Failed to soft delete wallet", entity=EntityKind.WALLET, entity_id=wallet_id):
            deleted = await self.repository.soft_delete(wallet_id, owner_id, utcnow())
        if deleted is None:
            raise AlreadyDeletedError(EntityKind.WALLET, wallet_id)

        logger.info("Wallet %s soft-deleted by owner %s", wallet_id, owner_id)
        return deleted

    async def _summarize(self, wallet: Wallet) -> WalletSummary:
        with persistence_errors("Failed to load wallet instruments", entity=EntityKind.WALLET, entity_id=wallet.id):
            instruments = await self.instruments.list_active_for_wallets([wallet.id])
        return WalletSummary(wallet=wallet, aggregates=compute_aggregates(instruments))
