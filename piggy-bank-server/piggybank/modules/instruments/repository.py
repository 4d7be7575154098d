"""Repository protocol for instrument operations."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from piggybank.modules.common.guard import EntityMeta
from piggybank.modules.common.models import SortOrder

from .models import Instrument, InstrumentDeleted, InstrumentSortField


class InstrumentRepository(Protocol):
    async def get_meta(self, instrument_id: str) -> EntityMeta | None:
        ...

    async def get_instrument(self, instrument_id: str) -> Instrument | None:
        ...

    async def find_active_by_name(
        self,
        wallet_id: str,
        name: str,
        *,
        case_insensitive: bool = False,
        exclude_id: Optional[str] = None,
    ) -> str | None:
        ...

    async def list_active_for_wallet(
        self,
        wallet_id: str,
        sort: InstrumentSortField,
        order: SortOrder,
    ) -> Sequence[Instrument]:
        ...

    async def list_active_for_wallets(self, wallet_ids: Sequence[str]) -> Sequence[Instrument]:
        ...

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
        ...

    async def update_instrument(
        self,
        instrument_id: str,
        owner_id: str,
        values: dict[str, Any],
        *,
        wallet_id: str,
    ) -> Instrument | None:
        ...

    async def soft_delete(self, instrument_id: str, owner_id: str, deleted_at: datetime) -> InstrumentDeleted | None:
        ...
