"""Repository protocol for wallet operations."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from piggybank.modules.common.guard import EntityMeta
from piggybank.modules.common.models import SortOrder

from .models import Wallet, WalletDeleted, WalletSortField


class WalletRepository(Protocol):
    async def get_meta(self, wallet_id: str) -> EntityMeta | None:
        ...

    async def get_wallet(self, wallet_id: str) -> Wallet | None:
        ...

    async def find_active_by_name(
        self,
        owner_id: str,
        name: str,
        *,
        case_insensitive: bool = False,
        exclude_id: Optional[str] = None,
    ) -> str | None:
        ...

    async def list_active(self, owner_id: str, sort: WalletSortField, order: SortOrder) -> Sequence[Wallet]:
        ...

    async def create_wallet(self, *, owner_id: str, name: str, description: Optional[str]) -> Wallet:
        ...

    async def update_wallet(self, wallet_id: str, owner_id: str, values: dict[str, Any]) -> Wallet | None:
        ...

    async def soft_delete(self, wallet_id: str, owner_id: str, deleted_at: datetime) -> WalletDeleted | None:
        ...

    async def touch(self, wallet_id: str) -> None:
        ...
