"""Domain models for wallet operations."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from piggybank.modules.common.models import UNSET
from piggybank.modules.instruments.models import Instrument


class WalletSortField(str, enum.Enum):
    NAME = "name"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


@dataclass(slots=True)
class Wallet:
    id: str
    owner_id: str
    name: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


@dataclass(slots=True, frozen=True)
class WalletAggregates:
    target_grosze: int
    target_pln: str
    current_value_grosze: int
    current_value_pln: str
    invested_sum_grosze: int
    invested_sum_pln: str
    progress_percent: float
    performance_percent: float


@dataclass(slots=True)
class WalletSummary:
    """Wallet with aggregates, as shown in listings and after creation."""

    wallet: Wallet
    aggregates: WalletAggregates


@dataclass(slots=True)
class WalletDetail:
    wallet: Wallet
    aggregates: WalletAggregates
    instruments: list[Instrument] = field(default_factory=list)


@dataclass(slots=True)
class WalletDeleted:
    id: str
    deleted_at: datetime


@dataclass(slots=True)
class WalletCreateInput:
    name: str
    description: Optional[str] = None


@dataclass(slots=True)
class WalletUpdateInput:
    name: str | object = UNSET
    description: Optional[str] | object = UNSET
