"""Domain models for instruments."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from piggybank.modules.common.models import UNSET
from piggybank.modules.currency import format_minor_units, format_optional_minor_units


class InstrumentType(str, enum.Enum):
    BONDS = "bonds"
    ETF = "etf"
    STOCKS = "stocks"


class InstrumentSortField(str, enum.Enum):
    NAME = "name"
    UPDATED_AT = "updated_at"
    TYPE = "type"
    CURRENT_VALUE = "current_value_grosze"


@dataclass(slots=True)
class Instrument:
    id: str
    wallet_id: str
    owner_id: str
    type: InstrumentType
    name: str
    short_description: Optional[str]
    invested_money_grosze: int
    current_value_grosze: int
    goal_grosze: Optional[int]
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    @property
    def invested_money_pln(self) -> str:
        return format_minor_units(self.invested_money_grosze)

    @property
    def current_value_pln(self) -> str:
        return format_minor_units(self.current_value_grosze)

    @property
    def goal_pln(self) -> Optional[str]:
        return format_optional_minor_units(self.goal_grosze)


@dataclass(slots=True)
class InstrumentDeleted:
    id: str
    deleted_at: datetime


@dataclass(slots=True)
class InstrumentCreateInput:
    type: InstrumentType
    name: str
    invested_money_pln: str
    current_value_pln: str
    short_description: Optional[str] = None
    goal_pln: Optional[str] = None


@dataclass(slots=True)
class InstrumentUpdateInput:
    type: InstrumentType | object = UNSET
    name: str | object = UNSET
    short_description: Optional[str] | object = UNSET
    invested_money_pln: str | object = UNSET
    current_value_pln: str | object = UNSET
    goal_pln: Optional[str] | object = UNSET


__all__ = [
    "Instrument",
    "InstrumentCreateInput",
    "InstrumentDeleted",
    "InstrumentSortField",
    "InstrumentType",
    "InstrumentUpdateInput",
]
