"""Domain models for instrument value-change history."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime

from piggybank.modules.currency import format_minor_units, format_signed_minor_units


class ValueChangeDirection(str, enum.Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    UNCHANGED = "unchanged"


@dataclass(slots=True, frozen=True)
class ValueChange:
    id: str
    instrument_id: str
    before_value_grosze: int
    after_value_grosze: int
    created_at: datetime

    @property
    def before_value_pln(self) -> str:
        return format_minor_units(self.before_value_grosze)

    @property
    def after_value_pln(self) -> str:
        return format_minor_units(self.after_value_grosze)

    @property
    def delta_grosze(self) -> int:
        return self.after_value_grosze - self.before_value_grosze

    @property
    def delta_pln(self) -> str:
        return format_signed_minor_units(self.delta_grosze)

    @property
    def direction(self) -> ValueChangeDirection:
        delta = self.delta_grosze
        if delta > 0:
            return ValueChangeDirection.INCREASE
        if delta < 0:
            return ValueChangeDirection.DECREASE
        return ValueChangeDirection.UNCHANGED
