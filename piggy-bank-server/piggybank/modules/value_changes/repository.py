"""Repository protocol for value-change history."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import ValueChange


class ValueChangeRepository(Protocol):
    async def add_value_change(
        self,
        *,
        instrument_id: str,
        before_value_grosze: int,
        after_value_grosze: int,
    ) -> ValueChange:
        ...

    async def list_for_instrument(self, instrument_id: str) -> Sequence[ValueChange]:
        ...
