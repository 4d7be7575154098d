"""Instrument domain exports"""

from .models import (
    Instrument,
    InstrumentCreateInput,
    InstrumentDeleted,
    InstrumentSortField,
    InstrumentType,
    InstrumentUpdateInput,
)

__all__ = [
    "Instrument",
    "InstrumentCreateInput",
    "InstrumentDeleted",
    "InstrumentSortField",
    "InstrumentType",
    "InstrumentUpdateInput",
]
