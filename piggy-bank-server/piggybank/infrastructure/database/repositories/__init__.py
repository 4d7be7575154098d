"""SQLAlchemy-backed repository implementations."""

from .instrument_repository import SqlInstrumentRepository
from .value_change_repository import SqlValueChangeRepository
from .wallet_repository import SqlWalletRepository

__all__ = [
    "SqlInstrumentRepository",
    "SqlValueChangeRepository",
    "SqlWalletRepository",
]
