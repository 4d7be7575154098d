"""Domain service providers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from piggybank.modules.instruments.service import InstrumentService
from piggybank.modules.value_changes.service import ValueChangeService
from piggybank.modules.wallets.service import WalletService

from .database import get_db_session


def get_wallet_service(db: AsyncSession = Depends(get_db_session)) -> WalletService:
    return WalletService.with_session(db)


def get_instrument_service(db: AsyncSession = Depends(get_db_session)) -> InstrumentService:
    return InstrumentService.with_session(db)


def get_value_change_service(db: AsyncSession = Depends(get_db_session)) -> ValueChangeService:
    return ValueChangeService.with_session(db)


__all__ = [
    "get_instrument_service",
    "get_value_change_service",
    "get_wallet_service",
]
