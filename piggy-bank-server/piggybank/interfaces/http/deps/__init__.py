"""Reusable FastAPI dependencies."""

from piggybank.core.security import get_current_owner

from .database import get_container, get_db_session
from .services import get_instrument_service, get_value_change_service, get_wallet_service

__all__ = [
    "get_container",
    "get_current_owner",
    "get_db_session",
    "get_instrument_service",
    "get_value_change_service",
    "get_wallet_service",
]
